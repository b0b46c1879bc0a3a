# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Test Suite for Blockflow

Structure:
- core/: Config, errors and logging
- parallel/: Parallel engine (routing, state, orchestration, executor)
"""
