# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Blockflow - parallel-block execution for graph-based workflows.
"""

__version__ = "1.0.0"
