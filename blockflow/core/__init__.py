# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Core utilities and shared modules for Blockflow.

This package contains:
- config: Configuration management
- errors: Custom exceptions
- logging: Structured logging
"""

from blockflow.core.config import get_config, Config
from blockflow.core.errors import BlockflowError, ValidationError, ExecutionError
from blockflow.core.logging import get_logger, get_engine_logger

__all__ = [
    "get_config",
    "Config",
    "BlockflowError",
    "ValidationError",
    "ExecutionError",
    "get_logger",
    "get_engine_logger",
]
