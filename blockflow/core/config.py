# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Blockflow Configuration - Single source of truth.
YAML is king. Env vars ONLY for the log level override.

All configuration lives in plain text so a run is inspectable via `cat`.
"""

import os
import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from blockflow.core.errors import ConfigurationError


DEFAULT_CONFIG_PATH = "configs/engine.yaml"


# =============================================================================
# CONFIGURATION DATACLASS
# =============================================================================

@dataclass(frozen=True)
class Config:
    """
    Immutable engine configuration.
    All values from YAML. No hidden state.
    """

    # -- Logging --
    log_level: str = "INFO"
    log_format: str = "json"
    log_file: Optional[str] = None

    # -- Executor --
    max_passes: int = 10000
    block_timeout: float = 3600.0

    # -- Parallel handles --
    start_handle: str = "parallel-start-source"
    end_handle: str = "parallel-end-source"

    @property
    def log_path(self) -> Optional[Path]:
        return Path(self.log_file) if self.log_file else None


# =============================================================================
# LOADER
# =============================================================================

def load_config(path: str = DEFAULT_CONFIG_PATH) -> Config:
    """
    Load configuration from YAML.
    Returns defaults if file doesn't exist.
    """
    if not Path(path).exists():
        return Config(log_level=os.getenv("LOG_LEVEL", "INFO"))

    with open(path) as f:
        y = yaml.safe_load(f) or {}

    # Helper to safely navigate nested dicts
    def get(d: dict, *keys, default=None):
        for k in keys:
            if not isinstance(d, dict):
                return default
            d = d.get(k, {})
        return d if d != {} else default

    log_format = get(y, "logging", "format") or "json"
    if log_format not in ("json", "text"):
        raise ConfigurationError(
            f"logging.format must be 'json' or 'text', got '{log_format}'",
            config_file=path
        )

    return Config(
        # Logging
        log_level=os.getenv("LOG_LEVEL") or get(y, "logging", "level") or "INFO",
        log_format=log_format,
        log_file=get(y, "logging", "file"),

        # Executor
        max_passes=int(get(y, "executor", "max_passes") or 10000),
        block_timeout=float(get(y, "executor", "block_timeout") or 3600.0),

        # Handles
        start_handle=get(y, "handles", "parallel_start") or "parallel-start-source",
        end_handle=get(y, "handles", "parallel_end") or "parallel-end-source",
    )


# =============================================================================
# GLOBAL INSTANCE
# =============================================================================

_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create global config instance."""
    global _config
    if _config is None:
        config_path = os.getenv("BLOCKFLOW_CONFIG_PATH", DEFAULT_CONFIG_PATH)
        _config = load_config(config_path)
    return _config


def reload_config() -> Config:
    """Force reload configuration."""
    global _config
    _config = None
    return get_config()
