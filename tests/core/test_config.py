# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit tests for configuration loading
"""

import pytest

from blockflow.core import config as config_module
from blockflow.core.config import Config, load_config, reload_config
from blockflow.core.errors import ConfigurationError


def test_missing_file_uses_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    config = load_config(str(tmp_path / "missing.yaml"))

    assert config == Config()
    assert config.start_handle == "parallel-start-source"
    assert config.end_handle == "parallel-end-source"


def test_yaml_values(tmp_path, monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    path = tmp_path / "engine.yaml"
    path.write_text(
        "logging:\n"
        "  level: DEBUG\n"
        "  format: text\n"
        "executor:\n"
        "  max_passes: 50\n"
        "  block_timeout: 2.5\n"
        "handles:\n"
        "  parallel_end: done\n"
    )

    config = load_config(str(path))

    assert config.log_level == "DEBUG"
    assert config.log_format == "text"
    assert config.max_passes == 50
    assert config.block_timeout == 2.5
    assert config.end_handle == "done"
    assert config.start_handle == "parallel-start-source"
    assert config.log_path is None


def test_log_level_env_override(tmp_path, monkeypatch):
    path = tmp_path / "engine.yaml"
    path.write_text("logging:\n  level: DEBUG\n")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")

    assert load_config(str(path)).log_level == "WARNING"


def test_invalid_log_format(tmp_path):
    path = tmp_path / "engine.yaml"
    path.write_text("logging:\n  format: xml\n")

    with pytest.raises(ConfigurationError) as exc_info:
        load_config(str(path))
    assert exc_info.value.config_file == str(path)


def test_reload_config_reads_env_path(tmp_path, monkeypatch):
    path = tmp_path / "engine.yaml"
    path.write_text("executor:\n  max_passes: 7\n")
    monkeypatch.setenv("BLOCKFLOW_CONFIG_PATH", str(path))
    monkeypatch.setattr(config_module, "_config", None)

    assert reload_config().max_passes == 7
    assert config_module.get_config() is config_module.get_config()
