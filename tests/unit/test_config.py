from __future__ import annotations

import os
from pathlib import Path

import pytest


def test_load_defaults_when_no_config(clean_env: None, temp_dir: Path) -> None:
    """Test that defaults are used when no config file exists."""
    os.chdir(temp_dir)

    from abilityforge.config import AbilityForgeConfig, load_config

    config = load_config()
    assert isinstance(config, AbilityForgeConfig)
    assert config.editor.layout_origin_x == 50
    assert config.editor.layout_origin_y == 50
    assert config.editor.json_indent == 2
    assert config.registry.snapshot_path is None
    assert config.verbosity == "warning"


def test_load_project_config(clean_env: None, temp_dir: Path) -> None:
    """Test loading configuration from abilityforge.yaml."""
    os.chdir(temp_dir)
    (temp_dir / "abilityforge.yaml").write_text(
        "editor:\n  layout_origin_x: 10\n  json_indent: 4\nverbosity: info\n"
    )

    from abilityforge.config import load_config

    config = load_config()
    assert config.editor.layout_origin_x == 10
    assert config.editor.layout_origin_y == 50
    assert config.editor.json_indent == 4
    assert config.verbosity == "info"


def test_explicit_config_path(clean_env: None, temp_dir: Path) -> None:
    """Test that an explicit path replaces ./abilityforge.yaml."""
    os.chdir(temp_dir)
    custom = temp_dir / "custom.yaml"
    custom.write_text("editor:\n  layout_origin_y: 7\n")

    from abilityforge.config import load_config

    config = load_config(custom)
    assert config.editor.layout_origin_y == 7


def test_env_var_overrides(clean_env: None, temp_dir: Path) -> None:
    """Test that ABILITYFORGE_* environment variables override config."""
    os.chdir(temp_dir)
    (temp_dir / "abilityforge.yaml").write_text("editor:\n  json_indent: 4\n")
    os.environ["ABILITYFORGE_EDITOR__JSON_INDENT"] = "0"

    from abilityforge.config import load_config

    config = load_config()
    assert config.editor.json_indent == 0


def test_invalid_value_raises_config_error(clean_env: None, temp_dir: Path) -> None:
    """Test that validation errors surface as ConfigError with the field."""
    os.chdir(temp_dir)
    (temp_dir / "abilityforge.yaml").write_text("editor:\n  json_indent: 20\n")

    from abilityforge.config import load_config
    from abilityforge.exceptions import ConfigError

    with pytest.raises(ConfigError) as exc_info:
        load_config()

    assert exc_info.value.field == "editor.json_indent"
    assert exc_info.value.value == 20


def test_invalid_yaml_raises_config_error(clean_env: None, temp_dir: Path) -> None:
    """Test that malformed YAML is reported as ConfigError."""
    os.chdir(temp_dir)
    (temp_dir / "abilityforge.yaml").write_text("editor: [unclosed\n")

    from abilityforge.config import load_config
    from abilityforge.exceptions import ConfigError

    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config()


def test_non_mapping_config_rejected(clean_env: None, temp_dir: Path) -> None:
    os.chdir(temp_dir)
    (temp_dir / "abilityforge.yaml").write_text("- editor\n")

    from abilityforge.config import load_config
    from abilityforge.exceptions import ConfigError

    with pytest.raises(ConfigError, match="must contain a mapping"):
        load_config()


def test_user_config_path() -> None:
    from abilityforge.config import get_user_config_path

    path = get_user_config_path()
    assert path.parts[-3:] == (".config", "abilityforge", "config.yaml")
