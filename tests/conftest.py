from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Generator, Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from abilityforge.registry import EffectRegistry

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def configure_test_logging() -> Generator[None, None, None]:
    """Configure structlog for test environment.

    This fixture runs automatically for all tests so log output goes to
    stderr at WARNING level and never mixes with command stdout.
    """
    from abilityforge.logging import clear_context, configure_logging

    configure_logging(level=logging.WARNING)
    yield
    clear_context()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner.

    Example:
        >>> def test_version(cli_runner):
        ...     result = cli_runner.invoke(cli, ["--version"])
        ...     assert result.exit_code == 0
    """
    return CliRunner()


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test files.

    Also saves and restores the current working directory to prevent
    tests that use os.chdir() from affecting other tests.
    """
    original_cwd = os.getcwd()
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
    os.chdir(original_cwd)


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Remove all ABILITYFORGE_ environment variables for clean testing."""
    original_env = os.environ.copy()
    for key in list(os.environ.keys()):
        if key.startswith("ABILITYFORGE_"):
            del os.environ[key]
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def snapshot_data() -> dict[str, Any]:
    """Registry snapshot covering every composite-field effect."""
    return {
        "currentZoneId": 30,
        "effects": [
            {
                "id": 1,
                "name": "damage",
                "effectType": "damage",
                "paramSchema": {
                    "properties": {"type": {}, "amount": {}, "interval": {}},
                    "required": ["amount"],
                },
            },
            {
                "id": 3,
                "name": "heal",
                "effectType": "restore",
                "paramSchema": {
                    "properties": {"resource": {}, "amount": {}, "scaling": {}},
                },
            },
            {
                "id": 5,
                "name": "summon",
                "effectType": "summon",
                "paramSchema": {"properties": {"mobType": {}, "duration": {}}},
            },
            {
                "id": 6,
                "name": "create",
                "effectType": "summon",
                "paramSchema": {"properties": {"objectType": {}, "quantity": {}}},
            },
            {
                "id": 7,
                "name": "teleport",
                "effectType": "movement",
                "paramSchema": {"properties": {"mode": {}}},
            },
            {
                "id": 8,
                "name": "status",
                "effectType": "control",
                "paramSchema": {
                    "properties": {"statusName": {}, "type": {}, "duration": {}},
                    "required": ["statusName"],
                },
            },
            {"id": 9, "name": "script", "effectType": "special"},
        ],
        "mobs": [
            {"id": 1201, "zoneId": 30, "name": "Wolf"},
            {"id": 17, "zoneId": 12, "name": "Bandit"},
            {"id": 1201, "zoneId": 30, "name": "Wolf (duplicate)"},
            {"id": 1100, "zoneId": 30, "name": "Bear"},
        ],
        "objects": [
            {"id": 5, "zoneId": 12, "name": "Torch"},
            {"id": 44, "zoneId": 30, "name": "Stone"},
        ],
        "triggers": [{"id": 400, "zoneId": 30, "name": "open_gate"}],
        "zones": [
            {"id": 30, "name": "Darkwood"},
            {"id": 12, "name": "Hillside"},
        ],
    }


@pytest.fixture
def registry(snapshot_data: dict[str, Any]) -> EffectRegistry:
    """A populated registry owned by the test."""
    return EffectRegistry(snapshot_data)


@pytest.fixture
def empty_registry() -> EffectRegistry:
    """A registry that has not been populated yet."""
    return EffectRegistry()


@pytest.fixture
def snapshot_file() -> Path:
    """Path to the YAML registry snapshot used by CLI tests."""
    return FIXTURES_DIR / "registry.yaml"
