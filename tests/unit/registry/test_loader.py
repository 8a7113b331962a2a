"""Unit tests for registry snapshot loading and option helpers."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from abilityforge.pipeline.errors import DocumentParseError
from abilityforge.registry import RegistrySnapshot, load_snapshot, parse_snapshot
from abilityforge.registry.options import (
    NO_SPECIFIC_MOB,
    mob_options,
    object_options,
    strip_ansi,
    to_title_case,
    trigger_options,
    zone_options,
)


class TestLoadSnapshot:
    """Tests for load_snapshot()."""

    def test_load_yaml(self, snapshot_file: Path) -> None:
        snapshot = load_snapshot(snapshot_file)

        assert [e.name for e in snapshot.effects] == ["damage", "heal", "summon"]
        assert snapshot.current_zone_id == 30

    def test_load_json(self, temp_dir: Path) -> None:
        path = temp_dir / "registry.json"
        path.write_text(json.dumps({"effects": [{"id": 3, "name": "heal"}]}))

        snapshot = load_snapshot(path)

        assert snapshot.effects[0].block_type == "effect_heal"

    def test_invalid_json_reports_line(self, temp_dir: Path) -> None:
        path = temp_dir / "registry.json"
        path.write_text('{\n  "effects": [\n')

        with pytest.raises(DocumentParseError) as exc_info:
            load_snapshot(path)

        assert exc_info.value.line_number is not None

    def test_invalid_yaml(self, temp_dir: Path) -> None:
        path = temp_dir / "registry.yaml"
        path.write_text("effects: [\n  - id: 1\n")

        with pytest.raises(DocumentParseError):
            load_snapshot(path)

    def test_missing_file(self, temp_dir: Path) -> None:
        with pytest.raises(DocumentParseError, match="Cannot read"):
            load_snapshot(temp_dir / "missing.yaml")

    def test_non_mapping_rejected(self, temp_dir: Path) -> None:
        path = temp_dir / "registry.yaml"
        path.write_text("- id: 1\n")

        with pytest.raises(DocumentParseError, match="must be an object"):
            load_snapshot(path)


class TestParseSnapshot:
    """Tests for parse_snapshot()."""

    def test_camel_and_snake_case_keys(self) -> None:
        snapshot = parse_snapshot(
            {
                "current_zone_id": 4,
                "effects": [
                    {"id": 1, "name": "damage", "param_schema": {"properties": {}}}
                ],
                "mobs": [{"id": 2, "zone_id": 4, "name": "Rat"}],
            }
        )

        assert snapshot.current_zone_id == 4
        assert snapshot.effects[0].param_schema is not None
        assert snapshot.mobs[0].zone_key == "4:2"

    def test_validation_error_names_location(self) -> None:
        with pytest.raises(DocumentParseError, match="effects.0.id"):
            parse_snapshot({"effects": [{"id": "one", "name": "x"}]})


class TestOptionHelpers:
    """Tests for the module-level option builders."""

    def test_strip_ansi(self) -> None:
        assert strip_ansi("\x1b[1;32mGreen\x1b[0m") == "Green"

    def test_to_title_case(self) -> None:
        assert to_title_case("fire_bolt") == "Fire Bolt"
        assert to_title_case("ice-lance") == "Ice Lance"

    def test_empty_snapshot_placeholders(self) -> None:
        snapshot = RegistrySnapshot()

        assert mob_options(snapshot) == [NO_SPECIFIC_MOB, ("(No mobs loaded)", "0:0")]
        assert object_options(snapshot) == [("(No objects loaded)", "0:0")]
        assert trigger_options(snapshot) == [("(No scripts loaded)", "0")]
        assert zone_options(snapshot) == [("(No zones loaded)", "-1")]

    def test_empty_zone_filter_placeholder(self) -> None:
        snapshot = RegistrySnapshot.model_validate(
            {"mobs": [{"id": 1, "zoneId": 2, "name": "Rat"}]}
        )

        assert mob_options(snapshot, 9) == [
            NO_SPECIFIC_MOB,
            ("(No mobs in zone)", "0:0"),
        ]
