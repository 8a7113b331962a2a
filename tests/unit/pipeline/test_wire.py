"""Unit tests for the wire form: PipelineWriter and the document parser."""

from __future__ import annotations

import json
import logging

import pytest
import yaml

from abilityforge.pipeline import (
    DocumentParseError,
    EffectInvocation,
    Gate,
    GateType,
    PipelineDocument,
    PipelineWriter,
    parse_document,
    parse_json,
    parse_yaml,
    read_document,
)
from abilityforge.pipeline.parser import read_node


@pytest.fixture
def document() -> PipelineDocument:
    return PipelineDocument(
        nodes=[
            EffectInvocation(
                effect_id=3,
                override_params={"amount": 20},
                order=0,
                trigger="on_hit",
                chance_pct=80,
            ),
            Gate(
                gate_type=GateType.CHANCE,
                override_params={"percentage": 50},
                order=2,
                on_pass=[EffectInvocation(effect_id=1, order=1)],
            ),
        ]
    )


class TestPipelineWriter:
    """Tests for PipelineWriter."""

    def test_effect_key_order(self, document: PipelineDocument) -> None:
        wire = PipelineWriter().to_wire(document)

        assert list(wire[0]) == [
            "effectId",
            "overrideParams",
            "order",
            "trigger",
            "chancePct",
        ]

    def test_gate_branches_nested_in_params(
        self, document: PipelineDocument
    ) -> None:
        gate = PipelineWriter().to_wire(document)[1]

        assert gate == {
            "gateType": "chance",
            "overrideParams": {
                "percentage": 50,
                "onPass": [
                    {
                        "effectId": 1,
                        "overrideParams": {},
                        "order": 1,
                        "chancePct": 100,
                    }
                ],
            },
            "order": 2,
            "chancePct": 100,
        }

    def test_absent_trigger_omitted(self) -> None:
        node = EffectInvocation(effect_id=3, order=0)

        wire = PipelineWriter().to_wire(PipelineDocument(nodes=[node]))

        assert "trigger" not in wire[0]
        assert "gateType" not in wire[0]

    def test_to_json_indent(self, document: PipelineDocument) -> None:
        text = PipelineWriter().to_json(document)

        assert text.startswith('[\n  {\n    "effectId": 3')
        assert json.loads(text) == document.to_wire()

    def test_to_yaml(self, document: PipelineDocument) -> None:
        text = PipelineWriter().to_yaml(document)

        assert text.startswith("- effectId: 3\n")
        assert yaml.safe_load(text) == document.to_wire()

    def test_writer_does_not_alias_params(self, document: PipelineDocument) -> None:
        wire = PipelineWriter().to_wire(document)
        wire[0]["overrideParams"]["amount"] = 999

        assert document.nodes[0].override_params == {"amount": 20}


class TestParseText:
    """Tests for parse_json / parse_yaml."""

    def test_parse_json(self) -> None:
        assert parse_json('[{"effectId": 3, "order": 0}]') == [
            {"effectId": 3, "order": 0}
        ]

    @pytest.mark.parametrize("text", ["", "   \n"])
    def test_empty_text_is_empty_document(self, text: str) -> None:
        assert parse_json(text) == []
        assert parse_yaml(text) == []

    def test_json_syntax_error_has_line_number(self) -> None:
        with pytest.raises(DocumentParseError) as exc_info:
            parse_json('[\n  {"effectId": 3,\n  "order": }\n]')

        assert exc_info.value.line_number == 3
        assert isinstance(exc_info.value.parse_error, json.JSONDecodeError)

    def test_json_object_rejected(self) -> None:
        with pytest.raises(DocumentParseError, match="must be an array"):
            parse_json('{"effectId": 3}')

    def test_yaml_syntax_error(self) -> None:
        with pytest.raises(DocumentParseError) as exc_info:
            parse_yaml("- effectId: 3\n  order: [0\n")

        assert exc_info.value.line_number is not None

    def test_parse_document_yaml(self) -> None:
        document = parse_document("- gateType: check\n  order: 0\n", format="yaml")

        assert isinstance(document.nodes[0], Gate)


class TestReadNode:
    """Tests for lenient node reading."""

    def test_effect_node(self) -> None:
        node = read_node({"effectId": 3, "overrideParams": {"amount": 1}, "order": 4})

        assert isinstance(node, EffectInvocation)
        assert node.effect_id == 3
        assert node.order == 4
        assert node.chance_pct == 100

    def test_chance_out_of_range_is_representable(self) -> None:
        """Range checks are the validator's job."""
        node = read_node({"effectId": 3, "order": 0, "chancePct": 150})

        assert node is not None
        assert node.chance_pct == 150

    def test_gate_branches_lifted_out_of_params(self) -> None:
        node = read_node(
            {
                "gateType": "contest",
                "overrideParams": {
                    "casterStat": "str",
                    "onFail": [{"effectId": 1, "order": 0}],
                },
                "order": 1,
                "trigger": "on_hit",
            }
        )

        assert isinstance(node, Gate)
        assert node.override_params == {"casterStat": "str"}
        assert node.on_pass == []
        assert [n.order for n in node.on_fail] == [0]

    def test_null_keys_treated_as_absent(self) -> None:
        node = read_node({"effectId": 3, "gateType": None, "order": 0, "trigger": None})

        assert isinstance(node, EffectInvocation)
        assert node.trigger is None

    @pytest.mark.parametrize(
        "raw",
        [
            42,
            {"order": 0},
            {"effectId": 3, "gateType": "check", "order": 0},
            {"gateType": "bogus", "order": 0},
            {"effectId": 3},
            {"gateType": "check", "overrideParams": [1], "order": 0},
        ],
    )
    def test_unreadable_nodes(self, raw: object) -> None:
        assert read_node(raw) is None

    def test_malformed_branch_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            node = read_node(
                {"gateType": "check", "overrideParams": {"onPass": "x"}, "order": 0}
            )

        assert isinstance(node, Gate)
        assert node.on_pass == []
        assert "branch_malformed" in caplog.text

    def test_read_document_skips_bad_nodes(self) -> None:
        document = read_document(
            [{"effectId": 3, "order": 1}, None, {"gateType": "check", "order": 0}]
        )

        assert len(document) == 2
        assert [n.order for n in document.nodes] == [1, 0]


class TestPipelineDocument:
    """Tests for PipelineDocument helpers."""

    def test_walk_paths(self, document: PipelineDocument) -> None:
        paths = [path for _, path in document.walk()]

        assert paths == ["Effect[0]", "Effect[1]", "Effect[1].onPass[0]"]

    def test_count_nodes(self, document: PipelineDocument) -> None:
        assert document.count_nodes() == 3

    def test_from_wire(self, document: PipelineDocument) -> None:
        assert PipelineDocument.from_wire(document.to_wire()) == document

    def test_to_json(self, document: PipelineDocument) -> None:
        assert json.loads(document.to_json()) == document.to_wire()
