"""Unit tests for PipelineSerializer.

Test scenarios:
1. Single effect with parameters (heal, effectId 3)
2. Chance gate with one onPass node and an empty onFail
3. Order numbering shared across chains and branches
4. Sentinel omission for optional fields
5. Composite folding (summon, create, teleport, damage components)
6. Skipping unresolvable blocks
"""

from __future__ import annotations

import logging

import pytest

from abilityforge.pipeline import (
    EffectInvocation,
    Gate,
    GateType,
    PipelineDocument,
    PipelineSerializer,
    serialize_program,
)
from abilityforge.registry import EffectRegistry
from abilityforge.visual import (
    Block,
    VisualProgram,
    chain_from_blocks,
    new_chain_node,
    set_nested_chain_slot,
)


def _program(*heads: Block) -> VisualProgram:
    program = VisualProgram()
    for head in heads:
        program.add_chain(head)
    return program


def _orders(document: PipelineDocument) -> list[int]:
    return [node.order for node, _ in document.walk()]


@pytest.fixture
def serializer(registry: EffectRegistry) -> PipelineSerializer:
    return PipelineSerializer(registry)


class TestSerializeEffects:
    """Tests for effect block serialization."""

    def test_heal_effect(self, serializer: PipelineSerializer) -> None:
        """A heal block becomes one effect node with its parameters."""
        block = new_chain_node("effect_heal", resource="hp", amount=20, scaling=1.5)

        document = serializer.serialize(_program(block))

        assert document.to_wire() == [
            {
                "effectId": 3,
                "overrideParams": {"resource": "hp", "amount": 20, "scaling": 1.5},
                "order": 0,
                "chancePct": 100,
            }
        ]

    def test_trigger_and_chance_copied(self, serializer: PipelineSerializer) -> None:
        block = new_chain_node(
            "effect_heal", amount=5, trigger="on_hit", chancePct="35"
        )

        node = serializer.serialize(_program(block)).nodes[0]

        assert isinstance(node, EffectInvocation)
        assert node.trigger == "on_hit"
        assert node.chance_pct == 35
        assert "trigger" not in node.override_params
        assert "chancePct" not in node.override_params

    def test_empty_trigger_not_written(self, serializer: PipelineSerializer) -> None:
        block = new_chain_node("effect_heal", amount=5, trigger="")

        node = serializer.serialize(_program(block)).nodes[0]

        assert isinstance(node, EffectInvocation)
        assert node.trigger is None

    def test_none_values_never_written(self, serializer: PipelineSerializer) -> None:
        block = new_chain_node("effect_heal", resource=None, amount=5)

        node = serializer.serialize(_program(block)).nodes[0]

        assert node.override_params == {"amount": 5}

    def test_fields_outside_schema_ignored(
        self, serializer: PipelineSerializer
    ) -> None:
        block = new_chain_node("effect_heal", amount=5, color="green")

        node = serializer.serialize(_program(block)).nodes[0]

        assert node.override_params == {"amount": 5}

    def test_params_follow_schema_order(self, serializer: PipelineSerializer) -> None:
        block = new_chain_node("effect_heal", scaling=2, amount=5, resource="mana")

        node = serializer.serialize(_program(block)).nodes[0]

        assert list(node.override_params) == ["resource", "amount", "scaling"]

    def test_serialize_does_not_mutate_program(
        self, serializer: PipelineSerializer
    ) -> None:
        block = new_chain_node("effect_summon", mobRef="30:1201", mobType="wolf")

        serializer.serialize(_program(block))

        assert block.fields == {"mobRef": "30:1201", "mobType": "wolf"}

    def test_serialize_is_deterministic(self, serializer: PipelineSerializer) -> None:
        program = _program(
            chain_from_blocks(
                [new_chain_node("effect_heal", amount=1), new_chain_node("gate_check")]
            )
        )

        assert serializer.serialize(program) == serializer.serialize(program)


class TestSentinelOmission:
    """Optional fields left at the empty sentinel are omitted."""

    def test_optional_empty_omitted(self, serializer: PipelineSerializer) -> None:
        block = new_chain_node(
            "effect_status", statusName="stun", type="", duration=3
        )

        node = serializer.serialize(_program(block)).nodes[0]

        assert node.override_params == {"statusName": "stun", "duration": 3}

    def test_required_empty_kept(self, serializer: PipelineSerializer) -> None:
        """Only optional fields are dropped when empty."""
        block = new_chain_node("effect_status", statusName="", duration=3)

        node = serializer.serialize(_program(block)).nodes[0]

        assert node.override_params == {"statusName": "", "duration": 3}


class TestSerializeGates:
    """Tests for gate serialization."""

    def test_chance_gate_with_pass_branch(
        self, serializer: PipelineSerializer
    ) -> None:
        """The branch node is numbered before the gate; empty onFail is omitted."""
        gate = new_chain_node("gate_chance", percentage=50)
        set_nested_chain_slot(
            gate, "onPass", new_chain_node("effect_summon", mobRef="30:1201")
        )

        document = serializer.serialize(_program(gate))

        assert document.to_wire() == [
            {
                "gateType": "chance",
                "overrideParams": {
                    "percentage": 50,
                    "onPass": [
                        {
                            "effectId": 5,
                            "overrideParams": {"mobZoneId": 30, "mobId": 1201},
                            "order": 0,
                            "chancePct": 100,
                        }
                    ],
                },
                "order": 1,
                "chancePct": 100,
            }
        ]

    def test_gate_chance_is_always_100(self, serializer: PipelineSerializer) -> None:
        gate = new_chain_node("gate_check", condition="hp<50", chancePct=25)

        node = serializer.serialize(_program(gate)).nodes[0]

        assert isinstance(node, Gate)
        assert node.chance_pct == 100
        assert node.override_params == {"condition": "hp<50"}

    def test_branch_orders_precede_gate(self, serializer: PipelineSerializer) -> None:
        """Pass branch, then fail branch, then the gate itself."""
        gate = new_chain_node("gate_saving_throw", saveType="will", dc=14)
        set_nested_chain_slot(
            gate,
            "onPass",
            chain_from_blocks(
                [new_chain_node("effect_heal"), new_chain_node("effect_heal")]
            ),
        )
        set_nested_chain_slot(gate, "onFail", new_chain_node("effect_damage"))

        node = serializer.serialize(_program(gate)).nodes[0]

        assert isinstance(node, Gate)
        assert node.gate_type is GateType.SAVING_THROW
        assert [n.order for n in node.on_pass] == [0, 1]
        assert [n.order for n in node.on_fail] == [2]
        assert node.order == 3

    def test_nested_gates(self, serializer: PipelineSerializer) -> None:
        inner = new_chain_node("gate_attack_roll", bonus=2)
        set_nested_chain_slot(inner, "onPass", new_chain_node("effect_damage"))
        outer = new_chain_node("gate_chance", percentage=75)
        set_nested_chain_slot(outer, "onPass", inner)

        document = serializer.serialize(_program(outer))

        outer_node = document.nodes[0]
        assert isinstance(outer_node, Gate)
        inner_node = outer_node.on_pass[0]
        assert isinstance(inner_node, Gate)
        assert inner_node.on_pass[0].order == 0
        assert inner_node.order == 1
        assert outer_node.order == 2


class TestOrderNumbering:
    """Orders are unique and contiguous from 0 across the whole program."""

    def test_counter_shared_across_chains(
        self, serializer: PipelineSerializer
    ) -> None:
        first = chain_from_blocks(
            [new_chain_node("effect_heal"), new_chain_node("effect_damage")]
        )
        gate = new_chain_node("gate_chance", percentage=10)
        set_nested_chain_slot(gate, "onFail", new_chain_node("effect_heal"))
        second = chain_from_blocks([gate, new_chain_node("effect_teleport")])

        document = serializer.serialize(_program(first, second))

        assert [n.order for n in document.nodes] == [0, 1, 3, 4]
        assert sorted(_orders(document)) == list(range(5))

    def test_skipped_blocks_do_not_consume_orders(
        self, serializer: PipelineSerializer
    ) -> None:
        head = chain_from_blocks(
            [
                new_chain_node("effect_heal"),
                new_chain_node("effect_unknown"),
                new_chain_node("effect_damage"),
            ]
        )

        document = serializer.serialize(_program(head))

        assert _orders(document) == [0, 1]

    def test_empty_program(self, serializer: PipelineSerializer) -> None:
        assert serializer.serialize(VisualProgram()).nodes == []


class TestCompositeFolding:
    """Composite editor fields are folded into wire parameters."""

    def test_create_object_ref(self, serializer: PipelineSerializer) -> None:
        block = new_chain_node(
            "effect_create", objectType="torch", quantity=2, objectRef="12:5"
        )

        node = serializer.serialize(_program(block)).nodes[0]

        assert node.override_params == {
            "objectType": "torch",
            "quantity": 2,
            "objectZoneId": 12,
            "objectId": 5,
        }

    def test_summon_without_template(self, serializer: PipelineSerializer) -> None:
        """An empty mobRef means no specific template."""
        block = new_chain_node("effect_summon", mobType="wolf", mobRef="")

        node = serializer.serialize(_program(block)).nodes[0]

        assert node.override_params == {"mobType": "wolf"}

    def test_teleport_target_room(self, serializer: PipelineSerializer) -> None:
        block = new_chain_node(
            "effect_teleport", mode="room", targetRoomZoneId=30, targetRoomId="1204"
        )

        node = serializer.serialize(_program(block)).nodes[0]

        assert node.override_params == {
            "mode": "room",
            "targetRoom": {"zoneId": 30, "id": 1204},
        }

    def test_damage_components(self, serializer: PipelineSerializer) -> None:
        block = new_chain_node("effect_damage", type="fire", amount=12)
        set_nested_chain_slot(
            block,
            "components",
            chain_from_blocks(
                [
                    new_chain_node("damage_component", type="fire", percent=50),
                    new_chain_node("damage_component", type="cold", percent=50),
                ]
            ),
        )

        node = serializer.serialize(_program(block)).nodes[0]

        assert node.override_params == {
            "amount": 12,
            "components": [
                {"type": "fire", "percent": 50},
                {"type": "cold", "percent": 50},
            ],
        }

    def test_extract_params_directly(self, serializer: PipelineSerializer) -> None:
        block = new_chain_node("effect_summon", mobRef="30:1201", duration=60)

        assert serializer.extract_params(block) == {
            "duration": 60,
            "mobZoneId": 30,
            "mobId": 1201,
        }


class TestUnresolvedBlocks:
    """Blocks that cannot be resolved are skipped and logged."""

    def test_unknown_type_logged_at_warning(
        self, serializer: PipelineSerializer, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING):
            document = serializer.serialize(_program(new_chain_node("effect_bogus")))

        assert document.nodes == []
        assert "block_skipped_unknown_type" in caplog.text

    def test_unknown_gate_kind_skipped(self, serializer: PipelineSerializer) -> None:
        document = serializer.serialize(_program(new_chain_node("gate_teleport")))

        assert document.nodes == []

    def test_registry_not_ready_skips_effects_keeps_gates(
        self, empty_registry: EffectRegistry, caplog: pytest.LogCaptureFixture
    ) -> None:
        gate = new_chain_node("gate_chance", percentage=50)
        set_nested_chain_slot(gate, "onPass", new_chain_node("effect_heal"))

        with caplog.at_level(logging.DEBUG):
            document = serialize_program(_program(gate), empty_registry)

        assert len(document.nodes) == 1
        node = document.nodes[0]
        assert isinstance(node, Gate)
        assert node.on_pass == []
        assert node.order == 0
        assert "block_skipped_registry_not_ready" in caplog.text
