"""In-memory model of the block editor's visual program.

A program is a list of independent top-level chains. Each chain is a singly
linked list of blocks; a block has a type tag, named field values, named
nested-chain slots (``onPass``, ``onFail``, ``components``) and, for chain
heads, a layout position.

The functions at module level are the narrow interface the compiler uses,
so an editor backed by a different widget tree only needs to provide the
same operations.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from abilityforge.logging import get_logger

__all__ = [
    "Block",
    "Chain",
    "Position",
    "VisualProgram",
    "new_chain_node",
    "get_field_value",
    "set_field_value",
    "get_nested_chain_slot",
    "set_nested_chain_slot",
    "connect_next",
    "walk_chain",
    "chain_from_blocks",
]

logger = get_logger(__name__)

Position = tuple[float, float]


def _new_block_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(eq=False)
class Block:
    """One block in the visual program.

    Blocks compare by identity. ``fields`` stores values exactly as given;
    the compiler never stringifies them.
    """

    type_tag: str
    fields: dict[str, Any] = field(default_factory=dict)
    slots: dict[str, Block | None] = field(default_factory=dict)
    next: Block | None = None
    position: Position | None = None
    id: str = field(default_factory=_new_block_id)

    def __repr__(self) -> str:
        return f"Block({self.type_tag!r}, id={self.id!r})"


@dataclass
class Chain:
    head: Block
    position: Position = (0.0, 0.0)


@dataclass
class VisualProgram:
    """Top-level chains in editor order."""

    chains: list[Chain] = field(default_factory=list)

    def add_chain(self, head: Block, position: Position = (0.0, 0.0)) -> Chain:
        """Append a top-level chain starting at ``head``."""
        head.position = position
        chain = Chain(head=head, position=position)
        self.chains.append(chain)
        return chain

    @property
    def heads(self) -> list[Block]:
        return [chain.head for chain in self.chains]

    def is_empty(self) -> bool:
        return not self.chains

    def iter_blocks(self) -> Iterator[Block]:
        """Yield every block, depth first, slot contents before ``next``."""

        def visit(start: Block | None) -> Iterator[Block]:
            for block in walk_chain(start):
                yield block
                for slot_head in block.slots.values():
                    yield from visit(slot_head)

        for chain in self.chains:
            yield from visit(chain.head)


def new_chain_node(type_tag: str, **fields: Any) -> Block:
    return Block(type_tag=type_tag, fields=dict(fields))


def get_field_value(block: Block, name: str) -> Any:
    """Return a field value, or None when the block does not carry it."""
    return block.fields.get(name)


def set_field_value(block: Block, name: str, value: Any) -> None:
    block.fields[name] = value


def get_nested_chain_slot(block: Block, slot: str) -> Block | None:
    return block.slots.get(slot)


def set_nested_chain_slot(block: Block, slot: str, head: Block | None) -> None:
    block.slots[slot] = head


def connect_next(previous: Block, block: Block | None) -> None:
    previous.next = block


def walk_chain(start: Block | None) -> Iterator[Block]:
    """Iterate a chain from ``start`` along ``next`` links.

    Each call starts a fresh walk. A link back to an already visited block
    ends the walk.
    """
    seen: set[int] = set()
    current = start
    while current is not None:
        if id(current) in seen:
            logger.warning("chain_cycle_detected", block_type=current.type_tag)
            return
        seen.add(id(current))
        yield current
        current = current.next


def chain_from_blocks(blocks: list[Block]) -> Block | None:
    """Link ``blocks`` in order and return the head (None if empty)."""
    for previous, block in zip(blocks, blocks[1:]):
        connect_next(previous, block)
    return blocks[0] if blocks else None
