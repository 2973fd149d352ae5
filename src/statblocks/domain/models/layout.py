from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, Mapping


CONTAINER_BLOCK_TYPES = frozenset({"group", "inline", "collapse"})
OPAQUE_BLOCK_TYPES = frozenset({"layout", "ifelse", "javascript"})


class FieldPolicy(Enum):
    TRAITS = "traits"
    SAVES = "saves"
    ADDITIVE = "additive"

    @classmethod
    def for_block_type(cls, block_type: Any) -> "FieldPolicy":
        if block_type == "traits":
            return cls.TRAITS
        if block_type == "saves":
            return cls.SAVES
        return cls.ADDITIVE


@dataclass(frozen=True)
class FieldDeclaration:
    name: str
    policy: FieldPolicy


@dataclass(frozen=True)
class Layout:
    name: str
    blocks: List[Mapping[str, Any]] = field(default_factory=list)
    id: str | None = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "Layout":
        blocks = payload.get("blocks")
        return cls(
            name=str(payload.get("name") or ""),
            blocks=[row for row in blocks if isinstance(row, Mapping)] if isinstance(blocks, list) else [],
            id=payload.get("id"),
        )


def unwrap_blocks(blocks: Iterable[Any]) -> List[Mapping[str, Any]]:
    """Flatten container blocks into the leaf blocks that can declare fields.

    ``group``/``inline``/``collapse`` blocks are descended into; ``layout``,
    ``ifelse`` and ``javascript`` blocks are skipped without descending.
    """

    leaves: List[Mapping[str, Any]] = []
    for block in blocks or []:
        if not isinstance(block, Mapping):
            continue
        block_type = block.get("type")
        if block_type in CONTAINER_BLOCK_TYPES:
            nested = block.get("nested")
            if isinstance(nested, list):
                leaves.extend(unwrap_blocks(nested))
            continue
        if block_type in OPAQUE_BLOCK_TYPES:
            continue
        leaves.append(block)
    return leaves


def declared_fields(blocks: Iterable[Any]) -> List[FieldDeclaration]:
    declarations: List[FieldDeclaration] = []
    for block in unwrap_blocks(blocks):
        properties = block.get("properties")
        if not isinstance(properties, list):
            continue
        policy = FieldPolicy.for_block_type(block.get("type"))
        for name in properties:
            if isinstance(name, str) and name:
                declarations.append(FieldDeclaration(name=name, policy=policy))
    return declarations
