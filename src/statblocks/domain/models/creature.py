from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping


CreatureRecord = Dict[str, Any]

ADDITIVE_SUFFIX = "+"
SUBTRACTIVE_SUFFIX = "-"


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def additive_key(name: str) -> str:
    return f"{name}{ADDITIVE_SUFFIX}"


def subtractive_key(name: str) -> str:
    return f"{name}{SUBTRACTIVE_SUFFIX}"


@dataclass(frozen=True)
class FieldSlots:
    """The direct (``F``), additive (``F+``) and subtractive (``F-``) forms of one field."""

    name: str
    direct: Any = MISSING
    additive: Any = MISSING
    subtractive: Any = MISSING

    @classmethod
    def read(cls, record: Mapping[str, Any], name: str) -> "FieldSlots":
        return cls(
            name=name,
            direct=record.get(name, MISSING),
            additive=record.get(additive_key(name), MISSING),
            subtractive=record.get(subtractive_key(name), MISSING),
        )

    @property
    def has_direct(self) -> bool:
        return self.direct is not MISSING

    @property
    def has_additive(self) -> bool:
        return self.additive is not MISSING

    @property
    def has_subtractive(self) -> bool:
        return self.subtractive is not MISSING

    @property
    def is_absent(self) -> bool:
        return not (self.has_direct or self.has_additive or self.has_subtractive)


ABSENT_DOCUMENT = "absent-document"
ABSENT_EXTENSION = "absent-extension"
CYCLIC_EXTENSION = "cyclic-extension"
UNRESOLVABLE_LABEL = "unresolvable-label"
MALFORMED_FIELD = "malformed-field"
LINK_TRANSFORM = "link-transform"


@dataclass(frozen=True)
class Diagnostic:
    kind: str
    message: str
    field: str | None = None


@dataclass
class BuildResult:
    record: CreatureRecord
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def kinds(self) -> List[str]:
        return [row.kind for row in self.diagnostics]

    @property
    def degraded(self) -> bool:
        return bool(self.diagnostics)
