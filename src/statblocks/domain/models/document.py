from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class Document:
    path: str
    basename: str = ""


@dataclass(frozen=True)
class FrontMatterInfo:
    exists: bool
    frontmatter: Dict[str, Any] = field(default_factory=dict)
