from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict, Mapping, Optional

from statblocks.domain.models.document import Document, FrontMatterInfo
from statblocks.domain.repositories import DocumentReader


def normalize_link_target(name: str) -> str:
    """Strip wiki-link brackets, aliases and heading anchors from a link."""

    text = str(name or "").strip()
    if text.startswith("[[") and text.endswith("]]"):
        text = text[2:-2]
    text = text.split("|", 1)[0].split("#", 1)[0].strip()
    if text.lower().endswith(".md"):
        text = text[:-3]
    return text


def _basename(path: str) -> str:
    return normalize_link_target(path.rsplit("/", 1)[-1])


class InMemoryDocumentReader(DocumentReader):
    """Documents with already-parsed front-matter, keyed by vault path."""

    def __init__(self, documents: Mapping[str, Mapping[str, Any] | None] | None = None) -> None:
        self._front_matter: Dict[str, Optional[Dict[str, Any]]] = {}
        for path, front_matter in (documents or {}).items():
            self.add(path, front_matter)

    def add(self, path: str, front_matter: Mapping[str, Any] | None) -> Document:
        self._front_matter[path] = dict(front_matter) if front_matter is not None else None
        return Document(path=path, basename=_basename(path))

    async def resolve_link(self, name: str, context: str) -> Optional[Document]:
        target = normalize_link_target(name)
        if not target:
            return None
        for path in self._front_matter:
            if normalize_link_target(path) == target:
                return Document(path=path, basename=_basename(path))
        lowered = target.lower()
        for path in self._front_matter:
            if _basename(path).lower() == lowered:
                return Document(path=path, basename=_basename(path))
        return None

    async def read_front_matter(self, document: Document) -> FrontMatterInfo:
        front_matter = self._front_matter.get(document.path)
        if front_matter is None:
            return FrontMatterInfo(exists=False)
        return FrontMatterInfo(exists=True, frontmatter=deepcopy(front_matter))
