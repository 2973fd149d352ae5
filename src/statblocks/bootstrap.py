import os
from pathlib import Path
from typing import Any, Mapping

from statblocks.application.services.creature_builder import CreatureBuilder
from statblocks.domain.repositories import CreatureRegistry, DocumentReader, LayoutRepository, LinkTransformer
from statblocks.infrastructure.inmemory.inmemory_bestiary import InMemoryBestiary
from statblocks.infrastructure.inmemory.inmemory_document_reader import InMemoryDocumentReader
from statblocks.infrastructure.inmemory.inmemory_layout_repo import DEFAULT_LAYOUT_NAME, InMemoryLayoutRepository
from statblocks.infrastructure.local_bestiary_provider import LocalBestiaryProvider
from statblocks.infrastructure.yaml_link_transform import WikiLinkTransformer


DEFAULT_BESTIARY_DIR = "data/bestiary"


def _is_truthy(value: str | None, *, default: str) -> bool:
    normalized = str(value if value is not None else default).strip().lower()
    return normalized in {"1", "true", "yes"}


def create_registry(bestiary_dir: str | Path | None = None) -> InMemoryBestiary:
    root = Path(bestiary_dir or os.getenv("STATBLOCKS_BESTIARY_DIR", DEFAULT_BESTIARY_DIR))
    if not root.exists():
        return InMemoryBestiary()
    return LocalBestiaryProvider(root).load_bestiary()


def create_layout_repository() -> InMemoryLayoutRepository:
    default_name = os.getenv("STATBLOCKS_DEFAULT_LAYOUT", DEFAULT_LAYOUT_NAME).strip() or DEFAULT_LAYOUT_NAME
    return InMemoryLayoutRepository(default_name=default_name)


def create_link_transformer() -> LinkTransformer | None:
    if not _is_truthy(os.getenv("STATBLOCKS_LINK_TRANSFORM_ENABLED"), default="1"):
        return None
    return WikiLinkTransformer()


def create_creature_builder(
    params: Mapping[str, Any],
    *,
    context: str = "",
    registry: CreatureRegistry | None = None,
    documents: DocumentReader | None = None,
    layouts: LayoutRepository | None = None,
) -> CreatureBuilder:
    return CreatureBuilder.from_params(
        params,
        registry=registry or create_registry(),
        documents=documents or InMemoryDocumentReader(),
        layouts=layouts or create_layout_repository(),
        link_transformer=create_link_transformer(),
        context=context,
    )
