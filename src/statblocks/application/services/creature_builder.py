from __future__ import annotations

import logging
from copy import deepcopy
from typing import Any, List, Mapping

from statblocks.application.services.field_merge_service import FieldMergeService
from statblocks.application.services.link_transform_service import transform_links
from statblocks.application.services.value_normalizer import flatten, join_image, js_string, js_truthy
from statblocks.domain.models.creature import (
    ABSENT_DOCUMENT,
    MALFORMED_FIELD,
    BuildResult,
    CreatureRecord,
    Diagnostic,
)
from statblocks.domain.models.layout import Layout, declared_fields
from statblocks.domain.repositories import CreatureRegistry, DocumentReader, LayoutRepository, LinkTransformer


def select_layout(
    layouts: LayoutRepository,
    params: Mapping[str, Any] | None = None,
    monster: Mapping[str, Any] | None = None,
    explicit: Layout | None = None,
) -> Layout:
    """Pick the layout named by the parameters or creature, else the default."""

    if explicit is not None:
        return explicit
    params = params or {}
    monster = monster or {}
    by_layout = params.get("layout") if params.get("layout") is not None else monster.get("layout")
    by_statblock = params.get("statblock") if params.get("statblock") is not None else monster.get("statblock")
    for layout in layouts.get_all():
        if layout.name == by_layout or layout.name == by_statblock:
            return layout
    return layouts.get_default()


def base_creature_for(registry: CreatureRegistry, params: Mapping[str, Any]) -> CreatureRecord:
    record = registry.get(params.get("monster")) or registry.get(params.get("creature"))
    return deepcopy(record) if record else {}


class CreatureBuilder:
    """Resolves one creature from its base record, linked note, ancestors and overrides."""

    def __init__(
        self,
        *,
        registry: CreatureRegistry,
        documents: DocumentReader,
        layout: Layout,
        link_transformer: LinkTransformer | None = None,
        monster: Mapping[str, Any] | None = None,
        params: Mapping[str, Any] | None = None,
        context: str = "",
        field_merge: FieldMergeService | None = None,
    ) -> None:
        self.registry = registry
        self.documents = documents
        self.layout = layout
        self.link_transformer = link_transformer
        self.monster: CreatureRecord = dict(monster or {})
        self.params: CreatureRecord = dict(params or {})
        self.context = context or ""
        self.field_merge = field_merge or FieldMergeService()
        self._logger = logging.getLogger(__name__)

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, Any],
        *,
        registry: CreatureRegistry,
        documents: DocumentReader,
        layouts: LayoutRepository,
        layout: Layout | None = None,
        link_transformer: LinkTransformer | None = None,
        context: str = "",
    ) -> "CreatureBuilder":
        monster = base_creature_for(registry, params)
        return cls(
            registry=registry,
            documents=documents,
            layout=select_layout(layouts, params, monster, explicit=layout),
            link_transformer=link_transformer,
            monster=monster,
            params=params,
            context=context,
        )

    @property
    def can_save(self) -> bool:
        return "name" in self.params

    async def build(self) -> CreatureRecord:
        result = await self.build_result()
        return result.record

    async def build_result(self) -> BuildResult:
        diagnostics: List[Diagnostic] = []

        built: CreatureRecord = deepcopy({**self.monster, **self.params})
        if not built:
            built = {"note": self.context}

        if js_truthy(built.get("note")):
            await self._merge_linked_document(built, diagnostics)

        if isinstance(built.get("image"), list):
            built["image"] = join_image(built["image"])

        extensions = self.registry.get_extensions(built, set(), diagnostics)
        for extension in reversed(extensions):
            built.update(deepcopy(extension))
        built.update(deepcopy(self.monster))
        built.update(deepcopy(self.params))
        # The most-derived source must rank front-matter below the base record, as the fold does.
        if extensions:
            extensions[0] = {**extensions[0], **deepcopy(self.monster), **deepcopy(self.params)}

        self.field_merge.apply(built, declared_fields(self.layout.blocks), extensions, diagnostics)

        built = transform_links(built, self.link_transformer, diagnostics)

        if isinstance(built.get("image"), list):
            built["image"] = join_image(built["image"])

        return BuildResult(record=built, diagnostics=diagnostics)

    async def _merge_linked_document(self, built: CreatureRecord, diagnostics: List[Diagnostic]) -> None:
        note = built.get("note")
        if isinstance(note, list):
            flat = flatten(note)
            note = flat[-1] if flat else None
        if not js_truthy(note):
            return

        document = await self.documents.resolve_link(js_string(note), self.context)
        if document is None:
            self._absent_document(diagnostics, f"No document found for note {js_string(note)!r}")
            return
        info = await self.documents.read_front_matter(document)
        if not info.exists:
            self._absent_document(diagnostics, f"Document {document.path!r} has no front-matter")
            return
        if not isinstance(info.frontmatter, Mapping):
            diagnostics.append(
                Diagnostic(kind=MALFORMED_FIELD, message=f"Front-matter of {document.path!r} is not a mapping", field="note")
            )
            return
        built.update(deepcopy(dict(info.frontmatter)))
        built.update(deepcopy(self.params))

    def _absent_document(self, diagnostics: List[Diagnostic], message: str) -> None:
        self._logger.debug(message, extra={"context": self.context})
        diagnostics.append(Diagnostic(kind=ABSENT_DOCUMENT, message=message, field="note"))

    def extension_names(self, record: Mapping[str, Any] | None = None) -> List[str]:
        source = dict(record) if record is not None else {**self.monster, **self.params}
        return self.registry.get_extension_names(source, set())

    async def refresh(self, creature: Mapping[str, Any], dependencies: List[str] | None = None) -> BuildResult | None:
        """Rebuild after ``creature`` changed in the registry, if this build depends on it.

        ``dependencies`` defaults to the extension names of the current inputs.
        An update to the base creature itself replaces the in-memory base record;
        ancestors are picked up from the registry on rebuild. Returns None when
        ``creature`` is unrelated.
        """

        names = dependencies if dependencies is not None else self.extension_names()
        name = creature.get("name")
        if name not in names:
            return None
        if self.monster and self.monster.get("name") == name:
            self.monster = deepcopy(dict(creature))
        return await self.build_result()
