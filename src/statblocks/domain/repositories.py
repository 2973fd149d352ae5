from abc import ABC, abstractmethod
from typing import Any, List, Optional, Set

from statblocks.domain.models.creature import CreatureRecord, Diagnostic
from statblocks.domain.models.document import Document, FrontMatterInfo
from statblocks.domain.models.layout import Layout


class CreatureRegistry(ABC):
    @abstractmethod
    def get(self, name: Any) -> Optional[CreatureRecord]:
        raise NotImplementedError

    @abstractmethod
    def has_creature(self, name: Any) -> bool:
        raise NotImplementedError

    @abstractmethod
    def get_extensions(
        self,
        record: CreatureRecord,
        visited: Set[str],
        diagnostics: Optional[List[Diagnostic]] = None,
    ) -> List[CreatureRecord]:
        """Return ``[record, *ancestors]``, most-derived first.

        ``visited`` carries the names already followed and is updated in place so
        cyclic ``extends`` graphs terminate. Missing or repeated ancestors are
        reported to ``diagnostics`` when a list is given.
        """
        raise NotImplementedError

    @abstractmethod
    def get_extension_names(self, record: CreatureRecord, visited: Set[str]) -> List[str]:
        raise NotImplementedError


class DocumentReader(ABC):
    @abstractmethod
    async def resolve_link(self, name: str, context: str) -> Optional[Document]:
        raise NotImplementedError

    @abstractmethod
    async def read_front_matter(self, document: Document) -> FrontMatterInfo:
        raise NotImplementedError


class LinkTransformer(ABC):
    @abstractmethod
    def transform(self, yaml_text: str) -> str:
        raise NotImplementedError


class LayoutRepository(ABC):
    @abstractmethod
    def get_all(self) -> List[Layout]:
        raise NotImplementedError

    @abstractmethod
    def get_default(self) -> Layout:
        raise NotImplementedError

    def find(self, name: Any) -> Optional[Layout]:
        """Convenience lookup by layout name over :meth:`get_all`."""
        if name is None:
            return None
        for layout in self.get_all():
            if layout.name == name:
                return layout
        return None
