from __future__ import annotations

import re

from statblocks.domain.repositories import LinkTransformer


_WIKI_LINK = re.compile(r"\[\[([^\[\]|#]+)(#[^\[\]|]*)?(?:\|([^\[\]]*))?\]\]")


class PassthroughLinkTransformer(LinkTransformer):
    def transform(self, yaml_text: str) -> str:
        return yaml_text


class WikiLinkTransformer(LinkTransformer):
    """Rewrites ``[[Target#Heading|Alias]]`` into ``[Alias](<Target#Heading>)``.

    Runs on dumped YAML text; links sit inside scalars the dumper already
    quoted where needed, so the rewrite keeps the document parseable.
    """

    def transform(self, yaml_text: str) -> str:
        return _WIKI_LINK.sub(self._replace, yaml_text)

    @staticmethod
    def _replace(match: re.Match) -> str:
        target = match.group(1).strip()
        heading = (match.group(2) or "").strip()
        alias = (match.group(3) or "").strip() or target
        destination = f"{target}{heading}"
        if any(char.isspace() for char in destination):
            destination = f"<{destination}>"
        return f"[{alias}]({destination})"
