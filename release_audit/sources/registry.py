from __future__ import annotations

from typing import Dict, Iterator, List, Mapping, Optional

from .base import (
    BADGE_VERSION_PATTERN,
    MANIFEST_VERSION_PATTERN,
    SourceKind,
    VersionSource,
)

DOCS_URL_TEMPLATE = "http://docs.peachcloud.org/software/microservices/{name}.html"
MANIFEST_URL_TEMPLATE = "https://raw.githubusercontent.com/peachcloud/{name}/main/Cargo.toml"
README_URL_TEMPLATE = "https://github.com/peachcloud/{name}"


def default_sources() -> List[VersionSource]:
    return [
        VersionSource(SourceKind.DOCS, BADGE_VERSION_PATTERN, DOCS_URL_TEMPLATE, html=True, badge=True),
        VersionSource(SourceKind.MANIFEST, MANIFEST_VERSION_PATTERN, MANIFEST_URL_TEMPLATE),
        VersionSource(SourceKind.README, BADGE_VERSION_PATTERN, README_URL_TEMPLATE, html=True, badge=True),
    ]


class SourceRegistry:
    """
    Registry of the version sources every component is checked against.
    Patterns and URL templates are fixed defaults that configuration may substitute.
    """
    def __init__(self, sources: Optional[List[VersionSource]] = None) -> None:
        self._sources: Dict[SourceKind, VersionSource] = {
            s.kind: s for s in (sources or default_sources())
        }

    # ---- Introspection / Management ----

    def register(self, source: VersionSource) -> None:
        self._sources[source.kind] = source

    def get(self, kind: SourceKind) -> VersionSource:
        return self._sources[kind]

    @property
    def sources(self) -> List[VersionSource]:
        return list(self._sources.values())

    def __iter__(self) -> Iterator[VersionSource]:
        return iter(self.sources)

    # ---- Substitution ----

    def override(
        self,
        patterns: Optional[Mapping[str, str]] = None,
        url_templates: Optional[Mapping[str, str]] = None,
    ) -> "SourceRegistry":
        """
        Return a new registry with per-kind pattern and URL template overrides
        applied. Keys are SourceKind values ("docs", "manifest", "readme").
        """
        patterns = patterns or {}
        url_templates = url_templates or {}
        return SourceRegistry([
            s.with_pattern(patterns.get(s.kind.value)).with_url_template(url_templates.get(s.kind.value))
            for s in self._sources.values()
        ])
