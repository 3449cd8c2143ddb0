from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence, Union
from abc import ABC, abstractmethod

from ..exceptions import AuditError
from ..semver import SemVer
from ..sources.base import SourceKind
from ..sources.registry import SourceRegistry

if TYPE_CHECKING:
    from aiohttp import ClientSession


@dataclass(frozen=True)
class Component:
    """A component to audit and the three URLs its version is read from."""

    name: str
    docs_url: str
    manifest_url: str
    readme_url: str

    @classmethod
    def from_name(cls, name: str, registry: SourceRegistry) -> "Component":
        return cls(
            name=name,
            docs_url=registry.get(SourceKind.DOCS).build_url(name),
            manifest_url=registry.get(SourceKind.MANIFEST).build_url(name),
            readme_url=registry.get(SourceKind.README).build_url(name),
        )

    def url_for(self, kind: SourceKind) -> str:
        return getattr(self, f"{kind.value}_url")


def versions_consistent(*versions: Optional[SemVer]) -> bool:
    """True iff every version is present and all are equal (build metadata ignored)."""
    if not versions or any(v is None for v in versions):
        return False
    first = versions[0]
    return all(v == first for v in versions[1:])


@dataclass(frozen=True)
class ComponentRecord:
    """
    Outcome of a completed check. Built once, after all three retrievals were
    attempted; a version of None means the source had no version marker.
    """

    name: str
    docs_url: str
    manifest_url: str
    readme_url: str
    docs_version: Optional[SemVer] = None
    manifest_version: Optional[SemVer] = None
    readme_version: Optional[SemVer] = None
    consistent: bool = False

    @classmethod
    def from_versions(
        cls, component: Component, versions: Mapping[SourceKind, Optional[SemVer]]
    ) -> "ComponentRecord":
        docs = versions.get(SourceKind.DOCS)
        manifest = versions.get(SourceKind.MANIFEST)
        readme = versions.get(SourceKind.README)
        return cls(
            name=component.name,
            docs_url=component.docs_url,
            manifest_url=component.manifest_url,
            readme_url=component.readme_url,
            docs_version=docs,
            manifest_version=manifest,
            readme_version=readme,
            consistent=versions_consistent(docs, manifest, readme),
        )

    def version_for(self, kind: SourceKind) -> Optional[SemVer]:
        return getattr(self, f"{kind.value}_version")

    def url_for(self, kind: SourceKind) -> str:
        return getattr(self, f"{kind.value}_url")

    @property
    def versions(self) -> Dict[SourceKind, Optional[SemVer]]:
        return {kind: self.version_for(kind) for kind in SourceKind}

    def divergent_sources(self) -> List[SourceKind]:
        """
        Sources that are missing a version or disagree with the most common one.
        Ties go to the earliest source in docs, manifest, readme order.
        """
        present = [v for v in self.versions.values() if v is not None]
        if not present:
            return list(SourceKind)
        counts = Counter(present)
        top = max(counts.values())
        majority = next(v for v in present if counts[v] == top)
        return [kind for kind, v in self.versions.items() if v is None or v != majority]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "consistent": self.consistent,
            "sources": {
                kind.value: {
                    "url": self.url_for(kind),
                    "version": str(v) if v is not None else None,
                }
                for kind, v in self.versions.items()
            },
            "divergent": [k.value for k in self.divergent_sources()] if not self.consistent else [],
        }


@dataclass(frozen=True)
class ComponentFailure:
    """A component whose check was aborted by a fatal error; it has no verdict."""

    name: str
    error: AuditError

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "error": self.error.to_dict()}


Outcome = Union[ComponentRecord, ComponentFailure]


@dataclass
class AuditReport:
    """Per-component outcomes, in the order the components were given."""

    outcomes: List[Outcome] = field(default_factory=list)

    @property
    def records(self) -> List[ComponentRecord]:
        return [o for o in self.outcomes if isinstance(o, ComponentRecord)]

    @property
    def failures(self) -> List[ComponentFailure]:
        return [o for o in self.outcomes if isinstance(o, ComponentFailure)]

    @property
    def all_consistent(self) -> bool:
        return not self.failures and all(r.consistent for r in self.records)

    @property
    def checked_count(self) -> int:
        return len(self.outcomes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "all_consistent": self.all_consistent,
            "order": [o.name for o in self.outcomes],
            "records": [r.to_dict() for r in self.records],
            "failures": [f.to_dict() for f in self.failures],
        }


class AuditEngine(ABC):
    """
    Abstract engine interface. Implementations own the fetch lifecycle.
    """
    @abstractmethod
    async def check(self, session: ClientSession, component: Component) -> ComponentRecord:  # pragma: no cover - interface
        """Check one component; raises AuditError if a source fails fatally."""
        ...

    @abstractmethod
    async def audit(self, components: Sequence[Component]) -> AuditReport:  # pragma: no cover - interface
        ...
