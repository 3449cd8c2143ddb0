"""The fleet of components audited when none are named explicitly."""

from __future__ import annotations

from typing import Iterable, List

from .engines.base import Component
from .sources.registry import SourceRegistry

DEFAULT_COMPONENTS = [
    "peach-buttons",
    "peach-menu",
    "peach-monitor",
    "peach-network",
    "peach-oled",
    "peach-stats",
]


def build_components(names: Iterable[str], registry: SourceRegistry) -> List[Component]:
    """Derive each component's three source URLs from the registry's templates."""
    return [Component.from_name(name, registry) for name in names]
