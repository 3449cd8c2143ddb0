from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from aiohttp import ClientSession

from .base import Component, Outcome
from .concurrent_engine import ConcurrentAuditEngine
from ..semver import SemVer
from ..sources.base import SourceKind


class SequentialAuditEngine(ConcurrentAuditEngine):
    """
    Same pipeline and verdicts as ConcurrentAuditEngine, one request at a time.
    Useful for debugging and for hosts that throttle parallel requests.
    """

    async def _run_all(self, session: ClientSession, components: Sequence[Component]) -> List[Outcome]:
        return [await self._check_isolated(session, c) for c in components]

    async def _check_sources(
        self, session: ClientSession, component: Component
    ) -> Dict[SourceKind, Optional[SemVer]]:
        # A fatal error on one source stops before the remaining ones are fetched.
        return {source.kind: await self.probe(session, component, source) for source in self.registry}
