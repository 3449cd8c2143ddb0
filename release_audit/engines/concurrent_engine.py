from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional, Sequence

from aiohttp import ClientSession

from .base import AuditEngine, AuditReport, Component, ComponentFailure, ComponentRecord, Outcome
from ..config import AuditConfig
from ..exceptions import AuditError
from ..semver import SemVer, parse_version
from ..sources.base import SourceKind, VersionSource
from ..sources.registry import SourceRegistry
from ..utils.http import create_session, fetch_text
from ..utils.parsing import decode_badge_text, extract_version

logger = logging.getLogger(__name__)


class ConcurrentAuditEngine(AuditEngine):
    """
    Async auditor sharing one HTTP session across the run.
    - Per component, the three sources are fetched concurrently and joined
      before the verdict; the first fatal error cancels the rest.
    - Components are checked concurrently, capped by a semaphore.
    - A fatal error only fails its own component.
    """
    def __init__(self, config: AuditConfig, registry: SourceRegistry | None = None) -> None:
        self.config = config
        self.registry = registry or config.source_registry()

    async def audit(self, components: Sequence[Component]) -> AuditReport:
        session = create_session(self.config.request_timeout, self.config.user_agent)
        try:
            outcomes = await self._run_all(session, components)
        finally:
            await session.close()

        return AuditReport(outcomes)

    async def _run_all(self, session: ClientSession, components: Sequence[Component]) -> List[Outcome]:
        sem = asyncio.Semaphore(self.config.max_concurrency)

        async def _guarded(component: Component) -> Outcome:
            async with sem:
                return await self._check_isolated(session, component)

        # gather preserves input order
        return list(await asyncio.gather(*(_guarded(c) for c in components)))

    async def _check_isolated(self, session: ClientSession, component: Component) -> Outcome:
        try:
            record = await self.check(session, component)
        except AuditError as exc:
            logger.warning("%s: check aborted: %s", component.name, exc.message)
            return ComponentFailure(name=component.name, error=exc)
        logger.info("%s: %s", component.name, "consistent" if record.consistent else "inconsistent")
        return record

    # ---------- Per-component pipeline ----------

    async def check(self, session: ClientSession, component: Component) -> ComponentRecord:
        """
        Retrieve every source, then build the record in one step.
        Raises AuditError (FetchError or VersionParseError) if any source fails fatally.
        """
        versions = await self._check_sources(session, component)
        return ComponentRecord.from_versions(component, versions)

    async def _check_sources(
        self, session: ClientSession, component: Component
    ) -> Dict[SourceKind, Optional[SemVer]]:
        tasks = {
            source.kind: asyncio.ensure_future(self.probe(session, component, source))
            for source in self.registry
        }
        try:
            done, pending = await asyncio.wait(tasks.values(), return_when=asyncio.FIRST_EXCEPTION)
            for task in done:
                exc = task.exception()
                if exc is not None:
                    raise exc
        finally:
            for task in tasks.values():
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks.values(), return_exceptions=True)
        return {kind: task.result() for kind, task in tasks.items()}

    async def probe(self, session: ClientSession, component: Component, source: VersionSource) -> Optional[SemVer]:
        """
        Fetch one source and return its parsed version, or None if it has no version marker.
        """
        url = component.url_for(source.kind)
        body = await self.fetch(session, url)
        raw = extract_version(source.regex, body, html=source.html)
        if raw is None:
            logger.info("%s: no version marker found in %s (%s)", component.name, source.kind.value, url)
            return None
        text = decode_badge_text(raw) if source.badge else raw
        version = parse_version(text, source=f"{component.name} {source.kind.value} ({url})")
        logger.debug("%s: %s version %s", component.name, source.kind.value, version)
        return version

    async def fetch(self, session: ClientSession, url: str) -> str:
        cfg = self.config
        return await fetch_text(
            session,
            url,
            timeout=cfg.request_timeout,
            user_agent=cfg.user_agent,
            retries=cfg.retries,
        )
