from __future__ import annotations

from typing import Optional, Protocol

from ..engines.base import AuditReport


class Exporter(Protocol):
    def export(self, report: AuditReport, path: Optional[str]) -> None:
        ...
