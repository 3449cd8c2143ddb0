from __future__ import annotations

import csv
import sys
from typing import Optional, TextIO
from pathlib import Path

from ..engines.base import AuditReport, ComponentFailure
from ..sources.base import SourceKind


class CSVExporter:
    """
    Writes one row per component; failed components carry the error instead of versions.
    """

    _headers = [
        "name",
        "docs_version",
        "manifest_version",
        "readme_version",
        "consistent",
        "divergent",
        "error",
    ]

    def export(self, report: AuditReport, path: Optional[str]) -> None:
        if not path or path == "-":
            self._write(report, sys.stdout)
            return
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            self._write(report, f)

    def _write(self, report: AuditReport, stream: TextIO) -> None:
        w = csv.writer(stream)
        w.writerow(self._headers)
        for outcome in report.outcomes:
            if isinstance(outcome, ComponentFailure):
                w.writerow([outcome.name, "", "", "", "", "", outcome.error.message])
                continue
            w.writerow(
                [
                    outcome.name,
                    *(str(outcome.version_for(kind) or "") for kind in SourceKind),
                    "true" if outcome.consistent else "false",
                    " ".join(k.value for k in outcome.divergent_sources()) if not outcome.consistent else "",
                    "",
                ]
            )
