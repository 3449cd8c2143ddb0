from __future__ import annotations

import sys
from typing import List, Optional
from pathlib import Path

from ..engines.base import AuditReport, ComponentFailure, ComponentRecord
from ..sources.base import SourceKind

NOT_FOUND = "not found"


class TextReporter:
    """
    Human-readable report, one block per component.
    Color is off unless requested, or unless writing to a terminal when ``color`` is None.
    """

    def __init__(self, color: Optional[bool] = None) -> None:
        self.color = color

    def export(self, report: AuditReport, path: Optional[str]) -> None:
        if not path or path == "-":
            use_color = self.color if self.color is not None else sys.stdout.isatty()
            sys.stdout.write(self.render(report, use_color=use_color))
            return
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.render(report, use_color=bool(self.color)))

    def render(self, report: AuditReport, use_color: bool = False) -> str:
        # ANSI color codes
        bold = "\033[1m" if use_color else ""
        red = "\033[31m" if use_color else ""
        green = "\033[32m" if use_color else ""
        yellow = "\033[33m" if use_color else ""
        reset = "\033[0m" if use_color else ""

        lines: List[str] = []

        def _record(record: ComponentRecord) -> None:
            divergent = set() if record.consistent else set(record.divergent_sources())
            lines.append(f"{bold}{record.name}{reset}")
            for kind in SourceKind:
                version = record.version_for(kind)
                text = str(version) if version is not None else NOT_FOUND
                marker = f"  {yellow}<- differs{reset}" if kind in divergent and version is not None else ""
                lines.append(f"  {kind.value:<9} {text}{marker}")
            verdict = f"{green}PASS{reset}" if record.consistent else f"{red}FAIL{reset}"
            lines.append(f"  verdict   {verdict}")

        def _failure(failure: ComponentFailure) -> None:
            lines.append(f"{bold}{failure.name}{reset}")
            lines.append(f"  {red}ERROR{reset} [{failure.error.error_code}] {failure.error.message}")

        for outcome in report.outcomes:
            if isinstance(outcome, ComponentFailure):
                _failure(outcome)
            else:
                _record(outcome)

        passed = sum(1 for r in report.records if r.consistent)
        lines.append("")
        lines.append(
            f"{passed}/{report.checked_count} consistent, "
            f"{len(report.records) - passed} inconsistent, {len(report.failures)} failed"
        )
        return "\n".join(lines) + "\n"
