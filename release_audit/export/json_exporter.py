from __future__ import annotations

import json
import sys
from typing import Optional
from pathlib import Path

from ..engines.base import AuditReport


class JSONExporter:
    def export(self, report: AuditReport, path: Optional[str]) -> None:
        if not path or path == "-":
            json.dump(report.to_dict(), sys.stdout, indent=2, ensure_ascii=False)
            sys.stdout.write("\n")
            return
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(report.to_dict(), f, indent=2, ensure_ascii=False)
