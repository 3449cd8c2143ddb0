from __future__ import annotations

from typing import Any, Dict, List, Optional
import logging

try:
    from fastapi import FastAPI, HTTPException
    from pydantic import BaseModel
except Exception as exc:  # pragma: no cover - optional dependency
    raise RuntimeError(
        "FastAPI not installed. Install with `pip install 'release-audit[api]'` "
        "or avoid using the API server."
    ) from exc

from ..components import build_components
from ..config import AuditConfig, SEQUENTIAL_ENGINE
from ..engines.base import AuditReport
from ..utils.loader import load_symbol
from ..version import PROJECT_NAME, __version__

logger = logging.getLogger(__name__)

app = FastAPI(title=f"{PROJECT_NAME} API", version=__version__)


class AuditRequest(BaseModel):
    components: Optional[List[str]] = None
    max_concurrency: Optional[int] = None
    request_timeout: Optional[float] = None
    sequential: bool = False
    patterns: Optional[Dict[str, str]] = None


@app.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/audit")
async def audit(req: AuditRequest) -> Dict[str, Any]:
    cfg = AuditConfig.from_env()
    if req.components:
        cfg.components = req.components
    if req.max_concurrency is not None:
        cfg.max_concurrency = req.max_concurrency
    if req.request_timeout is not None:
        cfg.request_timeout = req.request_timeout
    if req.sequential:
        cfg.engine = SEQUENTIAL_ENGINE
    if req.patterns:
        cfg.patterns = {**cfg.patterns, **req.patterns}

    try:
        cfg.validate()
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    # Load engine dynamically
    engine_cls = load_symbol(cfg.engine)
    registry = cfg.source_registry()
    engine = engine_cls(cfg, registry=registry)
    report: AuditReport = await engine.audit(build_components(cfg.components, registry))
    logger.info("API audit of %s components: consistent=%s", report.checked_count, report.all_consistent)
    return report.to_dict()
