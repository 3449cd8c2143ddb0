from __future__ import annotations

import argparse
import asyncio
import logging
from typing import List, Type

from ..components import build_components
from ..config import AuditConfig, SEQUENTIAL_ENGINE
from ..engines.base import AuditEngine, AuditReport
from ..export.base import Exporter
from ..utils.logging import setup_logging
from ..utils.loader import instantiate, load_symbol
from ..version import PROJECT_NAME, __version__

EXIT_OK = 0
EXIT_INCONSISTENT = 1
EXIT_USAGE = 2


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog=PROJECT_NAME,
        description="Check that each component's docs, manifest and readme declare the same version",
    )
    p.add_argument("components", nargs="*", help="Component names (default: the built-in fleet)")
    p.add_argument("--config", type=str, help="Path to config JSON", default=None)
    p.add_argument("--max-concurrency", type=int, default=None,
                   help="Max components checked at once (default from config)")
    p.add_argument("--timeout", type=float, default=None, help="Per-request timeout in seconds")
    p.add_argument("--retries", type=int, default=None, help="Extra attempts per request (default 0)")
    p.add_argument("--sequential", action="store_true", help="Fetch one source at a time")
    p.add_argument("--engine", type=str, default=None, help="Engine dotted path (module:ClassName)")
    p.add_argument("--exporter", type=str, default=None, help="Exporter dotted path (module:ClassName)")
    p.add_argument("--output", type=str, default=None, help="Output file path (default stdout)")
    color = p.add_mutually_exclusive_group()
    color.add_argument("--color", dest="color", action="store_true", default=None, help="Force colored output")
    color.add_argument("--plain", dest="color", action="store_false", default=None, help="Disable colored output")
    p.add_argument("--log-level", type=str, default=None, help="Log level (DEBUG, INFO, WARNING, ERROR)")
    p.add_argument("--serve", action="store_true", help="Run REST API server instead of a CLI audit")
    p.add_argument("--host", type=str, default="127.0.0.1", help="API host (when --serve)")
    p.add_argument("--port", type=int, default=8000, help="API port (when --serve)")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def _load_config(args: argparse.Namespace) -> AuditConfig:
    if args.config:
        cfg = AuditConfig.from_file(args.config)
    else:
        cfg = AuditConfig.from_env()

    if args.components:
        cfg.components = list(args.components)
    if args.max_concurrency is not None:
        cfg.max_concurrency = args.max_concurrency
    if args.timeout is not None:
        cfg.request_timeout = args.timeout
    if args.retries is not None:
        cfg.retries = args.retries
    if args.sequential:
        cfg.engine = SEQUENTIAL_ENGINE
    if args.engine:
        cfg.engine = args.engine
    if args.exporter:
        cfg.exporter = args.exporter
    if args.output:
        cfg.output_path = args.output
    if args.color is not None:
        cfg.color = args.color

    cfg.validate()
    return cfg


def run_server(host: str, port: int) -> None:
    try:
        import uvicorn  # type: ignore
    except Exception as exc:  # pragma: no cover - optional dep
        raise SystemExit("To run the API, install dependencies: pip install 'release-audit[api]'") from exc
    uvicorn.run("release_audit.apis.app:app", host=host, port=port)


def run_audit(cfg: AuditConfig, engine_cls: Type[AuditEngine]) -> AuditReport:
    registry = cfg.source_registry()
    components = build_components(cfg.components, registry)

    async def _run() -> AuditReport:
        engine = engine_cls(cfg, registry=registry)
        return await engine.audit(components)

    return asyncio.run(_run())


def run_cli(argv: List[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    setup_logging(args.log_level)
    log = logging.getLogger(__name__)

    if args.serve:
        run_server(args.host, args.port)
        return EXIT_OK

    try:
        cfg = _load_config(args)
        # Dynamic engine + exporter loading so upgrades don't require code edits.
        engine_cls = load_symbol(cfg.engine)
        exporter_cls = load_symbol(cfg.exporter)
    except (OSError, ValueError, ImportError) as exc:
        log.error("Invalid configuration: %s", exc)
        return EXIT_USAGE

    report = run_audit(cfg, engine_cls)

    exporter: Exporter = instantiate(exporter_cls, color=cfg.color)
    exporter.export(report, cfg.output_path)

    log.info("Checked: %s | Failed: %s | Consistent: %s",
             report.checked_count, len(report.failures), report.all_consistent)
    return EXIT_OK if report.all_consistent else EXIT_INCONSISTENT
