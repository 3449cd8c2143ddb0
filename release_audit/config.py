from __future__ import annotations

from dataclasses import dataclass, field, asdict, fields
from typing import List, Optional, Dict, Any
import os
import json

from .version import CONFIG_SCHEMA_VERSION
from .components import DEFAULT_COMPONENTS
from .sources.base import SourceKind, validate_pattern
from .sources.registry import (
    DOCS_URL_TEMPLATE,
    MANIFEST_URL_TEMPLATE,
    README_URL_TEMPLATE,
    SourceRegistry,
)

DEFAULT_ENGINE = "release_audit.engines.concurrent_engine:ConcurrentAuditEngine"
SEQUENTIAL_ENGINE = "release_audit.engines.sequential_engine:SequentialAuditEngine"
DEFAULT_EXPORTER = "release_audit.export.text_reporter:TextReporter"


def _split(value: str) -> List[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


def _parse_bool(value: Optional[str]) -> Optional[bool]:
    if value is None or value.strip() == "":
        return None
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class AuditConfig:
    """
    Canonical configuration object passed throughout the system.
    Keep it dataclass-only (no heavy deps) to stay upgrade-friendly.
    """
    schema_version: int = CONFIG_SCHEMA_VERSION
    components: List[str] = field(default_factory=lambda: list(DEFAULT_COMPONENTS))
    # URL templates; "{name}" is replaced by the component name.
    docs_url_template: str = DOCS_URL_TEMPLATE
    manifest_url_template: str = MANIFEST_URL_TEMPLATE
    readme_url_template: str = README_URL_TEMPLATE
    # Per-source pattern overrides keyed by "docs", "manifest" or "readme".
    patterns: Dict[str, str] = field(default_factory=dict)
    max_concurrency: int = 4
    request_timeout: float = 15.0
    retries: int = 0
    user_agent: Optional[str] = None
    # Dotted paths for engine/exporter to allow runtime swapping without code changes.
    engine: str = DEFAULT_ENGINE
    exporter: str = DEFAULT_EXPORTER
    # None (or "-") writes the report to stdout
    output_path: Optional[str] = None
    # None means "color when stdout is a terminal"
    color: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def source_registry(self) -> SourceRegistry:
        return SourceRegistry().override(
            patterns=self.patterns,
            url_templates={
                SourceKind.DOCS.value: self.docs_url_template,
                SourceKind.MANIFEST.value: self.manifest_url_template,
                SourceKind.README.value: self.readme_url_template,
            },
        )

    # ---------- Loaders ----------

    @classmethod
    def from_env(cls) -> "AuditConfig":
        """
        Build config from environment variables (all optional).
        """
        def _get(name: str, default: str) -> str:
            return os.getenv(name, default)

        patterns = {
            kind.value: os.environ[f"AUDIT_{kind.name}_PATTERN"]
            for kind in SourceKind
            if os.getenv(f"AUDIT_{kind.name}_PATTERN")
        }

        return cls(
            components=_split(_get("AUDIT_COMPONENTS", "")) or list(DEFAULT_COMPONENTS),
            docs_url_template=_get("AUDIT_DOCS_URL_TEMPLATE", DOCS_URL_TEMPLATE),
            manifest_url_template=_get("AUDIT_MANIFEST_URL_TEMPLATE", MANIFEST_URL_TEMPLATE),
            readme_url_template=_get("AUDIT_README_URL_TEMPLATE", README_URL_TEMPLATE),
            patterns=patterns,
            max_concurrency=int(_get("AUDIT_MAX_CONCURRENCY", "4")),
            request_timeout=float(_get("AUDIT_REQUEST_TIMEOUT", "15.0")),
            retries=int(_get("AUDIT_RETRIES", "0")),
            user_agent=os.getenv("AUDIT_USER_AGENT") or None,
            engine=_get("AUDIT_ENGINE", DEFAULT_ENGINE),
            exporter=_get("AUDIT_EXPORTER", DEFAULT_EXPORTER),
            output_path=os.getenv("AUDIT_OUTPUT_PATH") or None,
            color=_parse_bool(os.getenv("AUDIT_COLOR")),
        )

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> "AuditConfig":
        """
        Load configuration from a JSON file. Supports schema migration for future versions.
        """
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        data = migrate_config(data)
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"unknown config keys in {path}: {', '.join(unknown)}")
        return cls(**data)

    # ---------- Validation ----------

    def validate(self) -> None:
        if not self.components:
            raise ValueError("components cannot be empty; provide at least one component name.")
        if self.max_concurrency <= 0:
            raise ValueError("max_concurrency must be > 0")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be > 0")
        if self.retries < 0:
            raise ValueError("retries must be >= 0")
        for label, template in (
            ("docs_url_template", self.docs_url_template),
            ("manifest_url_template", self.manifest_url_template),
            ("readme_url_template", self.readme_url_template),
        ):
            if "{name}" not in template:
                raise ValueError(f"{label} must contain a '{{name}}' placeholder")
        kinds = {k.value for k in SourceKind}
        for key, pattern in self.patterns.items():
            if key not in kinds:
                raise ValueError(f"unknown pattern source {key!r}; expected one of {sorted(kinds)}")
            validate_pattern(pattern)


def migrate_config(raw: Dict[str, Any]) -> Dict[str, Any]:
    """
    Migrate config dict to the latest schema version.
    Keep this pure and additive. Add migrations here as you bump schema.
    """
    raw = dict(raw)
    schema = raw.get("schema_version", CONFIG_SCHEMA_VERSION)
    if schema > CONFIG_SCHEMA_VERSION:
        raise ValueError(f"config schema_version {schema} is newer than supported ({CONFIG_SCHEMA_VERSION})")

    # Ensure a schema_version is present
    raw.setdefault("schema_version", CONFIG_SCHEMA_VERSION)
    return raw
