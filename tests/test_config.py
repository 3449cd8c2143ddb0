"""
Tests for release_audit.config.
"""

import json

import pytest

from release_audit.components import DEFAULT_COMPONENTS
from release_audit.config import AuditConfig, DEFAULT_ENGINE, migrate_config
from release_audit.sources.base import SourceKind
from release_audit.version import CONFIG_SCHEMA_VERSION


class TestDefaults:
    def test_default_fleet_and_templates(self):
        cfg = AuditConfig()
        assert cfg.components == DEFAULT_COMPONENTS
        assert cfg.components is not DEFAULT_COMPONENTS
        assert cfg.retries == 0
        assert cfg.engine == DEFAULT_ENGINE
        cfg.validate()

    def test_registry_builds_peachcloud_urls(self):
        registry = AuditConfig().source_registry()
        assert registry.get(SourceKind.DOCS).build_url("peach-oled") == (
            "http://docs.peachcloud.org/software/microservices/peach-oled.html"
        )
        assert registry.get(SourceKind.README).build_url("peach-oled") == "https://github.com/peachcloud/peach-oled"
        assert registry.get(SourceKind.MANIFEST).build_url("peach-oled").endswith("/peach-oled/main/Cargo.toml")


class TestFromEnv:
    def test_reads_variables(self, monkeypatch):
        monkeypatch.setenv("AUDIT_COMPONENTS", "peach-oled, peach-menu")
        monkeypatch.setenv("AUDIT_MAX_CONCURRENCY", "2")
        monkeypatch.setenv("AUDIT_REQUEST_TIMEOUT", "3.5")
        monkeypatch.setenv("AUDIT_README_PATTERN", r"v(\d+\.\d+\.\d+)")
        monkeypatch.setenv("AUDIT_COLOR", "no")

        cfg = AuditConfig.from_env()
        assert cfg.components == ["peach-oled", "peach-menu"]
        assert cfg.max_concurrency == 2
        assert cfg.request_timeout == 3.5
        assert cfg.patterns == {"readme": r"v(\d+\.\d+\.\d+)"}
        assert cfg.color is False
        assert cfg.source_registry().get(SourceKind.README).pattern == r"v(\d+\.\d+\.\d+)"

    def test_empty_environment_uses_defaults(self, monkeypatch):
        for key in ("AUDIT_COMPONENTS", "AUDIT_COLOR", "AUDIT_OUTPUT_PATH", "AUDIT_USER_AGENT"):
            monkeypatch.delenv(key, raising=False)
        cfg = AuditConfig.from_env()
        assert cfg.components == DEFAULT_COMPONENTS
        assert cfg.color is None
        assert cfg.output_path is None
        assert cfg.user_agent is None


class TestFromFile:
    def test_loads_json(self, tmp_path):
        path = tmp_path / "audit.json"
        path.write_text(json.dumps({
            "components": ["peach-web"],
            "manifest_url_template": "https://example.org/{name}/Cargo.toml",
            "patterns": {"docs": r"Version: (\S+)"},
        }))
        cfg = AuditConfig.from_file(path)
        assert cfg.schema_version == CONFIG_SCHEMA_VERSION
        assert cfg.components == ["peach-web"]
        cfg.validate()
        assert cfg.source_registry().get(SourceKind.MANIFEST).build_url("peach-web") == (
            "https://example.org/peach-web/Cargo.toml"
        )

    def test_unknown_keys_rejected(self, tmp_path):
        path = tmp_path / "audit.json"
        path.write_text(json.dumps({"start_urls": ["https://example.org"]}))
        with pytest.raises(ValueError, match="start_urls"):
            AuditConfig.from_file(path)

    def test_newer_schema_rejected(self):
        with pytest.raises(ValueError, match="newer"):
            migrate_config({"schema_version": CONFIG_SCHEMA_VERSION + 1})


class TestValidate:
    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"components": []}, "components"),
            ({"max_concurrency": 0}, "max_concurrency"),
            ({"request_timeout": 0}, "request_timeout"),
            ({"retries": -1}, "retries"),
            ({"docs_url_template": "https://example.org/docs"}, "docs_url_template"),
            ({"patterns": {"changelog": r"(\d+)"}}, "changelog"),
            ({"patterns": {"docs": r"version \d+"}}, "capture group"),
            ({"patterns": {"docs": r"version (\d+"}}, "invalid"),
        ],
    )
    def test_rejects(self, overrides, message):
        cfg = AuditConfig(**overrides)
        with pytest.raises(ValueError, match=message):
            cfg.validate()
