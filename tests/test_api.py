"""
Tests for the REST API.
"""

import pytest

pytest.importorskip("fastapi")
pytest.importorskip("httpx")

from fastapi.testclient import TestClient

from release_audit.apis import app as api
from release_audit.engines.base import AuditReport, ComponentRecord
from release_audit.semver import parse_version
from release_audit.sources.base import SourceKind


class _FixedEngine:
    seen = {}

    def __init__(self, config, registry=None):
        _FixedEngine.seen["config"] = config

    async def audit(self, components):
        v = parse_version("1.0.0")
        return AuditReport([
            ComponentRecord.from_versions(c, {kind: v for kind in SourceKind}) for c in components
        ])


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(api, "load_symbol", lambda dotted: _FixedEngine)
    return TestClient(api.app)


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_audit(client):
    resp = client.post("/audit", json={"components": ["peach-oled"], "sequential": True})
    assert resp.status_code == 200
    data = resp.json()
    assert data["all_consistent"] is True
    assert data["records"][0]["name"] == "peach-oled"
    assert data["records"][0]["sources"]["manifest"]["version"] == "1.0.0"
    assert _FixedEngine.seen["config"].engine.endswith("SequentialAuditEngine")


def test_audit_rejects_bad_pattern(client):
    resp = client.post("/audit", json={"patterns": {"docs": "no group"}})
    assert resp.status_code == 422
