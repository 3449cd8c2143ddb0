import asyncio
import sys
import pathlib
from typing import Dict, List, Optional, Union

import pytest

# Ensure project root is on sys.path so 'import release_audit' works when pytest
# runs from a different working directory without an installed package.
_ROOT = pathlib.Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from release_audit.config import AuditConfig
from release_audit.engines.base import Component
from release_audit.engines.concurrent_engine import ConcurrentAuditEngine
from release_audit.engines.sequential_engine import SequentialAuditEngine
from release_audit.exceptions import FetchError
from release_audit.sources.registry import SourceRegistry

# A response is a body, an exception to raise, or a delay in seconds before "ok".
Response = Union[str, Exception, float]


def docs_page(version: str) -> str:
    return (
        "<html><body><h1>peach service</h1>"
        f'<img src="https://img.shields.io/badge/version-{version}-%3CCOLOR%3E.svg" alt="version">'
        "</body></html>"
    )


def readme_page(version: str) -> str:
    return (
        '<article class="markdown-body">'
        '<img src="https://camo.githubusercontent.com/0a1b2c" '
        f'data-canonical-src="https://img.shields.io/badge/version-{version}-%3CCOLOR%3E.svg">'
        "</article>"
    )


def cargo_toml(version: str) -> str:
    return (
        "[package]\n"
        'name = "peach-oled"\n'
        f'version = "{version}"\n'
        'edition = "2018"\n'
        "\n"
        "[dependencies]\n"
        'serde = { version = "1.0", features = ["derive"] }\n'
    )


class _StubFetch:
    """Serves canned responses by URL instead of touching the network."""

    responses: Dict[str, Response]

    def _init_stub(self, responses: Dict[str, Response]) -> None:
        self.responses = responses
        self.requested: List[str] = []
        self.completed: List[str] = []

    async def fetch(self, session, url: str) -> str:
        self.requested.append(url)
        value = self.responses.get(url)
        if value is None:
            raise FetchError(url, "HTTP 404 Not Found", status=404)
        if isinstance(value, Exception):
            raise value
        if isinstance(value, float):
            await asyncio.sleep(value)
            value = "<html></html>"
        self.completed.append(url)
        return value


class StubConcurrentEngine(_StubFetch, ConcurrentAuditEngine):
    def __init__(self, config, responses, registry=None):
        ConcurrentAuditEngine.__init__(self, config, registry=registry)
        self._init_stub(responses)


class StubSequentialEngine(_StubFetch, SequentialAuditEngine):
    def __init__(self, config, responses, registry=None):
        SequentialAuditEngine.__init__(self, config, registry=registry)
        self._init_stub(responses)


@pytest.fixture
def config() -> AuditConfig:
    return AuditConfig(components=["peach-oled", "peach-stats"])


@pytest.fixture
def registry(config) -> SourceRegistry:
    return config.source_registry()


@pytest.fixture
def make_component(registry):
    def _make(name: str) -> Component:
        return Component.from_name(name, registry)
    return _make


def responses_for(
    component: Component,
    docs: Optional[Response] = None,
    manifest: Optional[Response] = None,
    readme: Optional[Response] = None,
) -> Dict[str, Response]:
    out: Dict[str, Response] = {}
    for url, value in ((component.docs_url, docs), (component.manifest_url, manifest), (component.readme_url, readme)):
        if value is not None:
            out[url] = value
    return out
