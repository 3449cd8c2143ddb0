from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Pattern


class SourceKind(str, Enum):
    """The three channels a component's version is read from."""

    DOCS = "docs"
    MANIFEST = "manifest"
    README = "readme"


# shields.io static badge: /badge/<label>-<message>-<color>, where a literal
# dash inside the message is written "--".
BADGE_VERSION_PATTERN = r"badge/version-((?:[^-\s\"'<>/]|--)+)-"
MANIFEST_VERSION_PATTERN = r"(?m)^\s*version\s*=\s*[\"']([^\"'\n]+)[\"']"


@dataclass(frozen=True)
class VersionSource:
    """
    One version source: where to fetch it from and how to find the version in it.
    Keep this small and stable; the pipeline owns fetching and parsing.
    """

    kind: SourceKind
    pattern: str
    url_template: str
    html: bool = False   # body is an HTML page; search badge image URLs first
    badge: bool = False  # captured text uses shields.io badge escaping

    @property
    def regex(self) -> Pattern[str]:
        return _compile(self.pattern)

    def build_url(self, name: str) -> str:
        return self.url_template.format(name=name)

    def with_pattern(self, pattern: Optional[str]) -> "VersionSource":
        return replace(self, pattern=pattern) if pattern else self

    def with_url_template(self, url_template: Optional[str]) -> "VersionSource":
        return replace(self, url_template=url_template) if url_template else self


_COMPILED: dict[str, Pattern[str]] = {}


def _compile(pattern: str) -> Pattern[str]:
    regex = _COMPILED.get(pattern)
    if regex is None:
        regex = _COMPILED[pattern] = re.compile(pattern)
    return regex


def validate_pattern(pattern: str) -> None:
    """Raise ValueError unless ``pattern`` compiles and has a capture group."""
    try:
        regex = re.compile(pattern)
    except re.error as exc:
        raise ValueError(f"invalid version pattern {pattern!r}: {exc}") from exc
    if regex.groups < 1:
        raise ValueError(f"version pattern {pattern!r} needs a capture group for the version")
