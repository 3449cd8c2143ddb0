from __future__ import annotations

import functools
import re
from dataclasses import dataclass, field
from typing import Tuple, Union

from .exceptions import VersionParseError

# semver 2.0.0 grammar, with an optional leading "v" as found on release tags.
_SEMVER_RE = re.compile(
    r"^[vV]?"
    r"(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<prerelease>(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+(?P<build>[0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class SemVer:
    """
    Structured semantic version.
    Equality and hashing ignore build metadata; pre-release identifiers count.
    """
    major: int
    minor: int
    patch: int
    prerelease: Tuple[str, ...] = field(default_factory=tuple)
    build: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def core(self) -> Tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def _identity(self) -> Tuple[int, int, int, Tuple[str, ...]]:
        return (self.major, self.minor, self.patch, self.prerelease)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        if self.core != other.core:
            return self.core < other.core
        # A release outranks any of its pre-releases.
        if not self.prerelease or not other.prerelease:
            return bool(self.prerelease) and not other.prerelease
        return _prerelease_key(self.prerelease) < _prerelease_key(other.prerelease)

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        if self.build:
            text += "+" + ".".join(self.build)
        return text


def _prerelease_key(identifiers: Tuple[str, ...]) -> Tuple[Tuple[int, Union[int, str]], ...]:
    # Numeric identifiers sort before alphanumeric ones; shorter wins on a shared prefix.
    return tuple((0, int(i)) if i.isdigit() else (1, i) for i in identifiers)


def parse_version(text: str, source: str | None = None) -> SemVer:
    """
    Parse ``MAJOR.MINOR.PATCH[-prerelease][+build]`` into a SemVer.
    Raises VersionParseError for anything else (e.g. "1.2", "1.2.3.4", "01.2.3").
    """
    m = _SEMVER_RE.match(text.strip())
    if not m:
        raise VersionParseError(text, source)
    prerelease = m.group("prerelease")
    build = m.group("build")
    return SemVer(
        major=int(m.group("major")),
        minor=int(m.group("minor")),
        patch=int(m.group("patch")),
        prerelease=tuple(prerelease.split(".")) if prerelease else (),
        build=tuple(build.split(".")) if build else (),
    )
