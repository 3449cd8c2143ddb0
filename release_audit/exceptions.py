"""Exceptions raised while auditing a component.

A source that simply has no version marker is not an error: it is recorded
as ``None`` on the component record. Everything below is fatal for the
component being checked and is reported as a failure for that component only.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class AuditError(Exception):
    """Base exception for all release_audit errors.

    Carries a machine-readable ``error_code`` alongside the human message so
    reporters and the API can render failures without string matching.
    """

    error_code: str = "AUDIT_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        response: Dict[str, Any] = {
            "error_code": self.error_code,
            "message": self.message,
        }
        if self.details:
            response["details"] = self.details
        return response


class FetchError(AuditError):
    """Transport failure: DNS, connection, timeout or non-success status."""

    error_code = "FETCH_ERROR"

    def __init__(self, url: str, reason: str, status: Optional[int] = None):
        details: Dict[str, Any] = {"url": url}
        if status is not None:
            details["status"] = status
        super().__init__(f"failed to fetch {url}: {reason}", details)
        self.url = url
        self.status = status


class VersionParseError(AuditError):
    """A version marker was found but is not a valid semantic version."""

    error_code = "VERSION_PARSE_ERROR"

    def __init__(self, text: str, source: Optional[str] = None):
        where = f" in {source}" if source else ""
        super().__init__(
            f"malformed version {text!r}{where}: expected MAJOR.MINOR.PATCH[-prerelease][+build]",
            {"text": text, "source": source} if source else {"text": text},
        )
        self.text = text
        self.source = source
