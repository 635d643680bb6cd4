"""Registry error body models.

Registries report failures as a JSON document of the form::

    {"errors": [{"code": "MANIFEST_UNKNOWN", "message": "manifest unknown", "detail": {...}}]}

See: https://distribution.github.io/distribution/spec/api/#errors
"""

from dataclasses import dataclass
from typing import Any

import httpx


@dataclass(frozen=True)
class RegistryErrorDetail:
    """One entry of a registry ``errors`` array."""

    code: str | None = None  # Machine readable identifier, e.g. NAME_UNKNOWN
    message: str | None = None  # Human readable summary
    detail: Any = None  # Unstructured, code-specific payload

    @classmethod
    def from_response(cls, response: httpx.Response) -> "list[RegistryErrorDetail]":
        """Parse registry error details from an HTTP response.

        Args:
            response: HTTP response object whose body has been read

        Returns:
            List of details, empty if the body is not a registry error document
        """
        try:
            data = response.json()
        except (ValueError, TypeError, AttributeError, httpx.ResponseNotRead):
            # Non-JSON bodies, HEAD responses and unread streams carry no details
            return []

        if not isinstance(data, dict):
            return []

        entries = data.get("errors")
        if not isinstance(entries, list):
            return []

        details = []
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            details.append(
                cls(
                    code=entry.get("code"),
                    message=entry.get("message"),
                    detail=entry.get("detail"),
                )
            )
        return details

    def to_message(self) -> str:
        """Render as ``CODE: message``."""
        if self.code and self.message:
            return f"{self.code}: {self.message}"
        return self.code or self.message or "unknown registry error"
