"""Response bodies of the registry list endpoints."""

from dataclasses import dataclass, field
from typing import Any


def _string_list(data: Any, key: str) -> list[str]:
    if not isinstance(data, dict):
        raise TypeError(f"expected a JSON object, got {type(data).__name__}")
    # Registries send null for an empty list
    values = data.get(key) or []
    if not isinstance(values, list) or not all(isinstance(value, str) for value in values):
        raise ValueError(f"'{key}' is not a list of strings")
    return values


@dataclass
class TagList:
    """``GET /v2/<name>/tags/list``."""

    name: str | None = None
    tags: list[str] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Any) -> "TagList":
        tags = _string_list(data, "tags")
        return cls(name=data.get("name"), tags=tags)


@dataclass
class RepositoryList:
    """``GET /v2/_catalog``."""

    repositories: list[str] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Any) -> "RepositoryList":
        return cls(repositories=_string_list(data, "repositories"))
