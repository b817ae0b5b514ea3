"""Resolution data models.

Defines the core types passed through the resolver chain:
- ResolutionRequest: What is being resolved, from where, for which platform
- ResolutionContext: The context object handed to every resolver
- Resolution: What a request resolved to
- InverseDepNode: One node of a reconstructed "who imported this" tree
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import Any
from typing import Callable

WEB_PLATFORM = "web"


class ResolutionType(str, Enum):
    """Kind of resolution produced by a resolver."""

    SOURCE_FILE = "sourceFile"
    ASSET_FILES = "assetFiles"
    EMPTY = "empty"


@dataclass(frozen=True)
class Resolution:
    """Result of a successful resolution.

    Attributes:
        type: Resolution kind
        file_path: Resolved file for source files
        file_paths: Resolved files for asset resolutions
    """

    type: ResolutionType
    file_path: str | None = None
    file_paths: tuple[str, ...] = ()

    @classmethod
    def source_file(cls, file_path: str) -> Resolution:
        return cls(type=ResolutionType.SOURCE_FILE, file_path=file_path)

    @classmethod
    def asset_files(cls, file_paths: list[str] | tuple[str, ...]) -> Resolution:
        return cls(type=ResolutionType.ASSET_FILES, file_paths=tuple(file_paths))

    @classmethod
    def empty(cls) -> Resolution:
        return cls(type=ResolutionType.EMPTY)

    @property
    def is_source_file(self) -> bool:
        return self.type == ResolutionType.SOURCE_FILE and bool(self.file_path)

    @classmethod
    def from_value(cls, value: Any) -> Resolution | None:
        """Coerce a cached value into a Resolution.

        Accepts Resolution instances and mappings shaped like
        ``{"type": "sourceFile", "filePath": "..."}``. Returns None for
        anything that does not look like a resolution.
        """
        if isinstance(value, Resolution):
            return value
        if not isinstance(value, Mapping):
            return None

        try:
            resolution_type = ResolutionType(value.get("type"))
        except ValueError:
            return None

        file_path = value.get("filePath", value.get("file_path"))
        if file_path is not None and not isinstance(file_path, str):
            return None

        file_paths = value.get("filePaths", value.get("file_paths"))
        if file_paths is None:
            file_paths = ()
        if not isinstance(file_paths, (list, tuple)) or not all(isinstance(p, str) for p in file_paths):
            return None

        return cls(type=resolution_type, file_path=file_path, file_paths=tuple(file_paths))

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the bundler's field names."""
        result: dict[str, Any] = {"type": self.type.value}
        if self.file_path is not None:
            result["filePath"] = self.file_path
        if self.file_paths:
            result["filePaths"] = list(self.file_paths)
        return result


@dataclass(frozen=True)
class ResolutionContext:
    """Context handed to every resolver for a single request.

    Attributes:
        origin_module_path: File that issued the import
        custom_resolver_options: Caller-defined resolver options
        prefer_native_platform: Derived from the platform (False only for web)
        extras: Passthrough fields supplied by the host bundler
    """

    origin_module_path: str
    custom_resolver_options: Mapping[str, Any] = field(default_factory=dict)
    prefer_native_platform: bool = True
    extras: Mapping[str, Any] = field(default_factory=dict)

    def for_platform(self, platform: str | None) -> ResolutionContext:
        """Return a shallow copy normalized for the target platform."""
        return dataclasses.replace(self, prefer_native_platform=platform != WEB_PLATFORM)

    def get(self, key: str, default: Any = None) -> Any:
        """Read a passthrough field."""
        return self.extras.get(key, default)


@dataclass(frozen=True)
class ResolutionRequest:
    """A single module request."""

    origin_module_path: str
    module_name: str
    platform: str | None = None
    custom_resolver_options: Mapping[str, Any] = field(default_factory=dict)

    def to_context(self, **extras: Any) -> ResolutionContext:
        return ResolutionContext(
            origin_module_path=self.origin_module_path,
            custom_resolver_options=self.custom_resolver_options,
            extras=extras,
        )


@dataclass
class InverseDepNode:
    """A file and the files that (transitively) imported it."""

    origin: str
    previous: list[InverseDepNode] = field(default_factory=list)

    def iter_lines(self, depth: int = 0) -> Iterator[tuple[int, str]]:
        """Yield (depth, origin) pairs depth-first."""
        yield depth, self.origin
        for child in self.previous:
            yield from child.iter_lines(depth + 1)

    def count(self) -> int:
        return 1 + sum(child.count() for child in self.previous)

    def to_dict(self) -> dict[str, Any]:
        return {"origin": self.origin, "previous": [child.to_dict() for child in self.previous]}


# Resolver that may decline by returning None
ResolverStrategy = Callable[[ResolutionContext, str, str | None], Resolution | None]

# Resolver that always produces a resolution or raises
Resolver = Callable[[ResolutionContext, str, str | None], Resolution]
