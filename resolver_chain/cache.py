"""Read-only access to the module graph's resolution cache.

The cache is owned by the bundler's dependency graph and is laid out as
nested mappings:

    options_key -> origin -> target -> platform -> resolution

This module hides that layout behind a small typed accessor so the tracer
never touches the raw structure.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from typing import Protocol

import yaml

from .models import Resolution

logger = logging.getLogger(__name__)


def _canonicalize(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(k): _canonicalize(value[k]) for k in sorted(value, key=str)}
    if isinstance(value, (list, tuple)):
        return [_canonicalize(v) for v in value]
    if isinstance(value, (set, frozenset)):
        # Unordered, so order by serialized form
        items = [_canonicalize(v) for v in value]
        return sorted(items, key=lambda v: json.dumps(v, sort_keys=True, default=str))
    return value


def canonical_options_key(options: Mapping[str, Any] | None) -> str:
    """Serialize custom resolver options into a stable cache key.

    Keys are sorted at every level so logically equal options produce the
    same key regardless of how they were built.

    Examples:
        >>> canonical_options_key({"b": 1, "a": {"d": 2, "c": 3}})
        '{"a":{"c":3,"d":2},"b":1}'

        >>> canonical_options_key(None)
        '{}'
    """
    return json.dumps(_canonicalize(options or {}), separators=(",", ":"), ensure_ascii=False, default=str)


class ResolutionCache:
    """Typed view over the nested resolution cache mapping."""

    def __init__(self, data: Mapping[str, Any] | None = None):
        """Initialize with the raw cache mapping.

        Args:
            data: Nested mapping keyed by options key, origin, target, platform
        """
        self._data: Mapping[str, Any] = data if data is not None else {}

    def has_options(self, options_key: str) -> bool:
        return isinstance(self._data.get(options_key), Mapping)

    def lookup(self, options_key: str, origin: str, target: str, platform: str) -> Resolution | None:
        """Look up a single cached resolution.

        Returns:
            Resolution if present and well-formed, None otherwise
        """
        by_origin = self._data.get(options_key)
        if not isinstance(by_origin, Mapping):
            return None
        by_target = by_origin.get(origin)
        if not isinstance(by_target, Mapping):
            return None
        by_platform = by_target.get(target)
        if not isinstance(by_platform, Mapping):
            return None
        return Resolution.from_value(by_platform.get(platform))

    def entries(self, options_key: str, platform: str) -> Iterator[tuple[str, str, Resolution]]:
        """Iterate (origin, target, resolution) for one options key and platform.

        Entries are yielded in the cache's own insertion order. Malformed
        levels and resolutions are skipped.
        """
        by_origin = self._data.get(options_key)
        if not isinstance(by_origin, Mapping):
            return

        for origin, by_target in by_origin.items():
            if not isinstance(by_target, Mapping):
                continue
            for target, by_platform in by_target.items():
                if not isinstance(by_platform, Mapping):
                    continue
                resolution = Resolution.from_value(by_platform.get(platform))
                if resolution is not None:
                    yield origin, target, resolution

    @classmethod
    def from_file(cls, path: str | Path) -> ResolutionCache:
        """Load a cache dump from a JSON or YAML file.

        Raises:
            ValueError: Unsupported extension or top level is not a mapping
        """
        path = Path(path)
        text = path.read_text(encoding="utf-8")
        suffix = path.suffix.lower()

        if suffix == ".json":
            data = json.loads(text)
        elif suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            raise ValueError(f"Unsupported cache dump format '{suffix}' (expected .json, .yaml or .yml)")

        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ValueError(f"Cache dump {path} must contain a mapping at the top level")

        logger.debug(f"Loaded resolution cache dump {path} with {len(data)} option keys")
        return cls(data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"ResolutionCache({len(self._data)} option keys)"


class ModuleGraph(Protocol):
    """Protocol for the bundler's module graph as seen by the tracer."""

    def get_resolution_cache(self) -> ResolutionCache | None:
        """Return the graph's resolution cache, or None if not available."""
        ...


class StaticModuleGraph:
    """Module graph backed by a fixed resolution cache."""

    def __init__(self, cache: ResolutionCache | Mapping[str, Any] | None):
        if cache is not None and not isinstance(cache, ResolutionCache):
            cache = ResolutionCache(cache)
        self._cache = cache

    def get_resolution_cache(self) -> ResolutionCache | None:
        return self._cache

    def __repr__(self) -> str:
        return f"StaticModuleGraph({self._cache!r})"
