"""Inverse dependency tracer.

When a module cannot be resolved, the error on its own only names the file
that issued the failing import. The tracer walks the module graph's
resolution cache backwards to show which files, transitively, imported that
file, and attaches the result to the error as an import stack.

Tracing is best-effort: it never raises and never changes the error it was
given beyond attaching the import stack.
"""

from __future__ import annotations

import json
import logging
import os
import re
from collections.abc import Iterable
from collections.abc import Iterator

from .cache import ModuleGraph
from .cache import ResolutionCache
from .cache import StaticModuleGraph
from .cache import canonical_options_key
from .config import DEFAULT_DEPTH_LIMIT
from .config import DEFAULT_MAX_NODES
from .errors import attach_import_stack
from .logging_setup import resolution_extra
from .models import InverseDepNode
from .models import Resolution
from .models import ResolutionContext

logger = logging.getLogger(__name__)

IMPORT_STACK_HEADER = "Inverse dependency graph:"

# Optional `/index.[tj]sx?` after the matched path
INDEX_SUFFIX_PATTERN = r"(?:/index\.[tj]sx?)?\Z"


def _path_matcher(target_path: str) -> re.Pattern[str]:
    return re.compile(re.escape(target_path) + INDEX_SUFFIX_PATTERN, re.IGNORECASE)


class _NodeBudget:
    def __init__(self, max_nodes: int):
        self.remaining = max_nodes

    def spend(self) -> None:
        self.remaining -= 1


class InverseDependencyTracer:
    """Reconstructs and renders the chain of importers of a failing module."""

    def __init__(
        self,
        graph: ModuleGraph | None,
        root: str,
        *,
        depth_limit: int = DEFAULT_DEPTH_LIMIT,
        max_nodes: int = DEFAULT_MAX_NODES,
    ):
        """Initialize tracer.

        Args:
            graph: Module graph to read the resolution cache from (None disables tracing)
            root: Directory that rendered paths are shown relative to
            depth_limit: Maximum depth of the traced tree
            max_nodes: Maximum number of nodes in the traced tree
        """
        self.graph = graph
        self.root = root
        self.depth_limit = depth_limit
        self.max_nodes = max_nodes

    def annotate(
        self, error: BaseException, context: ResolutionContext, module_name: str, platform: str | None
    ) -> BaseException:
        """Attach an import stack to a resolution failure.

        Returns:
            The same error object, annotated when a trace was found
        """
        try:
            tree = self.trace(context, platform)
            if tree is None:
                return error
            attach_import_stack(error, self.render(tree))
        except Exception as e:
            logger.debug(
                f"[resolver:trace] Tracing failed for '{module_name}' ({platform}): {e}",
                extra={
                    "event": "trace.failed",
                    **resolution_extra(
                        module_name=module_name, platform=platform, origin_module_path=context.origin_module_path
                    ),
                },
            )
        return error

    def trace(self, context: ResolutionContext, platform: str | None) -> InverseDepNode | None:
        """Build the inverse dependency tree rooted at the context's origin module.

        Returns:
            Tree with at least one importer, or None when nothing was found
        """
        if self.graph is None or not platform:
            return None

        cache = self.graph.get_resolution_cache()
        if cache is None:
            return None

        options_key = canonical_options_key(context.custom_resolver_options)
        if not cache.has_options(options_key):
            logger.debug(
                f"[resolver:trace] No cached resolutions for options {options_key}",
                extra={"event": "trace.no_options", **resolution_extra(platform=platform, options_key=options_key)},
            )
            return None

        entries = list(cache.entries(options_key, platform))
        tree = self.recurse_back(entries, context.origin_module_path, _NodeBudget(self.max_nodes))

        extra = resolution_extra(
            platform=platform,
            origin_module_path=context.origin_module_path,
            options_key=options_key,
            node_count=tree.count(),
        )
        if not tree.previous:
            logger.debug(
                f"[resolver:trace] No importers found for {context.origin_module_path}",
                extra={"event": "trace.empty", **extra},
            )
            return None

        logger.debug(
            f"[resolver:trace] Inverse tree:\n{json.dumps(tree.to_dict(), indent=2)}",
            extra={"event": "trace.found", **extra},
        )
        return tree

    @staticmethod
    def get_references(
        entries: Iterable[tuple[str, str, Resolution]], target_path: str
    ) -> Iterator[tuple[str, str]]:
        """Find cached resolutions that landed on a file.

        A resolution matches when its file path ends with ``target_path``,
        optionally followed by ``/index.<js|jsx|ts|tsx>``, ignoring case.

        Yields:
            (resolved_file_path, origin) pairs in cache order
        """
        matcher = _path_matcher(target_path)
        for origin, _target, resolution in entries:
            if resolution.is_source_file and matcher.search(resolution.file_path):
                yield resolution.file_path, origin

    def recurse_back(
        self,
        entries: list[tuple[str, str, Resolution]],
        origin: str,
        budget: _NodeBudget | None = None,
        depth: int = 0,
    ) -> InverseDepNode:
        """Build the subtree of importers leading to ``origin``."""
        if budget is None:
            budget = _NodeBudget(self.max_nodes)
        budget.spend()

        node = InverseDepNode(origin=origin)
        if depth >= self.depth_limit:
            return node

        for resolved_path, previous in self.get_references(entries, origin):
            # Prefer the fully resolved path over the specifier
            node.origin = resolved_path
            if previous == origin:
                continue
            if budget.remaining <= 0:
                logger.debug(f"[resolver:trace] Node limit ({self.max_nodes}) reached at {origin}")
                continue
            node.previous.append(self.recurse_back(entries, previous, budget, depth + 1))

        return node

    def render(self, tree: InverseDepNode) -> str:
        """Render a tree as an indented import stack."""
        lines = [IMPORT_STACK_HEADER]
        for depth, origin in tree.iter_lines():
            lines.append(" " * depth + "└ " + self._relative(origin))
        return "\n".join(lines)

    def _relative(self, path: str) -> str:
        try:
            return os.path.relpath(path, self.root)
        except ValueError:
            return path

    def __repr__(self) -> str:
        return f"InverseDependencyTracer(depth_limit={self.depth_limit}, max_nodes={self.max_nodes})"


def tracer_for_cache(cache: ResolutionCache, root: str, **kwargs) -> InverseDependencyTracer:
    """Create a tracer over a standalone cache (e.g. a dump loaded from disk)."""
    return InverseDependencyTracer(StaticModuleGraph(cache), root, **kwargs)
