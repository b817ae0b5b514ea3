"""Resolver chain - ordered custom resolvers in front of the bundler's resolver.

Resolution order (first match wins):
1. Custom resolvers, in the order given
   - returning None skips to the next resolver
   - raising a "failed to resolve by name/path" error also skips
   - raising anything else aborts the chain
2. The host config's own resolve_request, or the default resolver

Failures are annotated with an inverse import stack before being re-raised.
"""

import importlib.metadata
import logging
from collections.abc import Sequence

from .cache import ModuleGraph
from .config import BundlerConfig
from .config import TracerSettings
from .errors import DefaultResolverNotFoundError
from .errors import is_resolution_error
from .logging_setup import resolution_extra
from .models import Resolution
from .models import ResolutionContext
from .models import ResolutionRequest
from .models import Resolver
from .models import ResolverStrategy
from .tracer import InverseDependencyTracer

logger = logging.getLogger(__name__)

DEFAULT_RESOLVER_GROUP = "resolver_chain.default_resolvers"


def _error_kind(error: BaseException) -> str:
    kind = getattr(error, "kind", None)
    return getattr(kind, "value", kind) or type(error).__name__


def get_default_resolver(project_root: str) -> Resolver:
    """Load the bundler runtime's default resolver for a project.

    The bundler runtime registers a factory in the
    ``resolver_chain.default_resolvers`` entry point group. The factory is
    called with the project root and must return a resolver callable.

    Args:
        project_root: Project root the resolver is bound to

    Returns:
        Resolver invoked as (context, module_name, platform)

    Raises:
        DefaultResolverNotFoundError: No default resolver installed
    """
    eps = list(importlib.metadata.entry_points(group=DEFAULT_RESOLVER_GROUP))
    if not eps:
        raise DefaultResolverNotFoundError(
            f"No default resolver installed for {project_root}. "
            f"Install a bundler runtime that registers the '{DEFAULT_RESOLVER_GROUP}' entry point, "
            f"or set resolver.resolve_request in the bundler config."
        )

    ep = eps[0]
    if len(eps) > 1:
        logger.debug(f"[resolver:chain] Multiple default resolvers installed, using '{ep.name}'")

    resolve = ep.load()(project_root)

    def default_resolver(context: ResolutionContext, module_name: str, platform: str | None) -> Resolution:
        return resolve(context, module_name, platform)

    return default_resolver


class ResolverChain:
    """Composed resolver with skip, short-circuit and propagate semantics."""

    def __init__(
        self,
        resolvers: Sequence[ResolverStrategy],
        fallback: Resolver,
        tracer: InverseDependencyTracer | None = None,
    ):
        """Initialize chain.

        Args:
            resolvers: Custom resolvers, tried in order
            fallback: Resolver used when every custom resolver declines
            tracer: Annotates failures with an import stack (optional)
        """
        self._resolvers = tuple(resolvers)
        self.fallback = fallback
        self.tracer = tracer

    @property
    def resolvers(self) -> tuple[ResolverStrategy, ...]:
        return self._resolvers

    def resolve_request(
        self, context: ResolutionContext, module_name: str, platform: str | None
    ) -> Resolution:
        """Resolve a module request through the chain.

        Args:
            context: Resolution context from the bundler
            module_name: Requested module specifier
            platform: Target platform, or None

        Returns:
            First non-None resolution

        Raises:
            Exception: Hard failure from a custom resolver, or the fallback's failure
        """
        universal_context = context.for_platform(platform)

        try:
            for resolver in self._resolvers:
                try:
                    resolution = resolver(universal_context, module_name, platform)
                except Exception as e:
                    resolver_kind = _error_kind(e)
                    extra = resolution_extra(
                        module_name=module_name,
                        platform=platform,
                        origin_module_path=universal_context.origin_module_path,
                        resolver_kind=resolver_kind,
                    )
                    if not is_resolution_error(e):
                        logger.debug(
                            f"[resolver:chain] Custom resolver failed: {resolver_kind}. Aborting chain.",
                            extra={"event": "resolver.abort", **extra},
                        )
                        raise
                    logger.debug(
                        f"[resolver:chain] Custom resolver threw: {resolver_kind}. "
                        f"(module: {module_name}, platform: {platform})",
                        extra={"event": "resolver.skip", **extra},
                    )
                    continue

                if resolution is not None:
                    return resolution

            return self.fallback(universal_context, module_name, platform)
        except Exception as e:
            if self.tracer is not None:
                self.tracer.annotate(e, universal_context, module_name, platform)
            raise

    __call__ = resolve_request

    def resolve(self, request: ResolutionRequest) -> Resolution:
        """Resolve a standalone request."""
        return self.resolve_request(request.to_context(), request.module_name, request.platform)

    def __repr__(self) -> str:
        return f"ResolverChain({len(self._resolvers)} resolvers)"


def with_resolvers(
    config: BundlerConfig,
    project_root: str,
    resolvers: Sequence[ResolverStrategy],
    *,
    graph: ModuleGraph | None = None,
    settings: TracerSettings | None = None,
) -> BundlerConfig:
    """Chain custom resolvers in front of a bundler config's resolver.

    Args:
        config: Host bundler config
        project_root: Project root used to load the default resolver
        resolvers: Custom resolvers to chain, in order
        graph: Module graph used to trace failures (None disables tracing)
        settings: Tracer limits (defaults when None)

    Returns:
        New BundlerConfig whose resolver.resolve_request is the chain
    """
    logger.debug(
        f"[resolver:chain] Appending {len(resolvers)} custom resolvers to bundler config. "
        f"(has custom resolver: {config.resolver.resolve_request is not None})"
    )
    fallback = config.resolver.resolve_request or get_default_resolver(project_root)

    settings = settings or TracerSettings()
    tracer = None
    if graph is not None:
        tracer = InverseDependencyTracer(
            graph,
            config.trace_root(project_root),
            depth_limit=settings.depth_limit,
            max_nodes=settings.max_nodes,
        )

    chain = ResolverChain(resolvers, fallback, tracer)
    resolver_config = config.resolver.model_copy(update={"resolve_request": chain.resolve_request})
    return config.model_copy(update={"resolver": resolver_config})
