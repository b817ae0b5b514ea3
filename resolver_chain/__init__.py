"""Module resolver chain with inverse dependency diagnostics.

Chains custom resolvers in front of a bundler's resolver and, when a request
cannot be resolved, explains which files led to the failing import.
"""

from .cache import ModuleGraph
from .cache import ResolutionCache
from .cache import StaticModuleGraph
from .cache import canonical_options_key
from .chain import ResolverChain
from .chain import get_default_resolver
from .chain import with_resolvers
from .config import BundlerConfig
from .config import ResolverConfig
from .config import ServerConfig
from .config import TracerSettings
from .config import load_tracer_settings
from .errors import DefaultResolverNotFoundError
from .errors import ResolutionError
from .errors import ResolutionErrorKind
from .errors import get_import_stack
from .errors import is_resolution_error
from .models import InverseDepNode
from .models import Resolution
from .models import ResolutionContext
from .models import ResolutionRequest
from .models import ResolutionType
from .tracer import InverseDependencyTracer

__all__ = [
    "BundlerConfig",
    "DefaultResolverNotFoundError",
    "InverseDepNode",
    "InverseDependencyTracer",
    "ModuleGraph",
    "Resolution",
    "ResolutionCache",
    "ResolutionContext",
    "ResolutionError",
    "ResolutionErrorKind",
    "ResolutionRequest",
    "ResolutionType",
    "ResolverChain",
    "ResolverConfig",
    "ServerConfig",
    "StaticModuleGraph",
    "TracerSettings",
    "canonical_options_key",
    "get_default_resolver",
    "get_import_stack",
    "is_resolution_error",
    "load_tracer_settings",
    "with_resolvers",
]
