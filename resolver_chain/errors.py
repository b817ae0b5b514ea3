"""Resolution error taxonomy.

Resolvers signal "I could not satisfy this request" by raising a
ResolutionError whose kind is one of RESOLUTION_FAILURE_KINDS. The chain
treats those as a decline and moves on; anything else aborts the chain.
"""

from __future__ import annotations

import logging
from enum import Enum

logger = logging.getLogger(__name__)

IMPORT_STACK_ATTR = "import_stack"


class ResolutionErrorKind(str, Enum):
    """Kinds of resolution failure.

    Kinds:
    - FAILED_TO_RESOLVE_NAME: No module matched the requested name
    - FAILED_TO_RESOLVE_PATH: A relative or absolute path did not exist
    - INVALID_PACKAGE: A package was found but its manifest is unusable
    - PACKAGE_PATH_NOT_EXPORTED: A package exists but hides the subpath
    """

    FAILED_TO_RESOLVE_NAME = "failed_to_resolve_name"
    FAILED_TO_RESOLVE_PATH = "failed_to_resolve_path"
    INVALID_PACKAGE = "invalid_package"
    PACKAGE_PATH_NOT_EXPORTED = "package_path_not_exported"


RESOLUTION_FAILURE_KINDS = frozenset(
    {
        ResolutionErrorKind.FAILED_TO_RESOLVE_NAME,
        ResolutionErrorKind.FAILED_TO_RESOLVE_PATH,
    }
)


class ResolutionError(Exception):
    """Raised when a module request cannot be satisfied."""

    def __init__(
        self,
        message: str,
        *,
        kind: ResolutionErrorKind,
        module_name: str | None = None,
        origin_module_path: str | None = None,
        candidates: list[str] | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.module_name = module_name
        self.origin_module_path = origin_module_path
        self.candidates = candidates or []

    @classmethod
    def name_not_found(
        cls, module_name: str, origin_module_path: str | None = None, candidates: list[str] | None = None
    ) -> ResolutionError:
        """Create a failed-to-resolve-by-name error."""
        message = f"Unable to resolve module '{module_name}'"
        if origin_module_path:
            message += f" from {origin_module_path}"
        return cls(
            message,
            kind=ResolutionErrorKind.FAILED_TO_RESOLVE_NAME,
            module_name=module_name,
            origin_module_path=origin_module_path,
            candidates=candidates,
        )

    @classmethod
    def path_not_found(
        cls, module_name: str, origin_module_path: str | None = None, candidates: list[str] | None = None
    ) -> ResolutionError:
        """Create a failed-to-resolve-by-path error."""
        message = f"Unable to resolve path '{module_name}'"
        if origin_module_path:
            message += f" from {origin_module_path}"
        if candidates:
            message += "\n\nTried:\n" + "\n".join(f"  - {c}" for c in candidates)
        return cls(
            message,
            kind=ResolutionErrorKind.FAILED_TO_RESOLVE_PATH,
            module_name=module_name,
            origin_module_path=origin_module_path,
            candidates=candidates,
        )

    def __repr__(self) -> str:
        return f"ResolutionError({self.kind.value}, {self.module_name!r})"


class DefaultResolverNotFoundError(Exception):
    """Raised when no default resolver is installed for the project."""

    pass


def is_resolution_error(error: BaseException) -> bool:
    """Check whether an error means "could not resolve" rather than a bug.

    Classification is by the ``kind`` value, so resolver packages can raise
    their own exception classes as long as they carry a matching kind.
    """
    kind = getattr(error, "kind", None)
    if kind is None:
        return False
    try:
        return ResolutionErrorKind(kind) in RESOLUTION_FAILURE_KINDS
    except ValueError:
        return False


def attach_import_stack(error: BaseException, text: str) -> None:
    """Attach display-only import stack text to an error."""
    try:
        setattr(error, IMPORT_STACK_ATTR, text)
    except (AttributeError, TypeError) as e:
        logger.debug(f"[resolver:trace] Cannot attach import stack to {type(error).__name__}: {e}")


def get_import_stack(error: BaseException) -> str | None:
    """Get the import stack text attached to an error, if any."""
    return getattr(error, IMPORT_STACK_ATTR, None)
