"""Tests for resolution error classification."""

import pytest

from resolver_chain.errors import ResolutionError
from resolver_chain.errors import ResolutionErrorKind
from resolver_chain.errors import attach_import_stack
from resolver_chain.errors import get_import_stack
from resolver_chain.errors import is_resolution_error


class TestResolutionError:
    """Tests for ResolutionError constructors."""

    def test_name_not_found(self):
        error = ResolutionError.name_not_found("lodash", "/app/index.js")

        assert error.kind == ResolutionErrorKind.FAILED_TO_RESOLVE_NAME
        assert error.module_name == "lodash"
        assert error.origin_module_path == "/app/index.js"
        assert str(error) == "Unable to resolve module 'lodash' from /app/index.js"

    def test_path_not_found_lists_candidates(self):
        error = ResolutionError.path_not_found("./missing", candidates=["/app/missing.js", "/app/missing.ts"])

        assert error.kind == ResolutionErrorKind.FAILED_TO_RESOLVE_PATH
        assert "/app/missing.ts" in str(error)
        assert error.candidates == ["/app/missing.js", "/app/missing.ts"]


class TestIsResolutionError:
    """Tests for is_resolution_error classification."""

    @pytest.mark.parametrize(
        "kind",
        [ResolutionErrorKind.FAILED_TO_RESOLVE_NAME, ResolutionErrorKind.FAILED_TO_RESOLVE_PATH],
    )
    def test_soft_kinds(self, kind):
        assert is_resolution_error(ResolutionError("nope", kind=kind))

    @pytest.mark.parametrize(
        "kind",
        [ResolutionErrorKind.INVALID_PACKAGE, ResolutionErrorKind.PACKAGE_PATH_NOT_EXPORTED],
    )
    def test_hard_kinds(self, kind):
        assert not is_resolution_error(ResolutionError("broken", kind=kind))

    def test_plain_exceptions_are_not_resolution_errors(self):
        assert not is_resolution_error(ValueError("bad"))
        assert not is_resolution_error(SyntaxError("unexpected token"))

    def test_classifies_by_kind_value_not_class(self):
        """Foreign exception classes count if they carry a matching kind."""

        class ForeignError(Exception):
            kind = "failed_to_resolve_path"

        assert is_resolution_error(ForeignError())

    def test_unknown_kind_value(self):
        class ForeignError(Exception):
            kind = "something_else"

        assert not is_resolution_error(ForeignError())


class TestImportStack:
    """Tests for import stack attachment."""

    def test_attach_and_get(self):
        error = RuntimeError("failed")
        attach_import_stack(error, "Inverse dependency graph:\n└ a.js")

        assert get_import_stack(error) == "Inverse dependency graph:\n└ a.js"
        assert str(error) == "failed"

    def test_get_without_stack(self):
        assert get_import_stack(RuntimeError("failed")) is None
