"""Tests for the error taxonomy."""

from sample_types import Readable, StringSource

from synthtype.errors import (
    ErrorCategory,
    InternalInvariantError,
    InvalidTargetError,
    SignatureMismatchError,
    SynthError,
    UnimplementedError,
    type_name,
)


class TestTypeName:
    """Tests for type_name."""

    def test_builtin(self):
        assert type_name(int) == "int"

    def test_module_qualified(self):
        assert type_name(Readable) == "sample_types.Readable"

    def test_instance_uses_its_class(self):
        assert type_name(StringSource("x")) == "sample_types.StringSource"


class TestSynthError:
    """Tests for the SynthError base."""

    def test_defaults(self):
        error = SynthError("boom")

        assert str(error) == "boom"
        assert error.category is ErrorCategory.INTERNAL
        assert error.context == {}
        assert error.recoverable

    def test_to_dict(self):
        error = SynthError(
            "boom",
            category=ErrorCategory.INVALID_TARGET,
            suggestion="try again",
            context={"target": "User"},
        )

        assert error.to_dict() == {
            "category": "INVALID_TARGET",
            "message": "boom",
            "suggestion": "try again",
            "recoverable": True,
            "context": {"target": "User"},
        }

    def test_to_compact(self):
        error = SynthError("boom", suggestion="try again")

        assert error.to_compact() == "[INTERNAL] boom\n  Try: try again"


class TestSignatureMismatchError:
    """Tests for SignatureMismatchError."""

    def test_message_names_member_source_and_capability(self):
        error = SignatureMismatchError("read", StringSource, Readable)

        assert str(error) == (
            "read is not implemented by sample_types.StringSource "
            "as required by the sample_types.Readable interface"
        )
        assert error.context == {
            "member": "read",
            "source": "sample_types.StringSource",
            "capability": "sample_types.Readable",
        }

    def test_detail_appended(self):
        error = SignatureMismatchError("read", StringSource, Readable, detail="not readable")

        assert str(error).endswith("interface (not readable)")

    def test_builtin_bases(self):
        error = SignatureMismatchError("read", StringSource, Readable)

        assert isinstance(error, SynthError)
        assert isinstance(error, TypeError)


class TestOtherErrors:
    """Tests for the remaining error classes."""

    def test_invalid_target(self):
        error = InvalidTargetError("Target was not a mock object", target=StringSource("x"))

        assert isinstance(error, TypeError)
        assert error.category is ErrorCategory.INVALID_TARGET
        assert error.context == {"target": "sample_types.StringSource"}

    def test_invalid_target_without_target(self):
        assert InvalidTargetError("bad").context == {}

    def test_unimplemented(self):
        error = UnimplementedError("save", "UserStub")

        assert isinstance(error, NotImplementedError)
        assert str(error) == 'The method "save" is not implemented by UserStub'
        assert error.method_name == "save"

    def test_internal_invariant_is_fatal(self):
        error = InternalInvariantError("missing field", context={"field": "_synth_core"})

        assert isinstance(error, RuntimeError)
        assert error.category is ErrorCategory.INTERNAL
        assert not error.recoverable
        assert error.to_dict()["recoverable"] is False
