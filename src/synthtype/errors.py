"""Error taxonomy for type synthesis.

Every failure raised by synthtype is a SynthError carrying a category,
an optional suggestion, and structured context. The concrete error classes
also derive from the closest builtin so callers that only know the
standard library can still catch them.

Usage:
    from synthtype.errors import SynthError, SignatureMismatchError

    try:
        wrapper = extract(Readable, source)
    except SignatureMismatchError as e:
        print(e.to_compact())
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Any


class ErrorCategory(Enum):
    """Categories of synthesis failures."""

    SIGNATURE_MISMATCH = auto()  # Source type lacks a capability member
    INVALID_TARGET = auto()  # Wrong kind of class for the operation
    UNIMPLEMENTED = auto()  # Stub method called without a body
    INTERNAL = auto()  # Synthesizer bug


def type_name(target: Any) -> str:
    """Qualified display name of a class (or of an instance's class)."""
    if not isinstance(target, type):
        target = type(target)
    module = getattr(target, "__module__", None)
    qualname = getattr(target, "__qualname__", target.__name__)
    if module in (None, "builtins"):
        return qualname
    return f"{module}.{qualname}"


class SynthError(Exception):
    """Base exception for synthtype with structured error handling."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.INTERNAL,
        suggestion: str | None = None,
        context: dict[str, Any] | None = None,
        recoverable: bool = True,
    ):
        super().__init__(message)
        self.category = category
        self.suggestion = suggestion
        self.context = context or {}
        self.recoverable = recoverable

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "category": self.category.name,
            "message": str(self),
            "suggestion": self.suggestion,
            "recoverable": self.recoverable,
            "context": self.context,
        }

    def to_compact(self) -> str:
        """Format as compact string."""
        parts = [f"[{self.category.name}] {self}"]
        if self.suggestion:
            parts.append(f"  Try: {self.suggestion}")
        return "\n".join(parts)


class SignatureMismatchError(SynthError, TypeError):
    """A capability member has no matching counterpart on the source type."""

    def __init__(
        self,
        member: str,
        source_type: type,
        capability: type,
        detail: str = "",
    ):
        msg = (
            f"{member} is not implemented by {type_name(source_type)} "
            f"as required by the {type_name(capability)} interface"
        )
        if detail:
            msg += f" ({detail})"
        super().__init__(
            msg,
            category=ErrorCategory.SIGNATURE_MISMATCH,
            suggestion=f"Add a matching '{member}' to {source_type.__name__}",
            context={
                "member": member,
                "source": type_name(source_type),
                "capability": type_name(capability),
            },
        )
        self.member = member
        self.source_type = source_type
        self.capability = capability


class InvalidTargetError(SynthError, TypeError):
    """The operation was given the wrong kind of class or object."""

    def __init__(
        self,
        message: str,
        target: Any = None,
        suggestion: str | None = None,
    ):
        context = {"target": type_name(target)} if target is not None else {}
        super().__init__(
            message,
            category=ErrorCategory.INVALID_TARGET,
            suggestion=suggestion,
            context=context,
        )
        self.target = target


class UnimplementedError(SynthError, NotImplementedError):
    """A stub method was called that has no body."""

    def __init__(self, method_name: str, owner: str):
        super().__init__(
            f'The method "{method_name}" is not implemented by {owner}',
            category=ErrorCategory.UNIMPLEMENTED,
            suggestion="Use mock_of() for a stand-in that answers calls",
            context={"method": method_name, "owner": owner},
        )
        self.method_name = method_name


class InternalInvariantError(SynthError, RuntimeError):
    """A construct the synthesizer itself defined could not be found."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(
            message,
            category=ErrorCategory.INTERNAL,
            context=context,
            recoverable=False,
        )
