"""Invocation recorder behind every mock.

A MockCore owns the call log and the setup rules of one mock instance.
Recording a call and choosing the rule that answers it happen under one
lock, so a rule added concurrently with a call is either fully visible to
that call or not at all.

Rules are grouped by method name and scanned in registration order; the
first rule whose predicate accepts the invocation answers it. Rules are not
consumed: a rule that fired keeps answering later matching calls.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

Predicate = Callable[["Invocation"], bool]
ResponseCallback = Callable[[tuple[type, ...], tuple[Any, ...]], Any]


@dataclass(frozen=True)
class Invocation:
    """One recorded call to a mock.

    Attributes:
        method_name: Name of the method called
        parameters: Positional arguments, as passed
        keywords: Keyword-only arguments, as passed
        generic_types: Generic type witnesses (always empty for Python calls)
    """

    method_name: str
    parameters: tuple[Any, ...] = ()
    keywords: Mapping[str, Any] = field(default_factory=dict)
    generic_types: tuple[type, ...] = ()


@dataclass(frozen=True)
class SetupRule:
    """A filtered response registered for one method."""

    method_name: str
    predicate: Predicate
    callback: ResponseCallback


def any_invocation(invocation: Invocation) -> bool:
    """Predicate that accepts every call."""
    return True


@runtime_checkable
class RecordingCore(Protocol):
    """Setup and verification surface of a mock."""

    def calls_made(self) -> tuple[Invocation, ...]:
        """In-order snapshot of the calls made to the mock."""
        ...

    def clear_calls(self) -> None:
        """Forget all recorded calls."""
        ...

    def add_setup(self, method_name: str, predicate: Predicate, callback: ResponseCallback) -> None:
        """Answer calls to ``method_name`` accepted by ``predicate`` with ``callback``."""
        ...

    def clean_setups(self) -> None:
        """Remove every setup rule."""
        ...


class MockCore:
    """Lock-guarded call log and setup rules of one mock instance."""

    def __init__(self) -> None:
        self._calls: list[Invocation] = []
        self._setups: dict[str, list[SetupRule]] = {}
        self._lock = threading.Lock()

    def delegate_call(
        self,
        method_name: str,
        parameters: tuple[Any, ...] = (),
        keywords: Mapping[str, Any] | None = None,
        default: Callable[[], Any] | None = None,
    ) -> Any:
        """Record a call and answer it.

        Args:
            method_name: Method being called
            parameters: Positional arguments
            keywords: Keyword-only arguments
            default: Produces the result when no rule matches

        Returns:
            The matching rule's callback result, else ``default()`` (or None)
        """
        invocation = Invocation(
            method_name=method_name,
            parameters=tuple(parameters),
            keywords=dict(keywords or {}),
        )

        rule: SetupRule | None = None
        with self._lock:
            self._calls.append(invocation)
            for candidate in self._setups.get(method_name, ()):
                if candidate.predicate(invocation):
                    rule = candidate
                    break

        if rule is None:
            return default() if default is not None else None
        return rule.callback(invocation.generic_types, invocation.parameters)

    def calls_made(self) -> tuple[Invocation, ...]:
        with self._lock:
            return tuple(self._calls)

    def calls_to(self, method_name: str) -> tuple[Invocation, ...]:
        """Snapshot of the calls made to one method."""
        with self._lock:
            return tuple(c for c in self._calls if c.method_name == method_name)

    def clear_calls(self) -> None:
        with self._lock:
            self._calls.clear()

    def add_setup(self, method_name: str, predicate: Predicate, callback: ResponseCallback) -> None:
        rule = SetupRule(method_name=method_name, predicate=predicate, callback=callback)
        with self._lock:
            self._setups.setdefault(method_name, []).append(rule)

    def returns(self, method_name: str, value: Any, predicate: Predicate | None = None) -> None:
        """Answer matching calls to ``method_name`` with a fixed value."""
        self.add_setup(method_name, predicate or any_invocation, lambda _types, _params: value)

    def clean_setups(self) -> None:
        with self._lock:
            self._setups.clear()

    def setups(self) -> dict[str, tuple[SetupRule, ...]]:
        """Snapshot of the registered rules, grouped by method name."""
        with self._lock:
            return {name: tuple(rules) for name, rules in self._setups.items()}
