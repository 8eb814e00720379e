"""Mock synthesizer.

A mock subclasses its target (interface or class) and reroutes every public
method, abstract or not, into a MockCore that records the call and answers
it from the registered setup rules. Properties get plain storage, as on a
stub. The target's constructor never runs.

Usage:
    from synthtype.mock import as_recording_core, mock_of

    repo = mock_of(Repository)
    core = as_recording_core(repo)
    core.returns("count", 3)

    repo.count()  # 3
    repo.save(user)  # None, recorded
    core.calls_made()  # (Invocation("count"), Invocation("save", (user,)))
"""

from __future__ import annotations

from typing import Any, TypeVar

from synthtype.codegen import (
    backed_property,
    build_type,
    default_value,
    leftover_abstract,
    name_function,
)
from synthtype.descriptor import CapabilityDescriptor, MethodSignature, describe
from synthtype.errors import InternalInvariantError, InvalidTargetError
from synthtype.logging import get_logger
from synthtype.recorder import MockCore
from synthtype.registry import Strategy, TypeKey, get_registry

T = TypeVar("T")

_log = get_logger("mock")


class MockBase:
    """Base of every generated mock; exposes the recording core."""

    __slots__ = ()

    def _synth_recording_core(self) -> MockCore:
        core = vars(self).get("_synth_core")
        if core is None:
            raise InternalInvariantError(
                f"{type(self).__name__} has no recording core",
                context={"type": type(self).__name__},
            )
        return core


def _mock_init(self: Any) -> None:
    vars(self)["_synth_core"] = MockCore()


def _recording_method(name: str, owner: str, method: MethodSignature | None = None) -> Any:
    signature = method.signature if method is not None else None
    return_type = method.return_type if method is not None else None

    def make_default() -> Any:
        return default_value(return_type)

    def record(self: Any, *args: Any, **kwargs: Any) -> Any:
        if signature is not None:
            # Raises TypeError on a bad call, like the real method would
            bound = signature.bind(self, *args, **kwargs)
            parameters, keywords = bound.args[1:], bound.kwargs
        else:
            parameters, keywords = args, kwargs
        return self._synth_recording_core().delegate_call(
            name,
            parameters,
            keywords,
            default=make_default,
        )

    return name_function(record, owner, method, name=name)


def _build_mock(descriptor: CapabilityDescriptor) -> type:
    target = descriptor.target
    name = f"{target.__name__}Mock"
    namespace: dict[str, Any] = {"__init__": _mock_init}

    for prop in descriptor.properties:
        namespace[prop.name] = backed_property(prop, name)

    for method in descriptor.methods:
        namespace[method.name] = _recording_method(method.name, name, method)

    for leftover in leftover_abstract(target, namespace):
        namespace[leftover] = _recording_method(leftover, name)

    handle = build_type(name, (target, MockBase), namespace, doc=f"Mock of {descriptor.name}.")
    _log.debug("built mock", target=descriptor.name, methods=len(descriptor.methods))
    return handle


def synthesize_mock(capability: type | CapabilityDescriptor) -> type:
    """Get or create the mock type for a class."""
    descriptor = describe(capability)
    key = TypeKey(Strategy.MOCK, descriptor.target)
    return get_registry().get_or_create(key, lambda: _build_mock(descriptor))


def instantiate_mock(handle: type[T]) -> T:
    """Create a mock instance with a fresh recording core."""
    return handle()


def mock_of(capability: type[T]) -> T:
    """Create a mock of a class."""
    return instantiate_mock(synthesize_mock(capability))


def as_recording_core(instance: Any) -> MockCore:
    """Reinterpret a mock as its recording core for setup and assertions.

    Raises:
        InvalidTargetError: If ``instance`` is not a mock
    """
    if isinstance(instance, MockCore):
        return instance
    if isinstance(instance, MockBase):
        return instance._synth_recording_core()
    raise InvalidTargetError("Target was not a mock object", target=instance)
