"""Stub synthesizer.

A stub is an empty, fully mutable instance of an interface or abstract
class. Every property gets storage plus a getter and a setter (even when the
original is read-only), every abstract method raises UnimplementedError, and
concrete methods inherited from an abstract base keep their real bodies.

Usage:
    from synthtype.stub import get_stub_instance

    user = get_stub_instance(User)
    user.name = "Name!"
    user.name  # "Name!"
    user.save()  # UnimplementedError: The method "save" is not implemented ...
"""

from __future__ import annotations

from typing import Any, TypeVar

from synthtype.codegen import backed_property, build_type, leftover_abstract, name_function
from synthtype.descriptor import CapabilityDescriptor, MethodSignature, describe
from synthtype.errors import UnimplementedError
from synthtype.logging import get_logger
from synthtype.registry import Strategy, TypeKey, get_registry

T = TypeVar("T")

_log = get_logger("stub")


def _unimplemented(method_name: str, owner: str, method: MethodSignature | None = None) -> Any:
    def unimplemented(self: Any, *args: Any, **kwargs: Any) -> Any:
        raise UnimplementedError(method_name, owner)

    return name_function(unimplemented, owner, method, name=method_name)


def _stub_init(self: Any) -> None:
    """Stubs start empty; the target's constructor is never run."""


def _build_stub(descriptor: CapabilityDescriptor) -> type:
    target = descriptor.target
    name = f"{target.__name__}Stub"
    namespace: dict[str, Any] = {"__init__": _stub_init}

    for prop in descriptor.properties:
        namespace[prop.name] = backed_property(prop, name)

    for method in descriptor.abstract_methods():
        namespace[method.name] = _unimplemented(method.name, name, method)

    for leftover in leftover_abstract(target, namespace):
        namespace[leftover] = _unimplemented(leftover, name)

    handle = build_type(name, (target,), namespace, doc=f"Stub of {descriptor.name}.")
    _log.debug(
        "built stub",
        target=descriptor.name,
        properties=len(descriptor.properties),
        unimplemented=len(descriptor.abstract_methods()),
    )
    return handle


def synthesize_stub(target: type | CapabilityDescriptor) -> type:
    """Get or create the stub type for a class."""
    descriptor = describe(target)
    key = TypeKey(Strategy.STUB, descriptor.target)
    return get_registry().get_or_create(key, lambda: _build_stub(descriptor))


def instantiate_stub(handle: type[T]) -> T:
    """Create an empty instance of a stub type."""
    return handle()


def get_stub_instance(target: type[T]) -> T:
    """Create an empty stub instance for a class."""
    return instantiate_stub(synthesize_stub(target))
