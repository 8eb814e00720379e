"""Forwarding synthesizer: expose a concrete object through an interface.

``extract`` wraps an object whose class happens to provide every member of an
interface without declaring it. The wrapper is a real subclass of the
interface, so ``isinstance`` holds, and every call is passed straight
through to the source object.

Signatures are checked once per (interface, source class) pair when the
wrapper type is synthesized, never per call. Matching is by method name plus
the exact sequence of parameter types; there is no overload resolution.

Only members defined in Python are visible to the check: methods must be
plain functions on the source class, and properties must be ``property``
objects or class annotations. Classes implemented in C (``io.StringIO``,
file objects) expose neither, so they cannot be extracted directly; wrap
them in a small Python class first.

Usage:
    from synthtype.forward import extract

    readable = extract(Readable, StringSource("hello"))
    readable.read(10)
"""

from __future__ import annotations

from typing import Any, TypeVar

from synthtype.codegen import build_type, leftover_abstract, name_function
from synthtype.descriptor import (
    CapabilityDescriptor,
    MethodSignature,
    PropertySignature,
    describe,
)
from synthtype.errors import InvalidTargetError, SignatureMismatchError, type_name
from synthtype.logging import get_logger
from synthtype.registry import Strategy, TypeKey, get_registry

T = TypeVar("T")

_log = get_logger("forward")


class ForwarderBase:
    """Base of every generated forwarding wrapper.

    The wrapper holds a reference to its source object but does not own it.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} wrapping {self._synth_source!r}>"


def _forwarder_init(self: Any, source: Any) -> None:
    object.__setattr__(self, "_synth_source", source)


def _forwarding_method(name: str, owner: str, method: MethodSignature | None = None) -> Any:
    def forward(self: Any, *args: Any, **kwargs: Any) -> Any:
        return getattr(self._synth_source, name)(*args, **kwargs)

    return name_function(forward, owner, method, name=name)


def _forwarding_property(prop: PropertySignature, owner: str) -> property:
    name = prop.name

    def fget(self: Any) -> Any:
        return getattr(self._synth_source, name)

    def fset(self: Any, value: Any) -> None:
        setattr(self._synth_source, name, value)

    return property(
        name_function(fget, owner, name=name) if prop.readable else None,
        name_function(fset, owner, name=name) if prop.writable else None,
        doc=f"Forwards '{name}' to the source object.",
    )


def _check_method(
    method: MethodSignature,
    source: CapabilityDescriptor,
    capability: type,
) -> None:
    found = source.get_method(method.name)
    if found is None:
        raise SignatureMismatchError(method.name, source.target, capability)
    if not method.matches(found):
        raise SignatureMismatchError(
            method.name,
            source.target,
            capability,
            detail=f"expected {method.render()}, found {found.render()}",
        )


def _check_property(
    prop: PropertySignature,
    source: CapabilityDescriptor,
    capability: type,
) -> None:
    found = source.get_property(prop.name)
    if found is None:
        raise SignatureMismatchError(
            prop.name, source.target, capability, detail="no such property"
        )
    if prop.readable and not found.readable:
        raise SignatureMismatchError(prop.name, source.target, capability, detail="not readable")
    if prop.writable and not found.writable:
        raise SignatureMismatchError(prop.name, source.target, capability, detail="not writable")


def _build_forwarder(capability: CapabilityDescriptor, source_type: type) -> type:
    target = capability.target
    source = describe(source_type)
    name = f"{target.__name__}From{source_type.__name__}"
    namespace: dict[str, Any] = {"__init__": _forwarder_init}

    for method in capability.methods:
        _check_method(method, source, target)
        namespace[method.name] = _forwarding_method(method.name, name, method)

    for prop in capability.properties:
        _check_property(prop, source, target)
        namespace[prop.name] = _forwarding_property(prop, name)

    for leftover in leftover_abstract(target, namespace):
        if not hasattr(source_type, leftover):
            raise SignatureMismatchError(leftover, source_type, target)
        namespace[leftover] = _forwarding_method(leftover, name)

    handle = build_type(
        name,
        (target, ForwarderBase),
        namespace,
        doc=f"Forwards {capability.name} to {type_name(source_type)}.",
    )
    _log.debug(
        "built forwarder",
        target=capability.name,
        source=type_name(source_type),
        methods=len(capability.methods),
    )
    return handle


def synthesize_forwarder(capability: type | CapabilityDescriptor, source_type: type) -> type:
    """Get or create the wrapper type binding ``capability`` to ``source_type``.

    Raises:
        SignatureMismatchError: If a capability member has no identical
            counterpart on the source type
    """
    descriptor = describe(capability)
    key = TypeKey(Strategy.FORWARD, descriptor.target, source_type)
    return get_registry().get_or_create(key, lambda: _build_forwarder(descriptor, source_type))


def extract(capability: type[T], source: Any) -> T:
    """Wrap ``source`` so it can be used as ``capability``.

    Each call returns a fresh wrapper holding its own reference to
    ``source``; the wrapper type itself is shared.

    Raises:
        InvalidTargetError: If ``capability`` is not an interface
        SignatureMismatchError: If the source's class does not provide every
            member of the interface
    """
    descriptor = describe(capability)
    if not descriptor.is_interface:
        raise InvalidTargetError(
            f"Target type must be an interface, "
            f"got {descriptor.kind.value} class {descriptor.name}",
            target=descriptor.target,
            suggestion="Extract to a Protocol or a fully abstract base class",
        )
    handle = synthesize_forwarder(descriptor, type(source))
    return handle(source)


def source_of(wrapper: Any) -> Any:
    """Return the object a forwarding wrapper passes calls to.

    Raises:
        InvalidTargetError: If ``wrapper`` was not made by ``extract``
    """
    if not isinstance(wrapper, ForwarderBase):
        raise InvalidTargetError("Object is not a forwarding wrapper", target=wrapper)
    return wrapper._synth_source
