"""Lazy forwarding synthesizer.

A lazy wrapper is a subclass of a concrete class that stands in for an
instance which has not been built yet. The wrapper skips the class's own
constructor; the real instance comes from a zero-argument factory the first
time any property is read or written, and every property access after that
is forwarded to it. The factory runs at most once per wrapper.

One property can be declared the key. The key has its own storage on the
wrapper, so reading or updating it never builds the real instance.

Usage:
    from synthtype.lazy import lazy_for_keyed

    user = lazy_for_keyed(User, "id", 42, lambda: repository.load(42))
    user.id  # 42, nothing loaded
    user.name  # loads the user, then reads its name
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any, TypeVar

from synthtype.codegen import build_type, leftover_abstract, name_function
from synthtype.descriptor import CapabilityDescriptor, MethodSignature, PropertySignature, describe
from synthtype.errors import InternalInvariantError, InvalidTargetError, type_name
from synthtype.logging import get_logger
from synthtype.registry import Strategy, TypeKey, get_registry

T = TypeVar("T")

_log = get_logger("lazy")

_UNSET = object()


class LazyBase:
    """Base of every generated lazy wrapper; owns the ensure-base logic."""

    __slots__ = ()

    def _synth_ensure_base(self) -> Any:
        """Build the real instance if it does not exist yet and return it."""
        state = vars(self)
        base = state.get("_synth_base")
        if base is not None:
            return base

        lock = state.get("_synth_lock")
        factory = state.get("_synth_factory")
        if lock is None or factory is None:
            raise InternalInvariantError(
                f"{type(self).__name__} is missing its lazy state",
                context={"type": type(self).__name__},
            )

        with lock:
            base = state.get("_synth_base")
            if base is None:
                base = factory()
                if base is None:
                    raise InvalidTargetError(
                        f"Factory for {type(self).__name__} returned None",
                        target=type(self),
                        suggestion="The factory must return the real instance",
                    )
                state["_synth_base"] = base
                _log.debug("materialized lazy instance", type=type(self).__name__)
        return base


def _lazy_init(self: Any, factory: Callable[[], Any], key_value: Any = _UNSET) -> None:
    state = vars(self)
    state["_synth_base"] = None
    state["_synth_factory"] = factory
    state["_synth_lock"] = threading.Lock()
    if key_value is not _UNSET:
        state["_synth_key"] = key_value


def _delegating_property(prop: PropertySignature, owner: str) -> property:
    name = prop.name

    def fget(self: Any) -> Any:
        return getattr(self._synth_ensure_base(), name)

    def fset(self: Any, value: Any) -> None:
        setattr(self._synth_ensure_base(), name, value)

    return property(
        name_function(fget, owner, name=name) if prop.readable else None,
        name_function(fset, owner, name=name) if prop.writable else None,
        doc=f"Reads and writes '{name}' on the lazily built instance.",
    )


def _key_property(prop: PropertySignature, owner: str) -> property:
    def fget(self: Any) -> Any:
        return vars(self).get("_synth_key")

    def fset(self: Any, value: Any) -> None:
        vars(self)["_synth_key"] = value

    return property(
        name_function(fget, owner, name=prop.name),
        name_function(fset, owner, name=prop.name),
        doc=f"Key '{prop.name}', stored on the wrapper itself.",
    )


def _delegating_method(name: str, owner: str, method: MethodSignature | None = None) -> Any:
    def delegate(self: Any, *args: Any, **kwargs: Any) -> Any:
        return getattr(self._synth_ensure_base(), name)(*args, **kwargs)

    return name_function(delegate, owner, method, name=name)


def _build_lazy(descriptor: CapabilityDescriptor) -> type:
    target = descriptor.target
    key = descriptor.key_property()
    name = f"Lazy{target.__name__}"
    if key is not None:
        name += f"_{key.name}"

    namespace: dict[str, Any] = {"__init__": _lazy_init}

    for prop in descriptor.properties:
        if prop.is_key:
            namespace[prop.name] = _key_property(prop, name)
        else:
            namespace[prop.name] = _delegating_property(prop, name)

    for method in descriptor.abstract_methods():
        namespace[method.name] = _delegating_method(method.name, name, method)

    for leftover in leftover_abstract(target, namespace):
        namespace[leftover] = _delegating_method(leftover, name)

    handle = build_type(name, (target, LazyBase), namespace, doc=f"Lazy {descriptor.name}.")
    _log.debug(
        "built lazy wrapper",
        target=descriptor.name,
        key=key.name if key is not None else None,
        properties=len(descriptor.properties),
    )
    return handle


def synthesize_lazy(target: type | CapabilityDescriptor, key_property: str | None = None) -> type:
    """Get or create the lazy wrapper type for a class.

    Raises:
        InvalidTargetError: If ``target`` is an interface, or has no property
            named ``key_property``
    """
    descriptor = describe(target)
    if descriptor.is_interface:
        raise InvalidTargetError(
            "Interfaces can't be delegated to",
            target=descriptor.target,
            suggestion="Pass the concrete class the factory returns",
        )
    if key_property is not None:
        descriptor = descriptor.with_key(key_property)

    marked = descriptor.key_property()
    key = TypeKey(Strategy.LAZY, descriptor.target, marked.name if marked else None)
    return get_registry().get_or_create(key, lambda: _build_lazy(descriptor))


def _instantiate(handle: type, factory: Callable[[], Any], key_value: Any = _UNSET) -> Any:
    if not callable(factory):
        raise InvalidTargetError(
            f"Lazy factory must be callable, got {type(factory).__name__}",
            target=handle,
        )
    # Bare object identity only; neither the target's __new__ nor __init__ runs
    instance = object.__new__(handle)
    _lazy_init(instance, factory, key_value)
    return instance


def lazy_for(target: type[T], factory: Callable[[], T]) -> T:
    """Wrap a factory in a lazy instance of ``target``."""
    return _instantiate(synthesize_lazy(target), factory)


def lazy_for_keyed(
    target: type[T],
    key_property: str,
    key_value: Any,
    factory: Callable[[], T],
) -> T:
    """Wrap a factory in a lazy instance whose key is readable up front."""
    return _instantiate(synthesize_lazy(target, key_property), factory, key_value)


def is_materialized(instance: Any) -> bool:
    """Whether a lazy wrapper has already run its factory.

    Raises:
        InvalidTargetError: If ``instance`` is not a lazy wrapper
    """
    if not isinstance(instance, LazyBase):
        raise InvalidTargetError(
            f"{type_name(instance)} is not a lazy wrapper",
            target=instance,
        )
    return vars(instance).get("_synth_base") is not None
