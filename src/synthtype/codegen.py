"""Shared helpers for building generated classes."""

from __future__ import annotations

import collections.abc
import types
from collections.abc import Callable
from typing import Any, get_origin

from synthtype.config import get_config
from synthtype.descriptor import MethodSignature, PropertySignature

_EMPTY_VALUES: dict[Any, Any] = {
    int: 0,
    float: 0.0,
    complex: 0j,
    bool: False,
    str: "",
    bytes: b"",
}

_EMPTY_FACTORIES: dict[Any, Callable[[], Any]] = {
    list: list,
    dict: dict,
    set: set,
    frozenset: frozenset,
    tuple: tuple,
    collections.abc.Sequence: tuple,
    collections.abc.MutableSequence: list,
    collections.abc.Mapping: dict,
    collections.abc.MutableMapping: dict,
    collections.abc.Set: frozenset,
    collections.abc.MutableSet: set,
    collections.abc.Iterable: tuple,
}


def default_value(annotation: Any) -> Any:
    """The empty value of a type: 0, "", an empty container, or None."""
    origin = get_origin(annotation) or annotation
    try:
        if origin in _EMPTY_VALUES:
            return _EMPTY_VALUES[origin]
        factory = _EMPTY_FACTORIES.get(origin)
    except TypeError:
        # Unhashable annotation objects
        return None
    return factory() if factory is not None else None


def initial_value(prop: PropertySignature) -> Any:
    """Starting value of a generated backing slot."""
    if get_config().seed_defaults:
        return default_value(prop.type)
    return None


def build_type(
    name: str,
    bases: tuple[type, ...],
    namespace: dict[str, Any],
    doc: str | None = None,
) -> type:
    """Create a class with the metaclass its bases require.

    The class is placed in the configured generated module so it is easy to
    tell apart from hand-written code in reprs and tracebacks.
    """
    module = get_config().generated_module

    def exec_body(ns: dict[str, Any]) -> None:
        ns.update(namespace)
        ns["__module__"] = module
        ns["__qualname__"] = name
        ns["__doc__"] = doc

    return types.new_class(name, bases, exec_body=exec_body)


def name_function(
    func: Callable[..., Any],
    owner: str,
    method: MethodSignature | None = None,
    name: str | None = None,
) -> Callable[..., Any]:
    """Give a generated function the name and signature of what it replaces."""
    func_name = name or (method.name if method is not None else func.__name__)
    func.__name__ = func_name
    func.__qualname__ = f"{owner}.{func_name}"
    if method is not None and method.signature is not None:
        func.__signature__ = method.signature
    return func


def backed_property(prop: PropertySignature, owner: str) -> property:
    """A read/write property stored in a private per-instance slot."""
    slot = f"_synth_{prop.name}"

    def fget(self: Any) -> Any:
        try:
            return self.__dict__[slot]
        except KeyError:
            # Mutable defaults are created per instance on first read
            value = initial_value(prop)
            self.__dict__[slot] = value
            return value

    def fset(self: Any, value: Any) -> None:
        self.__dict__[slot] = value

    name_function(fget, owner, name=prop.name)
    name_function(fset, owner, name=prop.name)
    return property(fget, fset, doc=f"Generated storage for '{prop.name}'.")


def leftover_abstract(target: type, namespace: dict[str, Any]) -> list[str]:
    """Abstract names of ``target`` the namespace does not yet override.

    Descriptors skip private members and static/class methods; any of those
    left abstract would make the generated class impossible to instantiate.
    """
    return sorted(n for n in getattr(target, "__abstractmethods__", ()) if n not in namespace)
