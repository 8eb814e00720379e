"""Capability descriptors.

A CapabilityDescriptor is inert metadata about a class: the public methods
and properties it declares (directly or through its bases) and whether it is
an interface, an abstract class or a concrete class. Every synthesizer works
from a descriptor rather than poking at the class directly.

Usage:
    from synthtype.descriptor import describe

    descriptor = describe(Repository)
    for method in descriptor.methods:
        print(method.render())
"""

from __future__ import annotations

import abc
import dataclasses
import functools
import inspect
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, ClassVar, Generic, Protocol, get_origin, get_type_hints

from synthtype.errors import InvalidTargetError, type_name

# Bases that never contribute members to a capability set
_SKIPPED_BASES = (object, Protocol, Generic, abc.ABC)


class TargetKind(Enum):
    """What sort of class a descriptor was built from."""

    INTERFACE = "interface"
    ABSTRACT = "abstract"
    CONCRETE = "concrete"


@dataclass(frozen=True)
class ParameterSignature:
    """One parameter of a method, excluding ``self``.

    Only the annotation and the parameter kind take part in equality, so two
    methods match when their parameter types line up regardless of naming.
    """

    annotation: Any
    kind: inspect._ParameterKind
    name: str = field(default="", compare=False)
    has_default: bool = field(default=False, compare=False)

    def render(self) -> str:
        prefix = ""
        if self.kind is inspect.Parameter.VAR_POSITIONAL:
            prefix = "*"
        elif self.kind is inspect.Parameter.VAR_KEYWORD:
            prefix = "**"
        default = " = ..." if self.has_default else ""
        return f"{prefix}{self.name}: {annotation_name(self.annotation)}{default}"


@dataclass(frozen=True)
class MethodSignature:
    """A public method of a capability set."""

    name: str
    parameter_types: tuple[ParameterSignature, ...] = ()
    return_type: Any = Any
    is_abstract: bool = False
    signature: inspect.Signature | None = field(default=None, compare=False, repr=False)

    def matches(self, other: MethodSignature) -> bool:
        """True if ``other`` has the same name and parameter-type sequence."""
        return self.name == other.name and self.parameter_types == other.parameter_types

    def render(self) -> str:
        params = ", ".join(p.render() for p in self.parameter_types)
        return f"{self.name}({params}) -> {annotation_name(self.return_type)}"


@dataclass(frozen=True)
class PropertySignature:
    """A property or annotated attribute of a capability set."""

    name: str
    type: Any = Any
    readable: bool = True
    writable: bool = True
    is_key: bool = False
    is_abstract: bool = False


@dataclass(frozen=True, eq=False)
class CapabilityDescriptor:
    """Metadata about the methods and properties of one class.

    Descriptors compare and hash by the class they describe, so any two
    descriptors of the same class are interchangeable as cache keys.
    """

    target: type
    kind: TargetKind
    methods: tuple[MethodSignature, ...] = ()
    properties: tuple[PropertySignature, ...] = ()
    interfaces: tuple[type, ...] = ()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CapabilityDescriptor):
            return NotImplemented
        return self.target is other.target

    def __hash__(self) -> int:
        return hash(self.target)

    @property
    def name(self) -> str:
        return type_name(self.target)

    @property
    def is_interface(self) -> bool:
        return self.kind is TargetKind.INTERFACE

    @property
    def is_abstract(self) -> bool:
        return self.kind is TargetKind.ABSTRACT

    @property
    def is_concrete(self) -> bool:
        return self.kind is TargetKind.CONCRETE

    def get_method(self, name: str) -> MethodSignature | None:
        return next((m for m in self.methods if m.name == name), None)

    def get_property(self, name: str) -> PropertySignature | None:
        return next((p for p in self.properties if p.name == name), None)

    def abstract_methods(self) -> tuple[MethodSignature, ...]:
        return tuple(m for m in self.methods if m.is_abstract)

    def key_property(self) -> PropertySignature | None:
        return next((p for p in self.properties if p.is_key), None)

    def with_key(self, name: str) -> CapabilityDescriptor:
        """Return a copy with ``name`` marked as the key property.

        Raises:
            InvalidTargetError: If the class has no such property
        """
        if self.get_property(name) is None:
            raise InvalidTargetError(
                f"{self.name} has no property '{name}' to use as a key",
                target=self.target,
                suggestion="Declare the key as a property or annotated attribute",
            )
        properties = tuple(replace(p, is_key=(p.name == name)) for p in self.properties)
        return replace(self, properties=properties)

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly rendering."""
        return {
            "name": self.name,
            "kind": self.kind.value,
            "interfaces": [type_name(i) for i in self.interfaces],
            "methods": [
                {
                    "name": m.name,
                    "parameters": [p.render() for p in m.parameter_types],
                    "returns": annotation_name(m.return_type),
                    "abstract": m.is_abstract,
                }
                for m in self.methods
            ],
            "properties": [
                {
                    "name": p.name,
                    "type": annotation_name(p.type),
                    "readable": p.readable,
                    "writable": p.writable,
                    "abstract": p.is_abstract,
                    "key": p.is_key,
                }
                for p in self.properties
            ],
        }


def annotation_name(annotation: Any) -> str:
    """Convert a type annotation to a short display string."""
    if annotation is None or annotation is type(None):
        return "None"
    if annotation is Any:
        return "Any"
    if isinstance(annotation, str):
        return annotation

    origin = get_origin(annotation)
    if origin is not None:
        args = getattr(annotation, "__args__", ())
        args_str = ", ".join(annotation_name(a) for a in args)
        origin_name = getattr(origin, "__name__", str(origin))
        return f"{origin_name}[{args_str}]" if args_str else origin_name

    if hasattr(annotation, "__name__"):
        return annotation.__name__

    return str(annotation)


def _normalize(annotation: Any) -> Any:
    if annotation is inspect.Parameter.empty:
        return Any
    if annotation is None:
        return type(None)
    return annotation


def _resolve_hints(obj: Any) -> dict[str, Any]:
    """Type hints of a function or class, falling back to raw annotations."""
    try:
        return get_type_hints(obj)
    except (NameError, TypeError, SyntaxError):
        # Unresolvable forward references stay as strings
        return dict(inspect.get_annotations(obj))


def _is_protocol_class(klass: type) -> bool:
    return bool(klass.__dict__.get("_is_protocol", False))


def _is_classvar(hint: Any) -> bool:
    if hint is ClassVar or get_origin(hint) is ClassVar:
        return True
    if isinstance(hint, dataclasses.InitVar):
        return True
    return isinstance(hint, str) and hint.startswith(("ClassVar", "typing.ClassVar"))


def _method_signature(name: str, func: Any, declared_abstract: bool) -> MethodSignature:
    sig = inspect.signature(func)
    hints = _resolve_hints(func)

    params = list(sig.parameters.values())
    if params and params[0].kind in (
        inspect.Parameter.POSITIONAL_ONLY,
        inspect.Parameter.POSITIONAL_OR_KEYWORD,
    ):
        params = params[1:]

    parameter_types = tuple(
        ParameterSignature(
            annotation=_normalize(hints.get(p.name, p.annotation)),
            kind=p.kind,
            name=p.name,
            has_default=p.default is not inspect.Parameter.empty,
        )
        for p in params
    )

    return MethodSignature(
        name=name,
        parameter_types=parameter_types,
        return_type=_normalize(hints.get("return", sig.return_annotation)),
        is_abstract=declared_abstract or getattr(func, "__isabstractmethod__", False),
        signature=sig,
    )


def _property_signature(name: str, prop: property, declared_abstract: bool) -> PropertySignature:
    prop_type: Any = Any
    if prop.fget is not None:
        prop_type = _normalize(_resolve_hints(prop.fget).get("return", Any))

    return PropertySignature(
        name=name,
        type=prop_type,
        readable=prop.fget is not None,
        writable=prop.fset is not None,
        is_abstract=declared_abstract or getattr(prop, "__isabstractmethod__", False),
    )


def _collect_members(
    target: type,
) -> tuple[dict[str, MethodSignature], dict[str, PropertySignature]]:
    """Walk the MRO base-first so the most derived definition wins."""
    class_hints = _resolve_hints(target)
    methods: dict[str, MethodSignature] = {}
    properties: dict[str, PropertySignature] = {}

    for klass in reversed(target.__mro__):
        if klass in _SKIPPED_BASES:
            continue
        declared_abstract = _is_protocol_class(klass)
        namespace = vars(klass)

        for name, value in namespace.items():
            if name.startswith("_"):
                continue
            if isinstance(value, property):
                methods.pop(name, None)
                properties[name] = _property_signature(name, value, declared_abstract)
            elif inspect.isfunction(value):
                properties.pop(name, None)
                methods[name] = _method_signature(name, value, declared_abstract)
            elif isinstance(value, (staticmethod, classmethod)):
                methods.pop(name, None)
                properties.pop(name, None)

        for name, annotation in inspect.get_annotations(klass).items():
            if name.startswith("_") or name in methods:
                continue
            if isinstance(namespace.get(name), property):
                continue
            hint = class_hints.get(name, annotation)
            if _is_classvar(hint):
                continue
            properties[name] = PropertySignature(
                name=name,
                type=_normalize(hint),
                is_abstract=declared_abstract,
            )

    return methods, properties


def _classify(
    target: type,
    methods: dict[str, MethodSignature],
    properties: dict[str, PropertySignature],
) -> TargetKind:
    if _is_protocol_class(target):
        return TargetKind.INTERFACE

    members = [*methods.values(), *properties.values()]
    abstract = [m for m in members if m.is_abstract]
    if inspect.isabstract(target) or abstract:
        if members and len(abstract) == len(members):
            return TargetKind.INTERFACE
        return TargetKind.ABSTRACT
    return TargetKind.CONCRETE


@functools.cache
def _describe(target: type) -> CapabilityDescriptor:
    methods, properties = _collect_members(target)
    kind = _classify(target, methods, properties)
    interfaces = tuple(
        base
        for base in target.__bases__
        if base not in _SKIPPED_BASES and _describe(base).is_interface
    )
    return CapabilityDescriptor(
        target=target,
        kind=kind,
        methods=tuple(methods.values()),
        properties=tuple(properties.values()),
        interfaces=interfaces,
    )


def describe(target: type | CapabilityDescriptor) -> CapabilityDescriptor:
    """Build (or fetch the memoized) descriptor for a class.

    Passing a descriptor returns it unchanged.

    Raises:
        InvalidTargetError: If ``target`` is not a class
    """
    if isinstance(target, CapabilityDescriptor):
        return target
    if not isinstance(target, type):
        raise InvalidTargetError(
            f"Expected a class, got {type(target).__name__} instance",
            target=target,
        )
    return _describe(target)
