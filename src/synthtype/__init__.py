"""synthtype: runtime type synthesis for interfaces and classes.

Given a capability set (a Protocol, an abstract base class, or a concrete
class) synthtype builds a class satisfying it on demand, using one of four
strategies:

- Stub: empty, fully mutable instances whose abstract methods raise
- Forward: wrap an object whose class provides an interface without
  declaring it
- Lazy: defer building an expensive instance until a property is touched
- Mock: record calls and answer them from setup rules

Generated classes are cached process-wide, so asking twice for the same
target and strategy returns the same class.

Example usage:
    from synthtype import as_recording_core, extract, get_stub_instance, mock_of

    user = get_stub_instance(User)
    user.name = "Name!"

    readable = extract(Readable, StringSource("hello"))

    repo = mock_of(Repository)
    as_recording_core(repo).returns("count", 3)
"""

from synthtype.config import SynthConfig, get_config, reset_config, set_config
from synthtype.descriptor import (
    CapabilityDescriptor,
    MethodSignature,
    ParameterSignature,
    PropertySignature,
    TargetKind,
    describe,
)
from synthtype.errors import (
    ErrorCategory,
    InternalInvariantError,
    InvalidTargetError,
    SignatureMismatchError,
    SynthError,
    UnimplementedError,
)
from synthtype.forward import ForwarderBase, extract, source_of, synthesize_forwarder
from synthtype.lazy import LazyBase, is_materialized, lazy_for, lazy_for_keyed, synthesize_lazy
from synthtype.mock import MockBase, as_recording_core, instantiate_mock, mock_of, synthesize_mock
from synthtype.recorder import Invocation, MockCore, RecordingCore, SetupRule, any_invocation
from synthtype.registry import (
    RegistryStats,
    Strategy,
    TypeKey,
    TypeRegistry,
    get_registry,
    reset_registry,
    set_registry,
)
from synthtype.stub import get_stub_instance, instantiate_stub, synthesize_stub
from synthtype.toml_config import configure, find_config_file, load_toml_config

__version__ = "0.1.0"

__all__ = [
    "CapabilityDescriptor",
    "ErrorCategory",
    "ForwarderBase",
    "InternalInvariantError",
    "InvalidTargetError",
    "Invocation",
    "LazyBase",
    "MethodSignature",
    "MockBase",
    "MockCore",
    "ParameterSignature",
    "PropertySignature",
    "RecordingCore",
    "RegistryStats",
    "SetupRule",
    "SignatureMismatchError",
    "Strategy",
    "SynthConfig",
    "SynthError",
    "TargetKind",
    "TypeKey",
    "TypeRegistry",
    "UnimplementedError",
    "__version__",
    "any_invocation",
    "as_recording_core",
    "configure",
    "describe",
    "extract",
    "find_config_file",
    "get_config",
    "get_registry",
    "get_stub_instance",
    "instantiate_mock",
    "instantiate_stub",
    "is_materialized",
    "lazy_for",
    "lazy_for_keyed",
    "load_toml_config",
    "mock_of",
    "reset_config",
    "reset_registry",
    "set_config",
    "set_registry",
    "source_of",
    "synthesize_forwarder",
    "synthesize_lazy",
    "synthesize_mock",
    "synthesize_stub",
]
