"""Command-line interface for synthtype.

Inspect what the synthesizers see in a class, and check ahead of time whether
an object's class can be extracted to an interface.

    synthtype describe myapp.models:User
    synthtype check myapp.io:Readable myapp.io:SocketReader --json
"""

from __future__ import annotations

import argparse
import importlib
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from synthtype.descriptor import CapabilityDescriptor, annotation_name, describe
from synthtype.errors import InvalidTargetError, SignatureMismatchError, type_name

if TYPE_CHECKING:
    from argparse import Namespace

EXIT_OK = 0
EXIT_MISMATCH = 1
EXIT_USAGE = 2


def get_version() -> str:
    """Get the synthtype version."""
    from synthtype import __version__

    return __version__


def get_console() -> Console:
    # Created per call so output follows sys.stdout when it is swapped
    return Console(highlight=False)


def error(message: str) -> None:
    Console(stderr=True, highlight=False).print(f"[bold red]error:[/] {escape(message)}")


def load_target(path: str) -> type:
    """Import a class from ``module:Qualified.Name``.

    Raises:
        ImportError: If the module cannot be imported
        AttributeError: If the name does not exist in the module
        ValueError: If ``path`` has no ``:`` separator
    """
    module_name, sep, qualname = path.partition(":")
    if not sep or not module_name or not qualname:
        raise ValueError(f"Expected module:Class, got {path!r}")

    obj: Any = importlib.import_module(module_name)
    for part in qualname.split("."):
        obj = getattr(obj, part)
    return obj


def setup(args: Namespace) -> None:
    """Apply config file and verbosity flags."""
    from synthtype.logging import configure_logging
    from synthtype.toml_config import configure

    path = Path(args.config) if getattr(args, "config", None) else None
    config = configure(path=path)
    if getattr(args, "verbose", False):
        configure_logging(logging.DEBUG, config.log_format)


def render_descriptor(descriptor: CapabilityDescriptor, console: Console) -> None:
    console.print(f"[bold]{escape(descriptor.name)}[/] ({descriptor.kind.value})")
    if descriptor.interfaces:
        names = ", ".join(type_name(i) for i in descriptor.interfaces)
        console.print(f"Interfaces: {escape(names)}")

    if descriptor.methods:
        table = Table(title="Methods", show_lines=False)
        table.add_column("Signature")
        table.add_column("Abstract")
        for method in descriptor.methods:
            table.add_row(escape(method.render()), "yes" if method.is_abstract else "")
        console.print(table)

    if descriptor.properties:
        table = Table(title="Properties")
        table.add_column("Name")
        table.add_column("Type")
        table.add_column("Access")
        table.add_column("Abstract")
        for prop in descriptor.properties:
            access = ("r" if prop.readable else "") + ("w" if prop.writable else "")
            table.add_row(
                escape(prop.name),
                escape(annotation_name(prop.type)),
                access,
                "yes" if prop.is_abstract else "",
            )
        console.print(table)

    if not descriptor.methods and not descriptor.properties:
        console.print("(no public members)")


def cmd_describe(args: Namespace) -> int:
    """Show the capability descriptor of a class."""
    try:
        target = load_target(args.target)
        descriptor = describe(target)
    except (ImportError, AttributeError, ValueError) as e:
        error(f"Cannot load {args.target}: {e}")
        return EXIT_USAGE
    except InvalidTargetError as e:
        error(str(e))
        return EXIT_USAGE

    if args.json:
        print(json.dumps(descriptor.to_dict(), indent=2))
        return EXIT_OK

    render_descriptor(descriptor, get_console())
    return EXIT_OK


def cmd_check(args: Namespace) -> int:
    """Check that a source class can be extracted to an interface."""
    from synthtype.forward import synthesize_forwarder

    try:
        capability = describe(load_target(args.capability))
        source = load_target(args.source)
    except (ImportError, AttributeError, ValueError) as e:
        error(f"Cannot load target: {e}")
        return EXIT_USAGE
    except InvalidTargetError as e:
        error(str(e))
        return EXIT_USAGE

    if not isinstance(source, type):
        error(f"{args.source} is not a class")
        return EXIT_USAGE
    if not capability.is_interface:
        error(f"{capability.name} is a {capability.kind.value} class, not an interface")
        return EXIT_USAGE

    result: dict[str, Any] = {
        "capability": capability.name,
        "source": type_name(source),
        "compatible": True,
        "error": None,
    }
    try:
        synthesize_forwarder(capability, source)
    except SignatureMismatchError as e:
        result["compatible"] = False
        result["error"] = e.to_dict()

    if args.json:
        print(json.dumps(result, indent=2))
    else:
        console = get_console()
        if result["compatible"]:
            message = f"{result['source']} provides {result['capability']}"
            console.print(f"[green]OK[/] {escape(message)}")
        else:
            console.print(f"[red]MISMATCH[/] {escape(result['error']['message'])}")

    return EXIT_OK if result["compatible"] else EXIT_MISMATCH


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="synthtype",
        description="Runtime type synthesis for interfaces and classes",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_version()}")
    parser.add_argument("--config", metavar="PATH", help="Config file (default: search upward)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log synthesis at DEBUG level")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # describe command
    describe_parser = subparsers.add_parser("describe", help="Show what a class declares")
    describe_parser.add_argument("target", help="Class to describe (module:Class)")
    describe_parser.add_argument("--json", "-j", action="store_true", help="Output as JSON")
    describe_parser.set_defaults(func=cmd_describe)

    # check command
    check_parser = subparsers.add_parser(
        "check", help="Check a class can be extracted to an interface"
    )
    check_parser.add_argument("capability", help="Interface (module:Class)")
    check_parser.add_argument("source", help="Source class (module:Class)")
    check_parser.add_argument("--json", "-j", action="store_true", help="Output as JSON")
    check_parser.set_defaults(func=cmd_check)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_OK

    try:
        setup(args)
    except (FileNotFoundError, ValueError) as e:
        error(f"Error loading config: {e}")
        return EXIT_USAGE

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
