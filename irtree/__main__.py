"""CLI entry point for irtree.

Inspects component trees stored as JSON: validate them against the default
schema, list the registered types, list node ids and print an outline.
A file may hold a bare tree (``{"id", "type", ...}``) or a document
(``{"meta": ..., "root": ...}``).
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import ValidationError as WireError

from irtree.config import get_log_level
from irtree.core import get_logger, setup_logging
from irtree.ir import IRNode
from irtree.mutation import get_all_ids, validate_unique_ids, walk
from irtree.schema import create_default_registry
from irtree.validation import IRValidator

logger = get_logger("cli")


# =============================================================================
# Helpers
# =============================================================================


def _load_tree_data(path: Path) -> Any:
    """Read a JSON file and return the tree part of it.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the file is not valid JSON.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict) and "root" in data and "id" not in data:
        return data["root"]
    return data


def _load_tree(path: Path) -> IRNode | None:
    """Load and parse a tree file, logging why it could not be used."""
    try:
        return IRNode.from_wire(_load_tree_data(path))
    except OSError as e:
        logger.error(f"Cannot read {path}: {e}")
    except WireError as e:
        logger.error(f"{path} is not a component tree: {e.error_count()} problem(s)")
        for problem in e.errors():
            location = ".".join(str(part) for part in problem["loc"]) or "root"
            logger.error(f"  {location}: {problem['msg']}")
    except ValueError as e:
        logger.error(f"{path} is not valid JSON: {e}")
    return None


# =============================================================================
# Validate Command
# =============================================================================


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate a tree file against the default schema."""
    try:
        data = _load_tree_data(args.file)
    except OSError as e:
        logger.error(f"Cannot read {args.file}: {e}")
        return 1
    except ValueError as e:
        logger.error(f"{args.file} is not valid JSON: {e}")
        return 1

    if not isinstance(data, dict):
        logger.error(f"{args.file} does not hold a JSON object")
        return 1

    result = IRValidator().validate(data)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0 if result.is_valid else 1

    for error in result.errors:
        print(f"ERROR   [{error.error_type.value}] {error.path} ({error.node_id}): {error.message}")
    for warning in result.warnings:
        print(
            f"WARNING [{warning.warning_type.value}] {warning.path} "
            f"({warning.node_id}): {warning.message}"
        )

    status = "valid" if result.is_valid else "invalid"
    print(f"{args.file}: {status} ({len(result.errors)} error(s), {len(result.warnings)} warning(s))")
    return 0 if result.is_valid else 1


def handle_validate_command(argv: list[str]) -> int:
    """Handle validate-specific commands."""
    parser = argparse.ArgumentParser(
        prog="irtree validate",
        description="Validate a component tree file",
    )
    parser.add_argument("file", type=Path, help="Tree or document JSON file")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )

    if not argv:
        parser.print_help()
        return 1

    args = parser.parse_args(argv)
    return cmd_validate(args)


# =============================================================================
# Schema Command
# =============================================================================


def cmd_schema(args: argparse.Namespace) -> int:
    """List the registered component types."""
    registry = create_default_registry()

    if args.json:
        print(json.dumps(registry.to_dict(), indent=2))
        return 0

    print(f"Containers: {', '.join(registry.container_types()) or '-'}")
    print(f"Leaves:     {', '.join(registry.leaf_types()) or '-'}")
    print()
    for name in registry.list_types():
        definition = registry.get_type(name)
        slots = ", ".join(definition.allowed_slots) or "-"
        limit = definition.max_children if definition.max_children is not None else "unbounded"
        print(f"  {name:<10} layout={definition.layout.value:<10} slots=[{slots}] max={limit}")
        if definition.forbidden_child_types:
            print(f"  {'':<10} forbids {', '.join(definition.forbidden_child_types)}")
    return 0


def handle_schema_command(argv: list[str]) -> int:
    """Handle schema-specific commands."""
    parser = argparse.ArgumentParser(
        prog="irtree schema",
        description="Show the default component schema",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print every type definition as JSON",
    )
    args = parser.parse_args(argv)
    return cmd_schema(args)


# =============================================================================
# Ids Command
# =============================================================================


def cmd_ids(args: argparse.Namespace) -> int:
    """Print every id in walk order and report duplicates."""
    root = _load_tree(args.file)
    if root is None:
        return 1

    for node_id in get_all_ids(root):
        print(node_id)

    report = validate_unique_ids(root)
    if not report.is_valid:
        logger.warning(f"Duplicate ids: {', '.join(sorted(report.duplicates))}")
        return 1
    return 0


def handle_ids_command(argv: list[str]) -> int:
    """Handle ids-specific commands."""
    parser = argparse.ArgumentParser(
        prog="irtree ids",
        description="List node ids and report duplicates",
    )
    parser.add_argument("file", type=Path, help="Tree or document JSON file")

    if not argv:
        parser.print_help()
        return 1

    args = parser.parse_args(argv)
    return cmd_ids(args)


# =============================================================================
# Tree Command
# =============================================================================


def cmd_tree(args: argparse.Namespace) -> int:
    """Print an indented outline of a tree file."""
    root = _load_tree(args.file)
    if root is None:
        return 1

    for entry in walk(root):
        indent = "  " * entry.depth
        slot = f"[{entry.slot_name}] " if entry.slot_name is not None else ""
        print(f"{indent}{slot}{entry.node.type} ({entry.node.id})")
    return 0


def handle_tree_command(argv: list[str]) -> int:
    """Handle tree-specific commands."""
    parser = argparse.ArgumentParser(
        prog="irtree tree",
        description="Print an indented outline of a tree",
    )
    parser.add_argument("file", type=Path, help="Tree or document JSON file")

    if not argv:
        parser.print_help()
        return 1

    args = parser.parse_args(argv)
    return cmd_tree(args)


# =============================================================================
# Main
# =============================================================================


def show_help() -> None:
    """Display CLI help message."""
    print("Usage: irtree {command} [args]")
    print("\nCommands:")
    print("  validate   Validate a tree file against the default schema")
    print("  schema     Show the registered component types")
    print("  ids        List node ids and report duplicates")
    print("  tree       Print an indented outline of a tree")
    print("\nExamples:")
    print("  irtree validate layout.json")
    print("  irtree validate layout.json --json")
    print("  irtree schema --json")
    print("  irtree tree layout.json")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    load_dotenv()

    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        show_help()
        return 1

    command, rest_args = argv[0], argv[1:]

    if command in ("-h", "--help"):
        show_help()
        return 0

    commands = {
        "validate": handle_validate_command,
        "schema": handle_schema_command,
        "ids": handle_ids_command,
        "tree": handle_tree_command,
    }

    if command in commands:
        setup_logging(get_log_level())
        return commands[command](rest_args)

    logger.error(f"Unknown command: {command}")
    show_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
