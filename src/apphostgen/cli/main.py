# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the AppHostGen command-line interface."""

import argparse
import logging
import sys
from pathlib import Path

from apphostgen.compiler.build import compile_topology
from apphostgen.schema.registry import build_default_registry
from apphostgen.validation.checks import Severity, validate
from apphostgen.workspace.config import (
    CONFIG_FILE_NAME,
    DEFAULT_CONFIG_TEXT,
    ProjectConfig,
    ProjectConfigError,
    load_project_config,
)
from apphostgen.workspace.document import TopologyDocumentError, dump_topology, load_topology

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the AppHostGen CLI."""
    parser = argparse.ArgumentParser(
        prog="apphostgen",
        description="AppHostGen: compile resource topologies into Aspire AppHost code",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # init subcommand
    init_parser = subparsers.add_parser(
        "init",
        help="Initialize a new AppHostGen project",
        description=f"Write a default {CONFIG_FILE_NAME} into a directory.",
    )
    init_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory to initialize the project in (default: current directory)",
    )

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Validate a topology document",
        description="Run all validation rules over a topology document and report the issues.",
    )
    check_parser.add_argument("topology", help="Path to the topology document")

    # generate subcommand
    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate the AppHost and companion files",
        description=(
            "Compile a topology document into AppHost.cs, appsettings.json, "
            "a Dockerfile and a container apps manifest."
        ),
    )
    generate_parser.add_argument("topology", help="Path to the topology document")
    generate_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output directory (default: the configured output-directory)",
    )
    generate_parser.add_argument(
        "--config",
        default=None,
        help=f"Project configuration file (default: ./{CONFIG_FILE_NAME} if present)",
    )

    # import subcommand
    import_parser = subparsers.add_parser(
        "import",
        help="Reconstruct a topology from existing files",
        description="Reconstruct a topology document from an AppHost, compose file or Dockerfile.",
    )
    import_parser.add_argument("format", choices=["apphost", "compose", "dockerfile"], help="Input format")
    import_parser.add_argument("file", help="File to import")
    import_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write the topology document here instead of standard output",
    )

    # templates subcommand
    subparsers.add_parser(
        "templates",
        help="List the built-in templates",
        description="List the built-in starter topologies.",
    )

    # new subcommand
    new_parser = subparsers.add_parser(
        "new",
        help="Create a topology document from a template",
        description="Write the topology document of a built-in template.",
    )
    new_parser.add_argument("template", help="Template id (see 'apphostgen templates')")
    new_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write the topology document here instead of standard output",
    )

    args = parser.parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################

_APPHOST_FILE = "AppHost.cs"
_SETTINGS_FILE = "appsettings.json"
_BUILD_FILE = "Dockerfile"
_MANIFEST_FILE = "manifest.json"


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "init":
        return _cmd_init(args)
    if args.command == "check":
        return _cmd_check(args)
    if args.command == "generate":
        return _cmd_generate(args)
    if args.command == "import":
        return _cmd_import(args)
    if args.command == "templates":
        return _cmd_templates(args)
    if args.command == "new":
        return _cmd_new(args)
    return 0


def _cmd_init(args: argparse.Namespace) -> int:
    """Handle the init subcommand."""
    directory = Path(args.directory).resolve()

    if not directory.exists():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return 1

    config_file = directory / CONFIG_FILE_NAME

    if config_file.exists():
        print(
            f"Error: project already exists at '{config_file}'.",
            file=sys.stderr,
        )
        return 1

    config_file.write_text(DEFAULT_CONFIG_TEXT, encoding="utf-8")
    print(f"Initialized AppHostGen project at '{config_file}'.")
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the check subcommand."""
    try:
        topology = load_topology(Path(args.topology))
    except TopologyDocumentError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    result = validate(topology, build_default_registry())
    for issue in result.issues:
        line = f"{issue.severity.value.capitalize()} [{issue.category.value}]: {issue.message}"
        print(line, file=sys.stderr if issue.severity is Severity.ERROR else sys.stdout)

    if not result.issues:
        print("No issues found.")
        return 0

    print(f"{result.error_count} error(s), {result.warning_count} warning(s), {result.info_count} info(s).")
    return 0 if result.is_valid else 1


def _cmd_generate(args: argparse.Namespace) -> int:
    """Handle the generate subcommand."""
    try:
        config = _load_config(args.config)
        topology = load_topology(Path(args.topology))
    except (ProjectConfigError, TopologyDocumentError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    output_dir = Path(args.output or config.output_directory)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        print(f"Error: cannot create output directory '{output_dir}': {exc}", file=sys.stderr)
        return 1

    registry = build_default_registry()
    artifacts = compile_topology(topology, registry, config.to_render_options())
    (output_dir / _APPHOST_FILE).write_text(artifacts.apphost, encoding="utf-8")

    if artifacts.is_blocked:
        print("Error: code generation blocked by validation errors:", file=sys.stderr)
        for message in artifacts.blocking_errors:
            print(f"  - {message}", file=sys.stderr)
        return 1

    (output_dir / _SETTINGS_FILE).write_text(artifacts.settings, encoding="utf-8")
    (output_dir / _BUILD_FILE).write_text(artifacts.build_file, encoding="utf-8")
    (output_dir / _MANIFEST_FILE).write_text(artifacts.manifest, encoding="utf-8")
    print(f"Generated {len(topology.instances)} resource(s) into '{output_dir}'.")

    if artifacts.required_packages:
        print("Required packages:")
        for package in artifacts.required_packages:
            print(f"  {package}")
    print("Deployment commands:")
    for command in artifacts.deployment_commands:
        print(f"  {command}")
    return 0


def _cmd_import(args: argparse.Namespace) -> int:
    """Handle the import subcommand."""
    from apphostgen.parser.apphost import AppHostParser
    from apphostgen.parser.base import TopologyParser
    from apphostgen.parser.compose import ComposeParser
    from apphostgen.parser.dockerfile import DockerfileParser

    source = Path(args.file)
    try:
        text = source.read_text(encoding="utf-8")
    except OSError as exc:
        print(f"Error: cannot read '{source}': {exc}", file=sys.stderr)
        return 1

    if args.format == "apphost":
        parser: TopologyParser = AppHostParser(build_default_registry())
    elif args.format == "compose":
        parser = ComposeParser(build_default_registry())
    else:
        parser = DockerfileParser(source.name)

    result = parser.parse(text)
    for warning in result.warnings:
        print(f"Warning: {warning}", file=sys.stderr)
    print(
        f"Imported {len(result.topology.instances)} resource(s) and "
        f"{len(result.topology.connections)} connection(s) from '{source}'.",
        file=sys.stderr,
    )
    return _emit_document(dump_topology(result.topology), args.output)


def _cmd_templates(args: argparse.Namespace) -> int:
    """Handle the templates subcommand."""
    from apphostgen.templates import list_templates

    for template in list_templates():
        print(f"{template.id:<22} {template.name} [{template.category}]")
        print(f"{'':<22} {template.description}")
    return 0


def _cmd_new(args: argparse.Namespace) -> int:
    """Handle the new subcommand."""
    from apphostgen.templates import UnknownTemplateError, load_template

    try:
        template = load_template(args.template)
    except UnknownTemplateError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return _emit_document(dump_topology(template.topology), args.output)


def _load_config(config_path: str | None) -> ProjectConfig:
    """Load the explicit config file, else ./.apphostgen.yaml if present, else defaults."""
    if config_path is not None:
        return load_project_config(Path(config_path))
    default_path = Path.cwd() / CONFIG_FILE_NAME
    if default_path.exists():
        return load_project_config(default_path)
    return ProjectConfig()


def _emit_document(text: str, output: str | None) -> int:
    """Write a topology document to *output*, or to stdout when no path is given."""
    if output is None:
        sys.stdout.write(text)
        return 0
    try:
        Path(output).write_text(text, encoding="utf-8")
    except OSError as exc:
        print(f"Error: cannot write '{output}': {exc}", file=sys.stderr)
        return 1
    print(f"Wrote topology document to '{output}'.", file=sys.stderr)
    return 0
