"""CLI entry point for flowpath.

Provides command-line interface for:
- Printing the visualization graph of a flow file
- Resolving a node path in a flow file
- Validating configuration files
- Listing available mapper plugins
- Displaying version information

Usage:
    flowpath graph -d flow.yaml
    flowpath graph -d flow.yaml -p route.from.steps.1.choice --json
    flowpath resolve -d flow.yaml route.from.uri
    flowpath validate -c flowpath.yaml
    flowpath plugins list
    flowpath version
"""

import argparse
import logging
import sys
from typing import List, Optional

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="flowpath",
        description="Path-addressable integration flow documents",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version and exit",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        default=None,
        help="Logging level (default: WARNING, or the config's level)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # graph command
    graph_parser = subparsers.add_parser(
        "graph",
        help="Print the visualization graph of a flow file",
    )
    graph_parser.add_argument(
        "-d", "--document",
        required=True,
        help="Path to the YAML flow file",
    )
    graph_parser.add_argument(
        "-p", "--path",
        help="Only build the subtree at this node path",
    )
    graph_parser.add_argument(
        "-c", "--config",
        help="Path to YAML configuration file",
    )
    graph_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the graph as JSON",
    )
    graph_parser.add_argument(
        "--plugins",
        action="store_true",
        help="Load node mapper plugins",
    )

    # resolve command
    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Print the value at a node path",
    )
    resolve_parser.add_argument(
        "-d", "--document",
        required=True,
        help="Path to the YAML flow file",
    )
    resolve_parser.add_argument(
        "path",
        help="Dot-joined node path, e.g. route.from.steps.0.log",
    )

    # validate command
    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate a configuration file",
    )
    validate_parser.add_argument(
        "-c", "--config",
        required=True,
        help="Path to YAML configuration file",
    )
    validate_parser.add_argument(
        "--check-plugins",
        action="store_true",
        help="Also verify that mapper plugins load",
    )

    # plugins command
    plugins_parser = subparsers.add_parser(
        "plugins",
        help="Manage plugins",
    )
    plugins_subparsers = plugins_parser.add_subparsers(
        dest="plugins_command",
        help="Plugin commands",
    )
    plugins_subparsers.add_parser(
        "list",
        help="List available mapper plugins",
    )

    # version command
    subparsers.add_parser(
        "version",
        help="Show version information",
    )

    return parser


def configure_logging(level: Optional[str], config_path: Optional[str] = None) -> None:
    """Configure stdlib logging from the flag, else the config file."""
    log_format = LOG_FORMAT
    if level is None and config_path:
        from flowpath.config import load_yaml_config, ConfigLoadError
        try:
            logging_config = load_yaml_config(config_path).logging
            level, log_format = logging_config.level, logging_config.format
        except (ConfigLoadError, FileNotFoundError):
            # Reported by the command itself
            pass
    logging.basicConfig(level=level or "WARNING", format=log_format)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level, getattr(args, "config", None))

    # Handle --version flag at top level
    if args.version:
        from flowpath.cli.commands.version import cmd_version
        return cmd_version()

    if args.command is None:
        parser.print_help()
        return 0

    # Dispatch to command handlers
    if args.command == "graph":
        from flowpath.cli.commands.graph import cmd_graph
        return cmd_graph(
            document_path=args.document,
            path=args.path,
            config_path=args.config,
            as_json=args.json,
            plugins=args.plugins,
        )

    elif args.command == "resolve":
        from flowpath.cli.commands.resolve import cmd_resolve
        return cmd_resolve(
            document_path=args.document,
            path=args.path,
        )

    elif args.command == "validate":
        from flowpath.cli.commands.validate import cmd_validate
        return cmd_validate(
            config_path=args.config,
            check_plugins=args.check_plugins,
        )

    elif args.command == "plugins":
        if args.plugins_command == "list":
            from flowpath.cli.commands.plugins import cmd_plugins_list
            return cmd_plugins_list()
        else:
            # Show plugins help
            parser.parse_args(["plugins", "--help"])
            return 0

    elif args.command == "version":
        from flowpath.cli.commands.version import cmd_version
        return cmd_version()

    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
