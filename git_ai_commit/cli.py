#!/usr/bin/env python3
"""
git-ai-commit CLI Interface

Usage:
    git-ai-commit [options]
    git-ai-commit config [options]

Options:
    --provider NAME       LLM provider: openai|anthropic|gemini
    --dry-run             Show what would be done without making changes
    --verbose             Show detailed logging
    --version             Show version information

Config options:
    --show                Show current configuration
    --set-provider NAME   Set default provider
    --set-verbose BOOL    Set default verbose mode (true|false)
    --set-dry-run BOOL    Set default dry-run mode (true|false)
    --global              Save to ~/.git-ai-commit.json (default)
    --local               Save to ./.git-ai-commit.json

Environment:
    OPENAI_API_KEY, ANTHROPIC_API_KEY, GEMINI_API_KEY (or GOOGLE_API_KEY)
"""

import argparse
import sys
from typing import List, Optional

from rich.markup import escape

from . import __version__
from .config import ConfigManager, Provider, parse_bool
from .utils import configure_logging, console, err_console
from .workflow import GitAICommit

EPILOG = """examples:
  git-ai-commit                                   use configured defaults
  git-ai-commit --provider anthropic              override provider
  git-ai-commit --dry-run --verbose               preview with details
  git-ai-commit config --set-provider gemini --local
  git-ai-commit config --show

configuration priority: CLI flags > ./.git-ai-commit.json > ~/.git-ai-commit.json > defaults
"""


def add_workflow_arguments(parser: argparse.ArgumentParser) -> None:
    """Flags of the default action. Unset flags stay None so config files apply."""
    parser.add_argument(
        "--provider",
        metavar="NAME",
        default=None,
        help=f"LLM provider: {'|'.join(Provider.names())}",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=None,
        help="Show what would be done without making changes",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=None,
        help="Show detailed logging",
    )


def add_config_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--show", action="store_true", help="Show current configuration")
    parser.add_argument(
        "--set-provider",
        metavar="NAME",
        help=f"Set default provider ({'|'.join(Provider.names())})",
    )
    parser.add_argument("--set-verbose", metavar="BOOL", help="Set default verbose mode (true|false)")
    parser.add_argument("--set-dry-run", metavar="BOOL", help="Set default dry-run mode (true|false)")
    parser.add_argument(
        "--global",
        dest="global_scope",
        action="store_true",
        help="Save to global config (~/.git-ai-commit.json)",
    )
    parser.add_argument(
        "--local",
        dest="local_scope",
        action="store_true",
        help="Save to local config (./.git-ai-commit.json)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="git-ai-commit",
        description="Automate git workflow with AI-generated branch names and commit messages",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Show version information",
    )
    add_workflow_arguments(parser)

    subparsers = parser.add_subparsers(dest="command")
    config_parser = subparsers.add_parser("config", help="Manage configuration settings")
    add_config_arguments(config_parser)

    return parser


def run_workflow(args: argparse.Namespace, manager: ConfigManager) -> int:
    options = manager.resolve_options(
        provider=args.provider,
        dry_run=args.dry_run,
        verbose=args.verbose,
    )
    configure_logging(options.verbose)
    GitAICommit(options).execute()
    return 0


def run_config(args: argparse.Namespace, manager: ConfigManager) -> int:
    """Show the configuration, or apply the --set-* flags and save it."""
    setters = (args.set_provider, args.set_verbose, args.set_dry_run)
    if args.show or all(value is None for value in setters):
        manager.show()
        return 0

    config = manager.load()
    if args.set_provider is not None:
        config.provider = Provider.parse(args.set_provider).value
    if args.set_verbose is not None:
        config.verbose = parse_bool(args.set_verbose)
    if args.set_dry_run is not None:
        config.dry_run = parse_bool(args.set_dry_run)

    manager.save(config, "local" if args.local_scope else "global")
    console.print("\n[bold green]✨ Configuration updated![/bold green]\n")
    manager.show()
    return 0


def main(argv: Optional[List[str]] = None, manager: Optional[ConfigManager] = None) -> int:
    """Parse arguments and dispatch.

    Returns:
        int: 0 on success or when there is nothing to commit, 1 on any error
        including usage errors, 130 when interrupted.
    """
    parser = create_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # argparse exits with 2 on usage errors, and 0 after --help or --version
        return 1 if e.code else 0
    manager = manager or ConfigManager()

    try:
        if args.command == "config":
            return run_config(args, manager)
        return run_workflow(args, manager)
    except KeyboardInterrupt:
        err_console.print("\nOperation cancelled by user")
        return 130
    except Exception as e:  # noqa: BLE001
        err_console.print(f"[bold red]\\[ERROR][/bold red] {escape(str(e))}")
        return 1


def main_cli() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    main_cli()
