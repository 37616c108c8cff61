"""omnihook CLI Entrypoint.

Main entry point for omnihook, the global git hook manager.
"""

from __future__ import annotations

import argparse
from collections.abc import Callable
import logging
from pathlib import Path
import sys

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm
from rich.table import Table

from omnihook.core.cache import SourceCache
from omnihook.core.config import (
    CACHE_FILE,
    CONFIG_FILE,
    OmnihookConfig,
    load_config,
    setup_logging,
)
from omnihook.core.error_handler import ErrorHandler
from omnihook.core.hooks.manager import HookRunManager
from omnihook.core.hooks.types import InstallError, OmnihookError, RunRequest, RunScope
from omnihook.core.installer import HookInstaller
from omnihook.setup.configure import configure

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

RUN_FAILED = "Error: one or more hook checks failed"

CommandHandler = Callable[[argparse.Namespace, OmnihookConfig, Console], int]


def _category_name(value: str) -> str:
    if not value.strip():
        raise argparse.ArgumentTypeError("hook type must not be empty")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="omnihook",
        description="OmniHook - A Global Git Hook Manager",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  omnihook configure                         # Set up global git hooks
  omnihook install --file hooks.yml          # Install hooks from a file
  omnihook run --type pre-commit             # Run pre-commit hooks
  omnihook disable --id lint --type pre-commit
        """,
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Config file (default is {CONFIG_FILE})",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Enable verbose debug output"
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    run = subparsers.add_parser("run", help="Run installed hooks in parallel")
    scope = run.add_mutually_exclusive_group(required=True)
    scope.add_argument("--all", action="store_true", help="Run all installed hooks")
    scope.add_argument(
        "--type",
        type=_category_name,
        help="Run all installed hooks of a specific type",
    )
    run.add_argument(
        "--commit-msg", default=None, help="Commit message passed from git commit"
    )
    run.add_argument(
        "--no-progress", action="store_true", help="Do not draw per-hook progress"
    )
    run.set_defaults(handler=_cmd_run)

    configure_cmd = subparsers.add_parser(
        "configure", help="Set up the global hooks directory and git shims"
    )
    configure_cmd.add_argument(
        "--reset", action="store_true", help="Reset the omnihook configuration"
    )
    configure_cmd.add_argument(
        "--hooks-dir", type=Path, default=None, help="Directory to install hooks into"
    )
    configure_cmd.set_defaults(handler=_cmd_configure)

    install = subparsers.add_parser(
        "install", help="Install hooks from a git repository or file"
    )
    source = install.add_mutually_exclusive_group(required=True)
    source.add_argument("--url", help="Git repository URL of the hooks")
    source.add_argument(
        "--file", type=Path, help="Path to the local hook configuration file"
    )
    install.set_defaults(handler=_cmd_install)

    uninstall = subparsers.add_parser(
        "uninstall", help="Uninstall a specific hook, a type of hooks or all hooks"
    )
    uninstall.add_argument("--id", help="ID of the hook to uninstall")
    uninstall.add_argument("--type", help="Type of the hooks to uninstall")
    uninstall.add_argument(
        "--all", action="store_true", help="Remove all installed hooks"
    )
    uninstall.add_argument(
        "-y", "--yes", action="store_true", help="Do not ask for confirmation"
    )
    uninstall.set_defaults(handler=_cmd_uninstall)

    for name, verb in (("enable", "Enable a disabled"), ("disable", "Disable a")):
        toggle = subparsers.add_parser(name, help=f"{verb} hook")
        toggle.add_argument("--id", required=True, help=f"ID of the hook to {name}")
        toggle.add_argument("--type", required=True, help=f"Type of the hook to {name}")
        toggle.set_defaults(handler=_cmd_toggle)

    list_cmd = subparsers.add_parser("list", help="List installed hooks")
    list_cmd.add_argument("--type", default=None, help="Only list hooks of this type")
    list_cmd.set_defaults(handler=_cmd_list)

    update = subparsers.add_parser("update", help="Update installed hooks")
    update_source = update.add_mutually_exclusive_group()
    update_source.add_argument("--url", help="Update hooks from a specific source URL")
    update_source.add_argument("--all", action="store_true", help="Update all sources")
    update.set_defaults(handler=_cmd_update)

    return parser


def _installer(args: argparse.Namespace, config: OmnihookConfig) -> HookInstaller:
    cache_file = args.config.parent / "cache.yaml" if args.config else CACHE_FILE
    cache = SourceCache(cache_file)
    return HookInstaller(config.hooks_dir, cache=cache)


def _cmd_run(args: argparse.Namespace, config: OmnihookConfig, console: Console) -> int:
    scope = RunScope.all() if args.all else RunScope.for_category(args.type)
    request = RunRequest(scope=scope, commit_message=args.commit_msg or None)
    manager = HookRunManager(config, console=console, show_progress=not args.no_progress)

    report = manager.run_sync(request)
    if not report.succeeded:
        console.print(f"[red]{RUN_FAILED}[/red]")
        return EXIT_FAILURE
    return EXIT_SUCCESS


def _cmd_configure(
    args: argparse.Namespace, config: OmnihookConfig, console: Console
) -> int:
    configure(
        reset=args.reset,
        config_path=args.config,
        hooks_dir=args.hooks_dir,
        console=console,
    )
    return EXIT_SUCCESS


def _cmd_install(
    args: argparse.Namespace, config: OmnihookConfig, console: Console
) -> int:
    installer = _installer(args, config)
    if args.url:
        installed = installer.install_from_url(args.url)
    else:
        installed = installer.install_from_file(args.file)

    for hook in installed:
        state = "" if hook.enabled else " [dim](disabled)[/dim]"
        console.print(f"Installed hook '{escape(hook.key)}'{state}")
    return EXIT_SUCCESS


def _confirm(message: str, args: argparse.Namespace, console: Console) -> bool:
    if args.yes:
        return True
    return Confirm.ask(message, console=console, default=False)


def _cmd_uninstall(
    args: argparse.Namespace, config: OmnihookConfig, console: Console
) -> int:
    installer = _installer(args, config)

    if args.all:
        if not installer.list_hooks():
            console.print("No hooks installed.")
            return EXIT_SUCCESS
        if not _confirm(
            "Are you sure you want to remove ALL hooks? This action cannot be undone.",
            args,
            console,
        ):
            console.print("Uninstall cancelled.")
            return EXIT_SUCCESS
        for name in installer.uninstall_all():
            console.print(f"Removed '{escape(name)}'")
        console.print("All hooks have been removed.")
        return EXIT_SUCCESS

    if args.id and not args.type:
        raise InstallError("--type is required when --id is specified")
    if not args.type:
        raise InstallError("either --type, --id (with --type), or --all must be specified")

    if args.id:
        if not _confirm(
            f"Are you sure you want to remove hook '{args.id}' of type '{args.type}'?",
            args,
            console,
        ):
            console.print("Uninstall cancelled.")
            return EXIT_SUCCESS
        installer.uninstall(args.type, args.id)
        console.print(f"Hook '{escape(args.id)}' of type '{escape(args.type)}' has been removed.")
        return EXIT_SUCCESS

    if not _confirm(
        f"Are you sure you want to remove all hooks of type '{args.type}'?",
        args,
        console,
    ):
        console.print("Uninstall cancelled.")
        return EXIT_SUCCESS
    installer.uninstall_category(args.type)
    console.print(f"All hooks of type '{escape(args.type)}' have been removed.")
    return EXIT_SUCCESS


def _cmd_toggle(
    args: argparse.Namespace, config: OmnihookConfig, console: Console
) -> int:
    installer = _installer(args, config)
    hook_id = escape(args.id)
    if args.command == "enable":
        changed = installer.enable(args.type, args.id)
        message = "has been enabled" if changed else "is already enabled"
    else:
        changed = installer.disable(args.type, args.id)
        message = "has been disabled" if changed else "is already disabled"
    console.print(f"Hook '{hook_id}' {message}.")
    return EXIT_SUCCESS


def _cmd_list(args: argparse.Namespace, config: OmnihookConfig, console: Console) -> int:
    hooks = _installer(args, config).list_hooks(args.type)
    if not hooks:
        console.print("No hooks installed.")
        return EXIT_SUCCESS

    table = Table(title="Installed hooks")
    table.add_column("Type", style="cyan")
    table.add_column("ID")
    table.add_column("Status")
    for hook in hooks:
        status = "[green]enabled[/green]" if hook.enabled else "[dim]disabled[/dim]"
        table.add_row(escape(hook.category), escape(hook.name), status)
    console.print(table)
    return EXIT_SUCCESS


def _cmd_update(
    args: argparse.Namespace, config: OmnihookConfig, console: Console
) -> int:
    installer = _installer(args, config)
    if args.url:
        sources = [args.url]
    else:
        sources = installer.cache.sources if installer.cache else []
        if not sources:
            raise InstallError("no sources to update, use --url instead")

    exit_code = EXIT_SUCCESS
    for source in sources:
        console.print(f"Updating hooks from: {escape(source)}")
        try:
            installed = installer.install_from_url(source)
        except OmnihookError as e:
            ErrorHandler.display_warning(str(e), context=f"Update from {source} failed")
            exit_code = EXIT_FAILURE
            continue
        console.print(f"Updated {len(installed)} hooks.")
    return exit_code


def main(argv: list[str] | None = None, console: Console | None = None) -> int:
    """Main entry point for omnihook.

    Returns:
        Process exit status: 0 on success, 1 when a command failed or
        any hook failed.
    """
    # Force UTF-8 encoding for stdout on Windows to support emojis
    if sys.platform == "win32" and hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8")

    args = build_parser().parse_args(argv)
    console = console or Console()

    try:
        config = load_config(config_path=args.config)
    except OmnihookError as e:
        setup_logging(verbose=args.verbose)
        ErrorHandler.display_error(e, context="Configuration")
        return EXIT_FAILURE

    setup_logging(config.log_level, verbose=args.verbose)
    handler: CommandHandler = args.handler

    try:
        return handler(args, config, console)
    except OmnihookError as e:
        ErrorHandler.display_error(
            e, context=args.command.capitalize(), show_traceback=args.verbose
        )
        return EXIT_FAILURE
    except KeyboardInterrupt:
        console.print("\n[dim]Interrupted[/dim]")
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
