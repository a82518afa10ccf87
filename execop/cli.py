"""CLI interface for execop"""

import typer
from typing import List, Optional
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from execop.operation import Reporter

app = typer.Typer(help="execop - run a command with a timeout and a failure policy")
config_app = typer.Typer(help="Configuration commands")

app.add_typer(config_app, name="config")

console = Console()


class ConsoleReporter(Reporter):
    """Reporter that prints to the rich console"""

    def info(self, message: str):
        console.print(escape(message))

    def error(self, message: str):
        console.print(f"[red]{escape(message)}[/red]")


@app.command("run")
def run(
    command: List[str] = typer.Argument(..., help="Executable followed by its arguments (use -- before options of the command)"),
    work_dir: Optional[str] = typer.Option(None, "--work-dir", help="Working directory (defaults to the current directory)"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Seconds before the process is killed (default: 30)"),
    fail: Optional[List[str]] = typer.Option(None, "--fail", help="Failure mode: exit, stderr, stdout, output, normal, all, none (repeatable)"),
    fail_on_exit: bool = typer.Option(True, "--fail-on-exit/--no-fail-on-exit", help="Legacy switch; --no-fail-on-exit never fails on exit value or output"),
    silent: bool = typer.Option(False, "--silent", help="Suppress output and diagnostics"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging")
):
    """
    Run a command once

    Examples:
        execop run -- python3 -c "print('hello')"
        execop run --timeout 5 --fail all -- ./build.sh --release
    """
    from execop.config import Project
    from execop.errors import ConfigurationError, ExecError
    from execop.operation import ExecOperation
    from execop.utils import setup_logging

    setup_logging(verbose=verbose)

    operation = ExecOperation(reporter=ConsoleReporter()).from_project(Project()).command(command)

    try:
        if work_dir:
            operation.work_dir(work_dir)
        if timeout is not None:
            operation.timeout(timeout)
        if not fail_on_exit:
            operation.fail_on_exit(False)
        if fail:
            operation.fail(*fail)
    except ConfigurationError as e:
        console.print(f"[red]Error: {escape(e.message)}[/red]")
        raise typer.Exit(1)

    try:
        operation.silent(silent).execute()
    except ExecError:
        # Already reported unless silenced
        raise typer.Exit(1)


@app.command("platform")
def show_platform(
    os_name: Optional[str] = typer.Argument(None, help="OS name to classify (defaults to this machine)")
):
    """Classify an OS name into its platform family"""
    from execop.platforms import FAMILY_PREDICATES, classify, current_os_name, is_unix

    name = os_name if os_name is not None else current_os_name()
    family = classify(name)

    console.print(f"\n[bold]OS name:[/bold] {escape(name) or '(empty)'}")
    console.print(f"[bold]Platform:[/bold] {family.value}\n")

    table = Table(title="Predicates")
    table.add_column("Predicate", style="cyan")
    table.add_column("Value", justify="right")

    for predicate_name, predicate in list(FAMILY_PREDICATES.items()) + [("is_unix", is_unix)]:
        value = predicate(name)
        table.add_row(predicate_name, "[green]true[/green]" if value else "[dim]false[/dim]")

    console.print(table)


@config_app.command("list")
def config_list():
    """Show effective configuration values"""
    from execop.config import DEFAULTS, ENV_PREFIX, get_config

    table = Table(title="Configuration")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")
    table.add_column("Environment", style="dim")

    for key in DEFAULTS:
        table.add_row(key, get_config(key), ENV_PREFIX + key.upper())

    console.print(table)


@config_app.command("get")
def config_get(
    key: str = typer.Argument(..., help="Config key to retrieve (supports both hyphen and underscore formats)")
):
    """
    Get configuration value

    Examples:
        execop config get timeout
        execop config get drain-grace
    """
    from execop.config import DEFAULTS, get_config, normalize_config_key

    normalized_key = normalize_config_key(key)

    if normalized_key not in DEFAULTS:
        console.print(f"[red]Error: Invalid config key. Valid keys: {', '.join(DEFAULTS)}[/red]")
        raise typer.Exit(1)

    console.print(f"{normalized_key} = {get_config(normalized_key)}")


if __name__ == "__main__":
    app()
