"""CLI interface for prio."""

from __future__ import annotations

import logging
import shlex
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from prio import __version__
from prio.config import CONFIG_FILE, PrioConfig
from prio.models import Filter, Priority
from prio.session import Session

console = Console()

PRIORITY_CHOICES = [p.value for p in Priority]
FILTER_CHOICES = [f.value for f in Filter]

PRIORITY_STYLES = {
    Priority.URGENT: "red",
    Priority.MEDIUM: "yellow",
    Priority.LOW: "green",
}

SHELL_HELP = """\
  [cyan]add TEXT[/cyan]          Add a task with the current draft priority
  [cyan]prio LEVEL[/cyan]        Set the draft priority (Urgent, Medium, Low)
  [cyan]ls[/cyan]                Show tasks for the active filter
  [cyan]filter NAME[/cyan]       Filter by All, Urgent, Medium or Low
  [cyan]sel ID[/cyan]            Toggle selection of a task
  [cyan]clear[/cyan]             Clear the selection
  [cyan]finish[/cyan]            Remove all selected tasks
  [cyan]rm ID[/cyan]             Remove one task
  [cyan]quit[/cyan]              Leave the shell"""


def _setup_logging(level: str) -> None:
    """Route prio's log records through rich on stderr."""
    logger = logging.getLogger("prio")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="prio")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=f"Config file (default: {CONFIG_FILE})",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def main(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """prio - Priority-tagged task lists.

    \b
    Examples:
      prio add "Buy milk" -p Urgent
      prio list -f Urgent
      prio done 1736500000000 1736500000001
      prio shell
    """
    config = PrioConfig.load(config_path)
    _setup_logging("DEBUG" if verbose else config.logging.level)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


def _open_session(ctx: click.Context) -> Session:
    return Session.open(ctx.obj["config"])


@main.command()
@click.argument("text")
@click.option(
    "--priority",
    "-p",
    type=click.Choice(PRIORITY_CHOICES, case_sensitive=False),
    default=None,
    help="Priority level (default: Medium)",
)
@click.pass_context
def add(ctx: click.Context, text: str, priority: str | None) -> None:
    """Add a task."""
    session = _open_session(ctx)
    task = session.create(text, priority)

    if task is None:
        console.print("[yellow]Nothing to add:[/yellow] task text is empty.")
        return

    style = PRIORITY_STYLES[task.priority]
    console.print(
        f"[green]Added[/green] [{style}]{task.priority.value}[/{style}] {escape(task.text)} "
        f"[dim]({task.id})[/dim]"
    )


@main.command("list")
@click.option(
    "--filter",
    "-f",
    "filter_name",
    type=click.Choice(FILTER_CHOICES, case_sensitive=False),
    default=Filter.ALL.value,
    help="Only show tasks with this priority",
)
@click.pass_context
def list_command(ctx: click.Context, filter_name: str) -> None:
    """List tasks, newest first."""
    session = _open_session(ctx)
    session.set_filter(filter_name)
    _render(session)


@main.command()
@click.argument("task_id", type=int)
@click.pass_context
def rm(ctx: click.Context, task_id: int) -> None:
    """Remove a task."""
    session = _open_session(ctx)
    if session.remove(task_id):
        console.print(f"[green]Removed[/green] {task_id}")
    else:
        console.print(f"[yellow]No task with id[/yellow] {task_id}")


@main.command()
@click.argument("task_ids", type=int, nargs=-1, required=True)
@click.pass_context
def done(ctx: click.Context, task_ids: tuple[int, ...]) -> None:
    """Finish several tasks at once."""
    session = _open_session(ctx)
    for task_id in set(task_ids):
        session.toggle_selection(task_id)

    removed = session.finish_selected()
    console.print(f"[green]Finished {removed} task(s)[/green]")


@main.command()
@click.pass_context
def counts(ctx: click.Context) -> None:
    """Show task totals per priority."""
    session = _open_session(ctx)
    console.print(_counts_line(session))


@main.command("config")
@click.pass_context
def config_command(ctx: click.Context) -> None:
    """Show the effective configuration."""
    config: PrioConfig = ctx.obj["config"]

    table = Table(title="Configuration", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("storage.path", config.storage.path)
    table.add_row("storage.key", config.storage.key)
    table.add_row("defaults.priority", config.defaults.priority.value)
    table.add_row("ids.monotonic", str(config.ids.monotonic).lower())
    table.add_row("logging.level", config.logging.level)
    console.print(table)


@main.command()
@click.pass_context
def shell(ctx: click.Context) -> None:
    """Interactive session with multi-select.

    The selection and filter last until you quit; tasks are saved
    after every change.
    """
    session = _open_session(ctx)
    console.print(Panel.fit("[bold]prio shell[/bold] - type [cyan]help[/cyan]", title="prio"))
    _render(session)

    while True:
        try:
            line = click.prompt(
                _shell_prompt(session), default="", show_default=False, prompt_suffix="> "
            )
        except click.Abort:
            break

        try:
            words = shlex.split(line)
        except ValueError as e:
            console.print(f"[red]{e}[/red]")
            continue

        if not words:
            continue

        command, args = words[0].lower(), words[1:]
        if command in ("quit", "exit", "q"):
            break
        _run_shell_command(session, command, args)


def _shell_prompt(session: Session) -> str:
    parts = [session.draft_priority.value]
    if session.can_finish_selection():
        parts.append(f"{session.selection_size()} selected")
    return f"prio ({', '.join(parts)})"


def _run_shell_command(session: Session, command: str, args: list[str]) -> None:
    """Dispatch one shell command against the session."""
    if command == "help":
        console.print(SHELL_HELP)
    elif command == "add":
        session.draft_text = " ".join(args)
        task = session.submit()
        if task is None:
            console.print("[yellow]Nothing to add:[/yellow] task text is empty.")
        else:
            _render(session)
    elif command == "prio":
        priority = _parse_choice(Priority, args)
        if priority is not None:
            session.draft_priority = priority
    elif command == "ls":
        _render(session)
    elif command == "filter":
        value = _parse_choice(Filter, args)
        if value is not None:
            session.set_filter(value)
            _render(session)
    elif command == "sel":
        task_id = _parse_id(args)
        if task_id is not None:
            session.toggle_selection(task_id)
            _render(session)
    elif command == "clear":
        session.clear_selection()
        _render(session)
    elif command == "finish":
        if not session.can_finish_selection():
            console.print("[yellow]Nothing selected.[/yellow]")
            return
        removed = session.finish_selected()
        console.print(f"[green]Finished {removed} task(s)[/green]")
        _render(session)
    elif command == "rm":
        task_id = _parse_id(args)
        if task_id is not None:
            if not session.remove(task_id):
                console.print(f"[yellow]No task with id[/yellow] {task_id}")
            _render(session)
    else:
        console.print(f"[red]Unknown command:[/red] {escape(command)} (try [cyan]help[/cyan])")


def _parse_choice(
    enum_type: type[Priority] | type[Filter], args: list[str]
) -> Priority | Filter | None:
    names = ", ".join(member.value for member in enum_type)
    if len(args) != 1:
        console.print(f"[red]Expected one of:[/red] {names}")
        return None
    try:
        return enum_type(args[0])
    except ValueError:
        console.print(f"[red]Expected one of:[/red] {names}")
        return None


def _parse_id(args: list[str]) -> int | None:
    if len(args) != 1 or not args[0].isdecimal():
        console.print("[red]Expected a task id[/red]")
        return None
    return int(args[0])


def _counts_line(session: Session) -> str:
    counts = session.counts()
    labels = []
    for value in Filter:
        label = f"{value.value}({counts.for_filter(value)})"
        if value is session.filter:
            label = f"[bold cyan]{label}[/bold cyan]"
        labels.append(label)
    return "  ".join(labels)


def _render(session: Session) -> None:
    """Print the counts bar and the filtered task table."""
    console.print(_counts_line(session))

    tasks = session.filtered_view()
    if not tasks:
        console.print("[dim]No tasks for this filter[/dim]")
        return

    table = Table(show_header=True)
    table.add_column("", width=1)
    table.add_column("ID", style="dim")
    table.add_column("Priority")
    table.add_column("Task", style="white")

    for task in tasks:
        mark = "[green]✓[/green]" if session.is_selected(task.id) else ""
        style = PRIORITY_STYLES[task.priority]
        priority = f"[{style}]{task.priority.value}[/{style}]"
        table.add_row(mark, str(task.id), priority, escape(task.text))

    console.print(table)

    if session.can_finish_selection():
        console.print(
            f"[cyan]{session.selection_size()} selected[/cyan] - [cyan]finish[/cyan] to remove"
        )
