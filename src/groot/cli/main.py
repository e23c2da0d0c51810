"""Main CLI entry point for Groot."""

import itertools
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from groot.constants import (
    ENV_LOG_FILE,
    ENV_REPO,
    EXIT_SYSTEM_ERROR,
    EXIT_USER_ERROR,
    GROOT_DIR,
    SHORT_HASH_LENGTH,
)
from groot.core import Repository, stage_file
from groot.core.history import STATUS_INITIAL, STATUS_NEW, FileDiff
from groot.diff import ADDED, REMOVED, diff_stats
from groot.errors import (
    AlreadyInitializedError,
    CommitNotFoundError,
    GrootError,
    NotARepositoryError,
    ObjectNotFoundError,
    StagingError,
)
from groot.utils.log_setup import setup_logging

console = Console()
app = typer.Typer(
    name="groot",
    help="A minimal local version control system",
    add_completion=False,
)

# Errors caused by user input; everything else is a system/data failure
USER_ERRORS = (
    CommitNotFoundError,
    NotARepositoryError,
    ObjectNotFoundError,
    StagingError,
)

SEGMENT_STYLES = {
    ADDED: ("++", "green"),
    REMOVED: ("--", "red"),
}


def _fail(error: GrootError) -> NoReturn:
    """Print an error and exit with the matching exit code."""
    console.print(f"[bold red]Error:[/bold red] {escape(str(error))}", style="red")
    exit_code = EXIT_USER_ERROR if isinstance(error, USER_ERRORS) else EXIT_SYSTEM_ERROR
    raise typer.Exit(exit_code)


def _open_repo(ctx: typer.Context) -> Repository:
    root = ctx.obj["root"]
    try:
        return Repository.open(root)
    except NotARepositoryError as e:
        console.print("[bold red]Error:[/bold red] Not a Groot repository", style="red")
        console.print(f"  No {GROOT_DIR}/ directory found in {root}", style="dim")
        console.print("\nRun [bold]groot init[/bold] to initialize a repository", style="yellow")
        raise typer.Exit(EXIT_USER_ERROR) from e


def _short(object_id: str) -> str:
    return object_id[:SHORT_HASH_LENGTH]


@app.callback()
def main_callback(
    ctx: typer.Context,
    repo: Optional[Path] = typer.Option(
        None,
        "--repo",
        "-C",
        envvar=ENV_REPO,
        help="Repository root (default: current directory)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        envvar=ENV_LOG_FILE,
        help="Append debug logs to this file",
    ),
) -> None:
    """A minimal local version control system."""
    setup_logging(is_verbose=verbose, log_file_path=log_file)
    ctx.obj = {"root": repo if repo is not None else Path.cwd()}


@app.command()
def version() -> None:
    """Show Groot version."""
    from groot import __version__
    typer.echo(f"Groot version {__version__}")


@app.command()
def init(
    ctx: typer.Context,
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress output except errors",
    ),
) -> None:
    """Initialize a Groot repository."""
    root = ctx.obj["root"]

    try:
        repo = Repository.init(root)
    except AlreadyInitializedError:
        if not quiet:
            console.print(f"[yellow]Already initialized the {GROOT_DIR} folder[/yellow]")
        return
    except GrootError as e:
        _fail(e)

    if not quiet:
        success_message = f"""[bold green]✓[/bold green] Initialized Groot repository

[dim]Repository root:[/dim] {escape(str(repo.root))}
[dim]Storage location:[/dim] {escape(str(repo.groot_dir))}

[bold]Next steps:[/bold]
  1. Stage a file: [cyan]groot add <file>[/cyan]
  2. Create a commit: [cyan]groot commit "Initial commit"[/cyan]
  3. Review history: [cyan]groot log[/cyan]
"""
        console.print(Panel(success_message, border_style="green", title="Groot Initialized"))


@app.command()
def add(
    ctx: typer.Context,
    paths: List[Path] = typer.Argument(..., help="Files to add"),
) -> None:
    """Add files to the staging area."""
    repo = _open_repo(ctx)

    errors = []
    for path in paths:
        try:
            entry = stage_file(repo.objects, repo.index, repo.root, path)
        except StagingError as e:
            errors.append(str(e))
            continue
        except GrootError as e:
            _fail(e)

        console.print(entry.content_id, highlight=False)
        console.print(f"[green]Added[/green] {escape(entry.path)}")

    if errors:
        console.print("\n[bold red]Errors:[/bold red]")
        for error in errors:
            console.print(f"  [red]x[/red] {escape(error)}")
        raise typer.Exit(EXIT_USER_ERROR)


@app.command()
def commit(
    ctx: typer.Context,
    message: Optional[str] = typer.Argument(None, help="Commit message"),
    message_option: Optional[str] = typer.Option(
        None,
        "--message",
        "-m",
        help="Commit message (alternative to the argument)",
    ),
) -> None:
    """Commit staged files as a snapshot."""
    message = message if message is not None else message_option
    if message is None:
        console.print("[bold red]Error:[/bold red] Commit message is required", style="red")
        console.print('  Use [bold]groot commit "your message"[/bold]', style="yellow")
        raise typer.Exit(EXIT_USER_ERROR)

    repo = _open_repo(ctx)

    try:
        new_commit = repo.commits.commit(message)
    except GrootError as e:
        _fail(e)

    console.print(f"[bold green]>[/bold green] Committed {new_commit.id}", highlight=False)
    console.print(f"  [dim]Files:[/dim]   {len(new_commit.files)}")
    parent = _short(new_commit.parent) if new_commit.parent else "(root commit)"
    console.print(f"  [dim]Parent:[/dim]  {parent}")


@app.command()
def log(
    ctx: typer.Context,
    max_count: Optional[int] = typer.Option(
        None,
        "--max-count",
        "-n",
        min=1,
        help="Limit number of commits to show",
    ),
    oneline: bool = typer.Option(
        False,
        "--oneline",
        help="Show each commit on a single line",
    ),
) -> None:
    """Show commit history, newest first."""
    repo = _open_repo(ctx)

    shown = 0
    try:
        for entry in itertools.islice(repo.history.history(), max_count):
            if oneline:
                first_line = entry.message.split("\n")[0]
                console.print(f"[yellow]{_short(entry.id)}[/yellow] {escape(first_line)}")
            else:
                if shown:
                    console.print()
                console.print(f"[bold yellow]commit {entry.id}[/bold yellow]")
                console.print(f"[bold]Date:[/bold]   {entry.timestamp}")
                console.print()
                for line in entry.message.split("\n"):
                    console.print(f"    {escape(line)}")
            shown += 1
    except GrootError as e:
        _fail(e)

    if not shown:
        console.print("[dim]No commits yet[/dim]")


@app.command()
def show(
    ctx: typer.Context,
    commit_ref: str = typer.Argument(..., metavar="COMMIT", help="Commit id, prefix or HEAD"),
    stat: bool = typer.Option(
        False,
        "--stat",
        help="Show only per-file line counts",
    ),
) -> None:
    """Show the files of a commit and their diff against its parent."""
    repo = _open_repo(ctx)

    try:
        commit_id = repo.commits.resolve(commit_ref)
        report = repo.history.diff(commit_id)
    except GrootError as e:
        _fail(e)

    target = report.commit
    console.print(f"[bold yellow]commit {target.id}[/bold yellow]")
    console.print(f"[bold]Date:[/bold]   {target.timestamp}")
    console.print(f"\n    {escape(target.message)}\n")

    if not report.files:
        console.print("[dim]No files in this commit[/dim]")
        return

    console.print("Changes in this commit are:")
    for file_diff in report.files:
        if stat:
            _print_stat(file_diff)
        else:
            _print_file_diff(file_diff)


def _print_stat(file_diff: FileDiff) -> None:
    if not file_diff.has_diff:
        label = "first commit" if file_diff.status == STATUS_INITIAL else "new file"
        console.print(f"  {escape(file_diff.path)}  [dim]({label})[/dim]")
        return
    added, removed = diff_stats(file_diff.segments)
    console.print(
        f"  {escape(file_diff.path)}  [green]+{added}[/green] [red]-{removed}[/red]"
    )


def _print_file_diff(file_diff: FileDiff) -> None:
    console.print(f"\n[bold]File:[/bold] {escape(file_diff.path)}")
    console.print(Text(file_diff.content))

    if file_diff.status == STATUS_INITIAL:
        console.print("[dim]First commit[/dim]")
        return
    if file_diff.status == STATUS_NEW:
        console.print("[cyan]New file in this commit[/cyan]")
        return

    console.print("\nDiff:")
    diff_text = Text()
    for segment in file_diff.segments:
        prefix, style = SEGMENT_STYLES.get(segment.tag, ("  ", "dim"))
        for line in segment.lines:
            if not line.endswith("\n"):
                line += "\n"
            diff_text.append(prefix + line, style=style)
    console.print(diff_text, end="")


@app.command()
def status(ctx: typer.Context) -> None:
    """Show the current head and the staged files."""
    repo = _open_repo(ctx)

    try:
        head = repo.commits.current_head()
        entries = repo.index.current_entries()
    except GrootError as e:
        _fail(e)

    if head:
        console.print(f"[bold]HEAD:[/bold] {_short(head)}")
    else:
        console.print("[bold]HEAD:[/bold] [dim](no commits yet)[/dim]")
    console.print()

    if not entries:
        console.print("[yellow]No files staged for commit[/yellow]")
        console.print("  Use [bold]groot add <file>[/bold] to stage files")
        return

    console.print("[bold green]Changes to be committed:[/bold green]")
    for entry in entries:
        console.print(
            f"  [green]+[/green] {escape(entry.path)}  [dim]({_short(entry.content_id)})[/dim]"
        )


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
