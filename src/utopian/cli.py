"""Utopian command-line interface."""

from __future__ import annotations

import re
import sys
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from .agent import run_agent
from .exceptions import HITLDeclinedError, UtopianError
from .models import TrustNode
from .scaffold import Scaffolder
from .settings import AgentSettings
from .store import FileStore
from .topics import list_topics, read_topic_content, read_topic_title
from .trust import add_trust_nodes, load_known_nodes

app = typer.Typer(
    name="utopian",
    help="Utopian: scaffold and grow a Utopia knowledge node with an AI model",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()


def _get_version_string() -> str:
    """Get version string from package metadata or pyproject.toml."""
    try:
        return get_version("utopian")
    except PackageNotFoundError:
        pass

    # Development checkout without an install
    pyproject_path = Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject_path.exists():
        content = pyproject_path.read_text()
        match = re.search(r'version\s*=\s*["\']([^"\']+)["\']', content)
        if match:
            return f"{match.group(1)} (development)"

    return "unknown"


def version_callback(value: bool) -> None:
    """Callback for --version flag."""
    if value:
        console.print(f"Utopian version {_get_version_string()}")
        raise typer.Exit


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    path: Path | None = typer.Option(
        None,
        "--path",
        "-p",
        help="Node directory (defaults to the current directory)",
        file_okay=False,
    ),
    base: str | None = typer.Option(
        None,
        "--base",
        help="OpenAI-compatible base URL",
    ),
    model: str | None = typer.Option(
        None,
        "--model",
        help="Model name to use",
    ),
    auto: bool = typer.Option(
        False,
        "--auto",
        help="Skip human-in-the-loop confirmations",
    ),
    iterations: int | None = typer.Option(
        None,
        "--iterations",
        "-n",
        help="Number of generation cycles (default 50)",
    ),
    images: bool = typer.Option(
        False,
        "--images/--no-images",
        help="Generate images each cycle when mflux-generate is installed",
    ),
    slides: bool = typer.Option(
        False,
        "--slides",
        help="Compile topic slide decks with marp after generation",
    ),
    commit: bool = typer.Option(
        False,
        "--commit",
        help="Commit the node directory with git at the end",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Initialize a Utopia node and run the generation loop over it.

    Without a subcommand, scaffolds the node in the target directory,
    creates the critical topics and runs the bounded generation loop,
    pausing for confirmation at each checkpoint unless --auto is given.
    """
    if ctx.invoked_subcommand is not None:
        return

    try:
        settings = AgentSettings.from_env(
            cwd=(path or Path.cwd()).resolve(),
            base_url=base,
            model=model,
            auto=auto,
            max_iterations=iterations,
            images=images,
            compile_slides=slides,
            commit=commit,
        )

        console.print("[bold]🤖 Running utopian agent with:[/bold]")
        console.print(f"  📍 Working directory: {settings.cwd}")
        console.print(
            f"  🌐 API base: {settings.base_url} "
            f"({'hosted' if settings.uses_cloud else 'local'})",
        )
        console.print(f"  🧠 Model: {settings.model}")
        console.print(f"  🚀 Auto mode: {'enabled' if settings.auto else 'disabled'}")

        report = run_agent(settings, console=console)
    except HITLDeclinedError as e:
        console.print(f"[red]❌ User cancelled operation[/red] ({e.step})")
        raise typer.Exit(1) from e
    except (UtopianError, OSError) as e:
        console.print(f"[red]❌ utopian error:[/red] {e}")
        raise typer.Exit(1) from e

    console.print(
        f"\n[green]✓[/green] Completed {len(report.cycles)} cycles "
        f"({report.failures} failed phases)",
    )


@app.command()
def init(
    path: Path | None = typer.Option(
        None,
        "--path",
        "-p",
        help="Node directory to initialize",
        file_okay=False,
    ),
) -> None:
    """Create the node skeleton without contacting a model."""
    root = path or Path.cwd()
    try:
        result = Scaffolder(FileStore(root)).ensure_node_skeleton()
    except OSError as e:
        console.print(f"[red]Error:[/red] Failed to initialize node: {e}")
        raise typer.Exit(1) from e

    console.print(f"[green]✓[/green] Node initialized at {root}")
    for created in result.created:
        console.print(f"  • {created} (created)")
    for skipped in result.skipped:
        console.print(f"  • {skipped} (preserved)")
    console.print(f"  • {result.report_path} (status report)")


@app.command()
def topics(
    path: Path | None = typer.Option(
        None,
        "--path",
        "-p",
        help="Node directory",
        file_okay=False,
    ),
) -> None:
    """List the topics of a node."""
    store = FileStore(path or Path.cwd())
    slugs = list_topics(store)
    if not slugs:
        console.print("[yellow]No topics found.[/yellow]")
        return

    table = Table(title="Topics")
    table.add_column("Slug", style="cyan")
    table.add_column("Title", style="green")
    table.add_column("Research Reports", justify="right")
    for slug in slugs:
        reports = [
            name
            for name in store.list_dir(Path("topics") / slug / "reports")
            if name.startswith("deep-research-")
        ]
        table.add_row(slug, read_topic_title(store, slug), str(len(reports)))
    console.print(table)


@app.command()
def topic(
    slug: str = typer.Argument(..., help="Topic slug (e.g., climate-action)"),
    path: Path | None = typer.Option(
        None,
        "--path",
        "-p",
        help="Node directory",
        file_okay=False,
    ),
) -> None:
    """Print a topic's content without its frontmatter."""
    content = read_topic_content(FileStore(path or Path.cwd()), slug)
    if content is None:
        console.print(f"[red]Error:[/red] Topic not found: {slug}")
        raise typer.Exit(1)
    console.print(content, markup=False, highlight=False)


@app.command()
def trust(
    path: Path | None = typer.Option(
        None,
        "--path",
        "-p",
        help="Node directory",
        file_okay=False,
    ),
    add: str | None = typer.Option(
        None,
        "--add",
        help="URL of a node to add or update",
    ),
    score: float | None = typer.Option(
        None,
        "--score",
        min=0.0,
        max=1.0,
        help="Trust score between 0 and 1",
    ),
    node_type: str | None = typer.Option(
        None,
        "--type",
        help="Node category",
    ),
    description: str | None = typer.Option(
        None,
        "--description",
        help="What the node is",
    ),
) -> None:
    """Show the trust network, or add a node to it."""
    store = FileStore(path or Path.cwd())
    try:
        if add:
            network = add_trust_nodes(
                store,
                [TrustNode(url=add, score=score, type=node_type, description=description)],
            )
            console.print(f"[green]✓[/green] Trusted {add}")
        else:
            network = load_known_nodes(store)
    except UtopianError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    if not network.nodes:
        console.print("[yellow]No trusted nodes.[/yellow]")
        return

    table = Table(title="Trust Network")
    table.add_column("URL", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Type")
    table.add_column("Description", style="green")
    for node in network.nodes:
        table.add_row(
            node.url,
            "" if node.score is None else f"{node.score:.2f}",
            node.type or "",
            node.description or "",
        )
    console.print(table)


@app.command("version")
def show_version() -> None:
    """Show Utopian version information."""
    console.print(f"Utopian version {_get_version_string()}")


def main() -> None:
    """Entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
