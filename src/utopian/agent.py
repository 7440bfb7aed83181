"""Top-level agent run: checkpoints, scaffolding and the generation loop."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console

from . import prompts
from .client import ChatBackend, ChatClient
from .hitl import HITLGate
from .loop import GenerationLoop
from .models import CRITICAL_TOPICS, CycleResult
from .runner import CommandRunner
from .scaffold import FOUNDATIONS_INDEX, GOALS_README, KNOWN_NODES, ScaffoldResult, Scaffolder
from .settings import AgentSettings
from .store import FileStore


@dataclass
class AgentReport:
    """Summary of one agent run."""

    scaffold: ScaffoldResult
    topics_created: list[str] = field(default_factory=list)
    cycles: list[CycleResult] = field(default_factory=list)
    slides: list[Path] = field(default_factory=list)
    committed: bool = False

    @property
    def failures(self) -> int:
        """Total failed phases across all cycles."""
        return sum(len(c.failures) for c in self.cycles)


def context_summary(store: FileStore) -> str:
    """Describe which core node files are already present."""
    goals = store.read_text(GOALS_README)
    foundations = store.read_text(FOUNDATIONS_INDEX)
    trust = store.read_text(KNOWN_NODES)
    return "\n".join([
        f"Repo present: {str(store.has_node()).lower()}",
        "- goals present" if goals else "- goals missing",
        "- foundations present" if foundations else "- foundations missing",
        "- trust present" if trust else "- trust missing",
    ])


def run_agent(
    settings: AgentSettings,
    client: ChatBackend | None = None,
    gate: HITLGate | None = None,
    console: Console | None = None,
    runner: CommandRunner | None = None,
) -> AgentReport:
    """Initialize a node and run the generation loop over it.

    The planning request is not protected by the loop's fault isolation:
    if it fails, the run fails.

    Args:
        settings: Resolved run settings
        client: Chat backend, defaults to an HTTP client built from settings
        gate: HITL gate, defaults to one honouring ``settings.auto``
        console: Console for progress output
        runner: Command runner for images, slides and commits

    Returns:
        Summary of what the run produced

    Raises:
        HITLDeclinedError: If the operator declines a checkpoint
        UtopianError: If planning or scaffolding fails
    """
    console = console or Console()
    store = FileStore(settings.cwd)
    gate = gate or HITLGate(settings.cwd, auto=settings.auto, console=console)
    runner = runner or CommandRunner()
    owns_client = client is None
    if client is None:
        client = ChatClient(
            settings.base_url,
            api_key=settings.api_key,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
        )

    try:
        summary = context_summary(store)
        gate.gate("planning", "01-planning", summary, auto=settings.auto)

        console.print("\n[bold]🧠 Model:[/bold] Generating plan...")
        plan = client.chat(
            prompts.conversation(prompts.planning_prompt(str(settings.cwd), summary)),
            settings.model,
        )
        console.print(plan or "[dim](no plan returned)[/dim]")

        scaffolder = Scaffolder(store)
        scaffold = scaffolder.ensure_node_skeleton()
        report = AgentReport(scaffold=scaffold)
        console.print("\n[green]✓[/green] Node structure ready")
        for path in scaffold.created:
            console.print(f"  • {path} (created)")
        for path in scaffold.skipped:
            console.print(f"  • {path} (preserved)")
        console.print(f"  • {scaffold.report_path} (status report)")

        console.print("\n[bold]🧠 Model:[/bold] Generating critical topics...")
        overview = client.chat(
            prompts.conversation(prompts.critical_topics_prompt(str(settings.cwd), summary)),
            settings.model,
        )
        if overview:
            console.print(overview)
        report.topics_created = scaffolder.create_topics(CRITICAL_TOPICS)
        for slug in report.topics_created:
            console.print(f"[green]✓[/green] Created topic: {slug}")

        gate.gate(
            "generation",
            "02-generation",
            f"Run up to {settings.max_iterations} generation cycles with {settings.model}.",
            auto=settings.auto,
        )

        loop = GenerationLoop(
            store,
            client,
            settings.model,
            console=console,
            max_iterations=settings.max_iterations,
            research_topics_per_cycle=settings.research_topics_per_cycle,
            success_delay=settings.success_delay,
            failure_delay=settings.failure_delay,
            runner=runner,
            images=settings.images,
            images_per_cycle=settings.images_per_cycle,
        )
        report.cycles = loop.run()

        if settings.compile_slides:
            report.slides = runner.compile_slides(settings.cwd)
            console.print(f"[green]✓[/green] Compiled {len(report.slides)} slide decks")

        gate.gate(
            "finalize",
            "99-finalize",
            f"Completed {len(report.cycles)} cycles with {report.failures} failed phases. "
            "Review artifacts and commit.",
            auto=settings.auto,
        )

        if settings.commit:
            report.committed = runner.git_commit(settings.cwd, "utopia update")
            status = "committed" if report.committed else "nothing to commit"
            console.print(f"[green]✓[/green] git: {status}")

        return report
    finally:
        if owns_client and isinstance(client, ChatClient):
            client.close()
