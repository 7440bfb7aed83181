"""Human-in-the-loop checkpoints with a durable preview trail."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from rich.console import Console

from .exceptions import HITLDeclinedError

AFFIRMATIVE = frozenset({"y", "yes"})


def preview_path(cwd: Path, preview_slug: str) -> Path:
    """Location of the preview file for a checkpoint."""
    return Path(cwd) / ".utopia" / "hitl" / f"{preview_slug}.md"


class HITLGate:
    """Writes a preview for each checkpoint, then waits for the operator.

    Proceeding requires an explicit ``y`` (case-insensitive). Any other
    answer, including end of input, declines the checkpoint.
    """

    def __init__(
        self,
        cwd: Path,
        auto: bool = False,
        console: Console | None = None,
        prompt: Callable[[str], str] | None = None,
    ) -> None:
        """Initialize gate.

        Args:
            cwd: Node directory holding ``.utopia/hitl/``
            auto: Continue through every checkpoint without asking
            console: Console for notices and the prompt
            prompt: Reads one line of operator input; defaults to the console
        """
        self.cwd = Path(cwd)
        self.auto = auto
        self.console = console or Console()
        self._prompt = prompt or self.console.input

    def write_preview(self, step: str, preview_slug: str, message: str) -> Path:
        """Write the checkpoint preview, creating parent directories."""
        path = preview_path(self.cwd, preview_slug)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"# HITL: {step}\n\n{message}\n", encoding="utf-8")
        return path

    def gate(
        self,
        step: str,
        preview_slug: str,
        message: str,
        auto: bool = False,
    ) -> Path:
        """Pass a checkpoint.

        The preview is written first, even in auto mode. A failed write
        propagates.

        Args:
            step: Checkpoint name (e.g., planning)
            preview_slug: Preview file stem (e.g., 01-planning)
            message: What is being proposed
            auto: Continue without asking for this checkpoint only

        Returns:
            Path of the preview file

        Raises:
            HITLDeclinedError: If the operator does not answer ``y``
        """
        path = self.write_preview(step, preview_slug, message)

        if auto or self.auto:
            self.console.print(
                f"\n[blue]🔎 Auto-continuing[/blue] {step} (review {path})",
            )
            return path

        self.console.print(f"\n[bold]🔎 HITL Check:[/bold] {step}")
        self.console.print(f"   Review {path}")
        try:
            answer = self._prompt("❓ Continue? (y/n): ")
        except EOFError:
            answer = ""

        if answer.strip().lower() not in AFFIRMATIVE:
            raise HITLDeclinedError(step, str(path))

        return path
