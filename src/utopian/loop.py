"""Bounded content-generation loop over a node directory."""

from __future__ import annotations

import time
from collections.abc import Callable
from pathlib import Path

from rich.console import Console

from . import prompts, templates
from .client import ChatBackend
from .exceptions import ChatClientError, UtopianError
from .models import CycleResult
from .runner import IMAGE_COMMAND, CommandRunner
from .scaffold import KNOWN_NODES
from .store import FileStore
from .topics import list_topics, read_topic_content, read_topic_title

Phase = Callable[[int], list[Path]]


class GenerationLoop:
    """Runs a fixed sequence of generation phases for a bounded number of cycles.

    Each cycle researches existing topics, proposes trust-network
    additions, discovers new topics, writes a synthesis and media content,
    and optionally generates images. A failing phase is reported and
    skipped; the loop always advances to the next cycle and stops after
    ``max_iterations`` cycles.
    """

    def __init__(
        self,
        store: FileStore,
        client: ChatBackend,
        model: str,
        console: Console | None = None,
        max_iterations: int = 50,
        research_topics_per_cycle: int = 2,
        success_delay: float = 2.0,
        failure_delay: float = 10.0,
        runner: CommandRunner | None = None,
        images: bool = False,
        images_per_cycle: int = 2,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize loop.

        Args:
            store: File store rooted at the node directory
            client: Chat backend used by every phase
            model: Model identifier passed to the backend
            console: Console for progress and failure output
            max_iterations: Number of cycles to run
            research_topics_per_cycle: How many topics the research phase covers
            success_delay: Seconds to wait after a clean cycle
            failure_delay: Seconds to wait after a cycle with failures
            runner: Command runner for the image phase
            images: Request the image phase (runs only if the generator is installed)
            images_per_cycle: Images generated per cycle
            sleep: Delay function, replaceable in tests
            clock: Epoch-seconds clock used for timestamped file names
        """
        self.store = store
        self.client = client
        self.model = model
        self.console = console or Console()
        self.max_iterations = max_iterations
        self.research_topics_per_cycle = research_topics_per_cycle
        self.success_delay = success_delay
        self.failure_delay = failure_delay
        self.runner = runner
        self.images = images
        self.images_per_cycle = images_per_cycle
        self._sleep = sleep
        self._clock = clock
        self._images_available: bool | None = None

    @property
    def images_available(self) -> bool:
        """Whether the image phase can run; probed once."""
        if self._images_available is None:
            self._images_available = bool(
                self.images
                and self.runner is not None
                and self.runner.is_available(IMAGE_COMMAND),
            )
        return self._images_available

    def _epoch(self) -> int:
        return int(self._clock() * 1000)

    def _ask(self, prompt: str) -> str:
        text = self.client.chat(prompts.conversation(prompt), self.model)
        if not isinstance(text, str) or not text.strip():
            msg = "Model returned no usable completion"
            raise ChatClientError(msg)
        return text

    def research_phase(self, iteration: int) -> list[Path]:
        """Write a deep-research report for the first few topics."""
        written = []
        for slug in list_topics(self.store)[: self.research_topics_per_cycle]:
            title = read_topic_title(self.store, slug)
            text = self._ask(
                prompts.research_prompt(title, read_topic_content(self.store, slug), iteration),
            )
            written.append(
                self.store.write_text(
                    Path("topics") / slug / "reports" / f"deep-research-{iteration}.md",
                    templates.phase_document(f"Deep Research: {title}", text, iteration),
                ),
            )
        return written

    def trust_phase(self, iteration: int) -> list[Path]:
        """Write proposed trust-network additions to a new timestamped file.

        The canonical known_nodes.yaml is never modified here.
        """
        text = self._ask(prompts.trust_expansion_prompt(self.store.read_text(KNOWN_NODES)))
        return [
            self.store.write_text(
                Path("trust") / f"expanded-network-{self._epoch()}.yaml",
                text.strip() + "\n",
            ),
        ]

    def discovery_phase(self, iteration: int) -> list[Path]:
        """Write newly identified candidate topics."""
        text = self._ask(prompts.topic_discovery_prompt(list_topics(self.store)))
        return [
            self.store.write_text(
                Path("topics") / f"emerging-{iteration}" / "discovery.md",
                templates.phase_document("Emerging Topics", text, iteration),
            ),
        ]

    def synthesis_phase(self, iteration: int) -> list[Path]:
        """Write a cross-topic synthesis report."""
        text = self._ask(prompts.synthesis_prompt(list_topics(self.store)))
        return [
            self.store.write_text(
                Path("reports") / f"synthesis-{self._epoch()}.md",
                templates.phase_document("Cross-Topic Synthesis", text, iteration),
            ),
        ]

    def media_phase(self, iteration: int) -> list[Path]:
        """Write slide, video and social content."""
        text = self._ask(prompts.media_prompt(list_topics(self.store)))
        return [
            self.store.write_text(
                Path("media") / f"content-{iteration}-{self._epoch()}.md",
                templates.phase_document("Media Content", text, iteration),
            ),
        ]

    def image_phase(self, iteration: int) -> list[Path]:
        """Generate a few images from model-written prompts."""
        if self.runner is None:
            return []

        text = self._ask(
            prompts.image_prompts_prompt(list_topics(self.store), self.images_per_cycle),
        )
        image_prompts = [line.strip(" -*\t") for line in text.splitlines() if line.strip()]

        written = []
        images_dir = self.store.ensure_dir(Path("media") / "images")
        for index, image_prompt in enumerate(image_prompts[: self.images_per_cycle], start=1):
            output = images_dir / f"cycle-{iteration}-{index}.png"
            self.runner.generate_image(image_prompt, output, cwd=self.store.root)
            written.append(output)
        return written

    def phases(self) -> list[tuple[str, Phase]]:
        """Ordered phases for one cycle."""
        ordered: list[tuple[str, Phase]] = [
            ("research", self.research_phase),
            ("trust", self.trust_phase),
            ("discovery", self.discovery_phase),
            ("synthesis", self.synthesis_phase),
            ("media", self.media_phase),
        ]
        if self.images_available:
            ordered.append(("images", self.image_phase))
        return ordered

    def run_cycle(self, iteration: int) -> CycleResult:
        """Run every phase once, isolating failures per phase."""
        result = CycleResult(iteration=iteration)
        for name, phase in self.phases():
            try:
                paths = phase(iteration)
            except (UtopianError, OSError) as e:
                result.failures.append(f"{name}: {e}")
                self.console.print(f"  [red]✗[/red] {name} phase failed: {e}")
                continue

            result.written.extend(paths)
            for path in paths:
                self.console.print(f"  [green]✓[/green] {name}: {path}")
        return result

    def run(self) -> list[CycleResult]:
        """Run cycles until ``max_iterations`` is reached.

        Returns:
            One result per completed cycle
        """
        if self.images and not self.images_available:
            self.console.print(
                f"[yellow]Warning:[/yellow] {IMAGE_COMMAND} not available, image phase disabled",
            )

        results: list[CycleResult] = []
        try:
            for iteration in range(1, self.max_iterations + 1):
                self.console.print(
                    f"\n[bold blue]🔄 Cycle {iteration}/{self.max_iterations}[/bold blue]",
                )
                result = self.run_cycle(iteration)
                results.append(result)

                if iteration < self.max_iterations:
                    self._sleep(self.success_delay if result.ok else self.failure_delay)
        except KeyboardInterrupt:
            self.console.print("\n[yellow]Generation stopped[/yellow]")

        return results
