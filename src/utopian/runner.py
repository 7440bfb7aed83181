"""Allow-listed external command runner."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

from .exceptions import CommandFailedError, CommandNotAllowedError

# Name-based filter only; not a sandbox.
ALLOWED_COMMANDS: frozenset[str] = frozenset({"marp", "ffmpeg", "git", "mflux-generate"})

IMAGE_COMMAND = "mflux-generate"


class CommandRunner:
    """Runs a closed set of external programs and captures their output."""

    def __init__(self, allowed: frozenset[str] = ALLOWED_COMMANDS) -> None:
        """Initialize runner with its allow-list.

        Args:
            allowed: Executable names permitted to run
        """
        self.allowed = frozenset(allowed)

    def check_allowed(self, command: str) -> None:
        """Raise if a command is outside the allow-list."""
        if command not in self.allowed:
            msg = f"Command not allowed: {command}"
            raise CommandNotAllowedError(
                msg,
                details={"command": command, "allowed": sorted(self.allowed)},
            )

    def run(
        self,
        command: str,
        args: list[str] | None = None,
        cwd: Path | None = None,
    ) -> str:
        """Run an allowed command.

        Args:
            command: Executable name (must be allow-listed)
            args: Command arguments
            cwd: Working directory for the process

        Returns:
            Trimmed stdout of the process

        Raises:
            CommandNotAllowedError: If the command is not allow-listed
            CommandFailedError: If the process cannot start or exits non-zero
        """
        self.check_allowed(command)

        try:
            result = subprocess.run(
                [command, *(args or [])],
                capture_output=True,
                text=True,
                cwd=cwd,
                check=False,
            )
        except OSError as e:
            msg = f"Failed to start {command}: {e}"
            raise CommandFailedError(msg, command=command) from e

        if result.returncode != 0:
            msg = result.stderr.strip() or f"exit {result.returncode}"
            raise CommandFailedError(
                msg,
                command=command,
                returncode=result.returncode,
                details={"args": args or []},
            )

        return result.stdout.strip()

    def is_available(self, command: str) -> bool:
        """Check whether an allowed command is installed on PATH."""
        return command in self.allowed and shutil.which(command) is not None

    def generate_image(
        self,
        prompt: str,
        output_path: Path,
        width: int = 1024,
        height: int = 1024,
        steps: int = 28,
        quantize: int = 8,
        seed: int | None = None,
        cwd: Path | None = None,
    ) -> str:
        """Generate an image with the local image generator.

        Args:
            prompt: Text prompt describing the image
            output_path: Where the PNG is written
            width: Image width in pixels
            height: Image height in pixels
            steps: Diffusion steps
            quantize: Model quantization bits
            seed: Optional fixed seed
            cwd: Working directory for the process

        Returns:
            Generator stdout
        """
        args = [
            "--low-ram",
            "--model", "dev",
            "--steps", str(steps),
            "--quantize", str(quantize),
            "--prompt", prompt,
            "--width", str(width),
            "--height", str(height),
            "--out", str(output_path),
        ]
        if seed is not None:
            args.extend(["--seed", str(seed)])

        output_path.parent.mkdir(parents=True, exist_ok=True)
        return self.run(IMAGE_COMMAND, args, cwd=cwd)

    def compile_slides(
        self,
        cwd: Path,
        pattern: str = "topics/*/slides/*.md",
        out_dir: str = "dist",
    ) -> list[Path]:
        """Compile each Marp deck matching a glob to HTML under ``out_dir``.

        Decks are named after their topic directory, so
        ``topics/climate-action/slides/presentation.md`` becomes
        ``dist/climate-action.html``.

        Returns:
            Paths of the compiled decks
        """
        compiled: list[Path] = []
        for deck in sorted(cwd.glob(pattern)):
            name = deck.parent.parent.name if deck.parent.name == "slides" else deck.stem
            target = Path(out_dir) / f"{name}.html"
            self.run(
                "marp",
                [str(deck.relative_to(cwd)), "-o", str(target), "--allow-local-files"],
                cwd=cwd,
            )
            compiled.append(cwd / target)
        return compiled

    def git_commit(self, cwd: Path, message: str = "utopia update") -> bool:
        """Stage everything and commit.

        Returns:
            True if a commit was made, False if there was nothing to commit
        """
        self.run("git", ["add", "."], cwd=cwd)
        try:
            self.run("git", ["commit", "-m", message], cwd=cwd)
        except CommandFailedError as e:
            # git reports a clean tree on stdout with exit 1
            if e.returncode == 1:
                return False
            raise
        return True
