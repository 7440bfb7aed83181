"""Tests for the allow-listed command runner."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from utopian import runner as runner_module
from utopian.exceptions import CommandFailedError, CommandNotAllowedError
from utopian.runner import ALLOWED_COMMANDS, CommandRunner


class FakeRun:
    """Replacement for subprocess.run that records invocations."""

    def __init__(self, returncode: int = 0, stdout: str = "", stderr: str = "") -> None:
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.calls: list[dict] = []

    def __call__(self, cmd: list[str], **kwargs: object) -> subprocess.CompletedProcess:
        self.calls.append({"cmd": cmd, **kwargs})
        return subprocess.CompletedProcess(cmd, self.returncode, self.stdout, self.stderr)


class TestAllowList:
    """Test allow-list enforcement."""

    def test_default_allow_list(self) -> None:
        """Test the fixed set of permitted programs."""
        assert ALLOWED_COMMANDS == {"marp", "ffmpeg", "git", "mflux-generate"}

    def test_disallowed_command_never_spawns(
        self,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
    ) -> None:
        """Test rejection happens before any process is started."""
        fake = FakeRun()
        monkeypatch.setattr(runner_module.subprocess, "run", fake)
        marker = tmp_path / "pwned"

        with pytest.raises(CommandNotAllowedError, match="Command not allowed: touch"):
            CommandRunner().run("touch", [str(marker)])

        assert fake.calls == []
        assert not marker.exists()

    def test_is_available_rejects_unlisted(self) -> None:
        """Test availability is never reported for unlisted programs."""
        assert not CommandRunner().is_available("sh")


class TestRun:
    """Test process execution and exit-code mapping."""

    def test_success_returns_trimmed_stdout(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test exit 0 yields trimmed stdout."""
        fake = FakeRun(stdout="  git version 2.45\n")
        monkeypatch.setattr(runner_module.subprocess, "run", fake)

        assert CommandRunner().run("git", ["--version"], cwd=tmp_path) == "git version 2.45"
        assert fake.calls[0]["cmd"] == ["git", "--version"]
        assert fake.calls[0]["cwd"] == tmp_path
        assert fake.calls[0]["capture_output"] is True

    def test_failure_carries_stderr(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test non-zero exit raises with the captured stderr."""
        monkeypatch.setattr(
            runner_module.subprocess, "run", FakeRun(returncode=2, stderr="fatal: bad\n"),
        )
        with pytest.raises(CommandFailedError, match="fatal: bad") as exc_info:
            CommandRunner().run("git", ["status"])
        assert exc_info.value.returncode == 2

    def test_failure_without_stderr(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test an empty stderr falls back to the exit code."""
        monkeypatch.setattr(runner_module.subprocess, "run", FakeRun(returncode=3))
        with pytest.raises(CommandFailedError, match="exit 3"):
            CommandRunner().run("ffmpeg")

    def test_missing_executable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a program that cannot start surfaces as CommandFailedError."""

        def raise_missing(*args: object, **kwargs: object) -> None:
            raise FileNotFoundError("marp")

        monkeypatch.setattr(runner_module.subprocess, "run", raise_missing)
        with pytest.raises(CommandFailedError, match="Failed to start marp"):
            CommandRunner().run("marp")


class TestHelpers:
    """Test the image, slide and git helpers."""

    def test_generate_image_arguments(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test the image generator is invoked with the expected flags."""
        fake = FakeRun()
        monkeypatch.setattr(runner_module.subprocess, "run", fake)
        out = tmp_path / "media" / "images" / "a.png"

        CommandRunner().generate_image("a solar farm", out, seed=7)

        cmd = fake.calls[0]["cmd"]
        assert cmd[0] == "mflux-generate"
        assert cmd[cmd.index("--prompt") + 1] == "a solar farm"
        assert cmd[cmd.index("--out") + 1] == str(out)
        assert cmd[cmd.index("--seed") + 1] == "7"
        assert cmd[cmd.index("--steps") + 1] == "28"
        assert out.parent.is_dir()

    def test_compile_slides_per_topic(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test every topic deck is compiled to dist/<slug>.html."""
        fake = FakeRun()
        monkeypatch.setattr(runner_module.subprocess, "run", fake)
        for slug in ("climate-action", "digital-rights"):
            deck = tmp_path / "topics" / slug / "slides" / "presentation.md"
            deck.parent.mkdir(parents=True)
            deck.write_text("# deck")

        compiled = CommandRunner().compile_slides(tmp_path)

        assert compiled == [
            tmp_path / "dist" / "climate-action.html",
            tmp_path / "dist" / "digital-rights.html",
        ]
        assert all(call["cmd"][0] == "marp" for call in fake.calls)

    def test_git_commit_nothing_to_commit(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test a clean tree is reported rather than raised."""
        results = iter([FakeRun(), FakeRun(returncode=1, stdout="nothing to commit")])

        def run(cmd: list[str], **kwargs: object) -> subprocess.CompletedProcess:
            return next(results)(cmd, **kwargs)

        monkeypatch.setattr(runner_module.subprocess, "run", run)
        assert CommandRunner().git_commit(tmp_path) is False

    def test_git_commit(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test a successful commit stages then commits."""
        fake = FakeRun()
        monkeypatch.setattr(runner_module.subprocess, "run", fake)

        assert CommandRunner().git_commit(tmp_path, "update") is True
        assert fake.calls[0]["cmd"] == ["git", "add", "."]
        assert fake.calls[1]["cmd"] == ["git", "commit", "-m", "update"]
