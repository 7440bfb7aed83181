"""File store over the node directory: text, YAML and directory bookkeeping."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .exceptions import StoreError


class FileStore:
    """Reads and writes the text/YAML corpus rooted at a node directory.

    Relative paths are resolved against the root; absolute paths are used
    as-is. Missing files and directories are reported as ``None`` or empty
    results rather than errors. Any other I/O failure propagates.
    """

    def __init__(self, root: Path) -> None:
        """Initialize store with its root directory.

        Args:
            root: Node directory that relative paths resolve against
        """
        self.root = Path(root)

    def path(self, *parts: str | Path) -> Path:
        """Resolve path parts against the store root."""
        candidate = Path(*parts)
        if candidate.is_absolute():
            return candidate
        return self.root / candidate

    def exists(self, path: str | Path) -> bool:
        """Check whether a file or directory exists."""
        return self.path(path).exists()

    def ensure_dir(self, path: str | Path) -> Path:
        """Create a directory and any missing ancestors.

        Args:
            path: Directory to create

        Returns:
            The resolved directory path
        """
        target = self.path(path)
        target.mkdir(parents=True, exist_ok=True)
        return target

    def read_text(self, path: str | Path) -> str | None:
        """Read a UTF-8 text file.

        Args:
            path: File to read

        Returns:
            File content, or None if the file does not exist
        """
        target = self.path(path)
        try:
            return target.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def write_text(self, path: str | Path, content: str) -> Path:
        """Write content to a file, creating parent directories as needed.

        Any prior content is fully overwritten.

        Args:
            path: File to write
            content: Text content

        Returns:
            The resolved file path
        """
        target = self.path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        return target

    def list_dir(self, path: str | Path) -> list[str]:
        """List entry names of a directory, sorted.

        Args:
            path: Directory to list

        Returns:
            Entry names, or an empty list if the directory does not exist
        """
        target = self.path(path)
        try:
            return sorted(entry.name for entry in target.iterdir())
        except (FileNotFoundError, NotADirectoryError):
            return []

    def read_yaml(self, path: str | Path) -> Any:
        """Read and parse a YAML file.

        Args:
            path: File to read

        Returns:
            Parsed value, or None if the file does not exist or is blank

        Raises:
            StoreError: If the file cannot be parsed as YAML
        """
        text = self.read_text(path)
        if not text:
            return None

        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            msg = f"Failed to parse YAML {self.path(path)}: {e}"
            raise StoreError(msg, details={"path": str(self.path(path))}) from e

    def write_yaml(self, path: str | Path, value: Any) -> Path:
        """Serialize a value as YAML and write it.

        Key order of mappings and element order of sequences are preserved.

        Args:
            path: File to write
            value: Nested mappings, sequences and scalars

        Returns:
            The resolved file path
        """
        text = yaml.safe_dump(
            value,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
        )
        return self.write_text(path, text)

    def has_node(self) -> bool:
        """Check whether the root already holds an initialized node."""
        return any(self.list_dir(name) for name in ("goals", "foundations", "trust"))
