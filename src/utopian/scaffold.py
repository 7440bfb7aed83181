"""Idempotent scaffolding of the node directory skeleton and topics."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from . import templates
from .models import Topic
from .store import FileStore

GOALS_README = Path("goals") / "README.md"
FOUNDATIONS_INDEX = Path("foundations") / "index.yaml"
KNOWN_NODES = Path("trust") / "known_nodes.yaml"
NODE_REPORT = Path("reports") / "utopia-report.md"
TOPIC_INIT_REPORT = Path("topics") / "utopia-init" / "reports" / "report.md"

TOPIC_SUBDIRS = ("docs", "slides", "video", "reports")


@dataclass
class ScaffoldResult:
    """Files written and skipped by one scaffold pass."""

    created: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)
    report_path: Path | None = None


class Scaffolder:
    """Creates the canonical node layout without clobbering existing content."""

    def __init__(self, store: FileStore) -> None:
        """Initialize scaffolder.

        Args:
            store: File store rooted at the node directory
        """
        self.store = store

    def ensure_node_skeleton(self) -> ScaffoldResult:
        """Create goals, foundations, trust and a status report.

        Existing goals and trust files are left untouched. Foundations are
        only seeded when ``foundations/`` was empty, so operator-authored
        documents are never overwritten. The status report is rewritten on
        every call; its location depends on whether ``topics/`` already had
        content.

        Returns:
            What was created, what was skipped, and where the report went
        """
        result = ScaffoldResult()

        # Both checks must happen before anything is created.
        foundations_populated = bool(self.store.list_dir("foundations"))
        topics_populated = bool(self.store.list_dir("topics"))

        self.store.ensure_dir("goals")
        self.store.ensure_dir("trust")
        if not foundations_populated:
            self.store.ensure_dir("foundations")

        if self.store.read_text(GOALS_README) is None:
            self.store.write_text(GOALS_README, templates.GOALS_README)
            result.created.append(GOALS_README)
        else:
            result.skipped.append(GOALS_README)

        if not foundations_populated:
            self.store.write_yaml(FOUNDATIONS_INDEX, templates.foundations_data())
            result.created.append(FOUNDATIONS_INDEX)
        else:
            result.skipped.append(FOUNDATIONS_INDEX)

        if self.store.read_text(KNOWN_NODES) is None:
            self.store.write_yaml(KNOWN_NODES, templates.trust_data())
            result.created.append(KNOWN_NODES)
        else:
            result.skipped.append(KNOWN_NODES)

        report_path = TOPIC_INIT_REPORT if topics_populated else NODE_REPORT
        self.store.write_text(
            report_path,
            templates.status_report(foundations_preserved=foundations_populated),
        )
        result.report_path = report_path

        return result

    def create_topic(self, topic: Topic) -> bool:
        """Create one topic directory with its template files.

        Args:
            topic: Topic to create

        Returns:
            True if created, False if ``topics/<slug>/`` already existed
        """
        topic_dir = Path("topics") / topic.slug
        if self.store.exists(topic_dir):
            return False

        for subdir in TOPIC_SUBDIRS:
            self.store.ensure_dir(topic_dir / subdir)

        self.store.write_text(topic_dir / "docs" / "overview.md", templates.topic_overview(topic))
        self.store.write_text(topic_dir / "slides" / "presentation.md", templates.topic_slides(topic))
        self.store.write_text(topic_dir / "video" / "script.md", templates.topic_video_script(topic))
        self.store.write_text(topic_dir / "reports" / "report.md", templates.topic_report(topic))
        return True

    def create_topics(self, topics: Iterable[Topic]) -> list[str]:
        """Create every topic that does not exist yet.

        Returns:
            Slugs of the topics created by this call
        """
        self.store.ensure_dir("topics")
        return [topic.slug for topic in topics if self.create_topic(topic)]
