"""Deterministic templates for node and topic artifacts."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from .models import Foundations, KnownNodes, Topic, TrustNode

NODE_VERSION = "0.1.0"

CORE_TRUST_NODE = TrustNode(
    url="https://github.com/core-nexus/utopia",
    score=1.0,
    type="core",
    description="Core Utopia project repository",
)

GOALS_README = """\
# Utopia Node Goals

## Purpose
This node aims to contribute to the Utopia ecosystem by providing valuable services and fostering meaningful connections.

## Objectives
- [ ] Establish trusted relationships with other nodes
- [ ] Contribute useful resources to the network
- [ ] Maintain high standards of operation and transparency
- [ ] Support the growth and development of the Utopia ecosystem

## Vision
A decentralized, collaborative network where nodes work together to create positive impact and shared value.
"""


def _today() -> str:
    return date.today().isoformat()


def foundations_data() -> dict[str, Any]:
    """Seed content for foundations/index.yaml."""
    return Foundations(
        principles=[
            "Transparency and openness",
            "Mutual respect and collaboration",
            "Quality and reliability",
            "Continuous improvement",
            "Community-driven development",
        ],
        values=[
            "Trust",
            "Innovation",
            "Sustainability",
            "Inclusivity",
            "Decentralization",
        ],
        established=_today(),
    ).model_dump()


def trust_data() -> dict[str, Any]:
    """Seed content for trust/known_nodes.yaml: the single core node."""
    return KnownNodes(
        nodes=[CORE_TRUST_NODE],
        last_updated=datetime.now().isoformat(),
    ).model_dump(exclude_none=True)


def status_report(foundations_preserved: bool) -> str:
    """Point-in-time status report written on every scaffold."""
    foundations_line = (
        "- ℹ️  Foundations directory already exists (preserved)"
        if foundations_preserved
        else "- ✅ Foundations established in `foundations/index.yaml`"
    )
    return f"""\
# Utopia Node Report

## Node Status
**Status**: Initializing
**Created**: {_today()}
**Version**: {NODE_VERSION}

## Overview
This Utopia node has been initialized with the basic structure and configuration.

## Structure Created
- ✅ Goals defined in `goals/README.md`
{foundations_line}
- ✅ Trust network initialized in `trust/known_nodes.yaml`
- ✅ Reporting system set up

## Next Steps
1. Customize goals and objectives based on specific use case
2. Expand trust network by connecting with other nodes
3. Implement specific services or contributions
4. Regular monitoring and reporting

---
*Generated by Utopia Node Agent*
"""


def topic_overview(topic: Topic) -> str:
    """docs/overview.md for a topic, with YAML frontmatter."""
    return f"""\
---
title: {topic.title}
description: {topic.description}
status: active
priority: critical
tags: [global-challenges, sustainability, action-needed]
---

# {topic.title}

## Overview
{topic.description}

## Current Status
This topic requires immediate attention and coordinated global action.

## Next Steps
1. Research current initiatives and best practices
2. Identify key stakeholders and organizations
3. Develop concrete action plans
4. Create educational materials and presentations
5. Engage communities and build awareness
"""


def make_slides(title: str, bullets: list[str]) -> str:
    """A Marp deck with a title slide and one bullet slide."""
    body = "\n".join(f"- {b}" for b in bullets)
    return f"""\
---
marp: true
title: {title}
paginate: true
---

# {title}

{body}
"""


def topic_slides(topic: Topic) -> str:
    """slides/presentation.md for a topic."""
    deck = make_slides(
        topic.title,
        [
            topic.description,
            "Why it matters now",
            "What individuals can do",
            "What organizations can do",
        ],
    )
    return deck + """
---

# Call to Action

- Learn: read the topic overview in `docs/overview.md`
- Connect: reach out to trusted organizations in `trust/`
- Act: pick one next step and share progress
"""


def topic_video_script(topic: Topic) -> str:
    """video/script.md outline for a topic."""
    return f"""\
# Video Script: {topic.title}

## Hook (0:00-0:15)
Open with the single most striking fact about {topic.title.lower()}.

## Context (0:15-1:00)
{topic.description}.

## Solutions (1:00-2:30)
- Evidence-based approaches already working
- Actions for individuals
- Actions for organizations and communities

## Call to Action (2:30-3:00)
Invite viewers to explore the topic materials and join the effort.
"""


def topic_report(topic: Topic) -> str:
    """reports/report.md placeholder for a topic."""
    return f"""\
# {topic.title} Report

## Summary
{topic.description}

## Findings
Research reports for this topic are written alongside this file as
`deep-research-<n>.md`.
"""


def phase_document(title: str, body: str, iteration: int) -> str:
    """Wrap generated text in a heading and a provenance footer."""
    return f"""\
# {title}

{body.strip()}

---
*Generated by Utopia Node Agent, cycle {iteration}, {datetime.now().isoformat(timespec="seconds")}*
"""
