"""Prompt text sent to the chat model."""

from __future__ import annotations

from .models import ChatMessage, MessageRole

SYSTEM_PROMPT = """\
You are a Utopia Node Agent, designed to help create and manage decentralized networks focused on solving global challenges.

Your role is to:
1. Initialize and structure Utopia nodes with proper directories and content
2. Generate comprehensive content about critical global challenges
3. Create actionable solutions and resources
4. Build trust networks with credible organizations
5. Facilitate continuous content generation and knowledge synthesis

Focus on:
- Evidence-based approaches to global challenges
- Actionable solutions for individuals and organizations
- Building connections between related topics and solutions
- Creating high-quality educational and advocacy materials
- Maintaining transparency and credibility

Always prioritize accuracy, actionability, and positive impact in your responses."""


def conversation(prompt: str) -> list[ChatMessage]:
    """A fresh two-message conversation: system prompt plus one request."""
    return [
        ChatMessage(role=MessageRole.SYSTEM, content=SYSTEM_PROMPT),
        ChatMessage(role=MessageRole.USER, content=prompt),
    ]


def planning_prompt(cwd: str, context_summary: str) -> str:
    return f"""\
Project root: {cwd}

Context:
{context_summary}

Please create a plan to set up this Utopia node with the following structure:
1. Create basic goals/README.md with project purpose
2. Create foundations/index.yaml with core principles
3. Create trust/known_nodes.yaml with initial trusted nodes
4. Create a simple report in reports/utopia-report.md

Keep the plan concise."""


def critical_topics_prompt(cwd: str, context_summary: str) -> str:
    return f"""\
Project root: {cwd}

Context:
{context_summary}

Identify the most critical global challenges that need immediate attention. For each challenge, outline:

1. A topic overview document
2. Presentation slides content (Marp-compatible Markdown)
3. A video script outline

Focus on actionable solutions and concrete next steps that individuals and organizations can take.

Respond with a structured summary of the topics and their content."""


def research_prompt(title: str, content: str | None, iteration: int) -> str:
    existing = content or "(no existing material)"
    return f"""\
Write deep research report #{iteration} on the topic "{title}".

Existing material:
{existing}

Cover the current state of the problem, the most promising evidence-based
solutions, key organizations working on it, and concrete next steps.
Respond in Markdown."""


def trust_expansion_prompt(known_nodes: str | None) -> str:
    return f"""\
These are the organizations this node currently trusts:

{known_nodes or "(none yet)"}

Suggest additional credible organizations working on global challenges.
Respond with YAML only: a mapping with a `nodes` list whose entries have
`url`, `score` (0 to 1), `type` and `description`."""


def topic_discovery_prompt(existing_topics: list[str]) -> str:
    listed = "\n".join(f"- {slug}" for slug in existing_topics) or "- (none)"
    return f"""\
The node already covers these topics:
{listed}

Identify new, related global challenges that deserve their own topic.
For each, give a kebab-case slug, a title, a one-line description and why
it matters now. Respond in Markdown."""


def synthesis_prompt(existing_topics: list[str]) -> str:
    listed = ", ".join(existing_topics) or "none"
    return f"""\
Write a cross-topic synthesis for these topics: {listed}.

Identify shared root causes, solutions that address several topics at
once, and where coordinated action would have the most impact.
Respond in Markdown."""


def media_prompt(existing_topics: list[str]) -> str:
    listed = ", ".join(existing_topics) or "global challenges"
    return f"""\
Create media content about: {listed}.

Include:
1. A short Marp slide deck (Markdown)
2. A 60-second video script
3. Three social media posts

Respond in Markdown."""


def image_prompts_prompt(existing_topics: list[str], count: int) -> str:
    listed = ", ".join(existing_topics) or "global challenges"
    return f"""\
Write {count} short, vivid image-generation prompts illustrating hopeful
solutions to: {listed}.
Respond with one prompt per line and nothing else."""
