"""Markdown-with-frontmatter rendering and parsing for stories and features.

A document is a YAML frontmatter block between ``---`` fences followed by a
Markdown body. Scalar metadata lives in the frontmatter; the narrative parts
(user story sentence, acceptance criteria, questions, edge cases) live in
``##`` sections of the body so the files read well on their own.
"""

from __future__ import annotations

import re
from typing import Any

import yaml
from pydantic.alias_generators import to_camel

from onep.storage.models import AcceptanceCriterion, Feature, Story

_FRONTMATTER_RE = re.compile(r"\A---\r?\n(.*?)\r?\n---\r?\n?(.*)\Z", re.DOTALL)

_STORY_META = (
    "id",
    "title",
    "type",
    "status",
    "priority",
    "feature",
    "persona",
    "estimate",
    "tags",
    "dependencies",
    "related_stories",
    "created_at",
    "updated_at",
)
_FEATURE_META = (
    "id",
    "title",
    "status",
    "priority",
    "tags",
    "stories",
    "created_at",
    "updated_at",
)


# -- Frontmatter ---------------------------------------------------------------


def dump_frontmatter(body: str, meta: dict[str, Any]) -> str:
    """Render *meta* as a YAML frontmatter block followed by *body*."""
    header = yaml.safe_dump(meta, sort_keys=False, allow_unicode=True)
    return f"---\n{header}---\n{body}"


def load_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Split a document into (metadata, body). Documents without a fence have no metadata."""
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return {}, text
    try:
        meta = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as exc:
        msg = f"Invalid frontmatter: {exc}"
        raise ValueError(msg) from exc
    if not isinstance(meta, dict):
        msg = "Frontmatter is not a mapping"
        raise ValueError(msg)
    return meta, match.group(2)


def _section(body: str, heading: str) -> str | None:
    match = re.search(rf"## {re.escape(heading)}\n\n(.*?)(?=\n## |\Z)", body, re.DOTALL)
    return match.group(1) if match else None


def _bullets(block: str | None) -> list[str]:
    if not block:
        return []
    items = []
    for line in block.splitlines():
        stripped = line.strip()
        if stripped.startswith("- "):
            text = stripped[2:].strip()
            if text:
                items.append(text)
    return items


def _meta(record: Story | Feature, fields: tuple[str, ...]) -> dict[str, Any]:
    data = record.model_dump(include=set(fields))
    return {to_camel(f): data[f] for f in fields if data[f] is not None}


# -- Stories -------------------------------------------------------------------


def story_to_markdown(story: Story) -> str:
    lines: list[str] = []

    if story.as_a or story.i_want or story.so_that:
        lines += ["## User Story", ""]
        if story.as_a:
            lines.append(f"**As a** {story.as_a}")
        if story.i_want:
            lines.append(f"**I want** {story.i_want}")
        if story.so_that:
            lines.append(f"**So that** {story.so_that}")
        lines.append("")

    if story.acceptance_criteria:
        lines += ["## Acceptance Criteria", ""]
        for ac in story.acceptance_criteria:
            checkbox = "[x]" if ac.completed else "[ ]"
            lines.append(f"- {checkbox} {ac.text}")
        lines.append("")

    if story.open_questions:
        lines += ["## Open Questions", ""]
        lines += [f"{i}. {q}" for i, q in enumerate(story.open_questions, start=1)]
        lines.append("")

    if story.edge_cases:
        lines += ["## Edge Cases", ""]
        lines += [f"- {ec}" for ec in story.edge_cases]
        lines.append("")

    body = "\n".join(lines)
    return dump_frontmatter(f"\n{body}" if body else "", _meta(story, _STORY_META))


def _user_story_part(body: str, label: str) -> str | None:
    match = re.search(rf"\*\*{label}\*\* (.+)", body)
    return match.group(1).strip() if match else None


def markdown_to_story(text: str) -> Story:
    """Parse a story document. Raises ``ValueError`` on malformed input."""
    meta, body = load_frontmatter(text)

    criteria = []
    for line in _bullets(_section(body, "Acceptance Criteria")):
        completed = line.startswith("[x]")
        criterion = re.sub(r"^\[[ x]\] ", "", line).strip()
        if criterion:
            criteria.append(AcceptanceCriterion(text=criterion, completed=completed))

    questions = []
    for line in (_section(body, "Open Questions") or "").splitlines():
        match = re.match(r"^\d+\. (.+)", line.strip())
        if match:
            questions.append(match.group(1).strip())

    return Story.model_validate({
        **meta,
        "asA": _user_story_part(body, "As a"),
        "iWant": _user_story_part(body, "I want"),
        "soThat": _user_story_part(body, "So that"),
        "acceptanceCriteria": criteria,
        "openQuestions": questions,
        "edgeCases": _bullets(_section(body, "Edge Cases")),
    })


# -- Features ------------------------------------------------------------------


def feature_to_markdown(feature: Feature) -> str:
    lines: list[str] = []

    if feature.description:
        lines += ["## Description", "", feature.description, ""]

    if feature.success_criteria:
        lines += ["## Success Criteria", ""]
        lines += [f"- {sc}" for sc in feature.success_criteria]
        lines.append("")

    body = "\n".join(lines)
    return dump_frontmatter(f"\n{body}" if body else "", _meta(feature, _FEATURE_META))


def markdown_to_feature(text: str) -> Feature:
    """Parse a feature document. Raises ``ValueError`` on malformed input."""
    meta, body = load_frontmatter(text)
    description = _section(body, "Description")
    return Feature.model_validate({
        **meta,
        "description": description.strip() if description else None,
        "successCriteria": _bullets(_section(body, "Success Criteria")),
    })
