"""Tests for the Markdown + frontmatter document format."""

import pytest

from onep.storage.markdown import (
    dump_frontmatter,
    feature_to_markdown,
    load_frontmatter,
    markdown_to_feature,
    markdown_to_story,
    story_to_markdown,
)
from onep.storage.models import AcceptanceCriterion, Feature, Story


@pytest.fixture
def story() -> Story:
    return Story(
        id="reset-password",
        title="Reset password",
        feature="auth",
        priority="high",
        as_a="registered user",
        i_want="to reset my password",
        so_that="I can regain access",
        acceptance_criteria=[
            AcceptanceCriterion(text="A reset link is emailed", completed=True),
            AcceptanceCriterion(text="The link expires after 1 hour"),
        ],
        open_questions=["Single use links?", "Rate limits?"],
        edge_cases=["Unknown email address"],
        tags=["security"],
    )


# -- Frontmatter -------------------------------------------------------------


def test_load_frontmatter_without_fence() -> None:
    assert load_frontmatter("just text") == ({}, "just text")


def test_dump_and_load_frontmatter() -> None:
    text = dump_frontmatter("\nBody\n", {"id": "x", "tags": ["a"]})

    assert text.startswith("---\nid: x\n")
    assert load_frontmatter(text) == ({"id": "x", "tags": ["a"]}, "\nBody\n")


def test_load_frontmatter_invalid_yaml() -> None:
    with pytest.raises(ValueError, match="Invalid frontmatter"):
        load_frontmatter("---\nid: [unclosed\n---\n")


def test_load_frontmatter_not_a_mapping() -> None:
    with pytest.raises(ValueError, match="not a mapping"):
        load_frontmatter("---\n- a\n- b\n---\n")


# -- Stories -----------------------------------------------------------------


def test_story_document_layout(story: Story) -> None:
    text = story_to_markdown(story)

    meta, body = load_frontmatter(text)
    assert meta["id"] == "reset-password"
    assert meta["feature"] == "auth"
    assert meta["tags"] == ["security"]
    assert "createdAt" in meta
    assert "persona" not in meta
    assert "asA" not in meta

    assert "**As a** registered user" in body
    assert "- [x] A reset link is emailed" in body
    assert "- [ ] The link expires after 1 hour" in body
    assert "1. Single use links?" in body
    assert "2. Rate limits?" in body
    assert "- Unknown email address" in body


def test_story_parses_back(story: Story) -> None:
    assert markdown_to_story(story_to_markdown(story)) == story


def test_minimal_story_parses_back() -> None:
    story = Story(id="bare", title="Bare story")

    parsed = markdown_to_story(story_to_markdown(story))

    assert parsed == story
    assert parsed.acceptance_criteria == []
    assert parsed.as_a is None


def test_story_missing_id_is_invalid() -> None:
    with pytest.raises(ValueError):
        markdown_to_story("---\ntitle: No id\n---\n")


# -- Features ----------------------------------------------------------------


def test_feature_parses_back() -> None:
    feature = Feature(
        id="auth",
        title="Authentication",
        description="Sign in and out.",
        success_criteria=["95% of logins under 2s"],
        tags=["core"],
    )

    text = feature_to_markdown(feature)

    assert "## Description\n\nSign in and out." in text
    assert "- 95% of logins under 2s" in text
    assert markdown_to_feature(text) == feature
