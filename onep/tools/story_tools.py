"""Story tools — create, update, list, search and score stories."""

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from onep.quality import analyze_invest
from onep.storage.models import (
    BACKLOG,
    Priority,
    Story,
    StoryStatus,
    criteria_from_texts,
    now_iso,
)
from onep.tools.base import ToolContext, ToolName, ToolParams, ToolResult
from onep.tools.registry import registry

logger = logging.getLogger(__name__)


# -- Param models --------------------------------------------------------------


class CreateStoryParams(ToolParams):
    story_id: str = Field(
        alias="id",
        description='URL-friendly ID for the story (e.g., "user-can-reset-password")',
    )
    title: str = Field(description="Brief descriptive title for the story")
    feature: str | None = Field(
        default=None, description="Feature/epic ID this story belongs to (optional)"
    )
    as_a: str = Field(description='The user role/persona (e.g., "registered user", "admin")')
    i_want: str = Field(description="What the user wants to accomplish")
    so_that: str = Field(description="The value/benefit the user gains")
    acceptance_criteria: list[str] = Field(
        description="List of acceptance criteria (testable conditions)"
    )
    priority: Priority | None = Field(default=None, description="Priority level")
    edge_cases: list[str] | None = Field(default=None, description="Edge cases to consider")
    open_questions: list[str] | None = Field(
        default=None, description="Questions that need to be resolved"
    )


class StoryUpdates(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str | None = None
    status: StoryStatus | None = None
    priority: Priority | None = None
    as_a: str | None = None
    i_want: str | None = None
    so_that: str | None = None
    acceptance_criteria: list[str] | None = None
    edge_cases: list[str] | None = None
    open_questions: list[str] | None = None


class UpdateStoryParams(ToolParams):
    story_id: str = Field(alias="id", description="The story ID to update")
    feature: str = Field(description="Feature ID where the story is located")
    updates: StoryUpdates = Field(description="Fields to update")


class ListStoriesParams(ToolParams):
    feature: str | None = Field(default=None, description="Filter by feature ID")
    status: StoryStatus | None = Field(default=None, description="Filter by status")


class SearchStoriesParams(ToolParams):
    query: str = Field(description="Search query to find matching stories")


class AnalyzeStoryQualityParams(ToolParams):
    story_id: str = Field(description="The story ID to analyze")
    feature_id: str = Field(description="The feature ID where the story is located")


# -- Tools ---------------------------------------------------------------------


@registry.tool(
    name=ToolName.CREATE_STORY,
    description=(
        "Create a new user story with the provided details. Use this after "
        "gathering requirements from the user through questions."
    ),
    params_model=CreateStoryParams,
)
async def create_story(
    ctx: ToolContext,
    story_id: str,
    title: str,
    as_a: str,
    i_want: str,
    so_that: str,
    acceptance_criteria: list[str],
    feature: str | None = None,
    priority: str | None = None,
    edge_cases: list[str] | None = None,
    open_questions: list[str] | None = None,
) -> ToolResult:
    try:
        story = Story(
            id=story_id,
            title=title,
            priority=priority or "medium",
            feature=feature,
            as_a=as_a,
            i_want=i_want,
            so_that=so_that,
            acceptance_criteria=criteria_from_texts(acceptance_criteria),
            open_questions=open_questions or [],
            edge_cases=edge_cases or [],
        )
        ctx.store.create_story(story)
    except (OSError, ValueError) as exc:
        logger.exception("Failed to create story %s", story_id)
        return ToolResult(error=f"Failed to create story: {exc}")

    return ToolResult(data={
        "message": f'Story "{story.title}" created successfully',
        "storyId": story.id,
        "feature": story.feature_id,
    })


@registry.tool(
    name=ToolName.UPDATE_STORY,
    description="Update an existing story with new information",
    params_model=UpdateStoryParams,
)
async def update_story(
    ctx: ToolContext,
    story_id: str,
    feature: str,
    updates: dict[str, Any],
) -> ToolResult:
    feature_id = feature or BACKLOG
    changes = {k: v for k, v in updates.items() if v is not None}
    try:
        existing = ctx.store.get_story(feature_id, story_id)
        if existing is None:
            return ToolResult(error=f'Story "{story_id}" not found in feature "{feature_id}"')

        if "acceptance_criteria" in changes:
            changes["acceptance_criteria"] = criteria_from_texts(changes["acceptance_criteria"])

        updated = Story.model_validate({
            **existing.model_dump(),
            **changes,
            "updated_at": now_iso(),
        })
        ctx.store.update_story(updated)
    except (OSError, ValueError) as exc:
        logger.exception("Failed to update story %s", story_id)
        return ToolResult(error=f"Failed to update story: {exc}")

    return ToolResult(data={"message": f'Story "{story_id}" updated successfully'})


@registry.tool(
    name=ToolName.LIST_STORIES,
    description="List stories, optionally filtered by feature or status",
    params_model=ListStoriesParams,
)
async def list_stories(
    ctx: ToolContext,
    feature: str | None = None,
    status: str | None = None,
) -> ToolResult:
    try:
        stories = ctx.store.list_stories(feature)
    except (OSError, ValueError) as exc:
        return ToolResult(error=f"Failed to list stories: {exc}")

    if status:
        stories = [s for s in stories if s.status == status]

    ctx.ui.display_story_list(stories)

    return ToolResult(data={
        "count": len(stories),
        "stories": [
            {
                "id": s.id,
                "title": s.title,
                "status": s.status,
                "priority": s.priority,
                "feature": s.feature,
            }
            for s in stories
        ],
    })


@registry.tool(
    name=ToolName.SEARCH_STORIES,
    description="Search across all stories using a text query",
    params_model=SearchStoriesParams,
)
async def search_stories(ctx: ToolContext, query: str) -> ToolResult:
    try:
        stories = ctx.store.search_stories(query)
    except OSError as exc:
        return ToolResult(error=f"Failed to search stories: {exc}")

    ctx.ui.display_story_list(stories)

    return ToolResult(data={
        "query": query,
        "count": len(stories),
        "stories": [
            {"id": s.id, "title": s.title, "status": s.status, "feature": s.feature}
            for s in stories
        ],
    })


@registry.tool(
    name=ToolName.ANALYZE_STORY_QUALITY,
    description=(
        "Analyze a story against INVEST criteria "
        "(Independent, Negotiable, Valuable, Estimable, Small, Testable)"
    ),
    params_model=AnalyzeStoryQualityParams,
)
async def analyze_story_quality(
    ctx: ToolContext,
    story_id: str,
    feature_id: str,
) -> ToolResult:
    try:
        story = ctx.store.get_story(feature_id, story_id)
    except (OSError, ValueError) as exc:
        return ToolResult(error=f"Failed to analyze story: {exc}")

    if story is None:
        return ToolResult(error=f'Story "{story_id}" not found')

    analysis = analyze_invest(story)
    return ToolResult(data={"storyId": story_id, "analysis": analysis.to_dict()})
