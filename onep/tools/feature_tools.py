"""Feature tools — create and list features (epics)."""

import logging

from pydantic import Field

from onep.storage.models import Feature, Priority
from onep.tools.base import ToolContext, ToolName, ToolParams, ToolResult
from onep.tools.registry import registry

logger = logging.getLogger(__name__)


class CreateFeatureParams(ToolParams):
    feature_id: str = Field(
        alias="id", description='URL-friendly ID for the feature (e.g., "authentication")'
    )
    title: str = Field(description="Descriptive title for the feature")
    description: str | None = Field(default=None, description="Detailed description of the feature")
    success_criteria: list[str] | None = Field(
        default=None, description="Success criteria for the feature"
    )
    priority: Priority | None = Field(default=None, description="Priority level")


@registry.tool(
    name=ToolName.CREATE_FEATURE,
    description="Create a new feature/epic to group related stories",
    params_model=CreateFeatureParams,
)
async def create_feature(
    ctx: ToolContext,
    feature_id: str,
    title: str,
    description: str | None = None,
    success_criteria: list[str] | None = None,
    priority: str | None = None,
) -> ToolResult:
    try:
        feature = Feature(
            id=feature_id,
            title=title,
            description=description,
            priority=priority or "medium",
            success_criteria=success_criteria or [],
        )
        ctx.store.create_feature(feature)
    except (OSError, ValueError) as exc:
        logger.exception("Failed to create feature %s", feature_id)
        return ToolResult(error=f"Failed to create feature: {exc}")

    return ToolResult(data={
        "message": f'Feature "{feature.title}" created successfully',
        "featureId": feature.id,
    })


@registry.tool(
    name=ToolName.LIST_FEATURES,
    description="List all features/epics in the project",
)
async def list_features(ctx: ToolContext) -> ToolResult:
    try:
        features = ctx.store.list_features()
        for feature in features:
            ctx.ui.display_feature(feature, len(ctx.store.list_stories(feature.id)))
    except OSError as exc:
        return ToolResult(error=f"Failed to list features: {exc}")

    return ToolResult(data={
        "count": len(features),
        "features": [{"id": f.id, "title": f.title, "status": f.status} for f in features],
    })
