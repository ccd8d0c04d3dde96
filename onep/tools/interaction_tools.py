"""Interactive tools — ask the user a question, present a draft for approval.

These block on terminal prompts. If the user cancels a prompt, the
``PromptCancelledError`` is deliberately not caught here: it ends the
current chat turn.
"""

from pydantic import BaseModel, Field

from onep.tools.base import ToolContext, ToolName, ToolParams, ToolResult
from onep.tools.registry import registry
from onep.ui.base import QuestionOption

CUSTOM_ANSWER = "__custom__"
CUSTOM_LABEL = "Other (custom answer)"


class Option(BaseModel):
    label: str = Field(description="Short option label")
    value: str = Field(description="Value if selected")
    description: str | None = Field(default=None, description="Longer description of the option")


class AskUserQuestionParams(ToolParams):
    question: str = Field(description="The question to ask the user")
    options: list[Option] = Field(
        description="Multiple choice options for the user to select from"
    )
    allow_custom: bool = Field(
        default=True, description="Whether to allow the user to provide a custom answer"
    )
    multi_select: bool = Field(default=False, description="Whether to allow multiple selections")


class PresentDraftParams(ToolParams):
    title: str = Field(description="Brief descriptive title for the story")
    as_a: str = Field(description="The user role/persona")
    i_want: str = Field(description="What the user wants to accomplish")
    so_that: str = Field(description="The value/benefit the user gains")
    acceptance_criteria: list[str] = Field(description="Testable acceptance criteria")
    priority: str | None = Field(default=None, description="Suggested priority level")
    edge_cases: list[str] | None = Field(default=None, description="Edge cases to consider")
    open_questions: list[str] | None = Field(
        default=None, description="Questions that still need an answer"
    )


@registry.tool(
    name=ToolName.ASK_USER_QUESTION,
    description=(
        "Ask the user a question with multiple-choice options. Use this to gather "
        "requirements, clarify needs, or guide the story writing process. Always prefer "
        "using this over asking open-ended questions when you can provide helpful options."
    ),
    params_model=AskUserQuestionParams,
)
async def ask_user_question(
    ctx: ToolContext,
    question: str,
    options: list[dict],
    allow_custom: bool = True,
    multi_select: bool = False,
) -> ToolResult:
    choices = [QuestionOption(**opt) for opt in options]
    if allow_custom:
        choices.append(
            QuestionOption(
                label=CUSTOM_LABEL, value=CUSTOM_ANSWER, description="Enter your own answer"
            )
        )
    if not choices:
        return ToolResult(error="No options to choose from")

    answer: str | list[str]
    if multi_select:
        answer = await ctx.ui.ask_multi_choice(question, choices)
        if CUSTOM_ANSWER in answer:
            custom = await ctx.ui.ask_free_text("Please enter your answer:")
            answer = [a for a in answer if a != CUSTOM_ANSWER] + [custom]
    else:
        answer = await ctx.ui.ask_single_choice(question, choices)
        if answer == CUSTOM_ANSWER:
            answer = await ctx.ui.ask_free_text("Please enter your answer:")

    return ToolResult(
        data={"question": question, "answer": answer},
        requires_user_input=True,
        user_input=answer,
    )


@registry.tool(
    name=ToolName.PRESENT_DRAFT,
    description=(
        "Present a draft story to the user for review and approval before saving. "
        "Always use this before creating a story to confirm details."
    ),
    params_model=PresentDraftParams,
)
async def present_draft(
    ctx: ToolContext,
    title: str,
    as_a: str,
    i_want: str,
    so_that: str,
    acceptance_criteria: list[str],
    priority: str | None = None,
    edge_cases: list[str] | None = None,
    open_questions: list[str] | None = None,
) -> ToolResult:
    ctx.ui.display_draft(
        "Story Draft",
        {
            "Title": title,
            "As a": as_a,
            "I want": i_want,
            "So that": so_that,
            "Acceptance Criteria": acceptance_criteria,
            "Priority": priority,
            "Edge Cases": edge_cases,
            "Open Questions": open_questions,
        },
    )

    if await ctx.ui.ask_yes_no("Do you approve this story draft?", default=True):
        return ToolResult(data={"approved": True, "message": "Draft approved by user"})

    feedback = await ctx.ui.ask_free_text("What would you like to change?")
    return ToolResult(data={"approved": False, "feedback": feedback})
