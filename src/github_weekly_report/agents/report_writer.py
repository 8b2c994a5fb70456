"""Report Writer Agent - the completion backend for chained summarization."""

import logging

import openai
from agents import Agent, ModelSettings, RunConfig, Runner, set_default_openai_key
from agents.exceptions import AgentsException

from github_weekly_report.config import DEFAULT_MODEL, ReportConfig
from github_weekly_report.pipeline.chain import (
    DEFAULT_TEMPERATURE,
    CompletionError,
    CompletionOptions,
)

logger = logging.getLogger(__name__)

WORKFLOW_NAME = "github-weekly-report"


def create_report_writer_agent(
    instructions: str,
    model: str = DEFAULT_MODEL,
    max_tokens: int | None = None,
    temperature: float = DEFAULT_TEMPERATURE,
) -> Agent:
    """Create a tool-less agent that answers a single prompt.

    Args:
        instructions: The system prompt for this call
        model: The model to use
        max_tokens: Output length cap for this call
        temperature: Sampling temperature
    """
    return Agent(
        name="Report Writer",
        instructions=instructions,
        model=model,
        model_settings=ModelSettings(
            temperature=temperature,
            max_tokens=max_tokens,
        ),
    )


class AgentsCompletionService:
    """Completion service backed by the OpenAI Agents SDK.

    Every call builds a fresh agent and runs it once, so no conversation state
    is kept between calls and `restart` has nothing to discard. The chat id is
    used as the trace group id so both steps of a chained call show up
    together in tracing.
    """

    def __init__(self, model: str = DEFAULT_MODEL, api_key: str | None = None):
        self.model = model
        if api_key:
            set_default_openai_key(api_key)

    @classmethod
    def from_config(cls, config: ReportConfig) -> "AgentsCompletionService":
        return cls(model=config.model, api_key=config.get_api_key())

    async def complete(
        self,
        chat_id: str,
        system_prompt: str,
        user_prompt: str,
        options: CompletionOptions,
    ) -> str:
        agent = create_report_writer_agent(
            instructions=system_prompt,
            model=self.model,
            max_tokens=options.max_tokens,
            temperature=options.temperature,
        )
        try:
            result = await Runner.run(
                agent,
                user_prompt,
                run_config=RunConfig(workflow_name=WORKFLOW_NAME, group_id=chat_id),
            )
        except (AgentsException, openai.OpenAIError) as e:
            raise CompletionError(str(e)) from e

        logger.debug("completion for %s (restart=%s) returned", chat_id, options.restart)
        return str(result.final_output or "")
