"""Anthropic Claude access through PydanticAI, returning validated models.

Responses are streamed: a full campaign analysis runs to several thousand
output tokens and a silent connection gets dropped by idle timeouts.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Any, TypeVar

import structlog
from pydantic import BaseModel
from pydantic_ai.models.anthropic import AnthropicModelSettings

from growthcase.config import Settings
from growthcase.metrics import llm_tokens_total

if TYPE_CHECKING:
    from pydantic_ai import Agent
    from pydantic_ai.models import Model
    from pydantic_ai.usage import RunUsage

logger = structlog.get_logger()

T = TypeVar("T", bound=BaseModel)

_DEFAULT_SYSTEM = "You are a senior performance-marketing analyst."


def _thread_loop() -> asyncio.AbstractEventLoop:
    """Event loop for the calling thread; API worker threads start without one."""
    try:
        loop = asyncio.get_event_loop()
    except RuntimeError:
        loop = None
    if loop is None or loop.is_closed():
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
    return loop


async def _stream_to_completion(
    agent: Agent[None, T],
    prompt: str,
    model_settings: AnthropicModelSettings,
) -> tuple[T, RunUsage]:
    async with agent.run_stream(prompt, model_settings=model_settings) as stream:
        async for _partial in stream.stream_output():
            pass
        return await stream.get_output(), stream.usage()


class LLMClient:
    """Structured generation against one configured Claude model."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()
        self._model: Model | None = None
        self._agents: dict[tuple[type[BaseModel], str], Agent[None, Any]] = {}

    @property
    def model(self) -> Model:
        if self._model is None:
            from pydantic_ai.models.anthropic import AnthropicModel
            from pydantic_ai.providers.anthropic import AnthropicProvider

            self._model = AnthropicModel(
                self.settings.llm_model,
                provider=AnthropicProvider(api_key=self.settings.anthropic_api_key),
            )
        return self._model

    @property
    def is_available(self) -> bool:
        return bool(self.settings.anthropic_api_key)

    def _agent_for(self, response_model: type[T], system: str) -> Agent[None, T]:
        # One agent per output schema and system prompt; the instructions stay
        # byte-identical between calls so Anthropic's prompt cache can hit.
        key = (response_model, system)
        agent = self._agents.get(key)
        if agent is None:
            from pydantic_ai import Agent

            agent = Agent(self.model, output_type=response_model, system_prompt=system)
            self._agents[key] = agent
        return agent

    def _model_settings(
        self,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> AnthropicModelSettings:
        return AnthropicModelSettings(
            temperature=self.settings.llm_temperature if temperature is None else temperature,
            max_tokens=self.settings.llm_max_tokens if max_tokens is None else max_tokens,
            anthropic_cache_instructions=True,
        )

    def _record_usage(self, response_model: str, usage: RunUsage, elapsed: float) -> None:
        model_label = self.settings.llm_model
        counts = {
            "request": usage.input_tokens or 0,
            "response": usage.output_tokens or 0,
            "cache_read": usage.cache_read_tokens or 0,
        }
        for token_type, count in counts.items():
            llm_tokens_total.labels(model=model_label, token_type=token_type).inc(count)

        logger.info(
            "LLM response received",
            model=model_label,
            response_model=response_model,
            input_tokens=counts["request"],
            output_tokens=counts["response"],
            cache_read_tokens=counts["cache_read"],
            duration_s=round(elapsed, 2),
        )

    def generate(
        self,
        prompt: str,
        response_model: type[T],
        system: str = "",
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> T:
        """Run *prompt* and return the output parsed as *response_model*.

        Validation failures surface as pydantic_ai's UnexpectedModelBehavior
        once the agent's own output retries are used up.
        """
        agent = self._agent_for(response_model, system or _DEFAULT_SYSTEM)
        model_settings = self._model_settings(temperature, max_tokens)

        logger.debug(
            "LLM request",
            model=self.settings.llm_model,
            response_model=response_model.__name__,
            prompt_chars=len(prompt),
        )
        start = time.monotonic()
        output, usage = _thread_loop().run_until_complete(
            _stream_to_completion(agent, prompt, model_settings)
        )
        self._record_usage(response_model.__name__, usage, time.monotonic() - start)
        return output
