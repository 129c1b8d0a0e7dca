"""
Drafting providers.

A provider is the async generate(prompt, context) collaborator itself:
awaiting provider(prompt, context) returns document text. The context is
sent as the model's system instructions (DEFAULT_SYSTEM_PROMPT when none is
given) and the prompt as the only user message, both verbatim.

SDK calls block, so they run in a worker thread. Errors a provider lists as
transient (rate limits, overload, dropped connections) are retried with
doubling delays; anything else propagates on the first attempt.
"""

import asyncio
import os
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional, Tuple, Type

from dotenv import load_dotenv

from scribe.contexts.generation.logger import log_llm_response, log_retry

load_dotenv()

MAX_ATTEMPTS = 5
FIRST_DELAY = 1.0
MAX_TOKENS = 4096

DEFAULT_SYSTEM_PROMPT = "You write resumes, cover letters and emails as plain text."

GenerateFn = Callable[[str, Optional[str]], Awaitable[str]]


@dataclass(frozen=True)
class Completion:
    """Text of one model call and its token usage."""

    text: str
    input_tokens: int = 0
    output_tokens: int = 0


def backoff_delays(attempts: int = MAX_ATTEMPTS, first: float = FIRST_DELAY) -> List[float]:
    """
    Sleep before each retry.

    Example:
        >>> backoff_delays(4)
        [1.0, 2.0, 4.0]
    """
    return [first * 2**retry for retry in range(attempts - 1)]


def _require_key(variable: str) -> str:
    key = os.getenv(variable)
    if not key:
        raise ValueError(f"{variable} environment variable not set")
    return key


class DraftingProvider(ABC):
    """
    One model endpoint that drafts documents.

    Subclasses set `vendor`, fill `transient_errors` and implement
    `_complete` for a single blocking call.
    """

    vendor: str = ""
    transient_errors: Tuple[Type[Exception], ...] = ()

    def __init__(self, model: str):
        self.model = model
        self.sleep: Callable[[float], None] = time.sleep

    @property
    def provider_name(self) -> str:
        return f"{self.vendor}/{self.model}"

    @abstractmethod
    def _complete(self, instructions: str, prompt: str) -> Completion:
        pass

    def complete(self, prompt: str, context: Optional[str] = None) -> Completion:
        """Blocking call with retries on transient errors."""
        instructions = context or DEFAULT_SYSTEM_PROMPT
        delays = backoff_delays()
        for attempt in range(1, MAX_ATTEMPTS + 1):
            try:
                completion = self._complete(instructions, prompt)
            except self.transient_errors as e:
                if attempt == MAX_ATTEMPTS:
                    raise
                delay = delays[attempt - 1]
                log_retry(f"{self.provider_name}: {type(e).__name__}", delay, attempt, MAX_ATTEMPTS)
                self.sleep(delay)
            else:
                log_llm_response(self.provider_name, completion.input_tokens, completion.output_tokens)
                return completion

    async def __call__(self, prompt: str, context: Optional[str] = None) -> str:
        completion = await asyncio.to_thread(self.complete, prompt, context)
        return completion.text


class AnthropicProvider(DraftingProvider):
    vendor = "anthropic"

    def __init__(self, model: str = "claude-sonnet-4-20250514"):
        # Lazy import - the SDK is only needed when this provider is chosen
        try:
            import anthropic
        except ImportError as e:
            raise ImportError("anthropic package required. Install with: pip install scribe[llm]") from e

        super().__init__(model)
        self.client = anthropic.Anthropic(api_key=_require_key("ANTHROPIC_API_KEY"))
        self.transient_errors = (anthropic.RateLimitError, anthropic.InternalServerError, anthropic.APIConnectionError)

    def _complete(self, instructions: str, prompt: str) -> Completion:
        response = self.client.messages.create(
            model=self.model,
            max_tokens=MAX_TOKENS,
            system=instructions,
            messages=[{"role": "user", "content": prompt}],
        )
        text = "".join(block.text for block in response.content if getattr(block, "type", "") == "text")
        return Completion(text, response.usage.input_tokens, response.usage.output_tokens)


class OpenAIProvider(DraftingProvider):
    vendor = "openai"

    def __init__(self, model: str = "gpt-4o"):
        try:
            import openai
        except ImportError as e:
            raise ImportError("openai package required. Install with: pip install scribe[llm]") from e

        super().__init__(model)
        self.client = openai.OpenAI(api_key=_require_key("OPENAI_API_KEY"))
        self.transient_errors = (openai.RateLimitError, openai.InternalServerError, openai.APIConnectionError)

    def _complete(self, instructions: str, prompt: str) -> Completion:
        response = self.client.chat.completions.create(
            model=self.model,
            max_tokens=MAX_TOKENS,
            messages=[
                {"role": "system", "content": instructions},
                {"role": "user", "content": prompt},
            ],
        )
        usage = response.usage
        return Completion(
            response.choices[0].message.content or "",
            usage.prompt_tokens if usage else 0,
            usage.completion_tokens if usage else 0,
        )


PROVIDERS: Dict[str, Type[DraftingProvider]] = {
    "anthropic": AnthropicProvider,
    "openai": OpenAIProvider,
}


def get_provider(vendor: Optional[str] = None, model: Optional[str] = None) -> DraftingProvider:
    """
    Instantiate a provider by vendor name.

    Args:
        vendor: "anthropic" or "openai" (default: LLM_PROVIDER, else "openai")
        model: Model name (default: the provider's own)

    Raises:
        ValueError: Unknown vendor or missing API key
        ImportError: The vendor SDK is not installed
    """
    vendor = (vendor or os.getenv("LLM_PROVIDER", "openai")).lower()
    if vendor not in PROVIDERS:
        raise ValueError(f"Unknown provider: {vendor}. Available: {sorted(PROVIDERS)}")
    provider_class = PROVIDERS[vendor]
    return provider_class(model) if model else provider_class()


def as_generate(provider: DraftingProvider) -> GenerateFn:
    """
    The provider as draft_document's generate collaborator.

    Example:
        >>> raw = asyncio.run(draft_document(as_generate(get_provider("anthropic")), "Write a resume for ..."))
    """
    if not isinstance(provider, DraftingProvider):
        raise TypeError(f"Expected a DraftingProvider, got {type(provider).__name__}")
    return provider
