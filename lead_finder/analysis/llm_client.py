"""Unified LLM client: routes to Anthropic (primary) or OpenAI (fallback)."""

from __future__ import annotations

import asyncio
import logging

logger = logging.getLogger(__name__)


class LLMError(RuntimeError):
    """Raised when no provider produced a usable text reply."""


async def llm_complete(
    prompt: str,
    api_key_anthropic: str,
    api_key_openai: str,
    model_anthropic: str = "claude-sonnet-4-20250514",
    model_openai: str = "gpt-4o",
    max_tokens: int = 12000,
    timeout: int = 120,
) -> str:
    """Send a single user message to an LLM and return the reply text.

    Tries Anthropic first; any Anthropic failure falls back to OpenAI for
    this call when an OpenAI key is configured. Raises LLMError otherwise.
    """
    if api_key_anthropic:
        try:
            return await asyncio.wait_for(
                _call_anthropic(prompt, api_key_anthropic, model_anthropic, max_tokens),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Anthropic call timed out after %ds", timeout)
            if not api_key_openai:
                raise LLMError(f"Anthropic call timed out after {timeout}s")
        except Exception as e:
            logger.error("Anthropic error: %s", e)
            if not api_key_openai:
                raise
        logger.info("Falling back to OpenAI for this call")

    if api_key_openai:
        return await asyncio.wait_for(
            _call_openai(prompt, api_key_openai, model_openai, max_tokens),
            timeout=timeout,
        )

    raise LLMError(
        "No LLM provider available. Set ANTHROPIC_API_KEY or OPENAI_API_KEY."
    )


async def _call_anthropic(
    prompt: str,
    api_key: str,
    model: str,
    max_tokens: int,
) -> str:
    """Call the Anthropic Messages API and return the first text block."""
    import anthropic

    async with anthropic.AsyncAnthropic(api_key=api_key) as client:
        response = await client.messages.create(
            model=model,
            max_tokens=max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )
    for block in response.content:
        if getattr(block, "type", None) == "text":
            return block.text
    raise LLMError("No text content in Anthropic response")


async def _call_openai(
    prompt: str,
    api_key: str,
    model: str,
    max_tokens: int,
) -> str:
    """Call the OpenAI chat completions API."""
    from openai import AsyncOpenAI

    async with AsyncOpenAI(api_key=api_key) as client:
        response = await client.chat.completions.create(
            model=model,
            max_tokens=max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )
    text = response.choices[0].message.content
    if not text:
        raise LLMError("Empty OpenAI response")
    return text
