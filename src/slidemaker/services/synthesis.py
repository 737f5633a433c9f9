# src/slidemaker/services/synthesis.py
from __future__ import annotations

from typing import Any, List, Optional

import openai
from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import BaseModel, Field, model_validator

from slidemaker.core.config import Settings
from slidemaker.core.logging import get_logger
from slidemaker.kernel.errors import SynthesisFailure, SynthesisUnavailable
from slidemaker.services.llm import get_chat

log = get_logger(__name__)


class SynthesisPolicy(BaseModel):
    model_alias: Optional[str] = None
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    min_bullets: int = Field(default=3, ge=1)
    max_bullets: int = Field(default=5, ge=1)
    speaker_notes: bool = True

    @model_validator(mode="after")
    def _bullet_range(self) -> "SynthesisPolicy":
        if self.min_bullets > self.max_bullets:
            raise ValueError("min_bullets must not exceed max_bullets")
        return self


SYSTEM_PROMPT = "You are an expert presentation designer and educator."
INVALID_KEY_DETAIL = "Invalid API key. Please check your API key in settings."


def build_messages(content: str, policy: SynthesisPolicy) -> List[Any]:
    notes_rule = (
        "Include speaker notes with additional context or explanation"
        if policy.speaker_notes else
        "Leave speaker notes empty"
    )
    rules = [
        "Create AS MANY slides as needed to properly cover ALL the content. There is no slide limit.",
        "Each slide should cover ONE clear concept or topic",
        "Each slide needs a concise, descriptive title",
        f"Each slide should have {policy.min_bullets}-{policy.max_bullets} bullet points maximum",
        "Bullet points must be SELF-EXPLANATORY to someone who has never read the source material",
        "Avoid cryptic abbreviations or shorthand that requires prior knowledge",
        "Use simple, clear language while maintaining accuracy",
        "Define technical terms when they appear",
        notes_rule,
        "Structure the slides in a logical learning progression",
        "Do NOT skip or summarize content; create slides for EVERYTHING",
    ]
    numbered = "\n".join(f"{i}. {r}" for i, r in enumerate(rules, start=1))
    user = (
        "Analyze the following textbook content and create presentation slides.\n\n"
        f'CONTENT TO ANALYZE:\n"""\n{content}\n"""\n\n'
        f"CRITICAL RULES:\n{numbered}\n\n"
        "RESPONSE FORMAT:\n"
        "Return ONLY a valid JSON array of slide objects. No markdown, no code blocks, no extra text.\n"
        "Each slide object must have:\n"
        '- "title": string (the slide title)\n'
        f'- "bullets": string[] (array of {policy.min_bullets}-{policy.max_bullets} bullet points)\n'
        '- "speakerNotes": string (additional context for the presenter)\n'
    )
    return [SystemMessage(content=SYSTEM_PROMPT), HumanMessage(content=user)]


def _message_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    # multi-part content: keep the text parts in order
    parts = []
    for part in content or []:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)


class ChatSynthesizer:
    """
    Calls an OpenAI-compatible chat model and returns its raw answer.
    The answer is untrusted; kernel.ops.validate decides what survives.
    """

    def __init__(self, settings: Settings, api_key: Optional[str] = None):
        self.settings = settings
        self.api_key = api_key

    def __call__(self, content: str, policy: Optional[SynthesisPolicy] = None) -> str:
        policy = policy or SynthesisPolicy()
        llm = get_chat(
            self.settings,
            model_alias=policy.model_alias,
            temperature=policy.temperature,
            api_key=self.api_key,
        )
        if llm is None:
            raise SynthesisUnavailable()

        log.info("synthesis request chars=%d", len(content))
        try:
            result = llm.invoke(build_messages(content, policy))
        except openai.AuthenticationError as e:
            log.warning("synthesis rejected the API key")
            raise SynthesisUnavailable(detail=INVALID_KEY_DETAIL) from e
        except openai.OpenAIError as e:
            log.warning("synthesis provider error=%s", type(e).__name__)
            raise SynthesisFailure() from e
        text = _message_text(result.content).strip()
        log.info("synthesis response chars=%d", len(text))
        return text
