from typing import Any, Optional
from slidemaker.core.config import Settings
from langchain_openai import ChatOpenAI

# Aliases -> provider models
MODEL_ALIASES = {
    "default": "gpt-4o-mini",
    "openai:gpt-4o-mini": "gpt-4o-mini",
    "openai:gpt-4o": "gpt-4o",
}

def get_chat(
    settings: Settings,
    model_alias: Optional[str] = None,
    temperature: Optional[float] = None,
    api_key: Optional[str] = None,
) -> Optional[Any]:
    """
    Return a ChatOpenAI instance, or None when no API key is available.
    A per-request `api_key` wins over the configured one.
    OPENAI_BASE_URL points the client at any OpenAI-compatible server.
    """
    alias = model_alias or settings.SYNTHESIS_MODEL
    model_name = MODEL_ALIASES.get(alias, alias)

    key = api_key or settings.OPENAI_API_KEY
    if not key:
        return None

    kwargs = {}
    if settings.OPENAI_BASE_URL:
        kwargs["base_url"] = settings.OPENAI_BASE_URL
    temp = settings.SYNTHESIS_TEMPERATURE if temperature is None else temperature
    return ChatOpenAI(model=model_name, temperature=temp, api_key=key, **kwargs)
