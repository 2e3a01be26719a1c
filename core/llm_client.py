import logging
import os

import requests

from core.errors import ProviderError

logger = logging.getLogger(__name__)

OPENROUTER_URL = os.getenv("OPENROUTER_URL", "https://openrouter.ai/api/v1/chat/completions")
SETUP_MODEL = os.getenv("REFEREE_SETUP_MODEL", "google/gemini-2.5-flash")
COMPARE_MODEL = os.getenv("REFEREE_COMPARE_MODEL", "google/gemini-2.5-pro")
TIMEOUT = float(os.getenv("REFEREE_LLM_TIMEOUT", "60"))


def build_messages(prompt, system=None):
    messages = []
    if system:
        messages.append({"role": "system", "content": system})
    messages.append({"role": "user", "content": prompt})
    return messages


def call_llm(messages, temperature=0.2, model=SETUP_MODEL, schema=None, schema_name="response", max_tokens=None):
    """
    Send a chat completion request to OpenRouter and return the reply text.

    When `schema` is given the request asks for JSON output matching it.
    Raises ProviderError on any transport, HTTP or payload problem.
    """
    api_key = os.getenv("OPENROUTER_API_KEY")
    if not api_key:
        raise ProviderError("OPENROUTER_API_KEY is not set")

    headers = {
        "Authorization": f"Bearer {api_key}",
        "HTTP-Referer": "https://the-referee-demo",
        "X-Title": "The Referee",
        "Content-Type": "application/json"
    }
    payload = {
        "model": model,
        "messages": messages,
        "temperature": temperature
    }
    if schema is not None:
        payload["response_format"] = {
            "type": "json_schema",
            "json_schema": {"name": schema_name, "schema": schema}
        }
    if max_tokens:
        payload["max_tokens"] = max_tokens

    logger.debug("LLM request model=%s schema=%s", model, schema_name if schema else None)
    try:
        r = requests.post(OPENROUTER_URL, headers=headers, json=payload, timeout=TIMEOUT)
        r.raise_for_status()
        content = r.json()["choices"][0]["message"]["content"]
    except requests.RequestException as e:
        raise ProviderError(f"LLM request failed: {e}") from e
    except (ValueError, KeyError, IndexError, TypeError) as e:
        raise ProviderError(f"Unexpected LLM response shape: {e}") from e

    if not content:
        raise ProviderError("LLM returned an empty response")
    return content
