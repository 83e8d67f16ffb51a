# careshift_project_root/analytics/completion.py
# TEXT-COMPLETION SERVICE CLIENT

import logging
import random
import time
from typing import Callable, Dict, List, Optional, Tuple

import certifi
import requests

from config import settings

logger = logging.getLogger(__name__)


class CompletionError(RuntimeError):
    pass


# Retry on rate limit / transient server errors
RETRY_STATUS = {429, 500, 502, 503, 504}

ChatMessages = List[Dict[str, str]]


def _backoff(attempt: int) -> float:
    base = settings.COMPLETION.backoff_base_seconds
    return base * (2 ** attempt) * (0.8 + 0.4 * random.random())


def _extract_reply(data: Dict) -> str:
    choices = data.get("choices") or []
    if not choices:
        raise CompletionError(f"Empty or malformed response (no choices): {data}")
    content = ((choices[0] or {}).get("message") or {}).get("content")
    if not content or not str(content).strip():
        raise CompletionError("Completion returned no reply content.")
    return str(content).strip()


def call_completion(
    messages: ChatMessages,
    model: Optional[str] = None,
    timeout: Optional[float] = None
) -> str:
    """
    Sends role-tagged messages to the chat-completions endpoint and returns
    the reply text. Transient failures are retried with jittered backoff;
    each request is bounded by `timeout` seconds.

    Raises:
        CompletionError: when no reply could be obtained.
    """
    config = settings.COMPLETION
    api_key = settings.OPENAI_API_KEY.get_secret_value() if settings.OPENAI_API_KEY else None
    if not api_key:
        raise CompletionError("Missing CARESHIFT_OPENAI_API_KEY")

    headers = {"Content-Type": "application/json", "Authorization": f"Bearer {api_key}"}
    body = {"model": model or config.model, "messages": messages}
    attempts = max(1, config.max_attempts)

    last_status = None
    last_err_text = None
    for i in range(attempts):
        try:
            resp = requests.post(
                config.api_url,
                headers=headers,
                json=body,
                timeout=timeout or config.timeout_seconds,
                verify=certifi.where(),
            )
            last_status = resp.status_code

            if resp.status_code in RETRY_STATUS and i < attempts - 1:
                last_err_text = resp.text
                logger.warning(f"Completion service returned HTTP {resp.status_code}; retrying ({i + 1}/{attempts}).")
                time.sleep(_backoff(i))
                continue

            resp.raise_for_status()
            return _extract_reply(resp.json())

        except requests.exceptions.RequestException as e:
            last_err_text = getattr(getattr(e, "response", None), "text", last_err_text)
            if i < attempts - 1:
                logger.warning(f"Completion request failed ({e}); retrying ({i + 1}/{attempts}).")
                time.sleep(_backoff(i))
                continue

            msg = f"{e}"
            if last_status is not None:
                msg = f"HTTP {last_status}: {msg}"
            if last_err_text:
                msg += f" | body: {last_err_text}"
            raise CompletionError(f"Completion call failed: {msg}") from e

    raise CompletionError(f"Completion call failed after {attempts} attempt(s).")


def safe_call_completion(
    messages: ChatMessages,
    model: Optional[str] = None,
    timeout: Optional[float] = None,
    completion_fn: Optional[Callable[..., str]] = None
) -> Tuple[Optional[str], Optional[str]]:
    """
    Wrapper that never raises; returns (reply, error_message). Exactly one of
    the two is set. `completion_fn` defaults to `call_completion`.
    """
    completion_fn = completion_fn or call_completion
    try:
        return completion_fn(messages, model=model, timeout=timeout), None
    except CompletionError as e:
        logger.error(f"Completion unavailable: {e}")
        return None, str(e)
