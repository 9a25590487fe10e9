from __future__ import annotations

import time
from typing import Any, Dict, Optional

import openai
import requests
from openai import OpenAI

from .config import (
    LLM_DEBUG,
    LLM_PROVIDER,
    LLM_REQUEST_TIMEOUT,
    OLLAMA_BASE_URL,
    OLLAMA_MODEL,
    OPENAI_API_KEY,
    OPENAI_BASE_URL,
    OPENAI_MODEL,
    CONNECTION_REFUSED_MESSAGE,
)
from .errors import LLMConnectionError, LLMRequestError
from .utils import _log_debug

_openai_client: Optional[OpenAI] = None


def get_openai_client() -> OpenAI:
  global _openai_client
  if _openai_client is None:
    if not OPENAI_API_KEY and not OPENAI_BASE_URL:
      raise RuntimeError("OPENAI_API_KEY is not set")
    # Local OpenAI-compatible servers accept any key.
    _openai_client = OpenAI(api_key=OPENAI_API_KEY or "ollama",
                            base_url=OPENAI_BASE_URL,
                            timeout=LLM_REQUEST_TIMEOUT)
  return _openai_client


# -------------------------
# LLM 프롬프트
# -------------------------
SCHEDULE_PROMPT_TEMPLATE = """You are a calendar scheduling assistant. Create calendar events based on the following request.
The user may request one or multiple tasks/events to be scheduled.

IMPORTANT: You must respond with ONLY a JSON object. No other text, no explanations, no comments.
The response must be a single JSON object with this exact structure:

{
  "events": [
    {
      "title": "Team Meeting",
      "startTime": "14:00",
      "endTime": "15:00",
      "description": "Team sync meeting"
    }
  ]
}

Rules:
1. Time format MUST be 24-hour (HH:mm) with leading zeros (e.g., "09:00" not "9:00")
2. All times must be between "00:00" and "23:59"
3. Include exactly these fields: title, startTime, endTime, description
4. Do not add any other fields
5. Do not add any text before or after the JSON
6. Create separate events for each task/activity mentioned
7. For recurring events, add "Recurring: [frequency]" to the description

Example valid times:
- "09:00" (not "9:00")
- "14:30" (not "2:30 pm")
- "23:00" (not "11:00 pm")
- "00:00" (for midnight)

User request: {REQUEST}"""

SUGGESTIONS_PROMPT_TEMPLATE = """You are an AI assistant specialized in optimizing learning and productivity schedules.

Current event: {EVENT}

Analyze this event and provide specific, actionable suggestions for:
1. Time optimization (Is this the best time for this activity?)
2. Learning effectiveness (How to maximize learning during this time?)
3. Preparation and materials needed
4. Related sub-tasks or prerequisites
5. Progress tracking metrics

Format your response as a structured list with clear, actionable items.
Be specific and practical in your suggestions.
Focus on measurable improvements and concrete steps.

Important: Respond with ONLY the suggestions, no additional text or explanations."""


def build_schedule_prompt(text: str) -> str:
  return SCHEDULE_PROMPT_TEMPLATE.replace("{REQUEST}", text)


def build_suggestions_prompt(event_description: str) -> str:
  return SUGGESTIONS_PROMPT_TEMPLATE.replace("{EVENT}", event_description)


# -------------------------
# LLM 호출 & 디버그
# -------------------------
def _debug_print(kind: str,
                 provider: str,
                 model_name: str,
                 prompt: str,
                 raw_content: str,
                 latency_ms: Optional[float] = None) -> None:
  if not LLM_DEBUG:
    return

  head = prompt[:220].replace("\n", "\\n")
  _log_debug(f"[LLM DEBUG] kind: {kind}")
  _log_debug(f"[LLM DEBUG] provider: {provider} model: {model_name}")
  _log_debug(f"[LLM DEBUG] prompt(head): {head}")
  _log_debug(f"[LLM DEBUG] raw_content: {raw_content}")
  if latency_ms is not None:
    _log_debug(f"[LLM DEBUG] latency_ms: {latency_ms:.1f} ms")


def _is_connection_refused(exc: BaseException) -> bool:
  seen = set()
  pending = [exc]
  while pending:
    current = pending.pop()
    if not isinstance(current, BaseException) or id(current) in seen:
      continue
    seen.add(id(current))
    if isinstance(current, ConnectionRefusedError):
      return True
    text = str(current)
    if "Connection refused" in text or "ECONNREFUSED" in text:
      return True
    pending.append(getattr(current, "reason", None))
    pending.append(current.__cause__)
    pending.append(current.__context__)
    for arg in getattr(current, "args", ()):
      if isinstance(arg, BaseException):
        pending.append(arg)
  return False


def _ollama_generate(prompt: str, failure_prefix: str) -> str:
  url = f"{OLLAMA_BASE_URL}/api/generate"
  payload: Dict[str, Any] = {
      "model": OLLAMA_MODEL,
      "prompt": prompt,
      "stream": False,
  }
  try:
    resp = requests.post(url,
                         json=payload,
                         headers={"Accept": "application/json"},
                         timeout=LLM_REQUEST_TIMEOUT)
    resp.raise_for_status()
    data = resp.json()
  except requests.exceptions.ConnectionError as exc:
    if _is_connection_refused(exc):
      raise LLMConnectionError(CONNECTION_REFUSED_MESSAGE) from exc
    raise LLMRequestError(f"{failure_prefix}: {exc}") from exc
  except requests.exceptions.RequestException as exc:
    status = getattr(getattr(exc, "response", None), "status_code", None)
    _log_debug(f"[LLM DEBUG] ollama request failed status={status}: {exc!r}")
    raise LLMRequestError(f"{failure_prefix}: {exc}") from exc
  except ValueError as exc:
    raise LLMRequestError(f"{failure_prefix}: invalid JSON from server") from exc

  content = data.get("response") if isinstance(data, dict) else None
  return content if isinstance(content, str) else ""


def _openai_generate(prompt: str, failure_prefix: str) -> str:
  try:
    c = get_openai_client()
  except RuntimeError as exc:
    raise LLMRequestError(f"{failure_prefix}: {exc}") from exc
  try:
    completion = c.chat.completions.create(
        model=OPENAI_MODEL,
        messages=[{
            "role": "user",
            "content": prompt
        }],
    )
  except openai.APIConnectionError as exc:
    if _is_connection_refused(exc):
      raise LLMConnectionError(CONNECTION_REFUSED_MESSAGE) from exc
    raise LLMRequestError(f"{failure_prefix}: {exc}") from exc
  except openai.APIError as exc:
    raise LLMRequestError(f"{failure_prefix}: {exc}") from exc

  content = completion.choices[0].message.content
  return content if isinstance(content, str) else ""


def generate_completion(kind: str,
                        prompt: str,
                        failure_prefix: str = "Failed to generate response from AI") -> str:
  """One non-streaming completion; raises ``LLMConnectionError``/``LLMRequestError``."""
  provider = LLM_PROVIDER
  started = time.perf_counter()
  if provider == "openai":
    raw = _openai_generate(prompt, failure_prefix)
    model_name = OPENAI_MODEL
  else:
    raw = _ollama_generate(prompt, failure_prefix)
    model_name = OLLAMA_MODEL
  latency_ms = (time.perf_counter() - started) * 1000.0
  _debug_print(kind, provider, model_name, prompt, raw, latency_ms)
  return raw


def generate_schedule_response(text: str) -> str:
  """Raw completion for a scheduling request; not yet parsed."""
  return generate_completion("schedule", build_schedule_prompt(text))


def get_event_suggestions(event_description: str) -> str:
  raw = generate_completion("suggestions",
                            build_suggestions_prompt(event_description),
                            failure_prefix="Failed to get suggestions from AI")
  return raw.strip()
