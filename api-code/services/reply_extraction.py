from __future__ import annotations

from typing import Any, Callable, Iterable, Optional, Tuple


ReplyExtractor = Callable[[Any], Optional[str]]


def _clean(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _candidates(body: Any) -> list:
    return _as_list(_as_dict(body).get("candidates"))


def _answer_parts(candidate: Any) -> list:
    parts = _as_list(_as_dict(_as_dict(candidate).get("content")).get("parts"))
    return [part for part in map(_as_dict, parts) if not part.get("thought")]


def first_candidate_first_part(body: Any) -> Optional[str]:
    """`candidates[0].content.parts[0].text`, the regular generateContent shape.

    Thought parts emitted by thinking models are not part of the answer.
    """
    candidates = _candidates(body)
    if not candidates:
        return None
    parts = _answer_parts(candidates[0])
    if not parts:
        return None
    return _clean(parts[0].get("text"))


def any_candidate_part(body: Any) -> Optional[str]:
    for candidate in _candidates(body):
        for part in _answer_parts(candidate):
            text = _clean(part.get("text"))
            if text:
                return text
    return None


def legacy_candidate_text(body: Any) -> Optional[str]:
    """Older PaLM-style candidates carrying `output` or `text` directly."""
    for candidate in _candidates(body):
        candidate = _as_dict(candidate)
        text = _clean(candidate.get("output")) or _clean(candidate.get("text"))
        if text:
            return text
    return None


def top_level_text(body: Any) -> Optional[str]:
    return _clean(_as_dict(body).get("text"))


DEFAULT_EXTRACTORS: Tuple[ReplyExtractor, ...] = (
    first_candidate_first_part,
    any_candidate_part,
    legacy_candidate_text,
    top_level_text,
)


def extract_reply(body: Any, extractors: Iterable[ReplyExtractor] = DEFAULT_EXTRACTORS) -> Optional[str]:
    """Return the first non-empty reply text found by `extractors`, in order."""
    for extractor in extractors:
        text = extractor(body)
        if text:
            return text
    return None


def describe_missing_reply(body: Any) -> str:
    feedback = _as_dict(_as_dict(body).get("promptFeedback"))
    block_reason = feedback.get("blockReason")
    if block_reason:
        return f"Prompt blocked by Gemini ({block_reason})."

    for candidate in _candidates(body):
        finish_reason = _as_dict(candidate).get("finishReason")
        if finish_reason and finish_reason != "STOP":
            return f"No reply from Gemini (finish reason {finish_reason})."
    return "No reply from Gemini."
