"""Builds the classifier request text and interprets its answer."""

import json
import math
import re

from .models import ModerationInput, ModerationVerdict

MAX_FRAMES = 3
TRANSCRIPT_PROMPT_LIMIT = 1000
CONFIDENT_APPROVAL = 0.8
DEFAULT_CONFIDENCE = 0.5
TEXT_FALLBACK_CONFIDENCE = 0.6

_JSON_BLOCK = re.compile(r"\{[\s\S]*\}")
_APPROVAL_WORDS = re.compile(r"\b(?:approved|gospel|christian|appropriate)\b")
_GOSPEL_FLAG = re.compile(r"gospel|worship|biblical|christian|faith", re.IGNORECASE)


def build_moderation_prompt(request: ModerationInput) -> str:
    """Describes the upload and its attached images for the classifier."""
    lines = [
        "**Content Information:**",
        f'- Title: "{request.title or "N/A"}"',
        f'- Description: "{request.description or "N/A"}"',
        f"- Content Type: {request.content_type}",
    ]

    if request.transcript:
        excerpt = request.transcript[:TRANSCRIPT_PROMPT_LIMIT]
        ellipsis = "..." if len(request.transcript) > TRANSCRIPT_PROMPT_LIMIT else ""
        lines.append(f'- Transcript: "{excerpt}{ellipsis}"')

    frame_count = min(len(request.frames), MAX_FRAMES)
    if request.thumbnail is not None:
        lines.append(
            "- Thumbnail Image: Provided below for visual analysis "
            "(CRITICAL - this is what users see first)"
        )
    if frame_count:
        lines.append(
            f"- Video Frames: {frame_count} frames extracted from the uploaded "
            "video (beginning, middle, end) for visual analysis"
        )

    if request.thumbnail is not None or frame_count:
        order = []
        if request.thumbnail is not None:
            order.append("First image = thumbnail (what users see first).")
        if frame_count:
            order.append("Following image(s) = frames extracted from the uploaded video.")
        lines.append("")
        lines.append("**Images attached below (in order):** " + " ".join(order))

    lines.append("")
    lines.append("Now analyze the content and respond in the exact JSON format.")
    return "\n".join(lines)


def _clamp_confidence(value) -> float:
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return DEFAULT_CONFIDENCE
    if not math.isfinite(confidence):
        return DEFAULT_CONFIDENCE
    return max(0.0, min(1.0, confidence))


def _verdict_from_json(parsed: dict) -> ModerationVerdict:
    is_approved = parsed.get("isApproved") is True
    raw_confidence = parsed.get("confidence")
    confidence = _clamp_confidence(
        DEFAULT_CONFIDENCE if raw_confidence is None else raw_confidence
    )
    raw_flags = parsed.get("flags")
    flags = frozenset(
        f for f in (raw_flags if isinstance(raw_flags, list) else []) if isinstance(f, str)
    )

    if is_approved:
        clear_gospel = any(_GOSPEL_FLAG.search(flag) for flag in flags)
        # An approval the classifier is not sure about still goes to a human.
        requires_review = not (confidence >= CONFIDENT_APPROVAL or clear_gospel)
    else:
        requires_review = parsed.get("requiresReview") is True

    reason = parsed.get("reason")
    return ModerationVerdict(
        is_approved=is_approved,
        confidence=confidence,
        reason=reason if isinstance(reason, str) and reason else "AI analysis completed",
        flags=flags,
        requires_review=requires_review,
    )


def parse_classifier_response(raw: str) -> ModerationVerdict:
    """
    Turns the classifier's raw answer into a verdict.

    The span from the first "{" to the last "}" is parsed as JSON. Without a
    usable JSON object the raw text is scanned for approval words and the
    verdict is always held for review.
    """
    match = _JSON_BLOCK.search(raw)
    if match:
        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, dict):
            return _verdict_from_json(parsed)

    is_approved = bool(_APPROVAL_WORDS.search(raw.lower()))
    return ModerationVerdict(
        is_approved=is_approved,
        confidence=TEXT_FALLBACK_CONFIDENCE,
        reason="Parsed from text response",
        requires_review=True,
    )
