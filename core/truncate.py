# =============================================================================
# core/truncate.py  —  Keeping documents inside the token budget
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Some help pages are enormous (full API references, release notes).  Sent
#   whole, they would crowd everything else out of the agent's context.  This
#   module cuts them down while keeping them readable.
#
# TWO POLICIES (the caller picks one, content is never inspected to choose):
#
#   truncate_content()         → HEAD + notice + TAIL
#     60% of the budget for the beginning (intro, main content)
#     20% for the end (conclusions, examples, "related information")
#     20% left for the truncation notice
#     On small budgets the notice can need more than its 20%; the head gives
#     up the difference so the result never exceeds the budget.
#
#   truncate_content_simple()  → HEAD + notice
#     For text where the end carries no special meaning.
#
# NATURAL BOUNDARIES:
#   A raw character cut can land mid-word or mid-code-block.  Both policies
#   try to move the cut to a nearby boundary first.  The head/tail policy
#   checks, in priority order: paragraph break, Markdown heading, code fence
#   close, horizontal rule, sentence end.  The first kind that occurs close
#   enough to the cut wins; if none does, the raw cut is kept.
# =============================================================================

import math
import re

from core.config import DEFAULT_MAX_CONTENT_LENGTH
from core.models import TruncationResult

CHARS_PER_TOKEN = 4

HEAD_SHARE = 0.6
TAIL_SHARE = 0.2

# Boundary search windows: the last 20% of the head, the first 20% of the tail.
HEAD_SNAP_WINDOW = 0.8
TAIL_SNAP_WINDOW = 0.2

SIMPLE_NOTICE_RESERVE = 300
SIMPLE_SNAP_WINDOW = 0.9

NATURAL_BREAKS = [
    re.compile(r"\n\n"),                 # paragraph break
    re.compile(r"\n#{1,6}\s"),           # Markdown heading
    re.compile(r"\n```\n"),              # code fence close
    re.compile(r"\n---\n"),              # horizontal rule
    re.compile(r"\.\s+"),                # sentence end
]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _unchanged(content: str) -> TruncationResult:
    return TruncationResult(
        content=content,
        was_truncated=False,
        original_length=len(content),
        truncated_length=len(content),
    )


def _snap_head(head: str, budget: int) -> str:
    """Cut the head back to the last natural boundary in its final 20%."""
    for pattern in NATURAL_BREAKS:
        last = None
        for last in pattern.finditer(head):
            pass
        if last is not None and last.start() > budget * HEAD_SNAP_WINDOW:
            return head[: last.end()]
    return head


def _snap_tail(tail: str, budget: int) -> str:
    """Drop the tail's leading fragment up to the first boundary in its first 20%."""
    for pattern in NATURAL_BREAKS:
        first = pattern.search(tail)
        if first is not None and first.start() < budget * TAIL_SNAP_WINDOW:
            return tail[first.end():]
    return tail


def _middle_notice(original_length: int, omitted: int) -> str:
    omitted_percent = _round_half_up(omitted / original_length * 100)
    approx_tokens = _round_half_up(original_length / CHARS_PER_TOKEN)
    return (
        "\n\n---\n\n"
        "⚠️ **Content Truncated**\n\n"
        f"The full content was {original_length:,} characters "
        f"(approximately {approx_tokens} tokens).\n"
        f"For readability and performance, {omitted:,} characters "
        f"({omitted_percent}%) have been omitted from the middle section.\n\n"
        "The beginning and end of the document are preserved above and below this notice.\n\n"
        "---\n\n"
    )


def _simple_notice(original_length: int, omitted: int) -> str:
    omitted_percent = _round_half_up(omitted / original_length * 100)
    approx_tokens = _round_half_up(original_length / CHARS_PER_TOKEN)
    return (
        "\n\n---\n\n"
        "⚠️ **Content Truncated**\n\n"
        f"The full content was {original_length:,} characters "
        f"(approximately {approx_tokens} tokens).\n"
        f"{omitted:,} characters ({omitted_percent}%) have been omitted for readability.\n\n"
        "---\n"
    )


def truncate_content(content: str, max_length: int = DEFAULT_MAX_CONTENT_LENGTH) -> TruncationResult:
    """Truncate by keeping the beginning and the end of the document.

    Args:
        content: The full document text.
        max_length: Character budget.

    Returns:
        A TruncationResult.  When the content fits, it is returned untouched
        with was_truncated=False.  Otherwise the result is head + notice +
        tail, where head is a prefix and tail a suffix of the original, and
        the whole stays within max_length.  A budget smaller than the notice
        itself leaves only the notice.
    """
    original_length = len(content)
    if original_length <= max_length:
        return _unchanged(content)

    # The notice is largest when everything is omitted; reserve that much.
    reserve = len(_middle_notice(original_length, original_length))
    tail_budget = max(0, min(math.floor(max_length * TAIL_SHARE), max_length - reserve))
    head_budget = max(
        0, min(math.floor(max_length * HEAD_SHARE), max_length - tail_budget - reserve)
    )

    head = _snap_head(content[:head_budget], head_budget)
    tail = _snap_tail(content[original_length - tail_budget:], tail_budget) if tail_budget else ""

    omitted = original_length - (len(head) + len(tail))
    truncated = head + _middle_notice(original_length, omitted) + tail
    return TruncationResult(
        content=truncated,
        was_truncated=True,
        original_length=original_length,
        truncated_length=len(truncated),
    )


def truncate_content_simple(content: str, max_length: int = DEFAULT_MAX_CONTENT_LENGTH) -> TruncationResult:
    """Truncate by keeping only the beginning, followed by a short notice."""
    original_length = len(content)
    if original_length <= max_length:
        return _unchanged(content)

    reserve = max(SIMPLE_NOTICE_RESERVE, len(_simple_notice(original_length, original_length)))
    keep = max(0, max_length - reserve)
    head = content[:keep]

    last_paragraph = head.rfind("\n\n")
    last_sentence = head.rfind(". ")
    if last_paragraph > keep * SIMPLE_SNAP_WINDOW:
        head = head[:last_paragraph]
    elif last_sentence > keep * SIMPLE_SNAP_WINDOW:
        head = head[: last_sentence + 1]

    truncated = head + _simple_notice(original_length, original_length - len(head))
    return TruncationResult(
        content=truncated,
        was_truncated=True,
        original_length=original_length,
        truncated_length=len(truncated),
    )
