"""Node id annotation of raw mesh log text.

An annotation is `` (!xxxxxxxx)`` inserted right after the first occurrence of a
node id's unsigned decimal form. Spans are recovered from the text itself using
the same grammar, so annotated text can be stored as plain text and restyled
after reloading.

Matching is a plain substring search, not field-aware parsing: a candidate's
digits may match inside an unrelated larger number, or inside an annotation
inserted for an earlier candidate. This is kept for compatibility with
previously annotated logs.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator

from .models import AnnotatedSpan
from .node_id import (
    NODE_ID_HEX_DIGITS,
    NODE_ID_PREFIX,
    format_hex,
    format_unsigned_decimal,
    to_unsigned,
)

logger = logging.getLogger(__name__)

ANNOTATION_SEPARATOR = " "
ANNOTATION_OPEN = "("
ANNOTATION_CLOSE = ")"

# Any line terminator ends a line, including \r\n and the Unicode separators.
LINE_END = r"(?=[\n\r\u0085\u2028\u2029]|\Z)"

# Annotations are always appended to a line, so the end-of-line anchor tells a
# real annotation apart from parenthesized hex appearing mid-line in a payload.
ANNOTATION_RE = re.compile(
    re.escape(ANNOTATION_OPEN)
    + re.escape(NODE_ID_PREFIX)
    + rf"[0-9a-fA-F]{{{NODE_ID_HEX_DIGITS}}}"
    + re.escape(ANNOTATION_CLOSE)
    + LINE_END,
)


def format_annotation(node_id: int) -> str:
    """Return the text inserted after a matched node id."""
    return f"{ANNOTATION_SEPARATOR}{ANNOTATION_OPEN}{format_hex(node_id)}{ANNOTATION_CLOSE}"


def _annotate_first(text: str, node_id: int) -> tuple[str, bool]:
    """Annotate the first occurrence of ``node_id`` in ``text``."""
    needle = format_unsigned_decimal(node_id)
    idx = text.find(needle)
    if idx < 0:
        return text, False
    end = idx + len(needle)
    return text[:end] + format_annotation(node_id) + text[end:], True


def annotate(raw_text: str, candidate_ids: Iterable[int]) -> str:
    """Annotate node ids found in ``raw_text`` with their hex form.

    Candidates are handled in order, each one searched in the text produced so
    far. Candidates with the same unsigned value are annotated once. When
    nothing matches, ``raw_text`` itself is returned.
    """
    text = raw_text
    mutated = False
    seen: set[int] = set()
    for node_id in candidate_ids:
        unsigned = to_unsigned(node_id)
        if unsigned in seen:
            continue
        seen.add(unsigned)

        text, hit = _annotate_first(text, node_id)
        if not hit:
            logger.debug("node id %s not found in message", unsigned)
        mutated = mutated or hit

    return text if mutated else raw_text


def extract_annotated_spans(annotated_text: str, *, reverse: bool = True) -> Iterator[AnnotatedSpan]:
    """Yield the spans of annotations found at line ends.

    Spans come rightmost first by default, which lets callers apply in-place
    edits without invalidating offsets still to be applied. Pass
    ``reverse=False`` for ascending order. Offsets always refer to
    ``annotated_text`` as given.
    """
    matches: Iterable[re.Match[str]] = ANNOTATION_RE.finditer(annotated_text)
    if reverse:
        matches = reversed(list(matches))
    for m in matches:
        yield AnnotatedSpan(start=m.start(), end=m.end())
