"""Text rendering of annotated mesh logs."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from .annotation import extract_annotated_spans
from .models import MeshLog

ANSI_ANNOTATION = ("\x1b[3;36m", "\x1b[0m")  # italic cyan


@dataclass(frozen=True, slots=True)
class TextSegment:
    """A run of text that is either plain or one annotation."""

    text: str
    annotated: bool


def split_segments(annotated_text: str) -> list[TextSegment]:
    """Split text into plain and annotated runs, in textual order."""
    out: list[TextSegment] = []
    pos = 0
    for span in extract_annotated_spans(annotated_text, reverse=False):
        if span.start > pos:
            out.append(TextSegment(annotated_text[pos : span.start], annotated=False))
        out.append(TextSegment(span.slice(annotated_text), annotated=True))
        pos = span.end
    if pos < len(annotated_text):
        out.append(TextSegment(annotated_text[pos:], annotated=False))
    return out


def highlight_annotations(annotated_text: str, *, start_marker: str, end_marker: str) -> str:
    """Wrap every annotation in ``start_marker``/``end_marker``."""
    text = annotated_text
    # Rightmost first: inserting markers never shifts spans still to be applied.
    for span in extract_annotated_spans(annotated_text):
        text = text[: span.start] + start_marker + text[span.start : span.end] + end_marker + text[span.end :]
    return text


def format_received_date(received_date: int) -> str:
    """Format epoch milliseconds as a UTC ISO-8601 timestamp."""
    ts = datetime.fromtimestamp(received_date / 1000, tz=UTC)
    return ts.isoformat(timespec="seconds")


def render_mesh_log(log: MeshLog, *, highlight: tuple[str, str] | None = None) -> str:
    """Render a record as a header line followed by its raw message."""
    header = f"{log.message_type}  {format_received_date(log.received_date)}"
    body = log.raw_message
    if highlight is not None:
        start_marker, end_marker = highlight
        body = highlight_annotations(body, start_marker=start_marker, end_marker=end_marker)
    return f"{header}\n{body}"
