"""Flow description line classification.

Turns the loosely formatted text an upstream generator produces into an
ordered list of typed steps. Two passes run per line:

1. A structural pass looks at the raw line: indentation, bullet markers,
   numbering and parenthesized comments.
2. A keyword pass looks at the normalized label and may re-type the step
   (``KARAR: ...`` becomes a decision even when it was only numbered).

Indent reflects visual nesting and type reflects semantic role; the keyword
pass is allowed to change the type after the indent has been fixed.
"""

from __future__ import annotations

import re
from collections import Counter
from typing import List, Optional, Tuple

from ..utils.logging import get_logger
from .steps import Step, StepType, indent_bucket
from .vocabulary import DEFAULT_VOCABULARY, BULLET, Vocabulary, fold, strip_emphasis

logger = get_logger(__name__)

_STRUCTURAL_RE = re.compile(rf"^(\s*)(?:\d+(?:\.\d+)*[.)]|{BULLET})\s*(.*)$")
_MARKER_PREFIX_RE = re.compile(rf"^(?:{BULLET}\s*|\[\s*)")
_BRACKETED_RE = re.compile(r"^\[\s*([^\]]*?)\s*\]\s*(.*)$")
_WRAPPERS = (("(", ")"), ("[", "]"))

# Types produced by the structural pass that the keyword pass may revise.
_REVISABLE = {StepType.PROCESS, StepType.RAW}


def classify(raw_text: Optional[str], vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> List[Step]:
    """Classify every non-blank line of ``raw_text`` into a :class:`Step`.

    Never raises. Lines nothing recognizes come back as ``raw`` steps, and
    ids are dense over the non-blank lines.
    """
    if not raw_text:
        return []

    steps: List[Step] = []
    for line in raw_text.splitlines():
        if not line.strip():
            continue
        step_type, text, indent = _classify_line(line, vocabulary)
        steps.append(Step(id=len(steps), text=text, type=step_type, indent_level=indent))

    if steps:
        counts = Counter(step.type.value for step in steps)
        logger.debug("Classified flow description", extra={"steps": len(steps), "types": dict(counts)})
    return steps


def _classify_line(line: str, vocabulary: Vocabulary) -> Tuple[StepType, str, int]:
    trimmed = line.strip()
    leading = len(line) - len(line.lstrip())
    indent = indent_bucket(leading)

    step_type, text, indent = _structural_pass(line, trimmed, indent, vocabulary)
    if step_type in _REVISABLE:
        step_type, text, indent = _keyword_pass(step_type, text, indent, vocabulary)

    text = text.lstrip(": \t").strip()
    if not text:
        text = trimmed
    return step_type, text, indent


def _structural_pass(
    line: str, trimmed: str, indent: int, vocabulary: Vocabulary
) -> Tuple[StepType, str, int]:
    plain = strip_emphasis(trimmed).strip()
    folded = fold(plain)

    match = vocabulary.parallel_marker.match(folded)
    if match:
        return StepType.PARALLEL, _marker_text(plain, match.end()), 1

    match = vocabulary.loop_marker.match(folded)
    if match:
        return StepType.LOOP, _marker_text(plain, match.end()), 1

    if vocabulary.branch_marker.match(folded):
        return StepType.BRANCH_LABEL, _unwrap(_branch_text(plain)), max(indent, 1)

    match = _STRUCTURAL_RE.match(strip_emphasis(line))
    if match:
        label = _unwrap(match.group(2).strip())
        return StepType.PROCESS, label, indent_bucket(len(match.group(1)))

    if trimmed.startswith("(") and trimmed.endswith(")"):
        return StepType.COMMENT, trimmed[1:-1].strip(), indent

    return StepType.RAW, trimmed, indent


def _keyword_pass(
    step_type: StepType, text: str, indent: int, vocabulary: Vocabulary
) -> Tuple[StepType, str, int]:
    plain = strip_emphasis(text).strip()
    folded = fold(plain)

    match = vocabulary.start_prefix.match(folded)
    if match:
        return StepType.START, vocabulary.canonical(match.group("kw")), 0

    match = vocabulary.end_prefix.match(folded)
    if match:
        return StepType.END, vocabulary.canonical(match.group("kw")), 0

    for pattern, keyword_type in (
        (vocabulary.io_prefix, StepType.IO),
        (vocabulary.process_prefix, StepType.PROCESS),
        (vocabulary.decision_prefix, StepType.DECISION),
    ):
        match = pattern.match(folded)
        if match:
            return keyword_type, _unwrap(plain[match.end():].strip()), indent

    if vocabulary.branch_phrase.search(folded):
        return StepType.BRANCH_LABEL, plain.rstrip(":").strip(), max(indent, 1)

    for pattern, keyword_type in (
        (vocabulary.parallel_phrase, StepType.PARALLEL),
        (vocabulary.loop_phrase, StepType.LOOP),
    ):
        if pattern.search(folded):
            offset = vocabulary.after_keyword(pattern, folded)
            label = plain[offset:] if offset is not None else plain
            return keyword_type, label.strip(), indent

    return step_type, plain, indent


def _branch_text(plain: str) -> str:
    """Label of a branch marker line; a bracketed marker loses both brackets."""
    bracketed = _BRACKETED_RE.match(plain)
    if bracketed:
        label = " ".join(part for part in bracketed.groups() if part)
    else:
        label = _MARKER_PREFIX_RE.sub("", plain)
    return label.rstrip(":").strip()


def _marker_text(plain: str, offset: int) -> str:
    remainder = plain[offset:].strip()
    if remainder:
        return _unwrap(remainder)
    return _MARKER_PREFIX_RE.sub("", plain).strip()


def _unwrap(text: str) -> str:
    """Strip one pair of enclosing parentheses or brackets."""
    for opening, closing in _WRAPPERS:
        if len(text) >= 2 and text.startswith(opening) and text.endswith(closing):
            inner = text[1:-1].strip()
            if inner:
                return inner
    return text
