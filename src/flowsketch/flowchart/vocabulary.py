"""Keyword vocabulary for flow description lines.

Patterns are matched against ``fold(text)``, never with ``re.IGNORECASE``:
Turkish dotted and dotless I do not round-trip through Python's case
mapping, so both sides are folded to the same uppercase form up front.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import cached_property
from typing import Dict, Iterable, Optional, Pattern, Tuple

BULLET = r"[-*•+](?=\s)"
EMPHASIS_RE = re.compile(r"\*\*|__")


def fold(text: str) -> str:
    """Uppercase ``text`` without changing its length.

    ``i``, ``ı`` and ``İ`` all fold to ``I``. Characters whose uppercase form
    is longer than one code point (``ß``) are kept as-is so that match offsets
    in the folded string remain valid in the original.
    """
    out = []
    for ch in text:
        if ch in "iıİ":
            out.append("I")
            continue
        upper = ch.upper()
        out.append(upper if len(upper) == 1 else ch)
    return "".join(out)


def strip_emphasis(text: str) -> str:
    return EMPHASIS_RE.sub("", text)


def _alternation(words: Iterable[str]) -> str:
    parts = []
    # Longest first so "EŞ ZAMANLI" wins over "EŞ".
    for word in sorted({fold(w) for w in words}, key=len, reverse=True):
        parts.append(r"\s+".join(re.escape(piece) for piece in word.split()))
    return "|".join(parts)


@dataclass(frozen=True)
class Vocabulary:
    start: Tuple[str, ...] = ("BAŞLANGIÇ", "START", "BEGIN")
    end: Tuple[str, ...] = ("BİTİŞ", "END", "FINISH")
    io: Tuple[str, ...] = ("GİRİŞ", "ÇIKIŞ", "INPUT", "OUTPUT")
    process: Tuple[str, ...] = ("İŞLEM", "PROCESS")
    decision: Tuple[str, ...] = ("KARAR", "DECISION")
    yes_no: Tuple[str, ...] = ("EVET", "HAYIR", "EVETSE", "HAYIRSA", "YES", "NO")
    conditional: Tuple[str, ...] = ("IF", "EĞER")
    # No English suffixes: "no case" and "no branch" occur in ordinary prose.
    branch_suffix: Tuple[str, ...] = ("İSE", "DALI")
    parallel: Tuple[str, ...] = (
        "PARALEL",
        "EŞ ZAMANLI",
        "EŞZAMANLI",
        "PARALLEL",
        "CONCURRENT",
        "SIMULTANEOUS",
    )
    loop: Tuple[str, ...] = ("DÖNGÜ", "TEKRARLA", "YİNELE", "LOOP", "REPEAT")

    # -- canonical labels ---------------------------------------------------

    @cached_property
    def _display(self) -> Dict[str, str]:
        return {fold(word): word for word in self.start + self.end}

    def canonical(self, matched: str) -> str:
        key = re.sub(r"\s+", " ", matched)
        return self._display.get(key, matched)

    # -- structural markers (checked on the stripped line) ------------------

    @cached_property
    def parallel_marker(self) -> Pattern[str]:
        return self._marker(self.parallel)

    @cached_property
    def loop_marker(self) -> Pattern[str]:
        return self._marker(self.loop)

    @cached_property
    def branch_marker(self) -> Pattern[str]:
        yes_no = _alternation(self.yes_no)
        cond = _alternation(self.conditional)
        suffix = _alternation(self.branch_suffix)
        return re.compile(
            rf"^(?:{BULLET}\s*|\[\s*)?"
            rf"(?:(?:{cond})[\s-]+(?:{yes_no})(?!\w)"
            rf"|(?:{yes_no})(?=\s*(?:$|[:)\],.\-–→]|(?:{suffix})(?!\w))))"
        )

    def _marker(self, words: Tuple[str, ...]) -> Pattern[str]:
        return re.compile(
            rf"^(?:{BULLET}\s*|\[\s*)(?:{_alternation(words)})\w*\s*\]?\s*:?\s*"
        )

    # -- keyword prefixes (checked on the normalized label) -----------------

    @cached_property
    def start_prefix(self) -> Pattern[str]:
        return re.compile(rf"^\[?(?P<kw>{_alternation(self.start)})(?!\w)\]?")

    @cached_property
    def end_prefix(self) -> Pattern[str]:
        return re.compile(rf"^\[?(?P<kw>{_alternation(self.end)})(?!\w)\]?")

    @cached_property
    def io_prefix(self) -> Pattern[str]:
        return self._labelled(self.io)

    @cached_property
    def process_prefix(self) -> Pattern[str]:
        return self._labelled(self.process)

    @cached_property
    def decision_prefix(self) -> Pattern[str]:
        return self._labelled(self.decision)

    def _labelled(self, words: Tuple[str, ...]) -> Pattern[str]:
        alt = _alternation(words)
        return re.compile(rf"^(?:\[\s*(?:{alt})\s*\]\s*:?|(?:{alt})\s*:)\s*")

    # -- keyword phrases anywhere in the label ------------------------------

    @cached_property
    def branch_phrase(self) -> Pattern[str]:
        yes_no = _alternation(self.yes_no)
        cond = _alternation(self.conditional)
        suffix = _alternation(self.branch_suffix)
        return re.compile(
            rf"(?<!\w)(?:(?:{cond})[\s-]+(?:{yes_no})|(?:{yes_no})\s+(?:{suffix})"
            rf"|{_alternation(('EVETSE', 'HAYIRSA'))})(?!\w)"
        )

    @cached_property
    def parallel_phrase(self) -> Pattern[str]:
        return re.compile(rf"(?<!\w)(?:{_alternation(self.parallel)})")

    @cached_property
    def loop_phrase(self) -> Pattern[str]:
        return re.compile(rf"(?<!\w)(?:{_alternation(self.loop)})")

    def after_keyword(self, pattern: Pattern[str], folded: str) -> Optional[int]:
        """Offset just past ``KEYWORD:`` when a phrase is followed by a colon."""
        match = pattern.search(folded)
        if not match:
            return None
        tail = re.match(r"\w*\s*:\s*", folded[match.end():])
        if not tail:
            return None
        return match.end() + tail.end()


DEFAULT_VOCABULARY = Vocabulary()
