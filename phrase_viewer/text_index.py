# text_index.py
from typing import List, Sequence

from phrase_viewer.models import GlyphSpan


def fold_case(text: str) -> str:
    """
    Lower-cases ``text`` one character at a time, keeping characters whose
    lower-case form is longer than one character (e.g. "İ") unchanged, so
    that offsets in the result match offsets in ``text``.
    """
    folded = []
    for ch in text:
        lowered = ch.lower()
        folded.append(lowered if len(lowered) == 1 else ch)
    return "".join(folded)


class TextIndex:
    """
    Searchable text of one rendered page.

    ``text`` is the concatenation of every span's text in render order, and
    ``owners[i]`` is the position in the page's span list of the span that
    contributed ``text[i]``. Spans are not joined with separators: whatever
    spacing the text layer has is exactly what can be matched.
    """

    def __init__(self, spans: Sequence[GlyphSpan]):
        parts = []
        owners: List[int] = []
        for position, span in enumerate(spans):
            parts.append(span.text)
            owners.extend([position] * len(span.text))
        self.text = "".join(parts)
        self.owners = owners
        self._folded = fold_case(self.text)

    def __len__(self) -> int:
        return len(self.text)

    def find(self, phrase: str) -> int:
        """Offset of the first case-insensitive occurrence of ``phrase``, or -1."""
        if not phrase:
            return -1
        return self._folded.find(fold_case(phrase))

    def spans_for_range(self, start: int, end: int) -> List[int]:
        """Unique span positions owning ``text[start:end]``, in text order."""
        return list(dict.fromkeys(self.owners[start:end]))
