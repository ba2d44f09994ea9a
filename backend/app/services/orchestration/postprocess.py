"""Provider-independent transforms applied to a succeeded job's output.

All functions here are pure: no I/O, inputs are never mutated.
"""
from __future__ import annotations

from dataclasses import dataclass
from numbers import Real
from typing import Any, List, Optional, Sequence

from ...models import Region

# OCR boxes are reported on a 0-1000 grid
BOX_SCALE = 1000.0


@dataclass(frozen=True)
class TextSpan:
    """One recognized text item, box already normalized to the unit square."""

    x1: float
    y1: float
    x2: float
    y2: float
    text: str

    @classmethod
    def from_raw(cls, item: Any) -> Optional["TextSpan"]:
        """Parse `{"box": [x1, y1, x2, y2], "text": ...}`; None when malformed."""
        if not isinstance(item, dict):
            return None
        box = item.get("box")
        if not isinstance(box, (list, tuple)) or len(box) != 4:
            return None
        if not all(isinstance(c, Real) and not isinstance(c, bool) for c in box):
            return None
        text = item.get("text")
        if text is None:
            text = ""
        x1, y1, x2, y2 = (float(c) / BOX_SCALE for c in box)
        return cls(x1=x1, y1=y1, x2=x2, y2=y2, text=str(text))

    def overlaps(self, region: Region) -> bool:
        # Inclusive: touching edges count as overlap
        right = region.x + region.width
        bottom = region.y + region.height
        return not (self.x2 < region.x or self.x1 > right or self.y2 < region.y or self.y1 > bottom)


def filter_text_in_region(output: Any, region: Region) -> str:
    """Join the text of every span whose box overlaps `region`, in output order."""
    if not isinstance(output, Sequence) or isinstance(output, (str, bytes)):
        return ""
    texts: List[str] = []
    for item in output:
        span = TextSpan.from_raw(item)
        if span is not None and span.overlaps(region):
            texts.append(span.text)
    return " ".join(texts).strip()


def join_text_output(output: Any) -> str:
    """Flatten a text model's output: strings are trimmed, token lists concatenated."""
    if isinstance(output, str):
        return output.strip()
    if isinstance(output, (list, tuple)):
        return "".join(part for part in output if isinstance(part, str)).strip()
    return ""


def passthrough(output: Any) -> Any:
    return output
