"""Best-effort value extraction from scraped page markup.

Pattern order matters and is kept stable; the first in-range candidate wins.
"""

from __future__ import annotations

import math
import re

from cspi.core.exceptions import ExtractionError

MVRV_MIN = -5.0
MVRV_MAX = 15.0
KIMCHI_ABS_LIMIT = 15.0

MVRV_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r'class="val"[^>]*?>(-?\d+\.?\d*)<', re.IGNORECASE),
    re.compile(r'"val"[^>]*?>(-?\d+\.?\d*)<', re.IGNORECASE),
)
_FIRST_NUMBER = re.compile(r"(-?\d+\.?\d*)")

PERCENT_PATTERN = re.compile(r"[-+]?\d+\.?\d*%")
# unrendered client-side templates, e.g. "{{ premium }}%" or "{{ 12.5% }}"
TEMPLATE_PLACEHOLDER = re.compile(r"\{\{.*?\}\}", re.DOTALL)


def mvrv_in_range(value: float) -> bool:
    return MVRV_MIN <= value <= MVRV_MAX


def extract_mvrv(html: str) -> float:
    """Find the MVRV Z-Score in chart page markup.

    For each pattern in order, the first number inside each full match is
    checked against [-5, 15].
    """
    for pattern in MVRV_PATTERNS:
        for match in pattern.finditer(html):
            number = _FIRST_NUMBER.search(match.group(0))
            if number is None:
                continue
            value = float(number.group(1))
            if math.isfinite(value) and mvrv_in_range(value):
                return value
    raise ExtractionError("MVRV fallback value could not be parsed", "mvrv")


def kimchi_candidates(html: str) -> list[float]:
    """All percent values with |v| < 15, in page order, template placeholders excluded."""
    candidates = []
    for raw in PERCENT_PATTERN.findall(TEMPLATE_PLACEHOLDER.sub(" ", html)):
        value = float(raw.replace("%", ""))
        if math.isfinite(value) and abs(value) < KIMCHI_ABS_LIMIT:
            candidates.append(value)
    return candidates


def extract_kimchi_premium(html: str) -> float:
    """Return the first plausible exchange premium percentage on the page."""
    candidates = kimchi_candidates(html)
    if not candidates:
        raise ExtractionError("Kimchi premium value could not be parsed", "kimchi_premium")
    return candidates[0]
