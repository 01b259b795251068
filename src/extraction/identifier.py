# src/extraction/identifier.py — v1
"""RUT/C.I. identifier detection over noisy PDF/OCR text.

Best-effort heuristic: false positives and negatives are expected and are
not errors. Patterns are tried in order and the first match wins; the
candidate is then reduced to its digits. The two phases stay separate
because the "C.I." label pattern captures dots and other non-digits. Only
ASCII digits count, so full-width digits in OCR output never match.
"""

from __future__ import annotations

import re

# "C.I. 1.234.567-8": everything between the label and the check-digit dash.
_CI_LABEL_RE = re.compile(r"C\.I\.\s*(.*?)\s*-", re.ASCII)

# "12345678-9", "1234567–K": body only, check character dropped.
_RUT_RE = re.compile(r"\b(\d{7,9})[-–](\d|k|K)\b", re.ASCII)

# Last resort: any standalone 7-8 digit number.
_BARE_NUMBER_RE = re.compile(r"\b(\d{7,8})\b", re.ASCII)

_NON_DIGIT_RE = re.compile(r"\D", re.ASCII)


def find_candidate(text: str) -> str | None:
    """Return the raw (un-normalized) identifier candidate, if any."""
    if not text:
        return None

    match = _CI_LABEL_RE.search(text)
    if match:
        return match.group(1).strip()

    match = _RUT_RE.search(text)
    if match:
        return match.group(1)

    match = _BARE_NUMBER_RE.search(text)
    if match:
        return match.group(1)

    return None


def normalize_identifier(raw: str | None) -> str | None:
    """Strip every non-digit character. Empty results mean "not found"."""
    if raw is None:
        return None
    digits = _NON_DIGIT_RE.sub("", raw)
    return digits or None


def extract_identifier(text: str) -> str | None:
    """Find and normalize a RUT/C.I. in ``text``.

    Examples:
        >>> extract_identifier("C.I. 1.234.567-8 ")
        '1234567'
        >>> extract_identifier("ref 12345678-9 more")
        '12345678'
        >>> extract_identifier("doc no. 7654321 x")
        '7654321'
    """
    return normalize_identifier(find_candidate(text))
