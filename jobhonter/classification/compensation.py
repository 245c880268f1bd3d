"""Compensation and employment-type detection from free text."""

import re
from typing import Optional

_NUMBER = r"(?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d+)?(?:\s?[kK]\b)?"
_AMOUNT = rf"\$\s?{_NUMBER}"

# Earliest match in the text wins, regardless of which pattern produced it.
_SALARY_PATTERNS = [
    re.compile(rf"{_AMOUNT}(?:\s?(?:-|–|to)\s?(?:{_AMOUNT}|{_NUMBER}))?"),
    re.compile(
        r"\b\d{2,3}(?:[.,]\d+)?\s?[kK]\s?(?:-|–|to)\s?\d{2,3}(?:[.,]\d+)?\s?[kK]\b"
        r"(?:\s?(?:per|/|a)\s?(?:year|yr|annum))?",
        re.IGNORECASE,
    ),
    re.compile(r"\b\d{2,3}(?:[.,]\d+)?\s?[kK]\s?(?:per|/|a)\s?(?:year|yr|annum)\b", re.IGNORECASE),
    re.compile(r"\b\d{2,3}\s(?:thousand)\b(?:\s(?:per|a)\s(?:year|annum))?", re.IGNORECASE),
    re.compile(r"\b\d[\d,]*(?:\.\d+)?\s?(?:usd|eur|gbp)\b", re.IGNORECASE),
]

_JOB_TYPE_PATTERNS = [
    ("full-time", re.compile(r"\b(?:full[\s-]?time|fulltime)\b", re.IGNORECASE)),
    ("part-time", re.compile(r"\b(?:part[\s-]?time|parttime)\b", re.IGNORECASE)),
    ("contract", re.compile(r"\b(?:contract|contractor|freelance|freelancer)\b", re.IGNORECASE)),
    ("internship", re.compile(r"\b(?:intern|internship)\b", re.IGNORECASE)),
]


def extract_salary(text: Optional[str]) -> Optional[str]:
    """Return the first compensation figure mentioned in text.

    Recognizes "$80k", "$60,000 - $90,000", "80k-100k", "50k per year",
    "100 thousand" and "75000 USD" style figures.

    Example:
        >>> extract_salary("Paying $60,000 - $90,000 DOE")
        '$60,000 - $90,000'
    """
    if not text:
        return None

    best = None
    for pattern in _SALARY_PATTERNS:
        match = pattern.search(text)
        if match and (best is None or match.start() < best.start()):
            best = match
    return best.group(0).strip() if best else None


def detect_job_type(text: Optional[str]) -> Optional[str]:
    """Employment type named in text, checked in a fixed priority order."""
    if not text:
        return None
    for job_type, pattern in _JOB_TYPE_PATTERNS:
        if pattern.search(text):
            return job_type
    return None
