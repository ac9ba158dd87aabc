"""
Lenient parsing of judge and reranker responses.

Models rarely answer in exactly the requested shape, so every parser here is
case-insensitive, tolerates surrounding prose and takes the first well-formed
match. When nothing matches a ParseError is raised instead of guessing.
"""

import re

from ragcore.errors import ParseError

_YES_NO_PATTERN = re.compile(r"\b(yes|no)\b", re.IGNORECASE)
_NUMBER = r"(\d+(?:\.\d+)?)"
# Checked on each line in turn; the first line that yields a rating wins
_RATING_LINE_PATTERNS = [
    # A line holding only the score, e.g. "4.0" or "4/5"
    re.compile(rf"^\s*\**{_NUMBER}\**\s*(?:/\s*\d+)?\s*\.?\s*$"),
    re.compile(rf"\b(?:score|rating)\b\s*(?:is|of|:|=)?\s*\**{_NUMBER}", re.IGNORECASE),
]
# Whole-text fallbacks once no line matched
_RATING_PATTERNS = [
    re.compile(rf"{_NUMBER}\s*/\s*\d+"),
    re.compile(rf"(?<![\w.]){_NUMBER}(?!\w|\.\d)"),
]
_DOC_RELEVANCE_PATTERN = re.compile(
    rf"Doc(?:ument)?[:#\s]*(\d+)[,;\s]*Relevance[:=\s]*{_NUMBER}",
    re.IGNORECASE,
)


def parse_yes_no(response: str) -> bool:
    """
    Interpret a YES/NO verdict.

    The first non-empty line is checked first, then the whole text.

    Raises:
        ParseError: If neither word appears
    """
    text = response.strip()
    first_line = next((line for line in text.splitlines() if line.strip()), "")
    match = _YES_NO_PATTERN.search(first_line) or _YES_NO_PATTERN.search(text)
    if match is None:
        raise ParseError("Expected a YES or NO verdict", response=response)
    return match.group(1).lower() == "yes"


def _first_in_range(patterns, text: str, low: float, high: float) -> float | None:
    for pattern in patterns:
        for match in pattern.finditer(text):
            value = float(match.group(1))
            if low <= value <= high:
                return value
    return None


def parse_rating(response: str, low: float = 1.0, high: float = 5.0) -> float:
    """
    Extract a numeric rating within ``[low, high]``.

    Lines are scanned top to bottom for a lone number or a
    ``score:``/``rating:`` label, and the first hit is returned. Only when
    no line carries one are looser forms such as ``4/5`` or a bare number
    anywhere in the text accepted.

    Raises:
        ParseError: If no number in range can be found
    """
    for line in response.splitlines():
        value = _first_in_range(_RATING_LINE_PATTERNS, line, low, high)
        if value is not None:
            return value
    value = _first_in_range(_RATING_PATTERNS, response, low, high)
    if value is None:
        raise ParseError(f"Expected a rating between {low:g} and {high:g}", response=response)
    return value


def parse_doc_relevance(response: str) -> dict[int, float]:
    """
    Parse ``Doc: <n>, Relevance: <score>`` lines.

    Returns:
        Mapping of 1-based document number to relevance, in order of
        appearance. Only the first occurrence of each document counts.

    Raises:
        ParseError: If no line matches
    """
    scores: dict[int, float] = {}
    for match in _DOC_RELEVANCE_PATTERN.finditer(response):
        doc = int(match.group(1))
        if doc not in scores:
            scores[doc] = float(match.group(2))
    if not scores:
        raise ParseError("Expected 'Doc: <n>, Relevance: <score>' lines", response=response)
    return scores


def parse_permutation(response: str, num: int) -> list[int]:
    """
    Parse a ranking such as ``[2] > [1] > [3]`` into 0-based indices.

    Duplicates keep their first position, labels outside ``1..num`` are
    ignored and any label never mentioned is appended in ascending order.

    Raises:
        ParseError: If the response names no valid label
    """
    seen: list[int] = []
    for token in re.findall(r"\d+", response):
        label = int(token)
        if 1 <= label <= num and label - 1 not in seen:
            seen.append(label - 1)
    if not seen:
        raise ParseError(f"Expected a permutation of labels 1..{num}", response=response)
    return seen + [i for i in range(num) if i not in seen]
