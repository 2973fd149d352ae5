from __future__ import annotations

from fractions import Fraction
from typing import Any

from statblocks.application.services.value_normalizer import to_number


DEFAULT_PROFICIENCY_BONUS = 2
MAX_CHALLENGE_RATING = 30

# Lower challenge rating bound -> proficiency bonus.
_PROFICIENCY_BY_CHALLENGE_RATING = (
    (29, 9),
    (25, 8),
    (21, 7),
    (17, 6),
    (13, 5),
    (9, 4),
    (5, 3),
    (0, 2),
)


def parse_challenge_rating(value: Any) -> float | None:
    """Challenge ratings arrive as numbers or strings such as ``"1/4"`` or ``"CR 5"``."""

    number = to_number(value)
    if number is not None:
        return float(number)
    if not isinstance(value, str):
        return None
    text = value.strip().lower()
    if text.startswith("cr"):
        text = text[2:].strip()
    text = text.split("(", 1)[0].strip()
    if not text:
        return None
    try:
        return float(Fraction(text))
    except (ValueError, ZeroDivisionError):
        return None


def proficiency_bonus_for_challenge_rating(cr: Any) -> int:
    rating = parse_challenge_rating(cr)
    if rating is None or rating < 0:
        return DEFAULT_PROFICIENCY_BONUS
    rating = min(rating, MAX_CHALLENGE_RATING)
    for lower_bound, bonus in _PROFICIENCY_BY_CHALLENGE_RATING:
        if rating >= lower_bound:
            return bonus
    return DEFAULT_PROFICIENCY_BONUS
