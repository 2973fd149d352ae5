import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from statblocks.application.services.balance_tables import (
    DEFAULT_PROFICIENCY_BONUS,
    parse_challenge_rating,
    proficiency_bonus_for_challenge_rating,
)


class BalanceTablesTests(unittest.TestCase):
    def test_parse_challenge_rating_accepts_fractions_and_prefixes(self) -> None:
        self.assertEqual(0.25, parse_challenge_rating("1/4"))
        self.assertEqual(5.0, parse_challenge_rating("CR 5"))
        self.assertEqual(2.0, parse_challenge_rating("2 (450 XP)"))
        self.assertEqual(12.0, parse_challenge_rating(12))
        self.assertIsNone(parse_challenge_rating("boss"))
        self.assertIsNone(parse_challenge_rating(None))

    def test_proficiency_bonus_follows_challenge_rating_bands(self) -> None:
        expected = {
            "1/8": 2,
            0: 2,
            4: 2,
            5: 3,
            8: 3,
            9: 4,
            12: 4,
            13: 5,
            17: 6,
            21: 7,
            25: 8,
            29: 9,
            30: 9,
        }
        for cr, bonus in expected.items():
            self.assertEqual(bonus, proficiency_bonus_for_challenge_rating(cr), cr)

    def test_missing_or_invalid_challenge_rating_uses_default(self) -> None:
        self.assertEqual(DEFAULT_PROFICIENCY_BONUS, proficiency_bonus_for_challenge_rating(None))
        self.assertEqual(DEFAULT_PROFICIENCY_BONUS, proficiency_bonus_for_challenge_rating("unknown"))
        self.assertEqual(DEFAULT_PROFICIENCY_BONUS, proficiency_bonus_for_challenge_rating(-1))


if __name__ == "__main__":
    unittest.main()
