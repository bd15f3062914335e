"""Failures raised by the draw prize calculator.

Every error is terminal: a calculation that raises returns nothing, and a
rejected settings update leaves the installed settings in place.
"""

from __future__ import annotations


class DrawCalculatorError(Exception):
    code = "draw-calculator-error"


class InputLengthMismatch(DrawCalculatorError):
    code = "invalid-calculate-input-lengths"


class InvalidPickEncoding(DrawCalculatorError):
    code = "invalid-pick-encoding"


class PickOutOfRange(DrawCalculatorError):
    code = "insufficient-user-picks"

    def __init__(self, pick: int, total_user_picks: int) -> None:
        super().__init__(
            f"pick {pick} is out of range; user holds {total_user_picks} picks"
        )
        self.pick = pick
        self.total_user_picks = total_user_picks


class PrizeOverflow(DrawCalculatorError):
    code = "prize-overflow"


class InvalidDrawSettings(DrawCalculatorError):
    code = "invalid-draw-settings"


class MatchCardinalityTooSmall(InvalidDrawSettings):
    code = "match-cardinality-too-small"


class BitRangeTooLarge(InvalidDrawSettings):
    code = "bit-range-too-large"


class PickCostNotPositive(InvalidDrawSettings):
    code = "pick-cost-not-positive"


class DistributionsExceedWhole(InvalidDrawSettings):
    code = "distributions-exceed-whole"


__all__ = [
    "BitRangeTooLarge",
    "DistributionsExceedWhole",
    "DrawCalculatorError",
    "InputLengthMismatch",
    "InvalidDrawSettings",
    "InvalidPickEncoding",
    "MatchCardinalityTooSmall",
    "PickCostNotPositive",
    "PickOutOfRange",
    "PrizeOverflow",
]
