"""Progressive bracket traversal shared by every tax and credit line."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from dutchtax.backend.config.year_config import RateSelector, TaxBracket

from .utils import FLOAT_EPSILON, round_currency, round_rate


@dataclass(frozen=True, slots=True)
class Percentage:
    """Fraction of the income inside a bracket, added to the running total."""

    rate: float

    def accumulate(self, amount: float, portion: float) -> float:
        return amount + round_currency(portion * self.rate)


@dataclass(frozen=True, slots=True)
class FixedAmount:
    """Absolute amount that replaces the running total."""

    value: float

    def accumulate(self, amount: float, portion: float) -> float:
        return self.value


AppliedRate = Percentage | FixedAmount


def resolve_rate(raw_rate: float, multiplier: float = 1.0) -> AppliedRate:
    """Scale ``raw_rate`` by ``multiplier`` and decide how the result applies.

    Rate tables store percentages and absolute amounts in the same field. A
    scaled rate strictly between -1 and 1 is a percentage; anything else is an
    absolute amount. Exactly zero counts as an absolute amount, so a zero-rate
    bracket resets the running total to 0 rather than adding nothing; credit
    tables rely on this to end their phase-out.
    """

    applied = round_rate(multiplier * raw_rate)
    if abs(applied) >= FLOAT_EPSILON and -1 < applied < 1:
        return Percentage(applied)
    return FixedAmount(applied)


def calculate_bracket_amount(
    brackets: Iterable[TaxBracket],
    base_amount: float,
    selector: RateSelector = RateSelector.PRIMARY,
    multiplier: float = 1.0,
) -> float:
    """Walk ``brackets`` for ``base_amount`` and return the accumulated amount.

    Each bracket consumes its width from the remaining base. The bracket the
    base ends in (or the open-ended final bracket) is terminal: its share is
    added, the total is rounded and traversal stops. Money is rounded to cents
    at every step, not only at the end.
    """

    remaining = base_amount
    amount = 0.0

    for bracket in brackets:
        applied = resolve_rate(bracket.rate_for(selector), multiplier)
        delta = bracket.delta

        if delta is None or remaining <= delta:
            amount = round_currency(applied.accumulate(amount, remaining))
            break

        amount = applied.accumulate(amount, delta)
        remaining -= delta

    return amount


__all__ = [
    "AppliedRate",
    "FixedAmount",
    "Percentage",
    "calculate_bracket_amount",
    "resolve_rate",
]
