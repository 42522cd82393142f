"""Scaling of tax credits for national insurance status."""

from __future__ import annotations

from dutchtax.backend.config.year_config import TaxRates


def social_credit_multiplier(
    rates: TaxRates,
    reached_retirement_age: bool = False,
    social_security: bool = True,
) -> float:
    """Return the factor applied to the general and labour credit tables.

    Credits are granted in proportion to the first bracket rate actually paid.
    The first social security bracket carries that combined ``rate`` together
    with the full national insurance premium (``social``: AOW, Anw and Wlz)
    and the premium after AOW age (``older``: Anw and Wlz only).
    """

    bracket = rates.first_social_bracket
    if bracket is None or bracket.rate <= 0:
        return 1.0

    rate = bracket.rate
    social_rate = bracket.social_rate or 0.0
    older_rate = bracket.older_rate or 0.0

    if not social_security:
        # No AOW, Anw or Wlz premium at all
        return (rate - social_rate) / rate

    if reached_retirement_age:
        # AOW premium no longer due
        return (rate + older_rate - social_rate) / rate

    return 1.0


__all__ = ["social_credit_multiplier"]
