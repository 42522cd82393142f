"""Domain-specific calculation helpers."""

from .brackets import (
    AppliedRate,
    FixedAmount,
    Percentage,
    calculate_bracket_amount,
    resolve_rate,
)
from .credits import social_credit_multiplier
from .ruling import calculate_tax_free_amount, ruling_threshold
from .utils import format_percentage, round_currency, round_rate

__all__ = [
    "AppliedRate",
    "FixedAmount",
    "Percentage",
    "calculate_bracket_amount",
    "calculate_tax_free_amount",
    "format_percentage",
    "resolve_rate",
    "round_currency",
    "round_rate",
    "ruling_threshold",
    "social_credit_multiplier",
]
