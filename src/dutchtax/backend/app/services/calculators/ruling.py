"""Tax-free allowance under the 30% ruling for incoming employees."""

from __future__ import annotations

from typing import TYPE_CHECKING

from dutchtax.backend.config.year_config import TaxRates

from .utils import round_currency

if TYPE_CHECKING:  # pragma: no cover - only for static type checkers
    from dutchtax.backend.app.models import RulingOptions

TAXED_SHARE = 0.7


def ruling_threshold(rates: TaxRates, ruling_type: str) -> float:
    """Return the minimum effective salary for ``ruling_type``."""

    thresholds = rates.ruling_thresholds
    by_type = {
        "normal": thresholds.normal,
        "young": thresholds.young,
        "research": thresholds.research,
    }
    try:
        return by_type[ruling_type]
    except KeyError as exc:
        raise ValueError(f"Unknown ruling type: {ruling_type}") from exc


def calculate_tax_free_amount(
    taxable_income: float,
    options: RulingOptions,
    rates: TaxRates,
) -> float:
    """Return the part of ``taxable_income`` paid out tax-free under the ruling.

    Only salary up to ``ruling_max_salary`` qualifies; income above the cap is
    taxed in full. The taxed part never drops below the threshold for the
    ruling type, so low salaries yield a smaller allowance or none at all.
    """

    if not options.enabled:
        return 0.0

    threshold = ruling_threshold(rates, options.type)
    max_salary = rates.ruling_max_salary

    if max_salary is None:
        eligible = taxable_income
        above_cap = 0.0
    else:
        eligible = min(taxable_income, max_salary)
        above_cap = max(0.0, taxable_income - max_salary)

    effective_salary = max(eligible * TAXED_SHARE + above_cap, threshold)
    reimbursement = taxable_income - effective_salary

    return max(0.0, round_currency(reimbursement))


__all__ = ["calculate_tax_free_amount", "ruling_threshold"]
