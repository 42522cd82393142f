"""Orchestrate rate lookup, tax lines and credits into a paycheck.

``calculate_paycheck`` is the ordered pipeline: annual gross, holiday
allowance, 30% ruling, payroll tax, national insurance, then the credits whose
final general credit depends on everything computed before it.
``calculate_tax`` wraps it for JSON payloads, adding request validation and
optional profiling so routes get a single entry point.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from time import perf_counter
from typing import Any

from pydantic import ValidationError

from dutchtax.backend.app.models import (
    CalculationRequest,
    CalculationResponse,
    PaycheckResult,
    Period,
    RulingOptions,
    SalaryInput,
    format_validation_error,
)
from dutchtax.backend.config.year_config import (
    RateProvider,
    RateSelector,
    TaxRates,
    default_rate_provider,
)

from .calculators import (
    calculate_bracket_amount,
    calculate_tax_free_amount,
    round_currency,
    social_credit_multiplier,
)

_LOGGER = logging.getLogger(__name__)

HOLIDAY_ALLOWANCE_RATE = 0.08


def _profiling_enabled() -> bool:
    """Return ``True`` when calculation profiling should be captured."""

    flag = os.getenv("DUTCHTAX_PROFILE_CALCULATIONS", "")
    return flag.strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def _profile_section(name: str, store: dict[str, float] | None):
    """Capture the duration of a named section when profiling is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


def holiday_allowance(annual_amount: float) -> float:
    """Return the holiday allowance (vakantiegeld) contained in ``annual_amount``.

    The amount already includes the 8% allowance, so it is divided out rather
    than added on top.
    """

    return round_currency(
        annual_amount * (HOLIDAY_ALLOWANCE_RATE / (1 + HOLIDAY_ALLOWANCE_RATE))
    )


@dataclass(frozen=True, slots=True)
class TaxCredits:
    """Credits after the general credit has been capped to the tax due."""

    multiplier: float
    labour_credit: float
    general_credit: float
    income_tax: float


def _apply_credits(
    taxable_year: float,
    tax_without_credit: float,
    salary_input: SalaryInput,
    rates: TaxRates,
) -> TaxCredits:
    multiplier = social_credit_multiplier(
        rates,
        salary_input.reached_retirement_age,
        salary_input.social_security,
    )
    below_low_wage = taxable_year < rates.low_wage_threshold / multiplier

    if below_low_wage:
        labour_credit = 0.0
    else:
        labour_credit = calculate_bracket_amount(
            rates.labour_credit, taxable_year, RateSelector.PRIMARY, multiplier
        )

    general_credit = calculate_bracket_amount(
        rates.general_credit, taxable_year, RateSelector.PRIMARY, multiplier
    )
    if salary_input.reached_retirement_age:
        general_credit += calculate_bracket_amount(rates.elder_credit, taxable_year)

    # Credits may cancel the tax due but never turn it into a refund.
    if tax_without_credit + labour_credit + general_credit > 0 or (
        salary_input.reached_retirement_age and below_low_wage
    ):
        general_credit = -(tax_without_credit + labour_credit)

    income_tax = round_currency(tax_without_credit + labour_credit + general_credit)

    return TaxCredits(
        multiplier=multiplier,
        labour_credit=labour_credit,
        general_credit=general_credit,
        income_tax=income_tax,
    )


def calculate_paycheck(
    salary_input: SalaryInput,
    period: Period,
    year: int,
    ruling: RulingOptions,
    provider: RateProvider,
) -> PaycheckResult:
    """Compute the full paycheck for ``salary_input`` in tax ``year``.

    Raises ``UnsupportedYearError`` from ``provider`` before any arithmetic
    when the year has no rates.
    """

    rates = provider.get_tax_rates_for_year(year)
    working_weeks = provider.get_working_weeks()
    working_days = provider.get_working_days()

    gross_year = salary_input.income * period.annual_multiplier(
        working_weeks, working_days, salary_input.hours_per_week
    )
    if gross_year < 0:
        gross_year = 0.0

    gross_allowance = (
        holiday_allowance(gross_year) if salary_input.include_holiday_allowance else 0.0
    )
    taxable_year = gross_year - gross_allowance

    tax_free_year = calculate_tax_free_amount(taxable_year, ruling, rates)
    taxable_year -= tax_free_year

    payroll_tax = -calculate_bracket_amount(rates.payroll_tax, taxable_year)

    if salary_input.social_security:
        selector = (
            RateSelector.OLDER if salary_input.reached_retirement_age else RateSelector.SOCIAL
        )
        social_tax = -calculate_bracket_amount(
            rates.social_security, taxable_year, selector
        )
    else:
        social_tax = 0.0

    tax_without_credit = round_currency(payroll_tax + social_tax)

    credits = _apply_credits(taxable_year, tax_without_credit, salary_input, rates)

    # The tax-free part is paid out even though it was never taxed
    net_year = taxable_year + credits.income_tax + tax_free_year
    net_allowance = (
        holiday_allowance(net_year) if salary_input.include_holiday_allowance else 0.0
    )

    return PaycheckResult(
        gross_year=round_currency(gross_year),
        gross_allowance=round_currency(gross_allowance),
        tax_free_year=round_currency(tax_free_year),
        taxable_year=round_currency(taxable_year + tax_free_year),
        payroll_tax=round_currency(payroll_tax),
        social_tax=round_currency(social_tax),
        labour_credit=round_currency(credits.labour_credit),
        general_credit=round_currency(credits.general_credit),
        net_year=round_currency(net_year),
        net_allowance=round_currency(net_allowance),
        working_weeks=working_weeks,
        working_days=working_days,
        hours_per_week=salary_input.hours_per_week,
    )


def calculate_tax(
    payload: Mapping[str, Any] | CalculationRequest,
    provider: RateProvider | None = None,
) -> dict[str, Any]:
    """Compute a paycheck for a JSON-style ``payload`` and return its snapshot."""

    if isinstance(payload, CalculationRequest):
        request_model = payload
    else:
        if not isinstance(payload, Mapping):
            raise ValueError("Payload must be a mapping")
        try:
            request_model = CalculationRequest.model_validate(payload)
        except ValidationError as exc:
            raise ValueError(format_validation_error(exc)) from exc

    timings: dict[str, float] | None = {} if _profiling_enabled() else None
    overall_start = perf_counter() if timings is not None else None

    rate_provider = provider or default_rate_provider()
    year = request_model.year
    if year is None:
        year = rate_provider.get_current_year()

    salary_input = request_model.to_salary_input(
        rate_provider.get_default_working_hours()
    )
    ruling = request_model.ruling.to_options()

    with _profile_section("paycheck", timings):
        result = calculate_paycheck(
            salary_input, request_model.period, year, ruling, rate_provider
        )

    if timings is not None and overall_start is not None:
        timings["total"] = perf_counter() - overall_start
        _LOGGER.debug(
            "calculate_tax timings (ms): %s",
            {name: round(duration * 1000, 3) for name, duration in timings.items()},
        )

    response_model = CalculationResponse.model_validate(
        {
            "result": result.as_dict(),
            "meta": {
                "year": year,
                "period": request_model.period,
                "ruling": ruling.type if ruling.enabled else None,
            },
        }
    )

    return response_model.model_dump(mode="json", exclude_none=True)


__all__ = [
    "HOLIDAY_ALLOWANCE_RATE",
    "TaxCredits",
    "calculate_paycheck",
    "calculate_tax",
    "holiday_allowance",
]
