"""Domain inputs and the derived paycheck record."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum

from dutchtax.backend.app.services.calculators.utils import round_currency
from dutchtax.backend.exceptions import InvalidIncomeError

MAX_HOURS_PER_WEEK = 168.0
MONTHS_PER_YEAR = 12


class Period(str, Enum):
    """Period in which an income figure is expressed."""

    YEAR = "year"
    MONTH = "month"
    WEEK = "week"
    DAY = "day"
    HOUR = "hour"

    def annual_multiplier(
        self,
        working_weeks: int = 52,
        working_days: int = 255,
        hours_per_week: float = 40.0,
    ) -> float:
        """Return the factor converting an amount for this period to a year."""

        if self is Period.YEAR:
            return 1.0
        if self is Period.MONTH:
            return float(MONTHS_PER_YEAR)
        if self is Period.WEEK:
            return float(working_weeks)
        if self is Period.DAY:
            return float(working_days)
        return working_weeks * hours_per_week


class RulingType(str, Enum):
    """Categories of the 30% ruling, each with its own salary threshold."""

    NORMAL = "normal"
    YOUNG_MASTER = "young"
    RESEARCH = "research"


@dataclass(frozen=True, slots=True)
class SalaryInput:
    """Validated salary figures and personal flags for one calculation."""

    income: float
    include_holiday_allowance: bool = False
    social_security: bool = True
    reached_retirement_age: bool = False
    hours_per_week: float = 40.0

    def __post_init__(self) -> None:
        if not math.isfinite(self.income):
            raise InvalidIncomeError.non_finite("Income", self.income)
        if self.income < 0:
            raise InvalidIncomeError.negative_income(self.income)
        if not math.isfinite(self.hours_per_week):
            raise InvalidIncomeError.non_finite("Working hours", self.hours_per_week)
        if self.hours_per_week < 0 or self.hours_per_week > MAX_HOURS_PER_WEEK:
            raise InvalidIncomeError.invalid_working_hours(self.hours_per_week)

    def with_income(self, income: float) -> SalaryInput:
        return replace(self, income=income)


@dataclass(frozen=True, slots=True)
class RulingOptions:
    """Whether the 30% ruling applies and under which category."""

    enabled: bool = False
    type: RulingType = RulingType.NORMAL

    @classmethod
    def disabled(cls) -> RulingOptions:
        return cls(enabled=False)

    @classmethod
    def enabled_for(cls, ruling_type: RulingType = RulingType.NORMAL) -> RulingOptions:
        return cls(enabled=True, type=ruling_type)


@dataclass(frozen=True, slots=True)
class PaycheckResult:
    """Year figures of a calculation; every other figure is derived on read.

    Taxes are negative amounts and credits positive ones, so that
    ``income_tax`` is the signed sum of all lines.
    """

    gross_year: float
    gross_allowance: float
    tax_free_year: float
    taxable_year: float
    payroll_tax: float
    social_tax: float
    labour_credit: float
    general_credit: float
    net_year: float
    net_allowance: float
    working_weeks: int = 52
    working_days: int = 255
    hours_per_week: float = 40.0

    def _per_month(self, value: float) -> float:
        return round_currency(value / MONTHS_PER_YEAR)

    def _per_week(self, value: float) -> float:
        if self.working_weeks <= 0:
            return 0.0
        return round_currency(value / self.working_weeks)

    def _per_day(self, value: float) -> float:
        if self.working_days <= 0:
            return 0.0
        return round_currency(value / self.working_days)

    def _per_hour(self, value: float) -> float:
        hours = self.working_weeks * self.hours_per_week
        if hours <= 0:
            return 0.0
        return round_currency(value / hours)

    @property
    def gross_month(self) -> float:
        return self._per_month(self.gross_year)

    @property
    def gross_week(self) -> float:
        return self._per_week(self.gross_year)

    @property
    def gross_day(self) -> float:
        return self._per_day(self.gross_year)

    @property
    def gross_hour(self) -> float:
        return self._per_hour(self.gross_year)

    @property
    def net_month(self) -> float:
        return self._per_month(self.net_year)

    @property
    def net_week(self) -> float:
        return self._per_week(self.net_year)

    @property
    def net_day(self) -> float:
        return self._per_day(self.net_year)

    @property
    def net_hour(self) -> float:
        return self._per_hour(self.net_year)

    @property
    def tax_without_credit(self) -> float:
        return round_currency(self.payroll_tax + self.social_tax)

    @property
    def tax_without_credit_month(self) -> float:
        return self._per_month(self.tax_without_credit)

    @property
    def tax_credit(self) -> float:
        return round_currency(self.labour_credit + self.general_credit)

    @property
    def tax_credit_month(self) -> float:
        return self._per_month(self.tax_credit)

    @property
    def income_tax(self) -> float:
        return round_currency(self.tax_without_credit + self.tax_credit)

    @property
    def income_tax_month(self) -> float:
        return self._per_month(self.income_tax)

    @property
    def payroll_tax_month(self) -> float:
        return self._per_month(self.payroll_tax)

    @property
    def social_tax_month(self) -> float:
        return self._per_month(self.social_tax)

    @property
    def labour_credit_month(self) -> float:
        return self._per_month(self.labour_credit)

    @property
    def general_credit_month(self) -> float:
        return self._per_month(self.general_credit)

    @property
    def tax_free_percent(self) -> float:
        if self.gross_year <= 0:
            return 0.0
        return round_currency(self.tax_free_year / self.gross_year * 100)

    @property
    def effective_tax_rate(self) -> float:
        """Income tax as a percentage of gross pay."""

        if self.gross_year <= 0:
            return 0.0
        return round_currency(abs(self.income_tax) / self.gross_year * 100)

    def as_dict(self) -> dict[str, float]:
        return {
            "gross_year": self.gross_year,
            "gross_month": self.gross_month,
            "gross_week": self.gross_week,
            "gross_day": self.gross_day,
            "gross_hour": self.gross_hour,
            "gross_allowance": self.gross_allowance,
            "tax_free_year": self.tax_free_year,
            "tax_free_percent": self.tax_free_percent,
            "taxable_year": self.taxable_year,
            "payroll_tax": self.payroll_tax,
            "payroll_tax_month": self.payroll_tax_month,
            "social_tax": self.social_tax,
            "social_tax_month": self.social_tax_month,
            "tax_without_credit": self.tax_without_credit,
            "tax_without_credit_month": self.tax_without_credit_month,
            "labour_credit": self.labour_credit,
            "labour_credit_month": self.labour_credit_month,
            "general_credit": self.general_credit,
            "general_credit_month": self.general_credit_month,
            "tax_credit": self.tax_credit,
            "tax_credit_month": self.tax_credit_month,
            "income_tax": self.income_tax,
            "income_tax_month": self.income_tax_month,
            "net_year": self.net_year,
            "net_allowance": self.net_allowance,
            "net_month": self.net_month,
            "net_week": self.net_week,
            "net_day": self.net_day,
            "net_hour": self.net_hour,
            "effective_tax_rate": self.effective_tax_rate,
        }


__all__ = [
    "MAX_HOURS_PER_WEEK",
    "PaycheckResult",
    "Period",
    "RulingOptions",
    "RulingType",
    "SalaryInput",
]
