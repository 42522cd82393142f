"""Errors raised by the calculation layer."""

from __future__ import annotations

from collections.abc import Sequence


class TaxCalculationError(ValueError):
    """Base class for calculation errors surfaced to callers."""


class InvalidIncomeError(TaxCalculationError):
    """Raised when salary input values are out of range."""

    @classmethod
    def negative_income(cls, income: float) -> InvalidIncomeError:
        return cls(f"Income cannot be negative. Received: {income:.2f}")

    @classmethod
    def non_finite(cls, field: str, value: float) -> InvalidIncomeError:
        return cls(f"{field} must be a finite number. Received: {value}")

    @classmethod
    def invalid_working_hours(cls, hours: float) -> InvalidIncomeError:
        return cls(
            f"Working hours must be between 0 and 168 per week. Received: {hours:.2f}"
        )


class UnsupportedYearError(TaxCalculationError):
    """Raised when no rate table is configured for the requested tax year."""

    def __init__(self, year: int, supported_years: Sequence[int]) -> None:
        self.year = year
        self.supported_years = tuple(supported_years)
        supported = ", ".join(str(entry) for entry in self.supported_years)
        super().__init__(
            f"Tax year {year} is not supported. Supported years: {supported}"
        )


__all__ = ["InvalidIncomeError", "TaxCalculationError", "UnsupportedYearError"]
