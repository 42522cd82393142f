"""Library entry point for computing Dutch paychecks without the HTTP layer."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from dutchtax.backend.app.models import PaycheckResult, Period, RulingOptions, SalaryInput
from dutchtax.backend.app.services.calculation_service import calculate_paycheck
from dutchtax.backend.config.year_config import (
    RateProvider,
    YamlRateProvider,
    default_rate_provider,
)


class DutchTaxCalculator:
    """Bind a ``RateProvider`` to the paycheck pipeline.

    >>> calculator = DutchTaxCalculator()
    >>> result = calculator.calculate(SalaryInput(income=5000), Period.MONTH, 2025)
    >>> result.gross_year
    60000.0
    """

    def __init__(self, provider: RateProvider | None = None) -> None:
        self._provider = provider or default_rate_provider()

    @classmethod
    def from_directory(cls, config_directory: Path | str) -> DutchTaxCalculator:
        """Use the rate files in ``config_directory`` instead of the bundled ones."""

        return cls(YamlRateProvider(config_directory))

    @property
    def provider(self) -> RateProvider:
        return self._provider

    def calculate(
        self,
        salary_input: SalaryInput,
        period: Period,
        year: int,
        ruling: RulingOptions | None = None,
    ) -> PaycheckResult:
        """Return the paycheck for ``salary_input``; the ruling is off by default."""

        return calculate_paycheck(
            salary_input,
            period,
            year,
            ruling or RulingOptions.disabled(),
            self._provider,
        )

    def supported_years(self) -> Sequence[int]:
        return self._provider.get_supported_years()

    def current_year(self) -> int:
        return self._provider.get_current_year()

    def is_year_supported(self, year: int) -> bool:
        return self._provider.is_year_supported(year)

    def working_weeks(self) -> int:
        return self._provider.get_working_weeks()

    def working_days(self) -> int:
        return self._provider.get_working_days()

    def default_working_hours(self) -> int:
        return self._provider.get_default_working_hours()


__all__ = ["DutchTaxCalculator"]
