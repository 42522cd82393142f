"""Pydantic models describing the tax year rate schema."""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterator, Mapping, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    RootModel,
    ValidationError,
    computed_field,
    model_validator,
)
from typing_extensions import Self


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class RateSelector(str, Enum):
    """Which rate column of a bracket a traversal reads."""

    PRIMARY = "rate"
    SOCIAL = "social"
    OLDER = "older"


class TaxBracket(ImmutableModel):
    """A single income range of a bracket table.

    ``rate`` holds either a fraction of the income falling inside the bracket
    or an absolute amount; see ``calculators.brackets.resolve_rate`` for how
    the two are told apart.
    """

    order: int = Field(default=1, alias="bracket")
    lower_bound: float = Field(alias="min")
    upper_bound: float | None = Field(default=None, alias="max")
    rate: float
    social_rate: float | None = Field(default=None, alias="social")
    older_rate: float | None = Field(default=None, alias="older")

    @model_validator(mode="after")
    def _validate_bounds(self) -> TaxBracket:
        if self.lower_bound < 0:
            raise ConfigurationError("Bracket lower bounds must be non-negative")
        if self.upper_bound is not None and self.upper_bound <= self.lower_bound:
            raise ConfigurationError("Bracket upper bounds must exceed the lower bound")
        return self

    @property
    def is_open(self) -> bool:
        return self.upper_bound is None

    @property
    def delta(self) -> float | None:
        """Width of the bracket, ``None`` for the open-ended final bracket."""

        if self.upper_bound is None:
            return None
        return self.upper_bound - self.lower_bound

    def rate_for(self, selector: RateSelector) -> float:
        if selector is RateSelector.SOCIAL and self.social_rate is not None:
            return self.social_rate
        if selector is RateSelector.OLDER and self.older_rate is not None:
            return self.older_rate
        return self.rate


class BracketTable(RootModel[tuple[TaxBracket, ...]]):
    """Ordered, immutable sequence of brackets for one tax concept and year."""

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _number_brackets(cls, data: Any) -> Any:
        if data is None:
            return ()
        if isinstance(data, BracketTable):
            return data.root
        if isinstance(data, Mapping) or isinstance(data, str | bytes):
            raise ConfigurationError("Bracket tables must be provided as a list")

        numbered: list[Any] = []
        for index, entry in enumerate(data, start=1):
            if isinstance(entry, Mapping) and "bracket" not in entry and "order" not in entry:
                entry = {**entry, "bracket": index}
            numbered.append(entry)
        return tuple(numbered)

    @model_validator(mode="after")
    def _validate_sequence(self) -> Self:
        previous: TaxBracket | None = None
        for bracket in self.root:
            if previous is not None:
                if previous.upper_bound is None:
                    raise ConfigurationError(
                        "Only the final bracket may have an open upper bound"
                    )
                if bracket.lower_bound < previous.upper_bound:
                    raise ConfigurationError(
                        "Brackets must be in ascending, non-overlapping order"
                    )
            previous = bracket
        return self

    def __iter__(self) -> Iterator[TaxBracket]:  # type: ignore[override]
        return iter(self.root)

    def __getitem__(self, index: int) -> TaxBracket:
        return self.root[index]

    def __len__(self) -> int:
        return len(self.root)

    @property
    def first(self) -> TaxBracket | None:
        return self.root[0] if self.root else None


def _empty_table() -> BracketTable:
    return BracketTable(())


class RulingThresholds(ImmutableModel):
    """Minimum effective salary per 30% ruling category."""

    normal: float = 0.0
    young: float = 0.0
    research: float = 0.0

    @model_validator(mode="after")
    def _validate_thresholds(self) -> RulingThresholds:
        if min(self.normal, self.young, self.research) < 0:
            raise ConfigurationError("Ruling thresholds must be non-negative")
        return self


class TaxRates(ImmutableModel):
    """All rate tables and thresholds for a single tax year."""

    year: int
    payroll_tax: BracketTable = Field(default_factory=_empty_table)
    social_security: BracketTable = Field(default_factory=_empty_table)
    general_credit: BracketTable = Field(default_factory=_empty_table)
    labour_credit: BracketTable = Field(default_factory=_empty_table)
    elder_credit: BracketTable = Field(default_factory=_empty_table)
    ruling_thresholds: RulingThresholds = Field(
        default_factory=RulingThresholds, alias="ruling_threshold"
    )
    ruling_max_salary: float | None = None
    low_wage_threshold: float = 0.0

    @model_validator(mode="after")
    def _validate_thresholds(self) -> TaxRates:
        if self.ruling_max_salary is not None and self.ruling_max_salary <= 0:
            raise ConfigurationError("ruling_max_salary must be positive when provided")
        if self.low_wage_threshold < 0:
            raise ConfigurationError("low_wage_threshold must be non-negative")
        return self

    @property
    def first_social_bracket(self) -> TaxBracket | None:
        return self.social_security.first

    def tables(self) -> dict[str, BracketTable]:
        return {
            "payroll_tax": self.payroll_tax,
            "social_security": self.social_security,
            "general_credit": self.general_credit,
            "labour_credit": self.labour_credit,
            "elder_credit": self.elder_credit,
        }


class TaxYearManifestEntry(ImmutableModel):
    """Entry describing a supported tax year in the manifest."""

    year: int
    filename: str | None = None

    @computed_field
    @property
    def resolved_filename(self) -> str:
        return self.filename or f"{self.year}.yaml"


class TaxYearManifest(ImmutableModel):
    """Manifest listing the rate files and process-wide working-time constants."""

    current_year: int
    working_weeks: int = 52
    working_days: int = 255
    default_working_hours: int = 40
    years: Sequence[TaxYearManifestEntry]

    @model_validator(mode="after")
    def _validate_manifest(self) -> TaxYearManifest:
        seen: set[int] = set()
        for entry in self.years:
            if entry.year in seen:
                raise ConfigurationError(
                    f"Duplicate year {entry.year} declared in the configuration manifest"
                )
            seen.add(entry.year)
        if self.current_year not in seen:
            raise ConfigurationError(
                f"Current year {self.current_year} is not declared in the manifest"
            )
        for label, value in {
            "working_weeks": self.working_weeks,
            "working_days": self.working_days,
            "default_working_hours": self.default_working_hours,
        }.items():
            if value <= 0:
                raise ConfigurationError(f"'{label}' must be a positive integer")
        return self

    def get_entry(self, year: int) -> TaxYearManifestEntry:
        for entry in self.years:
            if entry.year == year:
                return entry
        raise KeyError(year)

    @computed_field
    @property
    def supported_years(self) -> tuple[int, ...]:
        return tuple(sorted(entry.year for entry in self.years))


__all__ = [
    "BracketTable",
    "ConfigurationError",
    "ImmutableModel",
    "RateSelector",
    "RulingThresholds",
    "TaxBracket",
    "TaxRates",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "ValidationError",
]
