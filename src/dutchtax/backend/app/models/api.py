"""Pydantic models describing the public API surface."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .paycheck import MAX_HOURS_PER_WEEK, Period, RulingOptions, RulingType, SalaryInput

__all__ = [
    "CalculationRequest",
    "CalculationResponse",
    "ResponseMeta",
    "RulingInput",
    "format_validation_error",
]


class RulingInput(BaseModel):
    """30% ruling selection supplied by the user."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = False
    type: RulingType = RulingType.NORMAL

    @field_validator("type", mode="before")
    @classmethod
    def _normalise_type(cls, value: Any) -> Any:
        if value is None:
            return RulingType.NORMAL
        if isinstance(value, str):
            return value.strip().lower() or RulingType.NORMAL
        return value

    def to_options(self) -> RulingOptions:
        return RulingOptions(enabled=self.enabled, type=self.type)


class CalculationRequest(BaseModel):
    """Complete payload accepted by the calculation endpoint."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    year: int | None = Field(default=None, ge=0)
    income: float = Field(..., ge=0)
    period: Period = Period.YEAR
    holiday_allowance: bool = False
    social_security: bool = True
    older: bool = False
    hours: float | None = Field(default=None, ge=0, le=MAX_HOURS_PER_WEEK)
    ruling: RulingInput = Field(default_factory=RulingInput)

    @field_validator("period", mode="before")
    @classmethod
    def _normalise_period(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("ruling", mode="before")
    @classmethod
    def _coerce_ruling_flag(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, bool):
            return {"enabled": value}
        return value

    def to_salary_input(self, default_hours: float) -> SalaryInput:
        return SalaryInput(
            income=self.income,
            include_holiday_allowance=self.holiday_allowance,
            social_security=self.social_security,
            reached_retirement_age=self.older,
            hours_per_week=self.hours if self.hours is not None else default_hours,
        )


class ResponseMeta(BaseModel):
    """Metadata returned alongside the calculation output."""

    model_config = ConfigDict(extra="forbid")

    year: int
    period: Period
    ruling: RulingType | None = None


class CalculationResponse(BaseModel):
    """Full response payload produced by the calculation service."""

    model_config = ConfigDict(extra="forbid")

    result: dict[str, float]
    meta: ResponseMeta


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        if "greater than or equal to 0" in message.lower():
            message = "value cannot be negative"
        if location:
            messages.append(f"{location}: {message}")
        else:
            messages.append(message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid calculation payload: {details}"
