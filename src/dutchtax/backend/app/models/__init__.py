"""Typed request/response models shared across the calculation services.

Domain inputs (``SalaryInput``, ``RulingOptions``) and the derived
``PaycheckResult`` are lightweight frozen dataclasses validated on
construction, while the HTTP payloads are Pydantic models that convert into
them. Keeping both here lets routes, the facade and the calculation pipeline
agree on one vocabulary.
"""

from __future__ import annotations

from .api import (
    CalculationRequest,
    CalculationResponse,
    ResponseMeta,
    RulingInput,
    format_validation_error,
)
from .paycheck import (
    MAX_HOURS_PER_WEEK,
    PaycheckResult,
    Period,
    RulingOptions,
    RulingType,
    SalaryInput,
)

__all__ = [
    "CalculationRequest",
    "CalculationResponse",
    "MAX_HOURS_PER_WEEK",
    "PaycheckResult",
    "Period",
    "ResponseMeta",
    "RulingInput",
    "RulingOptions",
    "RulingType",
    "SalaryInput",
    "format_validation_error",
]
