"""Utilities for serialising calculation responses."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Tuple

from flask import jsonify

ResponseTuple = Tuple[Any, int]


def build_calculation_response(payload: Mapping[str, Any]) -> ResponseTuple:
    """Return a Flask JSON response for a paycheck ``payload``.

    ``payload`` is the snapshot produced by ``calculate_tax`` and must already
    be JSON serialisable.
    """

    if "result" not in payload:
        raise ValueError("Calculation payload is missing its result section")

    return jsonify(payload), 200
