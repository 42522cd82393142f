"""Utilities for validating tax rate files and surfacing issues.

Schema validation already guarantees well-formed, ordered brackets. The checks
here cover the tax rules that a loader cannot know about, such as credit
tables that must phase out to zero or social rates that must stay below the
combined first-bracket rate.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from dutchtax.backend.exceptions import UnsupportedYearError

from .year_config import (
    BracketTable,
    ConfigurationError,
    TaxRates,
    load_manifest,
    load_tax_rates,
)

_PERCENTAGE_TABLES = ("payroll_tax", "social_security")
_CREDIT_TABLES = ("general_credit", "labour_credit", "elder_credit")


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_percentage_table(scope: str, table: BracketTable) -> list[str]:
    errors: list[str] = []

    if not len(table):
        errors.append(_format_scope(scope, "at least one bracket is required"))
        return errors

    for bracket in table:
        for label, value in (
            ("rate", bracket.rate),
            ("social rate", bracket.social_rate),
            ("older rate", bracket.older_rate),
        ):
            if value is not None and not 0 <= value < 1:
                errors.append(
                    _format_scope(
                        f"{scope}[{bracket.order}]",
                        f"{label} {value} must be between 0 and 1",
                    )
                )

    return errors


def _validate_social_bracket(rates: TaxRates) -> list[str]:
    bracket = rates.first_social_bracket
    if bracket is None:
        return []

    scope = "social_security[1]"
    errors: list[str] = []

    if bracket.social_rate is None or bracket.older_rate is None:
        errors.append(
            _format_scope(scope, "first bracket must define social and older rates")
        )
        return errors

    if bracket.social_rate >= bracket.rate:
        errors.append(
            _format_scope(scope, "social rate must be lower than the combined rate")
        )
    if bracket.older_rate > bracket.social_rate:
        errors.append(
            _format_scope(scope, "older rate cannot exceed the social rate")
        )

    return errors


def _validate_credit_table(scope: str, table: BracketTable) -> list[str]:
    if not len(table):
        return []

    errors: list[str] = []
    last = table[len(table) - 1]

    if not last.is_open:
        errors.append(_format_scope(scope, "final bracket must be open-ended"))
    # A zero rate replaces the accumulated credit, ending the phase-out
    if last.rate != 0:
        errors.append(
            _format_scope(scope, "final bracket must carry a zero rate")
        )

    return errors


def _validate_ruling(rates: TaxRates) -> list[str]:
    errors: list[str] = []
    thresholds = rates.ruling_thresholds

    if thresholds.young > thresholds.normal:
        errors.append(
            _format_scope(
                "ruling_threshold",
                "young professional threshold cannot exceed the normal threshold",
            )
        )

    max_salary = rates.ruling_max_salary
    if max_salary is not None and max_salary < thresholds.normal:
        errors.append(
            _format_scope(
                "ruling_max_salary",
                "cap must not be lower than the normal threshold",
            )
        )

    return errors


def _validate_low_wage_threshold(rates: TaxRates) -> list[str]:
    # The schema defaults a missing threshold to zero, which disables the check
    if rates.low_wage_threshold > 0:
        return []
    return [_format_scope("low_wage_threshold", "must be set to a positive amount")]


def validate_tax_rates(rates: TaxRates) -> list[str]:
    """Return a list of validation issues for the provided rates."""

    errors: list[str] = []
    tables = rates.tables()

    for name in _PERCENTAGE_TABLES:
        errors.extend(_validate_percentage_table(name, tables[name]))
    errors.extend(_validate_social_bracket(rates))
    for name in _CREDIT_TABLES:
        errors.extend(_validate_credit_table(name, tables[name]))
    errors.extend(_validate_ruling(rates))
    errors.extend(_validate_low_wage_threshold(rates))

    return errors


def validate_all_years(
    years: Sequence[int] | None = None,
    directory: Path | None = None,
) -> dict[int, list[str]]:
    """Validate all configured years and return issues keyed by year."""

    targets = years or load_manifest(directory).supported_years
    results: dict[int, list[str]] = {}

    for year in targets:
        rates = load_tax_rates(int(year), directory)
        results[int(year)] = validate_tax_rates(rates)

    return results


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate configured tax years and report rate table issues."
    )
    parser.add_argument(
        "years",
        nargs="*",
        type=int,
        help="Specific years to validate (defaults to all configured years)",
    )
    parser.add_argument(
        "--config-dir",
        type=Path,
        default=None,
        help="Directory holding manifest.yaml and the yearly rate files",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)

    try:
        years = args.years or load_manifest(args.config_dir).supported_years
    except (FileNotFoundError, ConfigurationError) as error:
        print(f"failed to load manifest: {error}")
        return 1

    if not years:
        parser.print_help()
        return 1

    exit_code = 0

    for year in years:
        try:
            rates = load_tax_rates(year, args.config_dir)
        except (FileNotFoundError, ConfigurationError, UnsupportedYearError) as error:
            print(f"[{year}] failed to load configuration: {error}")
            exit_code = 1
            continue

        issues = validate_tax_rates(rates)
        if issues:
            exit_code = 1
            print(f"[{year}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{year}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
