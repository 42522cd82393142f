from pathlib import Path
from shutil import copy2

import pytest

from dutchtax.backend.config import year_config
from dutchtax.backend.config.validator import (
    main,
    validate_all_years,
    validate_tax_rates,
)
from dutchtax.backend.config.year_config import BracketTable, load_tax_rates


def _with_table(name: str, rows: list[dict[str, object]]):
    rates = load_tax_rates(2025)
    return rates.model_copy(update={name: BracketTable.model_validate(rows)})


def test_current_configurations_are_valid() -> None:
    results = validate_all_years()
    assert set(results) == {2024, 2025, 2026}
    assert all(not issues for issues in results.values()), results


def test_validator_flags_percentage_out_of_range() -> None:
    broken = _with_table("payroll_tax", [{"min": 0, "rate": 1.5}])

    errors = validate_tax_rates(broken)

    assert any("payroll_tax[1]" in error and "between 0 and 1" in error for error in errors)


def test_validator_requires_payroll_brackets() -> None:
    broken = _with_table("payroll_tax", [])

    errors = validate_tax_rates(broken)

    assert any("at least one bracket" in error for error in errors)


def test_validator_flags_missing_social_rates() -> None:
    broken = _with_table("social_security", [{"min": 0, "max": 38441, "rate": 0.3582}])

    errors = validate_tax_rates(broken)

    assert any("social and older rates" in error for error in errors)


def test_validator_flags_social_rate_above_combined_rate() -> None:
    broken = _with_table(
        "social_security",
        [{"min": 0, "max": 38441, "rate": 0.2, "social": 0.2765, "older": 0.0975}],
    )

    errors = validate_tax_rates(broken)

    assert any("lower than the combined rate" in error for error in errors)


def test_validator_flags_credit_without_phase_out() -> None:
    broken = _with_table(
        "general_credit",
        [{"min": 0, "max": 28406, "rate": 3068}, {"min": 28406, "rate": -0.06337}],
    )

    errors = validate_tax_rates(broken)

    assert any(error.startswith("general_credit") and "zero rate" in error for error in errors)


def test_validator_flags_closed_credit_table() -> None:
    broken = _with_table("elder_credit", [{"min": 0, "max": 45308, "rate": 0}])

    errors = validate_tax_rates(broken)

    assert any("open-ended" in error for error in errors)


def test_validator_flags_inverted_ruling_thresholds() -> None:
    rates = load_tax_rates(2025)
    thresholds = rates.ruling_thresholds.model_copy(update={"young": 50000.0})
    broken = rates.model_copy(update={"ruling_thresholds": thresholds})

    errors = validate_tax_rates(broken)

    assert any("young professional threshold" in error for error in errors)


def test_main_reports_success(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["2025"]) == 0
    assert "[2025] OK" in capsys.readouterr().out


def test_main_reports_unsupported_year(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["1999"]) == 1
    assert "[1999] failed to load configuration" in capsys.readouterr().out


def test_main_reports_issues_in_custom_directory(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    for filename in ("manifest.yaml", "2024.yaml", "2025.yaml", "2026.yaml"):
        copy2(year_config.CONFIG_DIRECTORY / filename, tmp_path / filename)
    rates_file = tmp_path / "2024.yaml"
    rates_file.write_text(
        rates_file.read_text().replace("young: 35048", "young: 99999"),
        encoding="utf-8",
    )

    exit_code = main(["--config-dir", str(tmp_path)])

    output = capsys.readouterr().out
    assert exit_code == 1
    assert "[2024] 1 issue(s) detected" in output
    assert "[2025] OK" in output


def test_validator_flags_missing_low_wage_threshold() -> None:
    broken = load_tax_rates(2025).model_copy(update={"low_wage_threshold": 0.0})

    errors = validate_tax_rates(broken)

    assert errors == ["low_wage_threshold: must be set to a positive amount"]


def test_bundled_years_define_low_wage_threshold() -> None:
    for year in (2024, 2025, 2026):
        assert load_tax_rates(year).low_wage_threshold > 0
