"""Rate loader wrapping the shared schema models."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Protocol, Sequence

import yaml
from pydantic import ValidationError

from dutchtax.backend.exceptions import UnsupportedYearError

from .schema import (
    BracketTable,
    ConfigurationError,
    RateSelector,
    RulingThresholds,
    TaxBracket,
    TaxRates,
    TaxYearManifest,
    TaxYearManifestEntry,
)

_LOGGER = logging.getLogger(__name__)

CONFIG_DIRECTORY = Path(
    os.getenv("DUTCHTAX_CONFIG_DIR") or Path(__file__).resolve().parent / "data"
)
MANIFEST_FILENAME = "manifest.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration file must define a mapping at the top level")
    return data


def _resolve_directory(directory: Path | None) -> Path:
    return directory if directory is not None else CONFIG_DIRECTORY


@lru_cache(maxsize=4)
def load_manifest(directory: Path | None = None) -> TaxYearManifest:
    """Load and cache the configuration manifest."""

    manifest_file = _resolve_directory(directory) / MANIFEST_FILENAME
    if not manifest_file.exists():
        raise FileNotFoundError(f"Configuration manifest not found: {manifest_file}")

    raw_manifest = _load_yaml(manifest_file)

    try:
        return TaxYearManifest.model_validate(raw_manifest)
    except ValidationError as error:
        raise ConfigurationError(f"Manifest validation failed: {error}") from error


@lru_cache(maxsize=16)
def load_tax_rates(year: int, directory: Path | None = None) -> TaxRates:
    """Load rates for the specified tax year from disk.

    Raises ``UnsupportedYearError`` when the manifest does not declare ``year``.
    """

    manifest = load_manifest(directory)
    try:
        manifest_entry = manifest.get_entry(year)
    except KeyError as exc:
        raise UnsupportedYearError(year, manifest.supported_years) from exc

    rates_file = _resolve_directory(directory) / manifest_entry.resolved_filename
    if not rates_file.exists():
        raise FileNotFoundError(
            f"Configuration file for year {year} missing: {rates_file.name}"
        )

    raw_rates = _load_yaml(rates_file)
    raw_rates.setdefault("year", year)

    try:
        rates = TaxRates.model_validate(raw_rates)
    except ValidationError as error:
        raise ConfigurationError(f"Configuration validation failed for {year}: {error}") from error

    if rates.year != year:
        raise ConfigurationError(
            f"Configuration year mismatch: expected {year}, found {rates.year}"
        )

    _LOGGER.debug("Loaded tax rates for %s from %s", year, rates_file)
    return rates


def manifest_entries() -> Sequence[TaxYearManifestEntry]:
    """Expose the configured manifest entries."""

    return load_manifest().years


def available_years() -> Sequence[int]:
    """Return the tax years declared in the manifest."""

    return load_manifest().supported_years


class RateProvider(Protocol):
    """Read-only source of year-indexed rates and working-time constants."""

    def get_tax_rates_for_year(self, year: int) -> TaxRates: ...

    def get_working_weeks(self) -> int: ...

    def get_working_days(self) -> int: ...

    def get_default_working_hours(self) -> int: ...

    def get_supported_years(self) -> Sequence[int]: ...

    def get_current_year(self) -> int: ...

    def is_year_supported(self, year: int) -> bool: ...


class YamlRateProvider:
    """``RateProvider`` backed by the YAML files in a configuration directory.

    Parsed years are cached for the lifetime of the process by the module-level
    loaders, so separate provider instances over the same directory share them.
    """

    def __init__(self, config_directory: Path | str | None = None) -> None:
        self._directory = Path(config_directory) if config_directory is not None else None
        self._manifest = load_manifest(self._directory)

    @property
    def config_directory(self) -> Path:
        return _resolve_directory(self._directory)

    def get_supported_years(self) -> Sequence[int]:
        return self._manifest.supported_years

    def get_current_year(self) -> int:
        return self._manifest.current_year

    def get_working_weeks(self) -> int:
        return self._manifest.working_weeks

    def get_working_days(self) -> int:
        return self._manifest.working_days

    def get_default_working_hours(self) -> int:
        return self._manifest.default_working_hours

    def is_year_supported(self, year: int) -> bool:
        return year in self._manifest.supported_years

    def get_tax_rates_for_year(self, year: int) -> TaxRates:
        if not self.is_year_supported(year):
            raise UnsupportedYearError(year, self.get_supported_years())
        return load_tax_rates(year, self._directory)


@lru_cache(maxsize=1)
def default_rate_provider() -> YamlRateProvider:
    """Return the shared provider over ``CONFIG_DIRECTORY``."""

    return YamlRateProvider()


__all__ = [
    "BracketTable",
    "CONFIG_DIRECTORY",
    "ConfigurationError",
    "MANIFEST_FILENAME",
    "RateProvider",
    "RateSelector",
    "RulingThresholds",
    "TaxBracket",
    "TaxRates",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "YamlRateProvider",
    "available_years",
    "default_rate_provider",
    "load_manifest",
    "load_tax_rates",
    "manifest_entries",
]
