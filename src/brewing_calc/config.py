"""
Configuration management for brewing-calc.

Calculation constants live on a frozen dataclass so a calculator can be
handed an explicit configuration; ``get_config()`` builds one from the
environment.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from brewing_calc.exceptions import ConfigurationError


class GravityBasis(str, Enum):
    """Volume that total extract is divided by when predicting OG."""

    BATCH = "batch"
    POST_BOIL = "post_boil"
    PRE_BOIL = "pre_boil"


@dataclass(frozen=True)
class CalculationConfig:
    """Constants and defaulting policy for recipe calculations."""

    gravity_basis: GravityBasis = GravityBasis.BATCH
    default_attenuation: float = 0.75
    grain_temp_c: float = 20.0
    target_mash_ph: float = 5.4

    # Tinseth utilisation
    tinseth_bigness_factor: float = 1.65
    tinseth_bigness_base: float = 0.000125
    tinseth_time_rate: float = 0.04
    tinseth_time_divisor: float = 4.15
    tinseth_mg_per_l_scale: float = 10.0

    first_wort_bonus_min: float = 20.0
    mash_hop_factor: float = 0.2
    mash_hop_default_time_min: float = 5.0

    whirlpool_min_temp_c: float = 60.0
    whirlpool_temp_span_c: float = 40.0
    whirlpool_exponent: float = 1.8
    whirlpool_default_time_min: float = 15.0
    whirlpool_default_temp_c: float = 80.0

    # Morey colour equation
    morey_factor: float = 1.4922
    morey_exponent: float = 0.6859

    dry_hop_bitterness: bool = False


DEFAULT_CONFIG = CalculationConfig()


def _env_float(name: str, default: float, low: float, high: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e
    if not low <= value <= high:
        raise ConfigurationError(f"{name} must be between {low} and {high}, got {value}")
    return value


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}")


def get_config() -> CalculationConfig:
    """
    Get calculation configuration from environment.

    Environment variables:
        BREWCALC_GRAVITY_BASIS: batch, post_boil or pre_boil
        BREWCALC_DEFAULT_ATTENUATION: Fraction used when no yeast is selected
        BREWCALC_GRAIN_TEMP_C: Grain temperature for strike calculations
        BREWCALC_TARGET_MASH_PH: Target for acid/base recommendations
        BREWCALC_DRY_HOP_BITTERNESS: Enable dry hop bitterness estimates

    Returns:
        CalculationConfig instance

    Raises:
        ConfigurationError: If a variable is set to an invalid value
    """
    basis_raw = os.environ.get("BREWCALC_GRAVITY_BASIS", GravityBasis.BATCH.value)
    try:
        basis = GravityBasis(basis_raw.strip().lower())
    except ValueError as e:
        valid = ", ".join(b.value for b in GravityBasis)
        raise ConfigurationError(
            f"BREWCALC_GRAVITY_BASIS must be one of {valid}, got {basis_raw!r}"
        ) from e

    return CalculationConfig(
        gravity_basis=basis,
        default_attenuation=_env_float(
            "BREWCALC_DEFAULT_ATTENUATION", DEFAULT_CONFIG.default_attenuation, 0.0, 1.0
        ),
        grain_temp_c=_env_float(
            "BREWCALC_GRAIN_TEMP_C", DEFAULT_CONFIG.grain_temp_c, -20.0, 100.0
        ),
        target_mash_ph=_env_float(
            "BREWCALC_TARGET_MASH_PH", DEFAULT_CONFIG.target_mash_ph, 3.0, 8.0
        ),
        dry_hop_bitterness=_env_bool(
            "BREWCALC_DRY_HOP_BITTERNESS", DEFAULT_CONFIG.dry_hop_bitterness
        ),
    )


@dataclass
class StorageConfig:
    """Configuration for the file-backed recipe store."""

    data_dir: Path = field(default_factory=lambda: Path("~/.brewing-calc"))

    def __post_init__(self):
        # Expand user paths
        self.data_dir = Path(self.data_dir).expanduser()


def get_storage_config() -> StorageConfig:
    """
    Get storage configuration from environment.

    Environment variables:
        BREWCALC_DATA_DIR: Directory holding stored JSON values (optional)

    Returns:
        StorageConfig instance
    """
    data_dir = os.environ.get("BREWCALC_DATA_DIR")
    if data_dir:
        return StorageConfig(data_dir=Path(data_dir))
    return StorageConfig()
