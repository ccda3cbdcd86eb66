"""
Configuration for the variant matrix.

Defaults live in matrix_config.json next to this module.
Config is declarative JSON - edit the file, not the code.
"""

import json
import os
from dataclasses import dataclass, field
from decimal import Decimal
from functools import lru_cache
from pathlib import Path

DEFAULT_CONFIG_PATH = Path(__file__).parent / "matrix_config.json"

# Environment override for the config file location
CONFIG_ENV_VAR = "VARIANT_MATRIX_CONFIG"


@dataclass
class SubmissionSettings:
    """Settings for mapping the matrix into a product submission."""
    srp_markup: Decimal = Decimal("1.2")
    price_quantum: Decimal = Decimal("0.01")
    uppercase_sku: bool = True


@dataclass
class MatrixSettings:
    """Full configuration for the variant matrix."""
    # Names given to new dimensions, by position
    default_dimension_names: list[str] = field(default_factory=lambda: ["Color", "Size"])
    # Dimension names (lowercase) that make a size chart relevant
    size_dimension_names: list[str] = field(default_factory=lambda: ["size"])
    currency_label: str = "RM"
    submission: SubmissionSettings = field(default_factory=SubmissionSettings)

    def default_dimension_name(self, position: int) -> str:
        """Name for a dimension appended at the given position."""
        if position < len(self.default_dimension_names):
            return self.default_dimension_names[position]
        return f"Variation {position + 1}"


def load_config(config_path: str | Path) -> MatrixSettings:
    """
    Load configuration from JSON file.

    Args:
        config_path: Path to a matrix_config.json

    Returns:
        MatrixSettings with missing keys filled from defaults
    """
    path = Path(config_path)
    with open(path, "r") as f:
        data = json.load(f)

    defaults = MatrixSettings()

    submission_data = data.get("submission", {})
    submission = SubmissionSettings(
        srp_markup=Decimal(str(submission_data.get("srp_markup", defaults.submission.srp_markup))),
        price_quantum=Decimal(str(submission_data.get("price_quantum", defaults.submission.price_quantum))),
        uppercase_sku=bool(submission_data.get("uppercase_sku", defaults.submission.uppercase_sku)),
    )

    size_names = data.get("size_dimension_names", defaults.size_dimension_names)

    return MatrixSettings(
        default_dimension_names=list(data.get("default_dimension_names", defaults.default_dimension_names)),
        size_dimension_names=[name.strip().lower() for name in size_names],
        currency_label=data.get("currency_label", defaults.currency_label),
        submission=submission,
    )


def default_config() -> MatrixSettings:
    """Load the config bundled with the package."""
    return load_config(DEFAULT_CONFIG_PATH)


@lru_cache
def get_settings() -> MatrixSettings:
    """
    Get cached settings instance.

    Uses the file named by VARIANT_MATRIX_CONFIG when set, otherwise the
    bundled matrix_config.json.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return load_config(override)
    return default_config()
