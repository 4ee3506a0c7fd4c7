"""
Analysis configuration schema and loading.

Settings are validated with Pydantic and loaded from YAML files. Every field
has a default, so an empty mapping yields the stock configuration.
"""

from pathlib import Path
from typing import Any, Dict, List, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as SchemaValidationError

from sequential_arbitrage.constants import DEFAULT_CONFIG
from sequential_arbitrage.exceptions import ConfigurationError


class AnalysisConfig(BaseModel):
    """Tunable parameters of one analysis pass"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    trading_fee: float = Field(
        default=DEFAULT_CONFIG["TRADING_FEE"],
        ge=0,
        lt=1,
        description="Fee fraction applied to every reverse quote",
    )
    chain_profit_threshold: float = Field(
        default=DEFAULT_CONFIG["CHAIN_PROFIT_THRESHOLD"],
        description="Minimum profit percentage per link and per chain",
    )
    max_chain_length: int = Field(
        default=DEFAULT_CONFIG["MAX_CHAIN_LENGTH"],
        ge=2,
        le=10,
        description="Exact number of links in a reported chain",
    )
    max_chains: int = Field(
        default=DEFAULT_CONFIG["MAX_CHAINS"],
        ge=1,
        description="Number of chains to report",
    )
    hidden_pairs: List[str] = Field(
        default_factory=list, description="Pair keys excluded from analysis"
    )
    serialized_swaps_per_group: int = Field(
        default=DEFAULT_CONFIG["SERIALIZED_SWAPS_PER_GROUP"],
        ge=1,
        description="Swaps kept per group when serializing",
    )

    @field_validator("hidden_pairs")
    @classmethod
    def validate_hidden_pairs(cls, v):
        for key in v:
            if "→" not in key:
                raise ValueError(f"Invalid pair key: {key}")
        return v

    @property
    def hidden_pair_set(self) -> set:
        return set(self.hidden_pairs)


def validate_config_dict(config_dict: Dict[str, Any]) -> AnalysisConfig:
    """
    Validate an analysis configuration dictionary

    Args:
        config_dict: Dictionary representation of the config

    Returns:
        Validated AnalysisConfig object

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    if not isinstance(config_dict, dict):
        raise ConfigurationError(
            f"Configuration must be a mapping, got {type(config_dict).__name__}"
        )
    try:
        return AnalysisConfig(**config_dict)
    except SchemaValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration: {e}", details={"errors": e.errors()}
        )


def load_config(config_path: Union[str, Path]) -> AnalysisConfig:
    """
    Load and validate a YAML configuration file.

    An empty file yields the default configuration.

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            config_dict = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}")
    except OSError as e:
        raise ConfigurationError(f"Failed to load config {config_path}: {e}")

    if config_dict is None:
        return AnalysisConfig()

    return validate_config_dict(config_dict)
