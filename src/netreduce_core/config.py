# src/netreduce_core/config.py
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import cerberus
import yaml

from .constants import DEFAULT_MAX_BRANCHES, DEFAULT_MAX_DEPTH

logger = logging.getLogger(__name__)


class ConfigParsingError(ValueError):
    """Custom exception for errors during analysis configuration parsing."""
    pass


@dataclass(frozen=True)
class AnalysisConfig:
    """
    Tunables of a TreeBuilder run. Frozen so it can take part in cache keys.

    - max_depth: longest path (in component traversals) the search explores.
    - max_branches: total recursive calls allowed for one build.
    - strict_limits: raise RecursionLimitExceededError instead of returning a
      partial result with a warning issue.
    - detect_bridges: run the series/parallel check and report bridges.
    - validate_links: validate internal link declarations before searching.
    """
    max_depth: int = DEFAULT_MAX_DEPTH
    max_branches: int = DEFAULT_MAX_BRANCHES
    strict_limits: bool = False
    detect_bridges: bool = True
    validate_links: bool = True


_CONFIG_SCHEMA = {
    "max_depth": {"type": "integer", "min": 1, "default": DEFAULT_MAX_DEPTH},
    "max_branches": {"type": "integer", "min": 1, "default": DEFAULT_MAX_BRANCHES},
    "strict_limits": {"type": "boolean", "default": False},
    "detect_bridges": {"type": "boolean", "default": True},
    "validate_links": {"type": "boolean", "default": True},
}


def parse_analysis_config(raw_config: Optional[Dict[str, Any]]) -> AnalysisConfig:
    """
    Parses a raw configuration mapping into an AnalysisConfig. A missing or
    empty mapping yields the defaults.
    """
    if raw_config is None:
        return AnalysisConfig()
    if not isinstance(raw_config, dict):
        raise ConfigParsingError(
            f"Analysis configuration must be a mapping, got {type(raw_config).__name__}."
        )

    validator = cerberus.Validator(_CONFIG_SCHEMA)
    validator.allow_unknown = False
    if not validator.validate(raw_config):
        problems = "; ".join(f"{k}: {v[0]}" for k, v in sorted(validator.errors.items()))
        raise ConfigParsingError(f"Failed to parse analysis configuration: {problems}")

    config = AnalysisConfig(**validator.document)
    logger.debug(f"Parsed analysis configuration: {config}")
    return config


def load_analysis_config(path: Union[str, Path]) -> AnalysisConfig:
    """Loads an AnalysisConfig from a YAML file."""
    source = Path(path)
    try:
        with source.open("r", encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except OSError as e:
        raise ConfigParsingError(f"Could not read analysis configuration '{source}': {e}") from e
    except yaml.YAMLError as e:
        raise ConfigParsingError(f"Invalid YAML in analysis configuration '{source}': {e}") from e
    return parse_analysis_config(content)
