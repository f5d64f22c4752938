"""
Rate Table Loader

Builds the immutable RateTable used by the impact estimator, either from the
bundled defaults or from a JSON override file of the same shape.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from ..data.impact_rates import get_default_rate_config
from ..schemas.impact_schemas import ActionRates, ActionType, RateTable

logger = logging.getLogger(__name__)

METRICS = ("co2", "water", "trees")
ACTION_TYPE_VALUES = {t.value for t in ActionType}


class RateTableError(ValueError):
    """Raised when rate configuration cannot be read or is invalid."""


def build_rate_table(config: Dict[str, Any]) -> RateTable:
    """
    Build a RateTable from a raw configuration dict.

    The dict has per-metric tables (``co2``, ``water``, ``trees``) keyed by
    action type; the rates are regrouped per action type.

    Args:
        config: Raw configuration, see ``get_default_rate_config``

    Returns:
        Validated, read-only RateTable

    Raises:
        RateTableError: unknown action type, negative rate, bad blend
    """
    per_action: Dict[str, Dict[str, Any]] = {}
    for metric in METRICS:
        table = config.get(metric) or {}
        if not isinstance(table, dict):
            raise RateTableError(f"'{metric}' rates must be a mapping of action type to rates")
        for action_type, rates in table.items():
            if action_type not in ACTION_TYPE_VALUES:
                raise RateTableError(f"Unknown action type in '{metric}' rates: {action_type!r}")
            per_action.setdefault(action_type, {})[metric] = rates

    try:
        return RateTable(
            version=str(config.get("version", "unversioned")),
            recycling_blend=config.get("recycling_blend"),
            shower_baseline_minutes=config.get("shower_baseline_minutes"),
            actions={
                ActionType(action_type): ActionRates(**metrics)
                for action_type, metrics in per_action.items()
            },
        )
    except ValidationError as exc:
        raise RateTableError(f"Invalid rate configuration: {exc}") from exc


def load_rate_table(path: Optional[Union[str, Path]] = None) -> RateTable:
    """
    Load the rate table once at startup.

    Args:
        path: Optional JSON override file; bundled defaults when empty

    Returns:
        RateTable
    """
    if not path:
        table = build_rate_table(get_default_rate_config())
        logger.info("Loaded bundled impact rate table version %s", table.version)
        return table

    try:
        with open(path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise RateTableError(f"Could not read rate table from {path}: {exc}") from exc

    if not isinstance(config, dict):
        raise RateTableError(f"Rate table in {path} must be a JSON object")

    table = build_rate_table(config)
    logger.info("Loaded impact rate table version %s from %s", table.version, path)
    return table
