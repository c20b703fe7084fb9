"""
Configuration Service

Loads plan policy overrides from a YAML file.
Allows changing business rules (peak mileage targets, phase splits,
pace offsets, ...) without code changes.

Usage:
    policy = ConfigService.get_policy()

    # Read a single rule
    reduction = ConfigService.get("recovery_week_reduction")

    # Reload after editing plan_rules.yaml
    ConfigService.reload()
"""

import logging
from functools import reduce
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .policy import DEFAULT_POLICY, PlanPolicy

logger = logging.getLogger(__name__)


class ConfigService:
    """
    Load and cache the active plan policy.
    """

    _policy: Optional[PlanPolicy] = None
    _rules_file: Optional[Path] = None

    @classmethod
    def configure(cls, rules_file: Optional[str]) -> None:
        """Point the service at a plan_rules.yaml file (None = defaults only)."""
        cls._rules_file = Path(rules_file) if rules_file else None
        cls._policy = None

    @classmethod
    def get_policy(cls) -> PlanPolicy:
        if cls._policy is None:
            cls._load()
        return cls._policy

    @classmethod
    def get(cls, key: str = None, default: Any = None) -> Any:
        """
        Get a policy value.

        Args:
            key: Dot-separated key (e.g., "peak_mileage_targets.Marathon.beginner.max")
            default: Default value if key not found

        Returns:
            Policy value, or the entire policy as a dict if no key provided
        """
        data = cls.get_policy().to_dict()
        if key is None:
            return data

        try:
            return reduce(lambda d, k: d[k], key.split("."), data)
        except (KeyError, TypeError):
            return default

    @classmethod
    def reload(cls) -> None:
        """Reload policy from file."""
        cls._policy = None
        cls._load()
        logger.info("Plan policy reloaded")

    @classmethod
    def set_policy(cls, policy: PlanPolicy) -> None:
        """
        Replace the active policy (in memory only).
        Useful for testing.
        """
        cls._policy = policy

    @classmethod
    def _load(cls) -> None:
        overrides = cls._read_overrides()
        if not overrides:
            cls._policy = DEFAULT_POLICY
            logger.debug("Using default plan policy")
            return

        try:
            cls._policy = DEFAULT_POLICY.with_overrides(overrides)
            logger.info(f"Loaded plan policy overrides: {sorted(overrides)}")
        except (ValueError, TypeError) as e:
            logger.error(f"Invalid plan policy overrides in {cls._rules_file}: {e}")
            cls._policy = DEFAULT_POLICY

    @classmethod
    def _read_overrides(cls) -> Dict[str, Any]:
        if cls._rules_file is None:
            return {}
        if not cls._rules_file.exists():
            logger.debug(f"Plan rules file not found: {cls._rules_file}")
            return {}

        try:
            with open(cls._rules_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error loading {cls._rules_file}: {e}")
            return {}

        if not isinstance(data, dict):
            return {}
        return data
