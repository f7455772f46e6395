"""
Feature flag application.

Flags are applied once per scenario, before the first page. The flag
service itself is external; ``FeatureFlagClient`` records what it would
set and then clears the application cache through an explicit
``CacheManager`` so cached pages reflect the new flags.
"""

from __future__ import annotations

import logging
from typing import Mapping, Protocol

from smartui.runner.scenario import Feature

logger = logging.getLogger(__name__)


class FeatureFlagService(Protocol):
    def apply(self, features: Mapping[str, Feature]) -> None:
        ...


class CacheManager:
    """Clears the application cache after flags change."""

    def __init__(self):
        self.clear_count = 0

    def clear(self) -> None:
        logger.info("clearing application cache")
        self.clear_count += 1


class FeatureFlagClient:
    def __init__(self, cache_manager: CacheManager):
        self.cache_manager = cache_manager

    def apply(self, features: Mapping[str, Feature]) -> None:
        for name, feature in features.items():
            logger.info(
                "setting feature %s to %s with context %s",
                name,
                feature.enabled,
                dict(feature.context),
            )
        self.cache_manager.clear()


class NoOpFeatureFlags:
    def apply(self, features: Mapping[str, Feature]) -> None:
        if features:
            logger.debug("ignoring %d feature flag(s)", len(features))
