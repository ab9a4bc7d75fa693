"""Stat and modifier engine."""

from .loader import CharacterStatsConfig, StatsLoadError, get_stats_config, load_stats_config
from .modifier import ModifierKind, StatModifier
from .registry import StatRegistry
from .stat import Stat
from .stat_type import StatType

__all__ = [
    "CharacterStatsConfig",
    "ModifierKind",
    "Stat",
    "StatModifier",
    "StatRegistry",
    "StatType",
    "StatsLoadError",
    "get_stats_config",
    "load_stats_config",
]
