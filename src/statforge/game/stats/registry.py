"""Per-character lookup of stats by type.

The registry is lenient about unknown stat types: reads return 0 and writes
are ignored. Subsystems such as equipment or buffs may touch a stat before a
character defines it, and that must never be an error.
"""

from collections.abc import Hashable, Iterator, Mapping
from typing import Any

import structlog

from statforge.game.events import Event
from statforge.game.stats.modifier import StatModifier
from statforge.game.stats.stat import Stat

logger = structlog.get_logger(__name__)


class StatRegistry:
    """
    Container of all stats for one character.

    Events:
        on_stat_changed(stat_type, old_value, new_value)
    """

    def __init__(self, base_values: Mapping[Hashable, float] | None = None) -> None:
        """
        Create a registry, optionally populated from a base-value table.

        Args:
            base_values: Mapping of stat type to base value. Entries are
                registered in iteration order.
        """
        self._stats: dict[Hashable, Stat] = {}
        self.on_stat_changed = Event("stat_changed")

        for stat_type, base_value in (base_values or {}).items():
            self.ensure_stat(stat_type, base_value)

    def ensure_stat(self, stat_type: Hashable, base_value: float = 0.0) -> Stat:
        """
        Register a stat if it does not exist yet.

        The first registration wins. Calling this again for an existing type
        does not change its base value.

        Returns:
            The registered stat
        """
        existing = self._stats.get(stat_type)
        if existing is not None:
            logger.debug(
                "stat_already_registered",
                stat=str(stat_type),
                base_value=existing.base_value,
                ignored_base_value=base_value,
            )
            return existing

        stat = Stat(stat_type, base_value)
        stat.on_value_changed.subscribe(self._handle_stat_changed)
        self._stats[stat_type] = stat
        return stat

    def get_stat(self, stat_type: Hashable) -> Stat | None:
        return self._stats.get(stat_type)

    def has_stat(self, stat_type: Hashable) -> bool:
        return stat_type in self._stats

    def get_value(self, stat_type: Hashable) -> float:
        """Current value of a stat, or 0 if it is not registered."""
        stat = self._stats.get(stat_type)
        return stat.value if stat is not None else 0.0

    def get_base_value(self, stat_type: Hashable) -> float:
        """Base value of a stat, or 0 if it is not registered."""
        stat = self._stats.get(stat_type)
        return stat.base_value if stat is not None else 0.0

    def set_base_value(self, stat_type: Hashable, value: float) -> None:
        """
        Set the base value of a registered stat.

        The stat recomputes at once, so on_stat_changed fires before this returns.
        """
        stat = self._lookup(stat_type, "set_base_value")
        if stat is None:
            return

        stat.set_base_value(value)

    def add_modifier(self, stat_type: Hashable, modifier: StatModifier) -> None:
        stat = self._lookup(stat_type, "add_modifier")
        if stat is not None:
            stat.add_modifier(modifier)

    def remove_modifier(self, stat_type: Hashable, modifier: StatModifier | str) -> bool:
        """
        Remove a modifier from a stat, by instance or by id.

        Returns:
            True if a modifier was removed
        """
        stat = self._lookup(stat_type, "remove_modifier")
        if stat is None:
            return False

        if isinstance(modifier, str):
            return stat.remove_modifier_by_id(modifier)
        return stat.remove_modifier(modifier)

    def remove_all_modifiers_from_source(self, source: Any) -> int:
        """
        Remove every modifier owned by ``source`` across all stats.

        Returns:
            Total number of modifiers removed
        """
        removed = sum(
            stat.remove_all_modifiers_from_source(source) for stat in self._stats.values()
        )

        if removed:
            logger.debug("modifiers_removed_from_source", count=removed)

        return removed

    def tick_all(self, delta_time: float) -> None:
        """Advance timed modifiers on every stat. Call once per simulation step."""
        for stat in self._stats.values():
            stat.update_timed_modifiers(delta_time)

    def clear_all_modifiers(self) -> None:
        for stat in self._stats.values():
            stat.clear_all_modifiers()

    def stat_types(self) -> list[Hashable]:
        """Registered stat types in registration order."""
        return list(self._stats)

    def base_values(self) -> dict[Hashable, float]:
        """Base values of every stat, the only stat data that is persisted."""
        return {stat_type: stat.base_value for stat_type, stat in self._stats.items()}

    def clone(self) -> "StatRegistry":
        """Copy of this registry with the same base values and no modifiers."""
        return StatRegistry(self.base_values())

    def _lookup(self, stat_type: Hashable, operation: str) -> Stat | None:
        stat = self._stats.get(stat_type)
        if stat is None:
            logger.debug("unknown_stat_ignored", stat=str(stat_type), operation=operation)
        return stat

    def _handle_stat_changed(self, stat: Stat, old_value: float, new_value: float) -> None:
        self.on_stat_changed.emit(stat.stat_type, old_value, new_value)

    def __contains__(self, stat_type: object) -> bool:
        return stat_type in self._stats

    def __iter__(self) -> Iterator[Stat]:
        return iter(self._stats.values())

    def __len__(self) -> int:
        return len(self._stats)

    def __repr__(self) -> str:
        return f"StatRegistry(stats={len(self._stats)})"
