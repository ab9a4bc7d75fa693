"""A single character stat: base value, active modifiers and a cached result."""

from collections.abc import Hashable
from typing import Any

import structlog

from statforge.game.events import Event
from statforge.game.stats.modifier import ModifierKind, StatModifier

logger = structlog.get_logger(__name__)

# Changes smaller than this are treated as float noise
VALUE_EPSILON = 0.0001


def _sort_key(modifier: StatModifier) -> tuple[int, int]:
    return (modifier.kind, modifier.order)


class Stat:
    """
    One named attribute with a base value and an ordered modifier list.

    The computed value is cached. Any mutation marks the cache dirty; adding or
    removing modifiers recomputes immediately so that ``on_value_changed``
    fires with accurate old and new values. Base value changes recompute
    immediately as well, so listeners never see a stale capacity.

    A change made by an on_value_changed handler to the same stat is reported
    after the current notification has reached every subscriber.

    Events:
        on_value_changed(stat, old_value, new_value)
    """

    def __init__(self, stat_type: Hashable, base_value: float = 0.0) -> None:
        self._type = stat_type
        self._base_value = float(base_value)
        self._modifiers: list[StatModifier] = []
        self._value = self._base_value
        self._is_dirty = False
        self._notifying = False
        self._queued_changes: list[tuple[float, float]] = []
        self.on_value_changed = Event("stat_value_changed")

    @property
    def stat_type(self) -> Hashable:
        return self._type

    @property
    def base_value(self) -> float:
        """Base value before modifiers."""
        return self._base_value

    @base_value.setter
    def base_value(self, value: float) -> None:
        self.set_base_value(value)

    @property
    def value(self) -> float:
        """Final value after all modifiers."""
        if self._is_dirty:
            self._recalculate()
        return self._value

    @property
    def is_dirty(self) -> bool:
        return self._is_dirty

    @property
    def modifiers(self) -> tuple[StatModifier, ...]:
        """Active modifiers in evaluation order."""
        return tuple(self._modifiers)

    def get_value(self) -> float:
        return self.value

    def set_base_value(self, value: float) -> None:
        """Change the base value. Differences below VALUE_EPSILON are ignored."""
        if abs(self._base_value - value) > VALUE_EPSILON:
            self._base_value = float(value)
            self._is_dirty = True
            self._recalculate()

    def add_modifier(self, modifier: StatModifier | None) -> None:
        """Add a modifier and recompute."""
        if modifier is None:
            return

        self._modifiers.append(modifier)
        # list.sort is stable: equal (kind, order) keep insertion order
        self._modifiers.sort(key=_sort_key)

        self._is_dirty = True
        self._recalculate()

    def remove_modifier(self, modifier: StatModifier) -> bool:
        """Remove a specific modifier instance. Returns True if it was present."""
        for index, existing in enumerate(self._modifiers):
            if existing is modifier:
                del self._modifiers[index]
                self._is_dirty = True
                self._recalculate()
                return True
        return False

    def remove_modifier_by_id(self, modifier_id: str) -> bool:
        """Remove a modifier by its id. Returns True if it was present."""
        modifier = self.get_modifier(modifier_id)
        return modifier is not None and self.remove_modifier(modifier)

    def remove_all_modifiers_from_source(self, source: Any) -> int:
        """
        Remove every modifier owned by ``source``.

        Sources are matched by identity, never by equality.

        Returns:
            Number of modifiers removed
        """
        kept = [m for m in self._modifiers if m.source is not source]
        removed = len(self._modifiers) - len(kept)

        if removed > 0:
            self._modifiers = kept
            self._is_dirty = True
            self._recalculate()

        return removed

    def clear_all_modifiers(self) -> None:
        """Drop every modifier and recompute."""
        if self._modifiers:
            self._modifiers.clear()
            self._is_dirty = True
            self._recalculate()

    def update_timed_modifiers(self, delta_time: float) -> None:
        """
        Advance timed modifiers and prune the expired ones.

        Every modifier is advanced before any is removed, and the stat is
        recomputed at most once per call.
        """
        expired = [m for m in self._modifiers if m.update_time(delta_time)]
        if not expired:
            return

        self._modifiers = [m for m in self._modifiers if not m.is_expired]
        self._is_dirty = True

        logger.debug(
            "modifiers_expired",
            stat=str(self._type),
            count=len(expired),
        )

        self._recalculate()

    def has_modifier(self, modifier_id: str) -> bool:
        return self.get_modifier(modifier_id) is not None

    def get_modifier(self, modifier_id: str) -> StatModifier | None:
        for modifier in self._modifiers:
            if modifier.id == modifier_id:
                return modifier
        return None

    def _recalculate(self) -> None:
        old_value = self._value
        result = self._base_value
        pending_percent_add = 0.0

        # Sorted by kind, so flat -> percent-add -> percent-mult
        for modifier in self._modifiers:
            if modifier.kind == ModifierKind.FLAT:
                result += modifier.value
            elif modifier.kind == ModifierKind.PERCENT_ADD:
                pending_percent_add += modifier.value
            elif modifier.kind == ModifierKind.PERCENT_MULT:
                # Fold in the accumulated percent-add before the first mult
                if pending_percent_add != 0:
                    result *= 1 + pending_percent_add
                    pending_percent_add = 0.0
                result *= 1 + modifier.value

        if pending_percent_add != 0:
            result *= 1 + pending_percent_add

        self._value = result
        self._is_dirty = False

        if abs(old_value - result) > VALUE_EPSILON:
            self._notify(old_value, result)

    def _notify(self, old_value: float, new_value: float) -> None:
        if self._notifying:
            # Nested change from a handler: delivered once the current emit ends
            self._queued_changes.append((old_value, new_value))
            return

        self._notifying = True
        try:
            self.on_value_changed.emit(self, old_value, new_value)
            while self._queued_changes:
                queued_old, queued_new = self._queued_changes.pop(0)
                self.on_value_changed.emit(self, queued_old, queued_new)
        finally:
            self._notifying = False
            self._queued_changes.clear()

    def __repr__(self) -> str:
        return (
            f"Stat({self._type!s}: {self.value:.1f}, base={self._base_value:.1f}, "
            f"modifiers={len(self._modifiers)})"
        )
