"""Stat modifiers: buffs, debuffs and equipment bonuses applied to a stat.

Calculation order on a stat is fixed by modifier kind:
base + flat -> * (1 + sum of percent-add) -> * (1 + percent-mult), each mult compounding.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any
from uuid import uuid4

PERMANENT = -1.0


class ModifierKind(IntEnum):
    """Kinds of stat modification, in the order they are evaluated."""

    FLAT = 100  # +10 Attack
    PERCENT_ADD = 200  # +10% Attack, stacks additively with other PERCENT_ADD
    PERCENT_MULT = 300  # x1.1 Attack, compounds with every other PERCENT_MULT


def _new_modifier_id() -> str:
    return str(uuid4())


@dataclass(eq=False)
class StatModifier:
    """
    A single modification to a stat value.

    Modifiers compare by identity: two modifiers with the same numbers are
    still distinct entries on a stat.

    Attributes:
        kind: How the value is applied (flat, percent-add, percent-mult)
        value: Flat amount, or a decimal fraction for percent kinds (0.1 = 10%)
        order: Tie-break within the same kind; lower values are applied first
        source: Opaque owner token (item, buff, caster) used for bulk removal
        duration: Lifetime in seconds; negative means permanent
        id: Process-unique identifier for direct removal
        remaining_time: Countdown for timed modifiers
    """

    kind: ModifierKind
    value: float
    order: int = 0
    source: Any = field(default=None, repr=False)
    duration: float = PERMANENT
    id: str = field(default_factory=_new_modifier_id)
    remaining_time: float = field(default=0.0, init=False)

    def __post_init__(self) -> None:
        if not self.is_permanent:
            self.remaining_time = self.duration

    @property
    def is_permanent(self) -> bool:
        """Whether this modifier never expires."""
        return self.duration < 0

    @property
    def is_expired(self) -> bool:
        """Whether a timed modifier has run out."""
        return self.duration >= 0 and self.remaining_time <= 0

    def update_time(self, delta_time: float) -> bool:
        """
        Advance the countdown.

        Args:
            delta_time: Seconds elapsed since the last update

        Returns:
            True if the modifier is now expired. Permanent modifiers always
            return False and are left untouched.
        """
        if self.is_permanent:
            return False

        self.remaining_time -= delta_time
        return self.is_expired

    def reset_duration(self) -> None:
        """Restart the countdown of a timed modifier."""
        if not self.is_permanent:
            self.remaining_time = self.duration

    def __str__(self) -> str:
        if self.kind == ModifierKind.FLAT:
            amount = f"{self.value:+g}"
        else:
            amount = f"{self.value * 100:+g}%"
        suffix = "" if self.is_permanent else f" ({self.remaining_time:.1f}s left)"
        return f"{self.kind.name.lower()} {amount}{suffix}"
