"""Health, mana and stamina pools for Statforge characters.

Current resource values live here; their capacities are the MAX_* stats of a
StatRegistry. Handles:
- Damage mitigation by damage type
- Healing and resource spending/restoring
- Re-clamping current values when a capacity stat changes
- The alive/dead state machine
"""

from collections.abc import Hashable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

import structlog

from statforge.game.events import Event
from statforge.game.stats.modifier import StatModifier
from statforge.game.stats.registry import StatRegistry
from statforge.game.stats.stat_type import RESOURCE_CAPACITY_STATS, StatType

if TYPE_CHECKING:
    from statforge.game.character.persistence import CharacterSnapshot

logger = structlog.get_logger(__name__)

# Damage formula constant: damage * DEFENSE_SCALE / (DEFENSE_SCALE + defense)
DEFENSE_SCALE = 100.0


class DamageType(Enum):
    """How incoming damage interacts with defense."""

    PHYSICAL = "physical"  # Reduced by DEFENSE
    MAGICAL = "magical"  # Reduced by MAGIC_DEFENSE
    TRUE = "true"  # Ignores defense
    PURE = "pure"  # Fixed amount, ignores defense


@dataclass(frozen=True)
class DamageInfo:
    """Details of one damage application, passed to on_damaged listeners."""

    raw_damage: float
    final_damage: float
    damage_type: DamageType
    source: Any = None
    is_critical: bool = False


def calculate_damage(raw_damage: float, damage_type: DamageType, defense: float) -> float:
    """
    Apply defense mitigation to raw damage.

    Args:
        raw_damage: Incoming damage before mitigation
        damage_type: Type of the damage
        defense: Defense value matching the damage type (negative counts as 0)

    Returns:
        Damage after mitigation

    Examples:
        >>> calculate_damage(100, DamageType.PHYSICAL, 50)
        66.66666666666667
        >>> calculate_damage(100, DamageType.TRUE, 50)
        100
    """
    if damage_type in (DamageType.TRUE, DamageType.PURE):
        return raw_damage

    return raw_damage * DEFENSE_SCALE / (DEFENSE_SCALE + max(0.0, defense))


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


class ResourcePool:
    """
    Current health, mana and stamina backed by a StatRegistry.

    Events:
        on_health_changed(current, maximum)
        on_mana_changed(current, maximum)
        on_stamina_changed(current, maximum)
        on_damaged(damage_info)
        on_healed(actual_amount)
        on_death()
        on_revive()
    """

    def __init__(self, registry: StatRegistry) -> None:
        self._registry = registry
        self._alive = True

        self.on_health_changed = Event("health_changed")
        self.on_mana_changed = Event("mana_changed")
        self.on_stamina_changed = Event("stamina_changed")
        self.on_damaged = Event("damaged")
        self.on_healed = Event("healed")
        self.on_death = Event("death")
        self.on_revive = Event("revive")

        self._current_health = registry.get_value(StatType.MAX_HEALTH)
        self._current_mana = registry.get_value(StatType.MAX_MANA)
        self._current_stamina = registry.get_value(StatType.MAX_STAMINA)

        registry.on_stat_changed.subscribe(self._handle_stat_changed)

    # Stat access

    @property
    def registry(self) -> StatRegistry:
        return self._registry

    @property
    def max_health(self) -> float:
        return self._registry.get_value(StatType.MAX_HEALTH)

    @property
    def max_mana(self) -> float:
        return self._registry.get_value(StatType.MAX_MANA)

    @property
    def max_stamina(self) -> float:
        return self._registry.get_value(StatType.MAX_STAMINA)

    @property
    def attack(self) -> float:
        return self._registry.get_value(StatType.ATTACK)

    @property
    def defense(self) -> float:
        return self._registry.get_value(StatType.DEFENSE)

    @property
    def move_speed(self) -> float:
        return self._registry.get_value(StatType.MOVE_SPEED)

    # Current values

    @property
    def current_health(self) -> float:
        return self._current_health

    @property
    def current_mana(self) -> float:
        return self._current_mana

    @property
    def current_stamina(self) -> float:
        return self._current_stamina

    @property
    def health_percent(self) -> float:
        maximum = self.max_health
        return self._current_health / maximum if maximum > 0 else 0.0

    @property
    def mana_percent(self) -> float:
        maximum = self.max_mana
        return self._current_mana / maximum if maximum > 0 else 0.0

    @property
    def stamina_percent(self) -> float:
        maximum = self.max_stamina
        return self._current_stamina / maximum if maximum > 0 else 0.0

    @property
    def is_alive(self) -> bool:
        return self._alive

    @property
    def is_dead(self) -> bool:
        return not self._alive

    def tick(self, delta_time: float) -> None:
        """Advance timed modifiers. Call once per simulation step."""
        self._registry.tick_all(delta_time)

    # Health

    def take_damage(
        self,
        raw_damage: float,
        source: Any = None,
        damage_type: DamageType = DamageType.PHYSICAL,
        is_critical: bool = False,
    ) -> float:
        """
        Apply damage after defense mitigation.

        Args:
            raw_damage: Damage before mitigation
            source: Opaque token for whoever dealt the damage
            damage_type: Selects which defense stat applies, if any
            is_critical: Passed through to on_damaged listeners

        Returns:
            Damage actually dealt (0 if ignored)
        """
        if raw_damage <= 0 or not self._alive:
            return 0.0

        if damage_type == DamageType.PHYSICAL:
            defense = self._registry.get_value(StatType.DEFENSE)
        elif damage_type == DamageType.MAGICAL:
            defense = self._registry.get_value(StatType.MAGIC_DEFENSE)
        else:
            defense = 0.0

        final_damage = calculate_damage(raw_damage, damage_type, defense)
        self._current_health = max(0.0, self._current_health - final_damage)

        info = DamageInfo(
            raw_damage=raw_damage,
            final_damage=final_damage,
            damage_type=damage_type,
            source=source,
            is_critical=is_critical,
        )
        self.on_damaged.emit(info)
        self.on_health_changed.emit(self._current_health, self.max_health)

        logger.debug(
            "damage_taken",
            raw_damage=raw_damage,
            final_damage=final_damage,
            damage_type=damage_type.value,
            current_health=self._current_health,
        )

        if self._current_health <= 0:
            self.die()

        return final_damage

    def heal(self, amount: float, source: Any = None) -> float:
        """
        Restore health, clamped to the maximum.

        Returns:
            Health actually restored
        """
        if amount <= 0 or not self._alive:
            return 0.0

        maximum = self.max_health
        previous = self._current_health
        self._current_health = min(maximum, self._current_health + amount)
        actual = self._current_health - previous

        if actual > 0:
            self.on_healed.emit(actual)
            self.on_health_changed.emit(self._current_health, self.max_health)

            logger.debug(
                "healed",
                requested=amount,
                actual=actual,
                current_health=self._current_health,
                source=repr(source) if source is not None else None,
            )

        return actual

    def set_health(self, value: float) -> None:
        """Set health directly, clamped to [0, max]. Ignored while dead."""
        if not self._alive:
            return

        self._current_health = max(0.0, min(value, self.max_health))
        self.on_health_changed.emit(self._current_health, self.max_health)

        if self._current_health <= 0:
            self.die()

    def full_heal(self) -> float:
        """Restore health to the maximum. Returns the amount healed."""
        return self.heal(self.max_health - self._current_health)

    # Mana and stamina

    def use_mana(self, amount: float) -> bool:
        """Spend mana. Returns False and changes nothing if there is not enough."""
        if amount < 0 or self._current_mana < amount:
            return False

        self._current_mana -= amount
        self.on_mana_changed.emit(self._current_mana, self.max_mana)
        return True

    def restore_mana(self, amount: float) -> None:
        if amount <= 0:
            return

        self._current_mana = min(self.max_mana, self._current_mana + amount)
        self.on_mana_changed.emit(self._current_mana, self.max_mana)

    def use_stamina(self, amount: float) -> bool:
        """Spend stamina. Returns False and changes nothing if there is not enough."""
        if amount < 0 or self._current_stamina < amount:
            return False

        self._current_stamina -= amount
        self.on_stamina_changed.emit(self._current_stamina, self.max_stamina)
        return True

    def restore_stamina(self, amount: float) -> None:
        if amount <= 0:
            return

        self._current_stamina = min(self.max_stamina, self._current_stamina + amount)
        self.on_stamina_changed.emit(self._current_stamina, self.max_stamina)

    # Modifiers

    def apply_modifier(self, stat_type: Hashable, modifier: StatModifier) -> None:
        """Apply a buff or debuff to a stat."""
        self._registry.add_modifier(stat_type, modifier)

    def remove_modifier(self, stat_type: Hashable, modifier: StatModifier | str) -> bool:
        return self._registry.remove_modifier(stat_type, modifier)

    def remove_all_modifiers_from_source(self, source: Any) -> int:
        return self._registry.remove_all_modifiers_from_source(source)

    # Death and revive

    def die(self) -> None:
        """Kill the character. Does nothing if already dead."""
        if not self._alive:
            return

        self._alive = False
        self._current_health = 0.0

        logger.info("character_died")
        self.on_death.emit()

    def revive(self, health_percent: float = 1.0) -> None:
        """
        Bring the character back with a fraction of maximum health.

        Args:
            health_percent: Fraction of max health to revive with, clamped to [0, 1]
        """
        if self._alive:
            return

        self._alive = True
        self._current_health = self.max_health * _clamp01(health_percent)

        logger.info("character_revived", current_health=self._current_health)

        self.on_health_changed.emit(self._current_health, self.max_health)
        self.on_revive.emit()

    # Persistence

    def to_snapshot(self) -> "CharacterSnapshot":
        """Capture the persisted state: base values and current resources."""
        from statforge.game.character.persistence import CharacterSnapshot

        return CharacterSnapshot(
            base_stats=self._registry.base_values(),
            current_health=self._current_health,
            current_mana=self._current_mana,
            current_stamina=self._current_stamina,
        )

    @classmethod
    def from_snapshot(cls, snapshot: "CharacterSnapshot") -> "ResourcePool":
        """
        Rebuild a pool from saved data.

        The registry is recreated from base values alone, so no modifiers
        survive. A snapshot taken at zero health restores a dead character.
        """
        pool = cls(StatRegistry(snapshot.base_stats))
        pool._current_health = max(0.0, min(snapshot.current_health, pool.max_health))
        pool._current_mana = max(0.0, min(snapshot.current_mana, pool.max_mana))
        pool._current_stamina = max(0.0, min(snapshot.current_stamina, pool.max_stamina))
        pool._alive = pool._current_health > 0
        return pool

    # Capacity tracking

    def _handle_stat_changed(self, stat_type: Hashable, old_value: float, new_value: float) -> None:
        if stat_type not in RESOURCE_CAPACITY_STATS:
            return

        # Capacity only ever acts as a ceiling; growth never refills
        if stat_type == StatType.MAX_HEALTH:
            self._current_health = max(0.0, min(self._current_health, new_value))
            self.on_health_changed.emit(self._current_health, new_value)
        elif stat_type == StatType.MAX_MANA:
            self._current_mana = max(0.0, min(self._current_mana, new_value))
            self.on_mana_changed.emit(self._current_mana, new_value)
        elif stat_type == StatType.MAX_STAMINA:
            self._current_stamina = max(0.0, min(self._current_stamina, new_value))
            self.on_stamina_changed.emit(self._current_stamina, new_value)

    def __repr__(self) -> str:
        state = "alive" if self._alive else "dead"
        return (
            f"ResourcePool(health={self._current_health:.1f}/{self.max_health:.1f}, "
            f"mana={self._current_mana:.1f}/{self.max_mana:.1f}, "
            f"stamina={self._current_stamina:.1f}/{self.max_stamina:.1f}, {state})"
        )
