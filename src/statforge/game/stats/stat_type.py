"""Stat type identifiers for Statforge characters."""

from enum import StrEnum


class StatType(StrEnum):
    """All attributes a character can carry."""

    # Vitals
    HEALTH = "health"
    MAX_HEALTH = "max_health"
    MANA = "mana"
    MAX_MANA = "max_mana"
    STAMINA = "stamina"
    MAX_STAMINA = "max_stamina"

    # Offensive
    ATTACK = "attack"
    MAGIC_ATTACK = "magic_attack"
    CRITICAL_RATE = "critical_rate"
    CRITICAL_DAMAGE = "critical_damage"

    # Defensive
    DEFENSE = "defense"
    MAGIC_DEFENSE = "magic_defense"
    EVASION = "evasion"
    BLOCK_RATE = "block_rate"

    # Speed
    MOVE_SPEED = "move_speed"
    ATTACK_SPEED = "attack_speed"

    # Utility
    LUCK = "luck"
    HEALTH_REGEN = "health_regen"
    MANA_REGEN = "mana_regen"

    # Progression (typically not modified by equipment)
    EXPERIENCE = "experience"
    LEVEL = "level"


# Capacity stats that bound a current resource value
RESOURCE_CAPACITY_STATS = frozenset(
    {StatType.MAX_HEALTH, StatType.MAX_MANA, StatType.MAX_STAMINA}
)
