"""Character resource pools and save data."""

from .persistence import CharacterSnapshot
from .resources import DamageInfo, DamageType, ResourcePool, calculate_damage

__all__ = [
    "CharacterSnapshot",
    "DamageInfo",
    "DamageType",
    "ResourcePool",
    "calculate_damage",
]
