"""Save data for a character's stats and resources.

Only base values and current resource levels are persisted. Modifiers are
runtime state and are rebuilt by the subsystems that own them after a load.
"""

from pydantic import BaseModel, Field

from statforge.game.stats.stat_type import StatType


class CharacterSnapshot(BaseModel):
    """
    Persisted stat state of one character.

    Attributes:
        base_stats: Base value of every registered stat
        current_health: Health at save time
        current_mana: Mana at save time
        current_stamina: Stamina at save time
    """

    base_stats: dict[StatType, float] = Field(
        default_factory=dict, description="Base value per stat type"
    )
    current_health: float = Field(default=0.0, ge=0, description="Current health")
    current_mana: float = Field(default=0.0, ge=0, description="Current mana")
    current_stamina: float = Field(default=0.0, ge=0, description="Current stamina")
