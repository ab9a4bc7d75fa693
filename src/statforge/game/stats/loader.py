"""
Base stat configuration for Statforge characters.

Handles loading and validating base-stat tables from YAML files.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from statforge.config import Settings, get_settings
from statforge.game.stats.registry import StatRegistry
from statforge.game.stats.stat_type import StatType

if TYPE_CHECKING:
    from statforge.game.character.resources import ResourcePool

logger = structlog.get_logger(__name__)


DEFAULT_BASE_STATS: dict[StatType, float] = {
    StatType.MAX_HEALTH: 100,
    StatType.MAX_MANA: 50,
    StatType.MAX_STAMINA: 100,
    StatType.ATTACK: 10,
    StatType.DEFENSE: 5,
    StatType.MOVE_SPEED: 5,
}

# Filled in when a table omits it, so a character can always take damage
DEFAULT_MAX_HEALTH = 100.0


class StatsLoadError(Exception):
    """Raised when there's an error loading a base-stat configuration."""

    pass


class CharacterStatsConfig(BaseModel):
    """
    Base stat table for one kind of character.

    Attributes:
        name: Identifier for this configuration (e.g., "warrior", "default")
        base_stats: Base value for each stat the character has
    """

    name: str = Field(default="default", description="Configuration identifier")
    base_stats: dict[StatType, float] = Field(
        default_factory=lambda: dict(DEFAULT_BASE_STATS),
        description="Base value for each stat, keyed by stat type",
    )

    @field_validator("base_stats")
    @classmethod
    def ensure_max_health(cls, value: dict[StatType, float]) -> dict[StatType, float]:
        """Every character needs a health capacity."""
        if StatType.MAX_HEALTH not in value:
            value = {StatType.MAX_HEALTH: DEFAULT_MAX_HEALTH, **value}
        return value

    def get_base_value(self, stat_type: StatType) -> float:
        return self.base_stats.get(stat_type, 0.0)

    def create_registry(self) -> StatRegistry:
        """Build a fresh registry with these base values and no modifiers."""
        return StatRegistry(self.base_stats)

    def create_pool(self) -> "ResourcePool":
        """Build a resource pool at full health, mana and stamina."""
        from statforge.game.character.resources import ResourcePool

        return ResourcePool(self.create_registry())


def load_stats_config(file_path: Path) -> CharacterStatsConfig:
    """
    Load a base-stat configuration from a YAML file.

    Expected layout::

        name: warrior
        base_stats:
          max_health: 150
          attack: 14

    Args:
        file_path: Path to the YAML file

    Returns:
        Validated CharacterStatsConfig

    Raises:
        StatsLoadError: If the file cannot be read, parsed or validated
    """
    try:
        with open(file_path, encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except FileNotFoundError:
        raise StatsLoadError(f"File not found: {file_path}")
    except yaml.YAMLError as e:
        raise StatsLoadError(f"YAML parsing error in {file_path}: {e}")

    if not data:
        raise StatsLoadError(f"Empty YAML file: {file_path}")

    if not isinstance(data, dict) or "base_stats" not in data:
        raise StatsLoadError(f"Missing 'base_stats' key in {file_path}")

    if not isinstance(data["base_stats"], dict):
        raise StatsLoadError(f"'base_stats' must be a mapping in {file_path}")

    try:
        config = CharacterStatsConfig(**data)
    except ValidationError as e:
        raise StatsLoadError(f"Invalid stat configuration in {file_path}: {e}")

    logger.info(
        "stats_config_loaded",
        path=str(file_path),
        name=config.name,
        stat_count=len(config.base_stats),
    )

    return config


def get_stats_config(settings: Settings | None = None) -> CharacterStatsConfig:
    """
    Get the base-stat configuration selected by settings.

    Loads ``stats_config_path`` when it is set, otherwise returns the
    built-in default table.

    Raises:
        StatsLoadError: If the configured file cannot be loaded
    """
    settings = settings or get_settings()

    if settings.stats_config_path is None:
        return CharacterStatsConfig()

    return load_stats_config(settings.stats_config_path)
