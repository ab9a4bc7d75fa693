"""Tests for health, mana and stamina pools."""

import pytest

from statforge.game.character.resources import (
    DamageInfo,
    DamageType,
    ResourcePool,
    calculate_damage,
)
from statforge.game.stats.modifier import ModifierKind, StatModifier
from statforge.game.stats.registry import StatRegistry
from statforge.game.stats.stat_type import StatType


class TestCalculateDamage:
    """Test defense mitigation."""

    def test_physical_mitigation(self):
        assert calculate_damage(100, DamageType.PHYSICAL, 50) == pytest.approx(66.6666667)

    def test_zero_defense_is_full_damage(self):
        assert calculate_damage(40, DamageType.MAGICAL, 0) == 40

    def test_negative_defense_counts_as_zero(self):
        """The denominator never drops below 100."""
        assert calculate_damage(40, DamageType.PHYSICAL, -80) == 40

    @pytest.mark.parametrize("damage_type", [DamageType.TRUE, DamageType.PURE])
    def test_bypass_types_ignore_defense(self, damage_type):
        assert calculate_damage(100, damage_type, 500) == 100


class TestInitialState:
    def test_starts_full_and_alive(self, pool):
        assert pool.current_health == 100
        assert pool.current_mana == 50
        assert pool.current_stamina == 100
        assert pool.is_alive
        assert not pool.is_dead
        assert pool.health_percent == 1.0

    def test_missing_capacity_stats_read_as_zero(self):
        pool = ResourcePool(StatRegistry({StatType.MAX_HEALTH: 10}))

        assert pool.current_mana == 0
        assert pool.mana_percent == 0.0
        assert pool.stamina_percent == 0.0
        assert pool.use_mana(1) is False

    def test_convenience_stats(self, pool):
        assert pool.attack == 10
        assert pool.defense == 50
        assert pool.move_speed == 0


class TestTakeDamage:
    """Test taking damage."""

    def test_physical_damage_uses_defense(self, pool):
        dealt = pool.take_damage(100, damage_type=DamageType.PHYSICAL)

        assert dealt == pytest.approx(100 * 100 / 150)
        assert pool.current_health == pytest.approx(100 - 100 * 100 / 150)

    def test_magical_damage_uses_magic_defense(self, pool):
        pool.take_damage(50, damage_type=DamageType.MAGICAL)

        assert pool.current_health == pytest.approx(100 - 50 * 100 / 125)

    @pytest.mark.parametrize("damage_type", [DamageType.TRUE, DamageType.PURE])
    def test_bypass_damage(self, pool, damage_type):
        pool.take_damage(30, damage_type=damage_type)

        assert pool.current_health == 70

    def test_default_type_is_physical(self, pool):
        pool.take_damage(150)

        assert pool.current_health == pytest.approx(0.0)

    def test_events_emitted(self, pool, recorder):
        damaged = recorder()
        health = recorder()
        attacker = object()
        pool.on_damaged.subscribe(damaged)
        pool.on_health_changed.subscribe(health)

        pool.take_damage(20, source=attacker, damage_type=DamageType.TRUE, is_critical=True)

        info = damaged.last[0]
        assert isinstance(info, DamageInfo)
        assert info.raw_damage == 20
        assert info.final_damage == 20
        assert info.damage_type == DamageType.TRUE
        assert info.source is attacker
        assert info.is_critical
        assert health.calls == [(80, 100)]

    @pytest.mark.parametrize("amount", [0, -5])
    def test_non_positive_damage_ignored(self, pool, recorder, amount):
        damaged = recorder()
        pool.on_damaged.subscribe(damaged)

        assert pool.take_damage(amount) == 0
        assert pool.current_health == 100
        assert damaged.count == 0

    def test_lethal_damage_kills_and_floors_at_zero(self, pool, recorder):
        death = recorder()
        pool.on_death.subscribe(death)

        pool.take_damage(1000, damage_type=DamageType.TRUE)

        assert pool.current_health == 0
        assert pool.is_dead
        assert death.count == 1

    def test_damage_ignored_when_dead(self, pool, recorder):
        pool.die()
        damaged = recorder()
        pool.on_damaged.subscribe(damaged)

        assert pool.take_damage(10) == 0
        assert damaged.count == 0

    def test_defense_buff_reduces_damage(self, pool):
        pool.apply_modifier(StatType.DEFENSE, StatModifier(ModifierKind.FLAT, 50))

        pool.take_damage(100)

        assert pool.current_health == pytest.approx(50.0)


class TestHeal:
    """Test healing."""

    def test_heal_reports_actual_amount(self, pool, recorder):
        healed = recorder()
        health = recorder()
        pool.on_healed.subscribe(healed)
        pool.on_health_changed.subscribe(health)
        pool.take_damage(30, damage_type=DamageType.TRUE)

        actual = pool.heal(50)

        assert actual == 30
        assert pool.current_health == 100
        assert healed.calls == [(30,)]
        assert health.last == (100, 100)

    def test_heal_at_full_emits_nothing(self, pool, recorder):
        healed = recorder()
        pool.on_healed.subscribe(healed)

        assert pool.heal(10) == 0
        assert healed.count == 0

    @pytest.mark.parametrize("amount", [0, -10])
    def test_non_positive_heal_ignored(self, pool, amount):
        pool.take_damage(30, damage_type=DamageType.TRUE)

        assert pool.heal(amount) == 0
        assert pool.current_health == 70

    def test_heal_ignored_when_dead(self, pool):
        pool.die()

        assert pool.heal(50) == 0
        assert pool.current_health == 0

    def test_full_heal(self, pool):
        pool.take_damage(64, damage_type=DamageType.PURE)

        assert pool.full_heal() == 64
        assert pool.current_health == 100


class TestSetHealth:
    def test_set_health_clamps(self, pool):
        pool.set_health(500)
        assert pool.current_health == 100

        pool.set_health(40)
        assert pool.current_health == 40

    def test_set_health_zero_kills(self, pool, recorder):
        death = recorder()
        pool.on_death.subscribe(death)

        pool.set_health(0)

        assert pool.is_dead
        assert death.count == 1

    def test_set_health_ignored_when_dead(self, pool):
        pool.die()

        pool.set_health(50)

        assert pool.current_health == 0
        assert pool.is_dead


class TestManaAndStamina:
    """Test spending and restoring mana and stamina."""

    def test_use_mana_success(self, pool, recorder):
        mana = recorder()
        pool.on_mana_changed.subscribe(mana)

        assert pool.use_mana(30) is True
        assert pool.current_mana == 20
        assert mana.calls == [(20, 50)]

    def test_insufficient_mana(self, pool, recorder):
        pool.use_mana(30)
        mana = recorder()
        pool.on_mana_changed.subscribe(mana)

        assert pool.use_mana(30) is False
        assert pool.current_mana == 20
        assert mana.count == 0

    def test_use_exact_remaining_mana(self, pool):
        assert pool.use_mana(50) is True
        assert pool.current_mana == 0

    def test_negative_use_rejected(self, pool):
        assert pool.use_mana(-10) is False
        assert pool.use_stamina(-10) is False
        assert pool.current_mana == 50
        assert pool.current_stamina == 100

    def test_restore_mana_clamps(self, pool):
        pool.use_mana(40)

        pool.restore_mana(100)

        assert pool.current_mana == 50

    def test_restore_non_positive_ignored(self, pool, recorder):
        stamina = recorder()
        pool.on_stamina_changed.subscribe(stamina)
        pool.use_stamina(10)

        pool.restore_stamina(-5)
        pool.restore_stamina(0)

        assert pool.current_stamina == 90
        assert stamina.count == 1

    def test_stamina(self, pool, recorder):
        stamina = recorder()
        pool.on_stamina_changed.subscribe(stamina)

        assert pool.use_stamina(60) is True
        assert pool.use_stamina(60) is False
        pool.restore_stamina(25)

        assert pool.current_stamina == 65
        assert stamina.last == (65, 100)


class TestCapacityChanges:
    """Current values follow their capacity stat downwards only."""

    def test_health_clamped_when_max_shrinks(self, pool, recorder):
        health = recorder()
        pool.on_health_changed.subscribe(health)
        pool.take_damage(20, damage_type=DamageType.TRUE)

        curse = StatModifier(ModifierKind.PERCENT_MULT, -0.5)
        pool.apply_modifier(StatType.MAX_HEALTH, curse)

        assert pool.current_health == 50
        assert health.last == (50, 50)

    def test_health_not_refilled_when_max_grows_back(self, pool):
        curse = StatModifier(ModifierKind.PERCENT_MULT, -0.5)
        pool.apply_modifier(StatType.MAX_HEALTH, curse)

        pool.remove_modifier(StatType.MAX_HEALTH, curse.id)

        assert pool.max_health == 100
        assert pool.current_health == 50

    def test_mana_clamped_on_base_value_change(self, pool):
        pool.registry.set_base_value(StatType.MAX_MANA, 30)

        assert pool.current_mana == 30

    def test_health_clamped_when_stat_base_set_directly(self, pool, recorder):
        """Changing the Stat object itself clamps before any further read."""
        health = recorder()
        pool.on_health_changed.subscribe(health)

        pool.registry.get_stat(StatType.MAX_HEALTH).base_value = 50

        assert pool.current_health == 50
        assert health.calls == [(50, 50)]
        assert pool.heal(10) == 0

        pool.take_damage(10, damage_type=DamageType.TRUE)

        assert pool.current_health == 40
        assert health.last == (40, 50)

    def test_stamina_clamped_when_max_shrinks(self, pool):
        pool.apply_modifier(StatType.MAX_STAMINA, StatModifier(ModifierKind.FLAT, -75))

        assert pool.current_stamina == 25

    def test_expiring_buff_clamps_health(self, pool):
        pool.apply_modifier(
            StatType.MAX_HEALTH, StatModifier(ModifierKind.FLAT, 50, duration=5.0)
        )
        pool.full_heal()
        assert pool.current_health == 150

        pool.tick(5.0)

        assert pool.current_health == 100

    def test_other_stats_do_not_touch_resources(self, pool, recorder):
        health = recorder()
        pool.on_health_changed.subscribe(health)

        pool.apply_modifier(StatType.ATTACK, StatModifier(ModifierKind.FLAT, 5))

        assert health.count == 0

    def test_remove_all_from_source(self, pool):
        amulet = object()
        pool.apply_modifier(StatType.ATTACK, StatModifier(ModifierKind.FLAT, 5, source=amulet))
        pool.apply_modifier(
            StatType.DEFENSE, StatModifier(ModifierKind.PERCENT_ADD, 0.1, source=amulet)
        )

        assert pool.remove_all_modifiers_from_source(amulet) == 2
        assert pool.attack == 10


class TestDeathAndRevive:
    """Test the alive/dead state machine."""

    def test_die_is_idempotent(self, pool, recorder):
        death = recorder()
        pool.on_death.subscribe(death)

        pool.die()
        pool.die()

        assert death.count == 1
        assert pool.current_health == 0

    def test_revive_with_percent(self, pool, recorder):
        health = recorder()
        revived = recorder()
        pool.die()
        pool.on_health_changed.subscribe(health)
        pool.on_revive.subscribe(revived)

        pool.revive(0.5)

        assert pool.is_alive
        assert pool.current_health == 50
        assert health.calls == [(50, 100)]
        assert revived.count == 1

    @pytest.mark.parametrize("percent, expected", [(2.0, 100), (-1.0, 0), (1.0, 100)])
    def test_revive_percent_clamped(self, pool, percent, expected):
        pool.die()

        pool.revive(percent)

        assert pool.current_health == expected

    def test_revive_when_alive_is_noop(self, pool, recorder):
        revived = recorder()
        pool.on_revive.subscribe(revived)
        pool.take_damage(10, damage_type=DamageType.TRUE)

        pool.revive()

        assert pool.current_health == 90
        assert revived.count == 0

    def test_can_take_damage_after_revive(self, pool):
        pool.die()
        pool.revive()

        pool.take_damage(10, damage_type=DamageType.TRUE)

        assert pool.current_health == 90


class TestRepr:
    def test_repr(self, pool):
        assert repr(pool) == (
            "ResourcePool(health=100.0/100.0, mana=50.0/50.0, stamina=100.0/100.0, alive)"
        )
