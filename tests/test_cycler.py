from __future__ import annotations

import logging

import pytest

from fletcher import config
from fletcher.events import QuiverRedrawEvent, subscribe_to_event
from fletcher.game.enums import EquipSlot, Launcher, WandType, WeaponType
from fletcher.game.player import QuiverOptions
from fletcher.quiver.actions import (
    AbilityAction,
    Action,
    AmmoAction,
    ArtefactEvokeAction,
    SpellAction,
    WandAction,
    empty_ammo,
    find_action_from_launcher,
)
from fletcher.quiver.cycler import on_actions_changed, on_weapon_changed
from tests.helpers import (
    BERSERK,
    FIREBALL,
    LEHUDIBS,
    MAGIC_DART,
    armour,
    arrows,
    artefact_weapon,
    collect_messages,
    collect_sounds,
    javelins,
    learn_spells,
    make_player,
    sling_bullets,
    stones,
    wand,
    weapon,
)


class TestSet:
    def test_starts_empty(self) -> None:
        player = make_player({1: stones()})

        assert player.quiver_action.is_empty()
        assert player.quiver_action.get() == empty_ammo(player)

    def test_reports_changes_and_plays_sound_once(self) -> None:
        player = make_player({1: stones()})
        sounds = collect_sounds()

        assert player.quiver_action.set(AmmoAction(player, 1))
        assert not player.quiver_action.set(AmmoAction(player, 1))
        assert sounds == [config.CHANGE_QUIVER_SOUND]

    def test_always_marks_redraw(self) -> None:
        player = make_player({1: stones()})
        player.quiver_action.set(AmmoAction(player, 1))
        player.redraw_quiver = False
        redraws: list[QuiverRedrawEvent] = []
        subscribe_to_event(QuiverRedrawEvent, redraws.append)

        player.quiver_action.set(AmmoAction(player, 1))

        assert player.redraw_quiver
        assert len(redraws) == 1

    def test_none_sets_empty_action(self) -> None:
        player = make_player({1: stones()})
        player.quiver_action.set(AmmoAction(player, 1))

        assert player.quiver_action.set(None)
        assert player.quiver_action.get() == Action(player)

    def test_item_change_updates_history(self) -> None:
        player = make_player(
            {0: weapon(WeaponType.HUNTING_SLING), 1: stones(), 2: javelins()},
            wielding=0,
        )

        player.quiver_action.set(AmmoAction(player, 1))
        player.quiver_action.set(AmmoAction(player, 2))

        assert player.quiver_history.last_ammo_for(Launcher.SLING) == 1
        assert player.quiver_history.last_ammo_for(Launcher.THROW) == 2

    def test_set_from_slot(self) -> None:
        player = make_player({4: wand(), 8: armour()})
        player.equip[EquipSlot.BODY_ARMOUR] = 8
        messages = collect_messages()

        player.quiver_action.set_from_slot(4)
        assert player.quiver_action.get() == WandAction(player, 4)

        player.quiver_action.set_from_slot(8)
        assert player.quiver_action.get() == empty_ammo(player)
        assert messages == ["You can't quiver worn items."]

    def test_set_from_cycler_shares_the_action(self) -> None:
        player = make_player({1: stones()})
        sounds = collect_sounds()
        player.quiver_action.current = AmmoAction(player, 1)

        assert player.launcher_action.set_from_cycler(player.quiver_action)
        assert player.launcher_action.current is player.quiver_action.current
        assert sounds == []

    def test_risky_spell_can_be_quivered_explicitly(self) -> None:
        player = make_player()
        learn_spells(player, a=MAGIC_DART, c=LEHUDIBS)

        assert player.quiver_action.set(SpellAction(player, LEHUDIBS))
        assert player.quiver_action.spell_is_quivered(LEHUDIBS)
        assert not player.quiver_action.spell_is_quivered(MAGIC_DART)

    def test_item_is_quivered(self) -> None:
        player = make_player({1: stones()})
        player.quiver_action.set(AmmoAction(player, 1))

        assert player.quiver_action.item_is_quivered(1)
        assert not player.quiver_action.item_is_quivered(2)
        assert not player.quiver_action.item_is_quivered(-1)


class TestLauncherCycler:
    def test_rejects_ammo_the_launcher_does_not_fire(self) -> None:
        player = make_player(
            {0: weapon(WeaponType.HUNTING_SLING), 1: stones(), 2: javelins()},
            wielding=0,
        )
        cycler = player.launcher_action
        cycler.set(AmmoAction(player, 1))
        player.wield_change = False
        redraws: list[QuiverRedrawEvent] = []
        subscribe_to_event(QuiverRedrawEvent, redraws.append)

        assert not cycler.set(AmmoAction(player, 2))

        assert cycler.get() == AmmoAction(player, 1)
        assert player.wield_change
        assert redraws == [QuiverRedrawEvent(weapon_changed=True)]

    def test_accepts_launched_ammo_and_empty(self) -> None:
        player = make_player(
            {0: weapon(WeaponType.HUNTING_SLING), 2: sling_bullets()}, wielding=0
        )
        cycler = player.launcher_action

        assert cycler.set(AmmoAction(player, 2))
        assert not cycler.is_empty()
        assert cycler.set(Action(player))
        assert cycler.is_empty()

    def test_ammo_is_empty_once_launcher_is_unwielded(self) -> None:
        player = make_player(
            {0: weapon(WeaponType.HUNTING_SLING), 1: stones()}, wielding=0
        )
        player.launcher_action.set(AmmoAction(player, 1))
        del player.equip[EquipSlot.WEAPON]

        # Still a valid thrown stone, but not launcher ammo any more.
        assert player.launcher_action.get().is_valid()
        assert player.launcher_action.is_empty()


class TestCycling:
    def _full_player(self):
        player = make_player({1: stones(), 2: javelins(), 4: wand(WandType.FLAME)})
        learn_spells(player, a=MAGIC_DART)
        player.talents = [BERSERK]
        return player

    def test_cycles_through_kinds_in_rotation(self) -> None:
        player = self._full_player()
        cycler = player.quiver_action

        seen = []
        for _ in range(6):
            cycler.cycle()
            seen.append(cycler.get())

        assert seen == [
            AmmoAction(player, 1),
            AmmoAction(player, 2),
            WandAction(player, 4),
            SpellAction(player, MAGIC_DART),
            AbilityAction(player, BERSERK),
            AmmoAction(player, 1),
        ]

    def test_cycles_backwards(self) -> None:
        player = self._full_player()
        cycler = player.quiver_action
        cycler.set(AmmoAction(player, 1))

        cycler.cycle(-1)
        assert cycler.get() == AbilityAction(player, BERSERK)
        cycler.cycle(-1)
        assert cycler.get() == SpellAction(player, MAGIC_DART)

    def test_never_lands_on_invalid_action(self) -> None:
        player = self._full_player()
        cycler = player.quiver_action

        for direction in (1, -1):
            for _ in range(12):
                cycler.cycle(direction)
                assert cycler.get().is_valid()

    def test_nothing_to_cycle_to(self) -> None:
        player = make_player()

        assert player.quiver_action.next() == empty_ammo(player)
        player.quiver_action.cycle()
        assert player.quiver_action.is_empty()

    def test_disabled_actions_can_be_skipped(self) -> None:
        player = make_player({1: stones(), 2: javelins()})
        player.hooks.warning_inscriptions = {"!f"}
        player.inv[2].inscription = "!f"
        player.quiver_action.set(AmmoAction(player, 1))

        assert player.quiver_action.next(1, allow_disabled=True) == AmmoAction(player, 2)
        assert player.quiver_action.next(1, allow_disabled=False) == AmmoAction(
            player, 1
        )

    def test_fire_key_hints(self) -> None:
        player = make_player({1: stones()})
        player.quiver_action.set(AmmoAction(player, 1))
        assert "cycle" not in player.quiver_action.fire_key_hints()

        player.add_item(2, javelins())
        assert "cycle" in player.quiver_action.fire_key_hints()


class TestOnActionsChanged:
    def test_used_up_ammo_is_replaced_from_fire_order(self) -> None:
        player = make_player({1: stones(), 2: javelins()})
        player.quiver_action.set(AmmoAction(player, 2))

        player.remove_item(2)
        player.quiver_action.on_actions_changed()

        assert player.quiver_action.get() == AmmoAction(player, 1)

    def test_falls_back_to_cycling(self, caplog: pytest.LogCaptureFixture) -> None:
        player = make_player({1: stones()})
        learn_spells(player, a=MAGIC_DART)
        player.quiver_action.set(AmmoAction(player, 1))

        player.remove_item(1)
        with caplog.at_level(logging.DEBUG, logger="fletcher.quiver.cycler"):
            player.quiver_action.on_actions_changed()

        assert player.quiver_action.get() == SpellAction(player, MAGIC_DART)
        assert "no replacement" in caplog.text

    def test_valid_action_is_kept(self) -> None:
        player = make_player({1: stones(), 2: javelins()})
        player.quiver_action.set(AmmoAction(player, 2))

        on_actions_changed(player)

        assert player.quiver_action.get() == AmmoAction(player, 2)

    def test_forgotten_spell_is_replaced(self) -> None:
        player = make_player({1: stones()})
        learn_spells(player, a=FIREBALL)
        player.quiver_action.set(SpellAction(player, FIREBALL))

        player.spell_letters.clear()
        on_actions_changed(player)

        assert player.quiver_action.get() == AmmoAction(player, 1)


class TestFindActionFromLauncher:
    def test_grasp_restriction(self) -> None:
        player = make_player({1: stones()})
        player.can_grasp_missiles = False

        action = find_action_from_launcher(player, None)

        assert not action.is_valid()
        assert action.error == "You can't grasp things well enough to shoot them."

    def test_no_missiles(self) -> None:
        action = find_action_from_launcher(make_player(), None)
        assert action.error == "No suitable missiles."

    def test_everything_before_fire_items_start(self) -> None:
        options = QuiverOptions(fire_items_start=3)
        player = make_player({1: stones()}, options=options)

        action = find_action_from_launcher(player, None)

        assert action.error == "Nothing suitable (fire_items_start = 'd')."

    def test_fire_items_start_past_the_pack(self) -> None:
        player = make_player({1: stones()})
        player.options.fire_items_start = config.ENDOFPACK

        action = find_action_from_launcher(player, None)

        assert not action.is_valid()
        assert action.error == "Nothing suitable (fire_items_start is past the pack)."

    def test_everything_excluded_by_inscription(self) -> None:
        player = make_player({1: stones(inscription="=f")})

        action = find_action_from_launcher(player, None)

        assert action.error == "Nothing suitable (ignored '=f'-inscribed item on 'b')."

    def test_prefers_current_launcher_ammo(self) -> None:
        player = make_player(
            {0: weapon(WeaponType.HUNTING_SLING), 1: stones(), 2: sling_bullets()},
            wielding=0,
        )
        player.launcher_action.set(AmmoAction(player, 2))

        assert find_action_from_launcher(player, player.weapon()) == AmmoAction(
            player, 2
        )

    def test_prefers_history_over_fire_order(self) -> None:
        player = make_player(
            {0: weapon(WeaponType.HUNTING_SLING), 1: stones(), 2: sling_bullets()},
            wielding=0,
        )
        player.quiver_history.record_use(player.inv[2], explicit_choice=True)

        assert find_action_from_launcher(player, player.weapon()) == AmmoAction(
            player, 2
        )

    def test_head_of_fire_order(self) -> None:
        player = make_player(
            {0: weapon(WeaponType.HUNTING_SLING), 1: stones(), 2: sling_bullets()},
            wielding=0,
        )

        assert find_action_from_launcher(player, player.weapon()) == AmmoAction(
            player, 1
        )


class TestOnWeaponChanged:
    def test_switching_launchers_switches_ammo(self) -> None:
        player = make_player(
            {
                0: weapon(WeaponType.HUNTING_SLING),
                1: stones(),
                2: arrows(),
                3: weapon(WeaponType.LONGBOW),
            }
        )

        player.equip[EquipSlot.WEAPON] = 0
        on_weapon_changed(player)
        assert player.launcher_action.get() == AmmoAction(player, 1)
        assert player.quiver_action.get() == AmmoAction(player, 1)

        player.equip[EquipSlot.WEAPON] = 3
        on_weapon_changed(player)
        assert player.launcher_action.get() == AmmoAction(player, 2)
        assert player.quiver_action.get() == AmmoAction(player, 2)

        # The sling's last ammo comes back from the history.
        player.equip[EquipSlot.WEAPON] = 0
        on_weapon_changed(player)
        assert player.quiver_action.get() == AmmoAction(player, 1)

    def test_evokable_artefact_fills_empty_quiver(self) -> None:
        player = make_player({0: artefact_weapon()}, wielding=0)

        on_weapon_changed(player)

        assert player.launcher_action.is_empty()
        assert player.quiver_action.get() == ArtefactEvokeAction(player, 0)

    def test_artefact_does_not_displace_valid_action(self) -> None:
        player = make_player({0: artefact_weapon(), 4: wand()}, wielding=0)
        player.quiver_action.set(WandAction(player, 4))

        on_weapon_changed(player)

        assert player.quiver_action.get() == WandAction(player, 4)


class TestPersistence:
    def test_save_and_load(self) -> None:
        player = make_player()
        learn_spells(player, a=MAGIC_DART)
        player.quiver_action.set(SpellAction(player, MAGIC_DART))

        player.quiver_action.save(config.QUIVER_PROPS_KEY)
        player.quiver_action.clear()
        player.quiver_action.load(config.QUIVER_PROPS_KEY)

        assert player.props[config.QUIVER_PROPS_KEY] == {
            "type": "spell_action",
            "param": MAGIC_DART,
        }
        assert player.quiver_action.get() == SpellAction(player, MAGIC_DART)

    def test_missing_record_is_rebuilt_and_saved(self) -> None:
        player = make_player(
            {0: weapon(WeaponType.HUNTING_SLING), 1: stones()}, wielding=0
        )

        player.launcher_action.load(config.LAUNCHER_QUIVER_PROPS_KEY)

        assert player.launcher_action.get() == AmmoAction(player, 1)
        assert player.props[config.LAUNCHER_QUIVER_PROPS_KEY] == {
            "type": "ammo_action",
            "param": 1,
        }

    def test_stale_record_heals_itself(self) -> None:
        player = make_player({1: stones()})
        player.props[config.QUIVER_PROPS_KEY] = {"type": "wand_action", "param": 7}

        player.quiver_action.load(config.QUIVER_PROPS_KEY)

        assert player.quiver_action.get() == AmmoAction(player, 1)
