from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from fletcher.events import MessageEvent, SoundEvent, subscribe_to_event
from fletcher.game.abilities import AbilityDef, AbilityRegistry
from fletcher.game.enums import (
    EquipSlot,
    InscriptionOperation,
    MiscType,
    MissileType,
    ObjectClass,
    SpellFlag,
    TargetCommand,
    WandType,
    WeaponType,
)
from fletcher.game.hooks import GameHooks
from fletcher.game.items import ArtefactEntry, Item
from fletcher.game.player import PlayerContext, QuiverOptions
from fletcher.game.spells import SpellDef, SpellRegistry
from fletcher.quiver.target import TargetSpec
from fletcher.types import AbilityId, SpellId

# =============================================================================
# SPELLS AND ABILITIES
# =============================================================================

MAGIC_DART = SpellId(1)
FIREBALL = SpellId(2)
BLINK = SpellId(3)
LEHUDIBS = SpellId(4)
HAILSTORM = SpellId(5)
NECROMUTATION = SpellId(6)

TEST_SPELLS = SpellRegistry(
    [
        SpellDef(MAGIC_DART, "Magic Dart", flags=SpellFlag.DIR_OR_TARGET),
        SpellDef(
            FIREBALL,
            "Fireball",
            flags=SpellFlag.TARGET,
            fail_severity=1,
            fail_rate=12,
            affects_outside_range=True,
        ),
        SpellDef(BLINK, "Blink"),
        SpellDef(
            LEHUDIBS,
            "Lehudib's Crystal Spear",
            flags=SpellFlag.DIR_OR_TARGET,
            fail_severity=3,
            fail_rate=65,
        ),
        SpellDef(HAILSTORM, "Hailstorm", has_targeter=True, manual_targeting=True),
        SpellDef(NECROMUTATION, "Necromutation", forbidden=True),
    ]
)

BERSERK = AbilityId(1)
HEAL_WOUNDS = AbilityId(2)
RENOUNCE = AbilityId(3)
SMITING = AbilityId(4)

TEST_ABILITIES = AbilityRegistry(
    [
        AbilityDef(BERSERK, "Berserk"),
        AbilityDef(HEAL_WOUNDS, "Heal Wounds", mp_cost=2),
        AbilityDef(RENOUNCE, "Renounce Religion", pseudo=True),
        AbilityDef(SMITING, "Smiting", targeted=True, mp_cost=3),
    ]
)


# =============================================================================
# ITEMS
# =============================================================================


def missile(kind: MissileType, quantity: int = 5, **kwargs: Any) -> Item:
    return Item(ObjectClass.MISSILE, kind, quantity=quantity, **kwargs)


def stones(quantity: int = 5, **kwargs: Any) -> Item:
    return missile(MissileType.STONE, quantity, **kwargs)


def javelins(quantity: int = 3, **kwargs: Any) -> Item:
    return missile(MissileType.JAVELIN, quantity, **kwargs)


def darts(quantity: int = 10, **kwargs: Any) -> Item:
    return missile(MissileType.DART, quantity, **kwargs)


def arrows(quantity: int = 20, **kwargs: Any) -> Item:
    return missile(MissileType.ARROW, quantity, **kwargs)


def sling_bullets(quantity: int = 8, **kwargs: Any) -> Item:
    return missile(MissileType.SLING_BULLET, quantity, **kwargs)


def weapon(kind: WeaponType, **kwargs: Any) -> Item:
    return Item(ObjectClass.WEAPON, kind, **kwargs)


def wand(kind: WandType = WandType.FLAME, **kwargs: Any) -> Item:
    return Item(ObjectClass.WAND, kind, **kwargs)


def misc(kind: MiscType, **kwargs: Any) -> Item:
    return Item(ObjectClass.MISCELLANY, kind, **kwargs)


def armour(**kwargs: Any) -> Item:
    return Item(ObjectClass.ARMOUR, **kwargs)


def artefact_weapon(
    name: str = "the Staff of Wucad Mu", *, targeted: bool = False, **kwargs: Any
) -> Item:
    entry = ArtefactEntry(name, evoke=not targeted, targeted_evoke=targeted, **kwargs)
    return Item(ObjectClass.WEAPON, WeaponType.QUARTERSTAFF, artefact=entry)


# =============================================================================
# COLLABORATORS
# =============================================================================


@dataclass
class FakeHooks(GameHooks):
    """Recording collaborator.

    Every execution call is appended to ``calls``. Targeting outcomes are
    scripted through ``responses``: each call to a targeting collaborator
    pops the next callable (if any) and applies it to the target record,
    otherwise the target is simply marked valid and fired.
    """

    calls: list[tuple[Any, ...]] = field(default_factory=list)
    responses: list[Callable[[TargetSpec], None]] = field(default_factory=list)
    fire_blocked: str | None = None
    blocked_spells: dict[SpellId, str] = field(default_factory=dict)
    useless_spells: set[SpellId] = field(default_factory=set)
    blocked_abilities: dict[AbilityId, str] = field(default_factory=dict)
    blocked_evokes: dict[int, str] = field(default_factory=dict)
    warning_inscriptions: set[str] = field(default_factory=set)
    hp_low: bool = False
    mp_low: bool = False
    advisory_error: Exception | None = None
    wield_succeeds: bool = True
    player: PlayerContext | None = None

    # Scripted answers for the menu pickers.
    inventory_choice: int | None = None
    spell_letter: str | None = None
    ability_choice: int | None = None
    menu_keys: list[Any] = field(default_factory=list)

    def _respond(self, target: TargetSpec) -> None:
        if self.responses:
            self.responses.pop(0)(target)
        else:
            fire(target)

    def throw_item(self, slot: int, target: TargetSpec) -> None:
        self.calls.append(("throw", slot, target.interactive))
        self._respond(target)
        if target.is_valid and not target.is_cancel and self.player is not None:
            # Throwing uses up one item from the stack.
            item = self.player.inv[slot]
            if item is not None:
                item.quantity -= 1
                if item.quantity <= 0:
                    self.player.remove_item(slot)

    def cast_spell(self, spell: SpellId, target: TargetSpec, *, range_check: bool) -> None:
        self.calls.append(("cast", spell, range_check, target.find_target))
        self._respond(target)

    def activate_ability(self, ability: AbilityId, target: TargetSpec) -> None:
        self.calls.append(("ability", ability))
        self._respond(target)

    def evoke_item(self, slot: int, target: TargetSpec) -> None:
        self.calls.append(("evoke", slot, target.interactive))
        self._respond(target)

    def wield_weapon(self, slot: int) -> bool:
        self.calls.append(("wield", slot))
        if self.wield_succeeds and self.player is not None:
            self.player.equip[EquipSlot.WEAPON] = slot
        return self.wield_succeeds

    def fire_blocked_reason(self) -> str | None:
        return self.fire_blocked

    def inscription_allows(self, item: Item, operation: InscriptionOperation) -> bool:
        return not any(mark in item.inscription for mark in self.warning_inscriptions)

    def spell_blocked_reason(self, spell: SpellId) -> str | None:
        return self.blocked_spells.get(spell)

    def spell_is_useless(self, spell: SpellId) -> bool:
        return spell in self.useless_spells

    def ability_blocked_reason(self, ability: AbilityId) -> str | None:
        return self.blocked_abilities.get(ability)

    def evoke_blocked_reason(self, slot: int) -> str | None:
        return self.blocked_evokes.get(slot)

    def hp_is_low(self) -> bool:
        if self.advisory_error is not None:
            raise self.advisory_error
        return self.hp_low

    def mp_is_low(self) -> bool:
        return self.mp_low

    def show_menu(self, menu: Any) -> None:
        self.calls.append(("menu", menu.title))
        for event in self.menu_keys:
            if not menu.is_active:
                break
            menu.handle_input(event)

    def prompt_inventory_slot(self, prompt: str, *, allow_empty: bool) -> int | None:
        self.calls.append(("prompt_inventory", prompt, allow_empty))
        return self.inventory_choice

    def prompt_spell_letter(self, prompt: str) -> str | None:
        return self.spell_letter

    def prompt_ability(self, abilities: list[AbilityId]) -> int | None:
        return self.ability_choice


def fire(target: TargetSpec) -> None:
    """Target response: a target was picked and the action went off."""
    target.is_valid = True
    target.is_cancel = False
    target.cmd_result = TargetCommand.FIRE


def cancel(target: TargetSpec) -> None:
    """Target response: the player pressed escape."""
    target.is_valid = False
    target.is_cancel = True
    target.cmd_result = TargetCommand.NO_CMD


def command(cmd: TargetCommand) -> Callable[[TargetSpec], None]:
    """Target response: a quiver key was pressed inside the chooser."""

    def respond(target: TargetSpec) -> None:
        target.is_valid = False
        target.is_cancel = True
        target.cmd_result = cmd

    return respond


def make_player(
    items: dict[int, Item] | None = None,
    *,
    wielding: int | None = None,
    options: QuiverOptions | None = None,
    hooks: FakeHooks | None = None,
) -> PlayerContext:
    """Build a player with ``items`` in the given pack slots."""
    hooks = hooks or FakeHooks()
    player = PlayerContext(
        hooks, spells=TEST_SPELLS, abilities=TEST_ABILITIES, options=options
    )
    hooks.player = player
    for slot, item in (items or {}).items():
        player.add_item(slot, item)
    if wielding is not None:
        player.equip[EquipSlot.WEAPON] = wielding
    return player


def learn_spells(player: PlayerContext, **letters: SpellId) -> None:
    player.spell_letters.update(letters)


def collect_messages() -> list[str]:
    """Subscribe to status messages; returns the live list of texts."""
    texts: list[str] = []
    subscribe_to_event(MessageEvent, lambda event: texts.append(event.text))
    return texts


def collect_sounds() -> list[str]:
    sounds: list[str] = []
    subscribe_to_event(SoundEvent, lambda event: sounds.append(event.sound_id))
    return sounds
