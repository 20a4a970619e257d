"""Quiver actions: the things a player can trigger with the fire command.

An action is a small value object identified by its :class:`ActionKind` and a
single integer parameter (a pack slot, spell id or ability id). Two actions
are equal when both match, regardless of which context built them. Actions
are cheap and are rebuilt on every query; nothing about them is cached
except the target record of the most recent trigger.

Validity and enablement are always reported, never raised:

- ``is_valid()`` answers "could this action exist at all right now?". An
  out-of-range slot, an empty slot, or a forgotten spell make it False.
- ``is_enabled()`` additionally checks that the action could be used this
  turn (costs, warning inscriptions, the right launcher).
- ``disabled_reason()`` returns the explanation without publishing it, and
  ``explain_disabled()`` publishes it as a status message.

Each kind knows its own fire order (``get_fire_order``), which is what
``find_next`` walks when the player cycles within a kind.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar

from fletcher import colors, config
from fletcher.events import MessageChannel, message
from fletcher.game.abilities import NON_ABILITY
from fletcher.game.enums import (
    FireType,
    InscriptionOperation,
    Launcher,
    LaunchResult,
    MiscType,
    MissileType,
    ObjectClass,
    WandType,
)
from fletcher.game.hooks import AdvisoryError
from fletcher.game.items import is_launched, weapon_ammo_type
from fletcher.game.spells import NO_SPELL
from fletcher.quiver.fire_order import (
    autoswitch_active,
    autoswitch_ammo_check,
    autoswitch_to_ranged,
    item_fire_order,
    item_matches,
)
from fletcher.quiver.target import TargetSpec
from fletcher.types import AbilityId, SpellId

if TYPE_CHECKING:
    from fletcher.game.abilities import AbilityDef
    from fletcher.game.items import Item
    from fletcher.game.player import PlayerContext
    from fletcher.game.spells import SpellDef
    from fletcher.types import InventorySlot

logger = logging.getLogger(__name__)


class ActionKind(Enum):
    """Discriminant of a quiver action. The value is the persisted tag."""

    EMPTY = "action"
    AMMO = "ammo_action"
    FUMBLE = "fumble_action"
    SPELL = "spell_action"
    ABILITY = "ability_action"
    WAND = "wand_action"
    MISC = "misc_action"
    ARTEFACT = "artefact_evoke_action"


# Order in which cycling moves from one kind of action to the next.
ACTION_ROTATION: tuple[ActionKind, ...] = (
    ActionKind.AMMO,
    ActionKind.WAND,
    ActionKind.MISC,
    ActionKind.ARTEFACT,
    ActionKind.SPELL,
    ActionKind.ABILITY,
)


class Action:
    """Base quiver action. On its own it is the empty "nothing quivered" action."""

    kind: ClassVar[ActionKind] = ActionKind.EMPTY
    # Parameter used for the placeholder instance of each kind.
    null_param: ClassVar[int] = -1

    def __init__(self, player: PlayerContext, param: int | None = None) -> None:
        self.player = player
        self.param: int = self.null_param if param is None else int(param)
        self.target = TargetSpec()
        # Set when this action was produced as a failed lookup.
        self.error = ""

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Action):
            return NotImplemented
        return self.kind is other.kind and self.param == other.param

    def __hash__(self) -> int:
        return hash((self.kind, self.param))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.param})"

    @property
    def item_slot(self) -> InventorySlot:
        """Pack slot this action uses, or -1 if it isn't item-backed."""
        return config.NO_SLOT

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_valid(self) -> bool:
        return False

    def is_enabled(self) -> bool:
        return False

    def disabled_reason(self) -> str | None:
        """Why this action can't be used right now, or None if it can."""
        return None if self.is_enabled() else "You have nothing quivered."

    def explain_disabled(self) -> None:
        """Publish ``disabled_reason()`` as a status message, if there is one."""
        reason = self.disabled_reason()
        if reason:
            message(reason)

    def is_targeted(self) -> bool:
        return False

    def allow_autofight(self) -> bool:
        """Whether autofight may trigger this action without confirmation."""
        return self.is_valid()

    def uses_resource_pool(self) -> bool:
        """Whether triggering draws on the player's magic."""
        return False

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def description(self, short: bool = False) -> str:
        return "Empty" if short else "Nothing quivered"

    def color(self) -> colors.Color:
        return colors.QUIVER_EMPTY

    # ------------------------------------------------------------------
    # Triggering
    # ------------------------------------------------------------------

    def reset(self) -> None:
        self.target = TargetSpec()

    def autofight_check(self) -> bool:
        """Check the autofight health and magic thresholds.

        Returns True (after telling the player why) if triggering should be
        prevented. Never blocks a trigger that will prompt for a target.
        """
        if self.target.needs_targeting():
            return False

        hooks = self.player.hooks
        try:
            hp_low = hooks.hp_is_low()
            mp_low = self.uses_resource_pool() and hooks.mp_is_low()
        except AdvisoryError as e:
            message(f"Advisory error: {e}", MessageChannel.ERROR)
            return True

        if hp_low:
            message("You are too injured to fight recklessly!", MessageChannel.WARNING)
        elif mp_low:
            message(
                "You are too depleted to draw on your mana recklessly!",
                MessageChannel.WARNING,
            )
        return hp_low or mp_low

    def trigger(self, target: TargetSpec | None = None) -> None:
        """Use this action. The empty action does nothing."""
        if target is not None:
            self.target = replace(target)

    def _begin_trigger(self, target: TargetSpec | None) -> TargetSpec:
        """Take a working copy of the caller's target record."""
        caller_target = target if target is not None else TargetSpec()
        self.target = replace(caller_target)
        return caller_target

    # ------------------------------------------------------------------
    # Fire order and cycling
    # ------------------------------------------------------------------

    def get_fire_order(self, allow_disabled: bool = True) -> list[Action]:
        return []

    def find_next(
        self, direction: int = 1, allow_disabled: bool = True, wrap: bool = True
    ) -> Action | None:
        """Return the neighbour of this action in its own kind's fire order.

        If this action isn't in the order (it is invalid, disabled, or
        excluded from cycling) the first entry is returned instead. Returns
        None when the order is empty, or when stepping past the end with
        ``wrap`` off.
        """
        order = self.get_fire_order(allow_disabled)
        if not order:
            return None

        if direction < 0:
            order.reverse()

        if not self.is_valid():
            return order[0]

        try:
            i = order.index(self)
        except ValueError:
            return order[0]

        i += 1
        if not wrap and i >= len(order):
            return None
        return order[i % len(order)]

    def find_replacement(self) -> Action | None:
        """Action to switch to when this one becomes invalid, if any."""
        return None

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self) -> dict[str, Any]:
        if self.kind is ActionKind.EMPTY:
            return {"type": self.kind.value}
        return {"type": self.kind.value, "param": self.param}


# =============================================================================
# AMMO
# =============================================================================


class AmmoAction(Action):
    """Fire ammo from a pack slot, with the wielded launcher or by hand."""

    kind = ActionKind.AMMO

    @property
    def item_slot(self) -> InventorySlot:
        return self.param

    @property
    def item(self) -> Item | None:
        return self.player.item_at(self.param)

    def launcher_check(self) -> bool:
        item = self.item
        return item is not None and item_matches(
            item, FireType.ALL, self.player.weapon(), False
        )

    def is_valid(self) -> bool:
        if not self.player.can_grasp_missiles:
            return False
        item = self.item
        if item is None:
            return False
        if autoswitch_active(self.player):
            # Valid, but possibly disabled until the switch happens.
            return autoswitch_ammo_check(self.player, item)
        return item_matches(item, FireType.ALL, self.player.weapon(), False)

    def disabled_reason(self) -> str | None:
        if not self.is_valid():
            return "You have no suitable ammunition quivered."

        hooks = self.player.hooks
        reason = hooks.fire_blocked_reason()
        if reason:
            return reason

        item = self.item
        assert item is not None
        weapon = self.player.weapon()
        if not self.launcher_check():
            return f"You can't fire {item.name()} with your current weapon."

        if not hooks.inscription_allows(item, InscriptionOperation.FIRE):
            return f"{item.name()} is inscribed against firing."
        if (
            weapon is not None
            and is_launched(self.player, weapon, item) is LaunchResult.LAUNCHED
            and not hooks.inscription_allows(weapon, InscriptionOperation.FIRE)
        ):
            return f"{weapon.name()} is inscribed against firing."
        return None

    def is_enabled(self) -> bool:
        return self.disabled_reason() is None

    def is_targeted(self) -> bool:
        return not self.player.confused

    def uses_resource_pool(self) -> bool:
        return self.player.projectile_spell_active

    def trigger(self, target: TargetSpec | None = None) -> None:
        caller_target = self._begin_trigger(target)
        item = self.item
        if not self.is_valid() or item is None:
            return
        if not self.is_enabled():
            # The launcher may just be on the other weapon slot.
            if not autoswitch_to_ranged(self.player, item):
                self.explain_disabled()
            return
        if self.autofight_check():
            return

        fired = item.snapshot()
        self.player.hooks.throw_item(self.param, self.target)
        self.player.quiver_history.record_use(fired, explicit_choice=True)

        caller_target.copy_from(self.target)

    def description(self, short: bool = False) -> str:
        item = self.item
        if not self.is_valid() or item is None:
            return super().description(short)

        text = ""
        if not short:
            verb = "confused " if self.player.confused else ""
            verb += {
                LaunchResult.FUMBLED: "toss (no damage)",
                LaunchResult.LAUNCHED: "fire",
                LaunchResult.THROWN: "throw",
            }[is_launched(self.player, self.player.weapon(), item)]
            text = f"{verb[0].upper()}{verb[1:]}: "

        if short and item.sub_type == MissileType.SLING_BULLET:
            plural = "s" if item.quantity > 1 else ""
            return f"{text}{item.quantity} bullet{plural}"
        return f"{text}{item.name()}"

    def color(self) -> colors.Color:
        return colors.QUIVER_DEFAULT if self.is_enabled() else colors.QUIVER_DISABLED

    def get_fire_order(self, allow_disabled: bool = True) -> list[Action]:
        slots = item_fire_order(self.player, self.player.weapon(), manual=True)
        result: list[Action] = []
        for slot in slots:
            action = AmmoAction(self.player, slot)
            if action.is_valid() and (allow_disabled or action.is_enabled()):
                result.append(action)
        return result

    def find_replacement(self) -> Action | None:
        return find_action_from_launcher(self.player, self.player.weapon())


class FumbleAction(AmmoAction):
    """Toss an item that isn't usable as ammo. Does no damage.

    Only items the plain ammo action rejects are valid here, so the two
    kinds never overlap. Cycling uses the ammo fire order.
    """

    kind = ActionKind.FUMBLE

    def launcher_check(self) -> bool:
        return True

    def is_valid(self) -> bool:
        if not self.player.can_grasp_missiles:
            return False
        if self.item is None:
            return False
        return not AmmoAction(self.player, self.param).is_valid()


# =============================================================================
# SPELLS
# =============================================================================


class SpellAction(Action):
    """Cast a known spell."""

    kind = ActionKind.SPELL
    null_param = NO_SPELL

    @property
    def spell(self) -> SpellId:
        return SpellId(self.param)

    @property
    def spell_def(self) -> SpellDef | None:
        return self.player.spell_registry.get(self.spell)

    def is_valid(self) -> bool:
        return self.spell_def is not None and self.player.has_spell(self.spell)

    def disabled_reason(self) -> str | None:
        if not self.is_valid():
            return "You don't know that spell."
        reason = self.player.hooks.spell_blocked_reason(self.spell)
        if reason:
            return reason
        if self.player.hooks.spell_is_useless(self.spell):
            return "That spell would have no effect right now."
        return None

    def is_enabled(self) -> bool:
        return self.disabled_reason() is None

    def is_dynamic_targeted(self) -> bool:
        spell_def = self.spell_def
        return spell_def is not None and spell_def.is_dynamic_targeted

    def needs_manual_targeting(self) -> bool:
        spell_def = self.spell_def
        return spell_def is not None and spell_def.manual_targeting

    def autotarget_incompatible(self) -> bool:
        """True for targeted spells that should skip the autotarget pass.

        Spells whose area can reach past their range use the direction
        chooser's own selection so they can hit targets at the edge.
        """
        spell_def = self.spell_def
        if spell_def is None:
            return False
        if not self.player.options.simple_targeting and spell_def.affects_outside_range:
            return True
        return spell_def.skip_autotarget or spell_def.manual_targeting

    def is_targeted(self) -> bool:
        spell_def = self.spell_def
        return spell_def is not None and (
            spell_def.is_dynamic_targeted or spell_def.has_targeter
        )

    def allow_autofight(self) -> bool:
        return self.is_dynamic_targeted() and not self.autotarget_incompatible()

    def uses_resource_pool(self) -> bool:
        return self.is_valid()

    def trigger(self, target: TargetSpec | None = None) -> None:
        if not self.is_valid():
            return
        caller_target = self._begin_trigger(target)
        if not self.is_enabled():
            self.explain_disabled()
            return

        if self.needs_manual_targeting():
            self.target.target = None
            self.target.find_target = False
            self.target.interactive = True
        elif self.autotarget_incompatible():
            self.target.target = None
            self.target.find_target = True
        elif not self.is_dynamic_targeted():
            # Static targeters only fire when asked to interactively.
            self.target.target = self.player.position

        # The fire interface does its own range feedback.
        range_check = self.target.fire_context is None
        if self.autofight_check():
            return

        self.player.hooks.cast_spell(self.spell, self.target, range_check=range_check)
        if (
            self.target.find_target
            and not self.target.is_valid
            and self.target.fire_context is None
        ):
            message("Can't find an automatic target! Use Z to cast.")

        caller_target.copy_from(self.target)

    def color(self) -> colors.Color:
        spell_def = self.spell_def
        if spell_def is None or not self.is_enabled():
            return colors.SPELL_USELESS
        if spell_def.forbidden:
            return colors.SPELL_FORBIDDEN
        return spell_def.fail_color

    def description(self, short: bool = False) -> str:
        spell_def = self.spell_def
        if not self.is_valid() or spell_def is None:
            return super().description(short)
        text = f"Cast: {spell_def.name}"
        if spell_def.fail_severity > 0:
            text += f" ({spell_def.fail_rate_text})"
        return text

    def get_fire_order(self, allow_disabled: bool = True) -> list[Action]:
        # Letter order. Risky and forbidden spells are left out of cycling
        # but can still be quivered explicitly.
        result: list[Action] = []
        threshold = self.player.options.fail_severity_to_quiver
        for letter in config.PACK_LETTERS[: config.SPELL_LETTER_COUNT]:
            spell = self.player.spell_by_letter(letter)
            if spell is None:
                continue
            action = SpellAction(self.player, spell)
            spell_def = action.spell_def
            if (
                spell_def is not None
                and action.is_valid()
                and (allow_disabled or action.is_enabled())
                and spell_def.fail_severity < threshold
                and not spell_def.forbidden
            ):
                result.append(action)
        return result


# =============================================================================
# ABILITIES
# =============================================================================


class AbilityAction(Action):
    """Use one of the player's abilities."""

    kind = ActionKind.ABILITY
    null_param = NON_ABILITY

    @property
    def ability(self) -> AbilityId:
        return AbilityId(self.param)

    @property
    def ability_def(self) -> AbilityDef | None:
        return self.player.ability_registry.get(self.ability)

    def is_valid(self) -> bool:
        if self.ability == NON_ABILITY or self.ability_def is None:
            return False
        return self.player.knows_ability(self.ability)

    def disabled_reason(self) -> str | None:
        if not self.is_valid():
            return "You don't have that ability."
        return self.player.hooks.ability_blocked_reason(self.ability)

    def is_enabled(self) -> bool:
        return self.disabled_reason() is None

    def is_targeted(self) -> bool:
        ability_def = self.ability_def
        return ability_def is not None and ability_def.targeted

    def allow_autofight(self) -> bool:
        return False

    def uses_resource_pool(self) -> bool:
        ability_def = self.ability_def
        return ability_def is not None and ability_def.mp_cost > 0

    def trigger(self, target: TargetSpec | None = None) -> None:
        if not self.is_valid():
            return
        caller_target = self._begin_trigger(target)
        if not self.is_enabled():
            self.explain_disabled()
            return
        if self.autofight_check():
            return

        self.target.find_target = True
        self.player.hooks.activate_ability(self.ability, self.target)

        caller_target.copy_from(self.target)

    def color(self) -> colors.Color:
        return colors.QUIVER_DEFAULT if self.is_enabled() else colors.QUIVER_DISABLED

    def description(self, short: bool = False) -> str:
        ability_def = self.ability_def
        if not self.is_valid() or ability_def is None:
            return super().description(short)
        return f"Abil: {ability_def.name}"

    def get_fire_order(self, allow_disabled: bool = True) -> list[Action]:
        result: list[Action] = []
        for ability in self.player.talents:
            ability_def = self.player.ability_registry.get(ability)
            if ability_def is None or ability_def.pseudo:
                continue
            action = AbilityAction(self.player, ability)
            if action.is_valid() and (allow_disabled or action.is_enabled()):
                result.append(action)
        return result


# =============================================================================
# EVOCABLES
# =============================================================================


class WandAction(Action):
    """Zap a wand from the pack."""

    kind = ActionKind.WAND
    base_type: ClassVar[ObjectClass] = ObjectClass.WAND

    @property
    def item_slot(self) -> InventorySlot:
        return self.param

    @property
    def item(self) -> Item | None:
        return self.player.item_at(self.param)

    def is_valid(self) -> bool:
        item = self.item
        return item is not None and item.base_type is self.base_type

    def disabled_reason(self) -> str | None:
        if not self.is_valid():
            return "You have nothing to evoke quivered."
        return self.player.hooks.evoke_blocked_reason(self.param)

    def is_enabled(self) -> bool:
        return self.disabled_reason() is None

    def is_targeted(self) -> bool:
        return True

    def trigger(self, target: TargetSpec | None = None) -> None:
        caller_target = self._begin_trigger(target)
        if not self.is_valid():
            return
        if not self.is_enabled():
            self.explain_disabled()
            return
        if self.autofight_check():
            return

        # Smart targeting for wands whose effect isn't a simple bolt.
        self.target.find_target = True
        self.player.hooks.evoke_item(self.param, self.target)

        caller_target.copy_from(self.target)

    def verb(self) -> str:
        return "Zap"

    def color(self) -> colors.Color:
        return colors.QUIVER_DEFAULT if self.is_enabled() else colors.QUIVER_DISABLED

    def description(self, short: bool = False) -> str:
        item = self.item
        if not self.is_valid() or item is None:
            return super().description(short)
        return f"{self.verb()}: {item.name()}"

    def _include_in_fire_order(self, item: Item) -> bool:
        # Digging is rarely what the player wants when cycling.
        return item.sub_type != WandType.DIGGING

    def get_fire_order(self, allow_disabled: bool = True) -> list[Action]:
        result: list[Action] = []
        for slot in range(config.ENDOFPACK):
            action = type(self)(self.player, slot)
            item = action.item
            if (
                item is not None
                and action.is_valid()
                and (allow_disabled or action.is_enabled())
                and action._include_in_fire_order(item)
            ):
                result.append(action)
        return result


_MISC_VERBS: dict[MiscType, str] = {
    MiscType.TIN_OF_TREMORSTONES: "Throw",
    MiscType.HORN_OF_GERYON: "Blow",
    MiscType.BOX_OF_BEASTS: "Open",
}

_TARGETED_MISC = frozenset(
    {MiscType.PHIAL_OF_FLOODS, MiscType.LIGHTNING_ROD, MiscType.PHANTOM_MIRROR}
)


class MiscAction(WandAction):
    """Evoke a miscellaneous device."""

    kind = ActionKind.MISC
    base_type = ObjectClass.MISCELLANY

    def allow_autofight(self) -> bool:
        return False

    def needs_manual_targeting(self) -> bool:
        item = self.item
        return item is not None and item.sub_type != MiscType.PHIAL_OF_FLOODS

    def is_targeted(self) -> bool:
        item = self.item
        return self.is_valid() and item is not None and item.sub_type in _TARGETED_MISC

    def trigger(self, target: TargetSpec | None = None) -> None:
        if target is None:
            target = TargetSpec()
        if self.is_valid() and self.needs_manual_targeting():
            target.interactive = True
        super().trigger(target)

    def verb(self) -> str:
        item = self.item
        assert item is not None
        return _MISC_VERBS.get(item.sub_type, "Evoke")  # type: ignore[call-overload]

    def _include_in_fire_order(self, item: Item) -> bool:
        # Ziggurat figurines can be quivered explicitly but aren't cycled to.
        return item.sub_type != MiscType.ZIGGURAT


class ArtefactEvokeAction(WandAction):
    """Evoke an equipped unrandom artefact."""

    kind = ActionKind.ARTEFACT

    def is_valid(self) -> bool:
        item = self.item
        if (
            item is None
            or item.artefact is None
            or not self.player.item_is_equipped(self.param)
        ):
            return False
        return item.artefact.evokable

    def disabled_reason(self) -> str | None:
        item = self.item
        if not self.is_valid() or item is None or item.artefact is None:
            return "You have nothing to evoke quivered."
        entry = item.artefact
        if entry.hp_cost and not self.player.enough_hp(entry.hp_cost):
            return "You don't have enough health to evoke that."
        if entry.mp_cost and not self.player.enough_mp(entry.mp_cost):
            return "You don't have enough magic to evoke that."
        return None

    def allow_autofight(self) -> bool:
        return False

    def is_targeted(self) -> bool:
        item = self.item
        return (
            self.is_valid()
            and item is not None
            and item.artefact is not None
            and item.artefact.targeted_evoke
        )

    def verb(self) -> str:
        return "Evoke"

    def _include_in_fire_order(self, item: Item) -> bool:
        return True


# =============================================================================
# CONSTRUCTION
# =============================================================================

ACTION_TYPES: dict[ActionKind, type[Action]] = {
    ActionKind.EMPTY: Action,
    ActionKind.AMMO: AmmoAction,
    ActionKind.FUMBLE: FumbleAction,
    ActionKind.SPELL: SpellAction,
    ActionKind.ABILITY: AbilityAction,
    ActionKind.WAND: WandAction,
    ActionKind.MISC: MiscAction,
    ActionKind.ARTEFACT: ArtefactEvokeAction,
}


def make_action(
    player: PlayerContext, kind: ActionKind, param: int | None = None
) -> Action:
    """Build an action of ``kind``. A None ``param`` builds the placeholder."""
    return ACTION_TYPES[kind](player, param)


def empty_ammo(player: PlayerContext, error: str = "") -> AmmoAction:
    """The invalid ammo action used when nothing at all can be quivered."""
    action = AmmoAction(player, config.NO_SLOT)
    action.error = error
    return action


def load_action(player: PlayerContext, record: dict[str, Any] | None) -> Action:
    """Rebuild an action from its ``save()`` record.

    Missing keys load as the empty ammo action; an unknown tag loads as the
    empty action.
    """
    if not record or "type" not in record or "param" not in record:
        if record and record.get("type") == ActionKind.EMPTY.value:
            return Action(player)
        return empty_ammo(player)

    try:
        kind = ActionKind(record["type"])
    except ValueError:
        logger.debug(f"Unknown quiver action type {record['type']!r}")
        return Action(player)
    return make_action(player, kind, int(record["param"]))


def find_action_from_launcher(player: PlayerContext, launcher: Item | None) -> Action:
    """Pick the ammo action that best suits ``launcher``.

    Prefers, in order: the launcher quiver's current ammo, the main quiver's
    current ammo, the ammo last fired from this kind of launcher, and the
    head of the fire order. If all fail the returned action is invalid and
    its ``error`` explains why.
    """
    if not player.can_grasp_missiles:
        return empty_ammo(player, "You can't grasp things well enough to shoot them.")

    def _matches(slot: InventorySlot) -> bool:
        item = player.item_at(slot)
        return item is not None and item_matches(item, FireType.LAUNCHER, launcher, False)

    cur_launcher_item = player.launcher_action.current.item_slot
    cur_quiver_item = player.quiver_action.current.item_slot

    if _matches(cur_launcher_item):
        # Keep the current ammo if the weapon type didn't change.
        slot = cur_launcher_item
    elif _matches(cur_quiver_item):
        slot = cur_quiver_item
    else:
        slot = player.quiver_history.last_ammo_for(launcher)

    if slot == config.NO_SLOT:
        order = item_fire_order(player, launcher, manual=False)
        if order:
            slot = order[0]

    if slot != config.NO_SLOT:
        return AmmoAction(player, slot)

    full_order = item_fire_order(player, launcher, manual=False, ignore_inscription_etc=True)
    if not full_order:
        return empty_ammo(player, "No suitable missiles.")

    skipped = full_order[0]
    fire_items_start = player.options.fire_items_start
    if fire_items_start >= config.ENDOFPACK:
        return empty_ammo(player, "Nothing suitable (fire_items_start is past the pack).")
    if skipped < fire_items_start:
        letter = config.PACK_LETTERS[fire_items_start]
        return empty_ammo(player, f"Nothing suitable (fire_items_start = '{letter}').")
    letter = config.PACK_LETTERS[skipped]
    return empty_ammo(player, f"Nothing suitable (ignored '=f'-inscribed item on '{letter}').")


def slot_to_action(
    player: PlayerContext, slot: InventorySlot, force: bool = False
) -> Action | None:
    """Build the natural action for the item in ``slot``.

    With ``force``, items that aren't valid ammo become fumble actions
    instead of invalid ammo actions.
    """
    item = player.item_at(slot)
    if item is None:
        return None

    if player.is_worn(slot):
        message("You can't quiver worn items.")
        return empty_ammo(player)

    if item.base_type is ObjectClass.WAND:
        return WandAction(player, slot)
    if item.base_type is ObjectClass.MISCELLANY:
        return MiscAction(player, slot)
    if item.is_unrandom_artefact:
        return ArtefactEvokeAction(player, slot)

    action: Action = AmmoAction(player, slot)
    if force and not action.is_valid():
        action = FumbleAction(player, slot)
    return action


def ammo_category_for(player: PlayerContext, item: Item) -> Launcher:
    """History category ``item`` is filed under given the wielded weapon."""
    weapon = player.weapon()
    if weapon is not None and item.launched_by(weapon):
        return weapon_ammo_type(weapon)
    return Launcher.THROW
