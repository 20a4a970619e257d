"""Action cyclers: the holders of the currently quivered action.

Each player has two cyclers. The main quiver (``player.quiver_action``) can
hold any action; the launcher quiver (``player.launcher_action``) only
accepts ammo that the wielded launcher actually launches, and is what the
weapon display shows next to a bow or sling.

A cycler always holds an action. "Nothing" is represented by the empty
action or by an invalid ammo action, never by None.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fletcher import config
from fletcher.events import QuiverRedrawEvent, SoundEvent, publish_event
from fletcher.quiver import targeting
from fletcher.quiver.actions import (
    ACTION_ROTATION,
    Action,
    ArtefactEvokeAction,
    SpellAction,
    ammo_category_for,
    empty_ammo,
    find_action_from_launcher,
    load_action,
    make_action,
    slot_to_action,
)

if TYPE_CHECKING:
    from fletcher.game.player import PlayerContext
    from fletcher.types import InventorySlot, SpellId

logger = logging.getLogger(__name__)


def _get_next_action_type(
    player: PlayerContext, current: Action | None, direction: int, allow_disabled: bool
) -> Action | None:
    """Find the first valid action in the kinds after ``current``'s kind.

    Kinds are visited in :data:`ACTION_ROTATION` order (reversed when
    ``direction`` is negative), starting with the kind after the current one
    and wrapping round to the current kind last. Kinds outside the rotation
    start from the beginning.
    """
    kinds = list(ACTION_ROTATION)
    if direction < 0:
        kinds.reverse()

    start = 0
    if current is not None and current.kind in kinds:
        # Move on from the current kind even if its action is still valid.
        start = (kinds.index(current.kind) + 1) % len(kinds)
    kinds = kinds[start:] + kinds[:start]

    for kind in kinds:
        candidate = make_action(player, kind).find_next(direction, allow_disabled, False)
        if candidate is not None and candidate.is_valid():
            return candidate
    return None


class ActionCycler:
    """Holds the current action and moves it through the fire orders."""

    def __init__(self, player: PlayerContext) -> None:
        self.player = player
        self.current: Action = empty_ammo(player)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.current!r})"

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self) -> Action:
        return self.current

    def is_empty(self) -> bool:
        return not self.current.is_valid()

    def spell_is_quivered(self, spell: SpellId) -> bool:
        return self.current == SpellAction(self.player, spell)

    def item_is_quivered(self, slot: InventorySlot) -> bool:
        return 0 <= slot < config.ENDOFPACK and self.current.item_slot == slot

    def fire_key_hints(self) -> str:
        """Key help shown by the direction chooser while firing."""
        if self.current == self.next():
            return ", <w>%</w> - select action"
        return ", <w>%</w> - select action, <w>%</w>/<w>%</w> - cycle"

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def set(self, new_action: Action | None) -> bool:
        """Make ``new_action`` current. Returns True if the value changed.

        A change records item-backed actions in the ammo history and plays
        the quiver-change sound. The displays are marked dirty either way.
        """
        action = new_action if new_action is not None else Action(self.player)

        changed = action != self.current
        self.current = action
        if changed:
            item = self.player.item_at(action.item_slot)
            if item is not None:
                self.player.quiver_history.set_quiver(
                    item, ammo_category_for(self.player, item)
                )
            publish_event(SoundEvent(sound_id=config.CHANGE_QUIVER_SOUND))
        self.set_needs_redraw()
        return changed

    def set_from_cycler(self, other: ActionCycler) -> bool:
        """Adopt ``other``'s action without any of ``set``'s side effects.

        The action object itself is shared, so an in-flight targeting
        session sees the same instance through either cycler.
        """
        changed = self.current is not other.current
        self.current = other.current
        self.set_needs_redraw()
        return changed

    def set_from_slot(self, slot: InventorySlot) -> bool:
        return self.set(slot_to_action(self.player, slot))

    def clear(self) -> bool:
        return self.set(Action(self.player))

    def next(self, direction: int = 1, allow_disabled: bool = True) -> Action:
        """The action ``cycle`` would move to. Never returns None."""
        # First try the next action of the same kind.
        result = self.current.find_next(direction, allow_disabled, False)
        # Then try a different kind.
        if result is None or not result.is_valid():
            result = _get_next_action_type(
                self.player, self.current, direction, allow_disabled
            )
        if result is None:
            return empty_ammo(self.player)
        return result

    def cycle(self, direction: int = 1, allow_disabled: bool = True) -> bool:
        return self.set(self.next(direction, allow_disabled))

    def on_actions_changed(self) -> None:
        """React to the pack, spells or abilities having changed."""
        if not self.current.is_valid():
            replacement = self.current.find_replacement()
            if replacement is not None and replacement.is_valid():
                self.set(replacement)
            else:
                logger.debug(f"{self!r}: no replacement, cycling")
                self.cycle()
        self.set_needs_redraw()

    def set_needs_redraw(self) -> None:
        self.player.redraw_quiver = True
        publish_event(QuiverRedrawEvent())

    # ------------------------------------------------------------------
    # Targeting
    # ------------------------------------------------------------------

    def do_target(self) -> Action | None:
        """Run one targeting pass for the current action."""
        return targeting.do_target(self)

    def target(self) -> None:
        """Run the interactive fire interface until it fires or is cancelled."""
        targeting.target_loop(self)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, key: str) -> None:
        self.player.props[key] = self.current.save()

    def load(self, key: str) -> None:
        """Restore the action saved under ``key``.

        A missing record is filled in from the wielded weapon (falling back
        to cycling) and saved straight away.
        """
        if key not in self.player.props:
            self.set(find_action_from_launcher(self.player, self.player.weapon()))
            if not self.current.is_valid():
                self.cycle()
            self.save(key)

        self.set(load_action(self.player, self.player.props[key]))
        # The saved action may no longer be usable.
        self.on_actions_changed()


def _is_currently_launched_ammo(player: PlayerContext, slot: InventorySlot) -> bool:
    weapon = player.weapon()
    item = player.item_at(slot)
    return weapon is not None and item is not None and item.launched_by(weapon)


class LauncherActionCycler(ActionCycler):
    """Cycler restricted to ammo for the wielded launcher (or empty)."""

    def is_empty(self) -> bool:
        # The action may be valid on its own terms but not launched ammo.
        if super().is_empty():
            return True
        return not _is_currently_launched_ammo(self.player, self.current.item_slot)

    def set(self, new_action: Action | None) -> bool:
        action = new_action if new_action is not None else Action(self.player)
        if _is_currently_launched_ammo(
            self.player, action.item_slot
        ) or action == Action(self.player):
            return super().set(action)
        self.set_needs_redraw()
        return False

    def set_needs_redraw(self) -> None:
        self.player.redraw_quiver = True
        self.player.wield_change = True
        publish_event(QuiverRedrawEvent(weapon_changed=True))


# =============================================================================
# PLAYER-LEVEL NOTIFICATIONS
# =============================================================================


def on_actions_changed(player: PlayerContext) -> None:
    """Notify both of the player's cyclers that actions may have changed."""
    player.quiver_action.on_actions_changed()
    player.launcher_action.on_actions_changed()


def on_weapon_changed(player: PlayerContext) -> None:
    """Re-select ammo after the player wields a different weapon."""
    weapon = player.weapon()
    player.launcher_action.set(find_action_from_launcher(player, weapon))

    if not player.launcher_action.is_empty():
        # Launcher ammo goes into the main quiver too.
        player.quiver_action.set(player.launcher_action.current)

    # An evokable artefact weapon takes over an otherwise useless quiver.
    if (
        weapon is not None
        and weapon.is_unrandom_artefact
        and not player.quiver_action.current.is_valid()
    ):
        player.quiver_action.set(ArtefactEvokeAction(player, weapon.link))
