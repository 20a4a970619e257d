"""Collaborator surface between the quiver engine and the rest of the game.

The quiver decides *what* is selected and *when* to trigger it. Everything
that actually touches the world (throwing, casting, evoking, wielding), every
rules check that depends on game state the quiver doesn't model, and every
piece of interactive UI is reached through :class:`GameHooks`.

Disablement checks come in two halves. The ``*_blocked_reason`` methods are
pure: they return ``None`` when the operation is possible and a one-line
explanation otherwise, and never publish anything. Actions decide for
themselves whether that explanation should reach the player.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

from fletcher.game.enums import InscriptionOperation, TargetCommand

if TYPE_CHECKING:
    from fletcher.game.items import Item
    from fletcher.quiver.actions import Action
    from fletcher.quiver.menu import ActionSelectMenu
    from fletcher.quiver.target import TargetSpec
    from fletcher.types import AbilityId, InventorySlot, SpellId


class AdvisoryError(RuntimeError):
    """Raised by an advisory predicate that could not be evaluated."""


class GameHooks(abc.ABC):
    """Entry points the quiver calls into the surrounding game.

    Execution methods report success or failure through the ``target``
    record they are given (``target.is_valid``, ``target.is_cancel`` and
    ``target.cmd_result``), never through a return value. They may also
    refine ``target.target``, e.g. snapping to a smart default.
    """

    # ------------------------------------------------------------------
    # Execution collaborators
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def throw_item(self, slot: InventorySlot, target: TargetSpec) -> None:
        """Fire or throw the item in ``slot``."""

    @abc.abstractmethod
    def cast_spell(
        self, spell: SpellId, target: TargetSpec, *, range_check: bool
    ) -> None:
        """Cast ``spell``. ``range_check`` is False inside the fire interface."""

    @abc.abstractmethod
    def activate_ability(self, ability: AbilityId, target: TargetSpec) -> None:
        """Use ``ability``."""

    @abc.abstractmethod
    def evoke_item(self, slot: InventorySlot, target: TargetSpec) -> None:
        """Evoke the wand, device or artefact in ``slot``."""

    @abc.abstractmethod
    def wield_weapon(self, slot: InventorySlot) -> bool:
        """Wield the weapon in ``slot``. Returns True if the wield happened."""

    def untargeted_fire(self, action: Action, target: TargetSpec) -> None:
        """Confirm an action that doesn't take a target.

        Front ends prompt here and write the player's answer into
        ``target``: a cycling or select-action key goes in ``cmd_result``
        with ``is_cancel`` set, escape sets ``is_cancel`` alone. The default
        confirms immediately.
        """
        target.is_valid = True
        target.is_cancel = False
        target.cmd_result = TargetCommand.FIRE

    # ------------------------------------------------------------------
    # Pure rules checks
    # ------------------------------------------------------------------

    def fire_blocked_reason(self) -> str | None:
        """Why the player can't fire anything at all right now."""
        return None

    def inscription_allows(self, item: Item, operation: InscriptionOperation) -> bool:
        """False if a warning inscription on ``item`` guards ``operation``."""
        return True

    def spell_blocked_reason(self, spell: SpellId) -> str | None:
        return None

    def ability_blocked_reason(self, ability: AbilityId) -> str | None:
        return None

    def evoke_blocked_reason(self, slot: InventorySlot) -> str | None:
        return None

    def spell_is_useless(self, spell: SpellId) -> bool:
        return False

    # ------------------------------------------------------------------
    # Autofight advisory predicates
    # ------------------------------------------------------------------

    def hp_is_low(self) -> bool:
        """True if health is too low to fight without confirmation."""
        return False

    def mp_is_low(self) -> bool:
        """True if magic is too low to fight without confirmation."""
        return False

    # ------------------------------------------------------------------
    # Interactive pickers used by the selection menu
    # ------------------------------------------------------------------

    def show_menu(self, menu: ActionSelectMenu) -> None:  # noqa: B027
        """Display ``menu`` and feed it input until it closes."""
        pass

    def prompt_inventory_slot(self, prompt: str, *, allow_empty: bool) -> int | None:
        """Ask for a pack slot.

        Returns the slot, :data:`PROMPT_GOT_SPECIAL` if the player chose
        "none", or None if the prompt was cancelled.
        """
        return None

    def prompt_spell_letter(self, prompt: str) -> str | None:
        return None

    def prompt_ability(self, abilities: list[AbilityId]) -> int | None:
        """Ask for an ability; returns an index into ``abilities``."""
        return None


# Returned by prompt_inventory_slot when the "none" key was pressed.
PROMPT_GOT_SPECIAL = -2
