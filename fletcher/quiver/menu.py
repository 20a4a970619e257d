"""
Quiver selection menu: pick any action directly.
"""

from __future__ import annotations

import functools
import string
from typing import TYPE_CHECKING

import tcod.event

from fletcher import colors
from fletcher.events import message
from fletcher.game.hooks import PROMPT_GOT_SPECIAL
from fletcher.quiver.actions import (
    ACTION_ROTATION,
    AbilityAction,
    Action,
    SpellAction,
    make_action,
    slot_to_action,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from fletcher.quiver.cycler import ActionCycler

# US layout characters for shifted digit and punctuation keys.
_SHIFTED_CHARS: dict[str, str] = dict(
    zip("1234567890-=[];',./`\\", "!@#$%^&*()_+{}:\"<>?~|", strict=True)
)


class MenuOption:
    """Represents a single option in a menu."""

    def __init__(
        self,
        key: str | None,
        text: str,
        action: Callable[[], bool] | None = None,
        enabled: bool = True,
        color: colors.Color = colors.WHITE,
    ) -> None:
        self.key = key
        self.text = text
        self.action = action
        self.enabled = enabled
        self.color = color if enabled else colors.GREY


def all_fire_orders(cycler: ActionCycler) -> list[Action]:
    """Every valid action of every kind, in cycling order."""
    actions: list[Action] = []
    for kind in ACTION_ROTATION:
        actions.extend(
            action
            for action in make_action(cycler.player, kind).get_fire_order()
            if action.is_valid()
        )
    return actions


class ActionSelectMenu:
    """Menu listing every quiverable action, plus shortcuts to pick others.

    Keys: a letter picks a listed action; ``-`` empties the quiver (when
    allowed); ``*`` picks any pack item, tossing it if it isn't ammo; ``&``
    picks a spell by letter; ``^`` picks an ability.
    """

    def __init__(self, cycler: ActionCycler, allow_empty: bool) -> None:
        self.cycler = cycler
        self.player = cycler.player
        self.allow_empty = allow_empty
        self.options: list[MenuOption] = []
        self.is_active = False

    @property
    def title(self) -> str:
        text = "Quiver which action? ("
        if self.allow_empty:
            text += "-: none, "
        return text + "*: full inventory, &: spells, ^: abilities)"

    def populate_options(self) -> None:
        self.options.clear()
        keys = string.ascii_letters
        for i, action in enumerate(all_fire_orders(self.cycler)):
            self.options.append(
                MenuOption(
                    key=keys[i] if i < len(keys) else None,
                    text=action.description(),
                    action=functools.partial(self.set_to_quiver, action),
                    color=action.color(),
                )
            )

    def show(self) -> None:
        self.is_active = True
        self.populate_options()

    def hide(self) -> None:
        self.is_active = False
        self.options.clear()

    def set_to_quiver(self, action: Action | None) -> bool:
        """Quiver ``action`` if it is valid (or an allowed empty choice)."""
        if action is None or not action.is_valid():
            return False
        if not self.allow_empty and action == Action(self.player):
            return False
        self.cycler.set(action)
        if self.cycler is self.player.quiver_action:
            self.player.launcher_action.set(action)
        return True

    def clear_quiver(self) -> bool:
        self.cycler.set(Action(self.player))
        if self.cycler is self.player.quiver_action:
            self.player.launcher_action.set(Action(self.player))
        message("Clearing quiver.")
        return True

    def choose_from_inventory(self) -> bool:
        hooks = self.player.hooks
        prompt = "Quiver which item?"
        if self.allow_empty:
            prompt += " (- for none)"
        slot = hooks.prompt_inventory_slot(prompt, allow_empty=self.allow_empty)
        if slot is None:
            return False
        if slot == PROMPT_GOT_SPECIAL:
            return self.allow_empty and self.clear_quiver()
        return self.set_to_quiver(slot_to_action(self.player, slot, force=True))

    def choose_spell(self) -> bool:
        letter = self.player.hooks.prompt_spell_letter("Select a spell to quiver")
        if not letter:
            return False
        spell = self.player.spell_by_letter(letter)
        if spell is None:
            return False
        return self.set_to_quiver(SpellAction(self.player, spell))

    def choose_ability(self) -> bool:
        talents = list(self.player.talents)
        index = self.player.hooks.prompt_ability(talents)
        if index is None or not 0 <= index < len(talents):
            return False
        return self.set_to_quiver(AbilityAction(self.player, talents[index]))

    def handle_key(self, key_char: str) -> bool:
        """Handle one key. Returns True if the menu should close."""
        match key_char:
            case "-" if self.allow_empty:
                return self.clear_quiver()
            case "*":
                return self.choose_from_inventory()
            case "&":
                return self.choose_spell()
            case "^":
                return self.choose_ability()

        for option in self.options:
            if option.key == key_char and option.enabled and option.action:
                return option.action()
        return False

    def handle_input(self, event: tcod.event.Event) -> bool:
        """Handle input events for the menu. Returns True if event was consumed."""
        if not self.is_active:
            return False

        match event:
            case tcod.event.KeyDown(sym=tcod.event.KeySym.ESCAPE):
                self.hide()
                return True
            case tcod.event.KeyDown() as key_event:
                sym = int(key_event.sym)
                key_char = chr(sym) if 32 <= sym <= 126 else ""
                if key_event.mod & tcod.event.Modifier.SHIFT:
                    key_char = _SHIFTED_CHARS.get(key_char, key_char.upper())
                if key_char and self.handle_key(key_char):
                    self.hide()
                return True  # Consume all keyboard input while menu is active

        return False


def choose(cycler: ActionCycler, allow_empty: bool) -> None:
    """Open the selection menu for ``cycler`` and run it to completion."""
    menu = ActionSelectMenu(cycler, allow_empty)
    menu.show()
    cycler.player.hooks.show_menu(menu)
