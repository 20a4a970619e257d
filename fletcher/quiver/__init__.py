"""The quiver: what the fire command triggers, and how the player changes it.

Public entry points for front ends. Game code builds a
:class:`~fletcher.game.player.PlayerContext` and then works through its two
cyclers (``player.quiver_action`` and ``player.launcher_action``).
"""

from .actions import (
    ACTION_ROTATION,
    ACTION_TYPES,
    AbilityAction,
    Action,
    ActionKind,
    AmmoAction,
    ArtefactEvokeAction,
    FumbleAction,
    MiscAction,
    SpellAction,
    WandAction,
    empty_ammo,
    find_action_from_launcher,
    load_action,
    make_action,
    slot_to_action,
)
from .cycler import (
    ActionCycler,
    LauncherActionCycler,
    on_actions_changed,
    on_weapon_changed,
)
from .fire_order import item_fire_order, item_matches
from .history import AmmoHistory, HistoryFormatError
from .menu import ActionSelectMenu, choose
from .target import TargetSpec
from .targeting import do_target, target_loop

__all__ = [
    "ACTION_ROTATION",
    "ACTION_TYPES",
    "AbilityAction",
    "Action",
    "ActionCycler",
    "ActionKind",
    "ActionSelectMenu",
    "AmmoAction",
    "AmmoHistory",
    "ArtefactEvokeAction",
    "FumbleAction",
    "HistoryFormatError",
    "LauncherActionCycler",
    "MiscAction",
    "SpellAction",
    "TargetSpec",
    "WandAction",
    "choose",
    "do_target",
    "empty_ammo",
    "find_action_from_launcher",
    "item_fire_order",
    "item_matches",
    "load_action",
    "make_action",
    "on_actions_changed",
    "on_weapon_changed",
    "slot_to_action",
    "target_loop",
]
