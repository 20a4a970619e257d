"""The fire interface: interactive targeting with in-loop quiver cycling.

Each action reaches its own direction chooser through its collaborator
(throwing, casting, evoking), and those choosers are all built differently.
Rather than teach every chooser to cycle, the loop here rebuilds targeting
from scratch on each pass. Quiver commands pressed inside a chooser are not
handled there; they come back in ``target.cmd_result`` and the loop acts on
them before going round again. To the player it looks like one prompt.

The loop never leaves the player with a different quiver just because a
targeting attempt was abandoned or used up the selected action: on cancel,
or if the action ends up invalid, the action held on entry is restored.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fletcher.events import ClearMessagesEvent, message, publish_event
from fletcher.game.enums import TargetCommand
from fletcher.quiver.menu import choose

if TYPE_CHECKING:
    from fletcher.quiver.actions import Action
    from fletcher.quiver.cycler import ActionCycler


def do_target(cycler: ActionCycler) -> Action | None:
    """Run one targeting pass for ``cycler``'s current action.

    Returns the action that was used (which may have become invalid by
    running out of ammo), or None if there was nothing valid to trigger.
    """
    action = cycler.current
    if not action.is_valid():
        return None

    action.reset()
    target = action.target
    target.target = None
    target.find_target = False
    target.fire_context = cycler
    target.interactive = True

    if action.is_targeted():
        action.trigger(action.target)
    else:
        cycler.player.hooks.untargeted_fire(action, action.target)
        if not action.target.is_cancel:
            action.trigger(action.target)

    if action.target.is_cancel and action.target.cmd_result is TargetCommand.NO_CMD:
        message("Okay, then.")

    return action


def target_loop(cycler: ActionCycler) -> TargetCommand:
    """Drive the fire interface until the player fires or cancels.

    Returns the command that ended the loop: ``FIRE`` or ``NO_CMD``.
    """
    initial = cycler.current
    publish_event(ClearMessagesEvent())

    while True:
        publish_event(ClearMessagesEvent())
        action = do_target(cycler)

        # If the chosen action was used up (the last arrow fired), go back
        # to the entry action rather than whatever comes next.
        force_restore_initial = action is None or not action.is_valid()
        command = action.target.cmd_result if action is not None else TargetCommand.NO_CMD

        match command:
            case TargetCommand.CYCLE_QUIVER_FORWARD:
                cycler.cycle(1, False)
            case TargetCommand.CYCLE_QUIVER_BACKWARD:
                cycler.cycle(-1, False)
            case TargetCommand.SELECT_ACTION:
                choose(cycler, allow_empty=False)
            case TargetCommand.FIRE:
                break
            case _:
                command = TargetCommand.NO_CMD
                break

    if (command is TargetCommand.NO_CMD or force_restore_initial) and initial.is_valid():
        cycler.set(initial)
    return command
