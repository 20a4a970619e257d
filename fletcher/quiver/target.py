from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING

from fletcher.game.enums import TargetCommand

if TYPE_CHECKING:
    from fletcher.quiver.cycler import ActionCycler
    from fletcher.types import WorldTilePos


@dataclass
class TargetSpec:
    """Target record for one trigger of a quiver action.

    Collaborators read the request fields (``target``, ``find_target``,
    ``interactive``) and write the outcome back: ``is_valid`` when a target
    was chosen, ``is_cancel`` when the player backed out, and ``cmd_result``
    when a quiver command was pressed while the direction chooser was open.

    Attributes:
        target: Chosen tile, or None when no target has been set.
        find_target: Ask the collaborator to pick a smart default target.
        interactive: Open the direction chooser rather than firing blind.
        is_valid: Set by collaborators once a usable target exists.
        is_cancel: Set by collaborators when targeting was aborted.
        cmd_result: Quiver command that interrupted targeting.
        fire_context: The cycler driving the fire interface, if any. Used by
            direction choosers for prompts and by actions to relax checks.
    """

    target: WorldTilePos | None = None
    find_target: bool = False
    interactive: bool = False
    is_valid: bool = False
    is_cancel: bool = False
    cmd_result: TargetCommand = TargetCommand.NO_CMD
    fire_context: ActionCycler | None = None

    def needs_targeting(self) -> bool:
        """True if triggering with this record will ask the player for input."""
        return self.interactive or (
            self.target is None and not self.is_valid and not self.find_target
        )

    def copy_from(self, other: TargetSpec) -> None:
        """Overwrite every field with the values from ``other``."""
        for f in fields(self):
            setattr(self, f.name, getattr(other, f.name))
