"""Read-only spell definitions consulted by spell quiver actions."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from fletcher import colors
from fletcher.game.enums import SpellFlag
from fletcher.types import SpellId

NO_SPELL = SpellId(-1)


@dataclass(frozen=True)
class SpellDef:
    """Static data for one spell.

    Attributes:
        id: Registry identifier, also the persisted quiver parameter.
        name: Display title.
        flags: Targeting and behaviour flags.
        fail_severity: 0 (harmless) to 3 (dangerous) miscast severity.
        fail_rate: Current failure chance in percent, for display.
        mp_cost: Magic spent per cast.
        has_targeter: True if the spell has a static area targeter even though
            it is not dynamically targeted.
        affects_outside_range: True if the targeter can reach beyond the
            spell's nominal range (explosions, clouds).
        manual_targeting: Always prompt for a target; never autotarget.
        skip_autotarget: Skip the automatic target pass and use the
            direction chooser's own target selection.
        forbidden: Casting is forbidden by the player's god.
    """

    id: SpellId
    name: str
    flags: SpellFlag = SpellFlag.NONE
    fail_severity: int = 0
    fail_rate: int = 0
    mp_cost: int = 1
    has_targeter: bool = False
    affects_outside_range: bool = False
    manual_targeting: bool = False
    skip_autotarget: bool = False
    forbidden: bool = False

    @property
    def is_dynamic_targeted(self) -> bool:
        return bool(self.flags & SpellFlag.TARGETING_MASK)

    @property
    def fail_color(self) -> colors.Color:
        severity = max(0, min(self.fail_severity, len(colors.FAIL_RATE_COLORS) - 1))
        return colors.FAIL_RATE_COLORS[severity]

    @property
    def fail_rate_text(self) -> str:
        return f"{self.fail_rate}%"


class SpellRegistry:
    """Lookup table of all spells the game knows about."""

    def __init__(self, spells: Iterable[SpellDef] = ()) -> None:
        self._spells: dict[SpellId, SpellDef] = {}
        for spell in spells:
            self.register(spell)

    def register(self, spell: SpellDef) -> None:
        self._spells[spell.id] = spell

    def get(self, spell_id: SpellId) -> SpellDef | None:
        return self._spells.get(spell_id)

    def is_valid_spell(self, spell_id: SpellId) -> bool:
        return spell_id in self._spells

    def __iter__(self) -> Iterator[SpellDef]:
        return iter(self._spells.values())

    def __len__(self) -> int:
        return len(self._spells)
