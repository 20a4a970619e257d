from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from fletcher.types import AbilityId

NON_ABILITY = AbilityId(-1)


@dataclass(frozen=True)
class AbilityDef:
    """Static data for one ability.

    ``pseudo`` marks abilities that are silly to quiver: one-off choices,
    "stop doing X" toggles, costly capstones, and abilities that vanish when
    used. They can still be quivered explicitly but never appear in the
    fire order.
    """

    id: AbilityId
    name: str
    targeted: bool = False
    pseudo: bool = False
    mp_cost: int = 0


class AbilityRegistry:
    """Lookup table of all abilities the game knows about."""

    def __init__(self, abilities: Iterable[AbilityDef] = ()) -> None:
        self._abilities: dict[AbilityId, AbilityDef] = {}
        for ability in abilities:
            self.register(ability)

    def register(self, ability: AbilityDef) -> None:
        self._abilities[ability.id] = ability

    def get(self, ability_id: AbilityId) -> AbilityDef | None:
        return self._abilities.get(ability_id)
