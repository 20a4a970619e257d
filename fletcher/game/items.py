"""Item snapshots as the quiver sees them.

The quiver never owns or mutates inventory; it reads :class:`Item` values out
of the player's pack and asks questions about them. These helpers answer the
questions that involve launchers: which ammo category a weapon uses, whether
a missile is launched or merely thrown, and whether two items are the "same"
item for history matching.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from fletcher.game.enums import (
    Launcher,
    LaunchResult,
    MiscType,
    MissileType,
    ObjectClass,
    WandType,
    WeaponType,
)

if TYPE_CHECKING:
    from fletcher.game.player import PlayerContext


_WEAPON_AMMO: dict[WeaponType, Launcher] = {
    WeaponType.HUNTING_SLING: Launcher.SLING,
    WeaponType.FUSTIBALUS: Launcher.SLING,
    WeaponType.SHORTBOW: Launcher.BOW,
    WeaponType.LONGBOW: Launcher.BOW,
    WeaponType.HAND_CROSSBOW: Launcher.CROSSBOW,
    WeaponType.ARBALEST: Launcher.CROSSBOW,
    WeaponType.TRIPLE_CROSSBOW: Launcher.CROSSBOW,
}

_MISSILE_AMMO: dict[MissileType, Launcher] = {
    MissileType.STONE: Launcher.SLING,
    MissileType.SLING_BULLET: Launcher.SLING,
    MissileType.ARROW: Launcher.BOW,
    MissileType.BOLT: Launcher.CROSSBOW,
}

# Missiles that can be usefully thrown by hand.
_THROWING_MISSILES = frozenset(
    {
        MissileType.DART,
        MissileType.STONE,
        MissileType.JAVELIN,
        MissileType.LARGE_ROCK,
        MissileType.THROWING_NET,
        MissileType.BOOMERANG,
    }
)

_SUB_TYPE_ENUMS = {
    ObjectClass.WEAPON: WeaponType,
    ObjectClass.MISSILE: MissileType,
    ObjectClass.WAND: WandType,
    ObjectClass.MISCELLANY: MiscType,
}


@dataclass(frozen=True)
class ArtefactEntry:
    """Static data for an unrandom artefact that may be evoked.

    Attributes:
        name: Display name of the artefact.
        evoke: True if the artefact has an untargeted evoke effect.
        targeted_evoke: True if the artefact's evoke effect takes a target.
        hp_cost: Health spent up front when evoking.
        mp_cost: Magic spent up front when evoking.
    """

    name: str
    evoke: bool = False
    targeted_evoke: bool = False
    hp_cost: int = 0
    mp_cost: int = 0

    @property
    def evokable(self) -> bool:
        return self.evoke or self.targeted_evoke


@dataclass
class Item:
    """A single stack of items, as held in a pack slot."""

    base_type: ObjectClass
    sub_type: int = 0
    quantity: int = 1
    inscription: str = ""
    plus: int = 0
    brand: str = ""
    # Pack letter the item was last assigned to. Part of item identity for
    # history matching, so it survives the item moving to another slot.
    slot: str = ""
    # Current pack index, or -1 when the item is not in the pack.
    link: int = -1
    artefact: ArtefactEntry | None = None
    name_override: str | None = None

    def defined(self) -> bool:
        return self.quantity > 0

    def snapshot(self) -> Item:
        """Return a detached copy used for history matching only."""
        return replace(self, quantity=1)

    @property
    def is_unrandom_artefact(self) -> bool:
        return self.artefact is not None

    @property
    def kind_name(self) -> str:
        if self.name_override:
            return self.name_override
        if self.artefact is not None:
            return self.artefact.name
        enum_type = _SUB_TYPE_ENUMS.get(self.base_type)
        if enum_type is None:
            return self.base_type.name.lower()
        try:
            return enum_type(self.sub_type).name.lower().replace("_", " ")
        except ValueError:
            return f"unknown {self.base_type.name.lower()}"

    def name(self, *, with_quantity: bool = True) -> str:
        """Plain display name, e.g. ``"5 stones"`` or ``"a wand of flame"``."""
        kind = self.kind_name
        if self.artefact is not None:
            return kind
        if self.base_type is ObjectClass.WAND:
            kind = f"wand of {kind}"
        prefix = f"{self.plus:+d} " if self.plus else ""
        if not with_quantity:
            return f"{prefix}{kind}"
        if self.quantity > 1:
            return f"{self.quantity} {prefix}{kind}s"
        return f"a {prefix}{kind}"

    def launched_by(self, launcher: Item) -> bool:
        """True if ``launcher`` fires this item (rather than it being thrown)."""
        if self.base_type is not ObjectClass.MISSILE:
            return False
        launcher_type = weapon_ammo_type(launcher)
        if launcher_type is Launcher.THROW:
            return False
        return missile_ammo_type(self) is launcher_type


def weapon_ammo_type(weapon: Item | None) -> Launcher:
    """Return the ammo category used by ``weapon``.

    Anything that isn't a launcher, including no weapon at all, counts as
    :attr:`Launcher.THROW`.
    """
    if weapon is None or weapon.base_type is not ObjectClass.WEAPON:
        return Launcher.THROW
    try:
        return _WEAPON_AMMO.get(WeaponType(weapon.sub_type), Launcher.THROW)
    except ValueError:
        return Launcher.THROW


def missile_ammo_type(item: Item) -> Launcher:
    if item.base_type is not ObjectClass.MISSILE:
        return Launcher.THROW
    try:
        return _MISSILE_AMMO.get(MissileType(item.sub_type), Launcher.THROW)
    except ValueError:
        return Launcher.THROW


def is_throwable(player: PlayerContext, item: Item) -> bool:
    if item.base_type is not ObjectClass.MISSILE:
        return False
    try:
        sub_type = MissileType(item.sub_type)
    except ValueError:
        return False
    if sub_type is MissileType.LARGE_ROCK:
        return player.can_throw_large_rocks
    return sub_type in _THROWING_MISSILES


def is_launched(
    player: PlayerContext, launcher: Item | None, item: Item
) -> LaunchResult:
    """Classify how ``item`` would be fired while ``launcher`` is wielded."""
    if launcher is not None and item.launched_by(launcher):
        return LaunchResult.LAUNCHED
    if is_throwable(player, item):
        return LaunchResult.THROWN
    return LaunchResult.FUMBLED


def items_similar(a: Item, b: Item) -> bool:
    """True if ``a`` and ``b`` would stack, ignoring quantity and position."""
    return (
        a.base_type is b.base_type
        and a.sub_type == b.sub_type
        and a.plus == b.plus
        and a.brand == b.brand
        and _artefact_name(a) == _artefact_name(b)
    )


def _artefact_name(item: Item) -> str:
    # Unrandom artefacts are unique, so the name identifies one.
    return item.artefact.name if item.artefact is not None else ""
