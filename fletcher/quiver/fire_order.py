"""Ammo fire order resolution.

The fire order is the ranked list of pack slots that the ammo quiver cycles
through. Each item is placed in the first fire order rank (a set of
:class:`FireType` flags taken from the player's options) that it matches.
Ranks strictly dominate, and within a rank pack order is kept.

Ordering is done with a composite integer key, ``rank << 16 | slot``, so a
single numeric sort gives both properties at once.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from fletcher import config
from fletcher.game.enums import FireType, Launcher, LaunchResult, MissileType, ObjectClass
from fletcher.game.items import is_launched, weapon_ammo_type

if TYPE_CHECKING:
    from fletcher.game.items import Item
    from fletcher.game.player import PlayerContext
    from fletcher.types import InventorySlot


_MISSILE_FIRE_TYPES: dict[MissileType, FireType] = {
    MissileType.STONE: FireType.STONE,
    MissileType.JAVELIN: FireType.JAVELIN,
    MissileType.LARGE_ROCK: FireType.ROCK,
    MissileType.THROWING_NET: FireType.NET,
    MissileType.BOOMERANG: FireType.BOOMERANG,
    MissileType.DART: FireType.DART,
}


def item_matches(
    item: Item, types: FireType, launcher: Item | None, manual: bool
) -> bool:
    """True if ``item`` belongs to any of the fire categories in ``types``.

    ``+f`` (or ``+F`` for manual selection) inscriptions force an item into
    the INSCRIBED category whatever it is.
    """
    if types & FireType.INSCRIBED and ("+F" if manual else "+f") in item.inscription:
        return True

    if item.base_type is not ObjectClass.MISSILE:
        return False

    fire_type = _MISSILE_FIRE_TYPES.get(item.sub_type)  # type: ignore[call-overload]
    if fire_type is not None and types & fire_type:
        return True

    return bool(
        types & FireType.LAUNCHER
        and launcher is not None
        and item.launched_by(launcher)
    )


# =============================================================================
# AUTO WEAPON SWITCH
# =============================================================================


def _autoswitch_slots() -> tuple[InventorySlot, InventorySlot]:
    return config.AUTOSWITCH_PRIMARY_SLOT, config.AUTOSWITCH_SECONDARY_SLOT


def autoswitch_active(player: PlayerContext) -> bool:
    """True if auto switch is on and one of the alternate weapons is wielded."""
    weapon = player.weapon()
    return (
        player.options.auto_switch
        and weapon is not None
        and weapon.link in _autoswitch_slots()
    )


def autoswitch_ammo_check(player: PlayerContext, ammo: Item | None) -> bool:
    """True if ``ammo`` suits either of the two alternate weapons."""
    if ammo is None or not ammo.defined():
        return False
    return any(
        weapon is not None and item_matches(ammo, FireType.ALL, weapon, False)
        for weapon in (player.item_at(slot) for slot in _autoswitch_slots())
    )


def autoswitch_to_ranged(player: PlayerContext, ammo: Item) -> bool:
    """Wield the alternate launcher for ``ammo``. Returns True if it did.

    This only wields; the shot itself is left for the next command.
    """
    # TODO: switching away from a ranged weapon with auto switch on keeps the
    # launcher quiver pointed at the old ammo until the next weapon change.
    if not autoswitch_active(player):
        return False

    primary, secondary = _autoswitch_slots()
    weapon = player.weapon()
    assert weapon is not None
    item_slot = secondary if weapon.link == primary else primary

    launcher = player.item_at(item_slot)
    if launcher is None or not autoswitch_ammo_check(player, ammo):
        return False
    if not ammo.launched_by(launcher):
        return False

    if not player.hooks.wield_weapon(item_slot):
        return False

    player.turn_is_over = True
    return True


# =============================================================================
# FIRE ORDER
# =============================================================================


def item_fire_order(
    player: PlayerContext,
    launcher: Item | None,
    *,
    manual: bool,
    ignore_inscription_etc: bool = False,
) -> list[InventorySlot]:
    """Return the pack slots of usable ammo, best first.

    Args:
        player: Context to read the pack and options from.
        launcher: Determines which items match the LAUNCHER category and
            whether non-launched missiles are skipped.
        manual: True when the player is choosing by hand. Thrown items stay
            available with a launcher wielded, and ``=F``/``+F`` replace
            ``=f``/``+f``.
        ignore_inscription_etc: Ignore ``=f`` exclusions and the
            ``fire_items_start`` cutoff. Only used to explain why the real
            fire order came up empty.
    """
    options = player.options
    inv_start = 0 if ignore_inscription_etc else options.fire_items_start
    exclusion = "=F" if manual else "=f"
    launcher_is_ranged = weapon_ammo_type(launcher) is not Launcher.THROW
    autoswitch_launcher = (
        launcher is not None
        and autoswitch_active(player)
        and launcher.link in _autoswitch_slots()
    )

    keys: list[int] = []
    for slot in range(max(inv_start, 0), config.ENDOFPACK):
        item = player.item_at(slot)
        if item is None:
            continue

        # Running out of launcher ammo shouldn't fall back to throwing.
        if (
            not manual
            and launcher_is_ranged
            and is_launched(player, launcher, item) is LaunchResult.THROWN
        ):
            continue

        if not ignore_inscription_etc and exclusion in item.inscription:
            continue

        for rank, types in enumerate(options.fire_order):
            if item_matches(item, types, launcher, manual) or (
                autoswitch_launcher and autoswitch_ammo_check(player, item)
            ):
                keys.append((rank << config.FIRE_ORDER_SLOT_BITS) | slot)
                break

    if not keys:
        return []
    ordered = np.sort(np.asarray(keys, dtype=np.int64)) & config.FIRE_ORDER_SLOT_MASK
    return [int(slot) for slot in ordered]
