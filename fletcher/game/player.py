"""The explicit player context handed to every quiver operation.

Nothing in the quiver engine reaches into ambient global state. Inventory,
equipment, the spellbook, known abilities, option values and the game's
collaborator hooks are all read through a :class:`PlayerContext`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from fletcher import config
from fletcher.game.abilities import AbilityRegistry
from fletcher.game.enums import WORN_SLOTS, EquipSlot, FireType
from fletcher.game.spells import SpellRegistry

if TYPE_CHECKING:
    from fletcher.game.hooks import GameHooks
    from fletcher.game.items import Item
    from fletcher.quiver.cycler import ActionCycler, LauncherActionCycler
    from fletcher.quiver.history import AmmoHistory
    from fletcher.types import AbilityId, InventorySlot, SpellId, WorldTilePos


_FIRE_TYPE_NAMES: dict[str, FireType] = {
    "launcher": FireType.LAUNCHER,
    "dart": FireType.DART,
    "darts": FireType.DART,
    "stone": FireType.STONE,
    "stones": FireType.STONE,
    "rock": FireType.ROCK,
    "rocks": FireType.ROCK,
    "javelin": FireType.JAVELIN,
    "javelins": FireType.JAVELIN,
    "net": FireType.NET,
    "nets": FireType.NET,
    "boomerang": FireType.BOOMERANG,
    "boomerangs": FireType.BOOMERANG,
    "inscribed": FireType.INSCRIBED,
}


def parse_fire_order(text: str) -> list[FireType]:
    """Parse a fire order option string.

    Commas separate ranks; ``/`` or ``|`` joins several kinds into one rank,
    so ``"launcher, stone / javelin"`` has two ranks. Unknown names raise
    ``ValueError``.
    """
    ranks: list[FireType] = []
    for rank_text in text.split(","):
        rank = FireType.NONE
        for name in re.split(r"[/|]", rank_text):
            name = name.strip().lower()
            if not name:
                continue
            try:
                rank |= _FIRE_TYPE_NAMES[name]
            except KeyError:
                raise ValueError(f"Unknown fire_order type: {name!r}") from None
        if rank:
            ranks.append(rank)
    return ranks


@dataclass
class QuiverOptions:
    """Player options that shape the fire order. Read-only to the quiver."""

    fire_order: list[FireType] = field(
        default_factory=lambda: parse_fire_order(config.DEFAULT_FIRE_ORDER)
    )
    fire_items_start: int = config.DEFAULT_FIRE_ITEMS_START
    fail_severity_to_quiver: int = config.DEFAULT_FAIL_SEVERITY_TO_QUIVER
    auto_switch: bool = False
    simple_targeting: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.fire_items_start < config.ENDOFPACK:
            raise ValueError(
                f"fire_items_start must be a pack slot, got {self.fire_items_start}"
            )

    @classmethod
    def from_strings(cls, fire_order: str, **kwargs: Any) -> QuiverOptions:
        return cls(fire_order=parse_fire_order(fire_order), **kwargs)


class PlayerContext:
    """Snapshot of everything the quiver needs to know about the player.

    The quiver cyclers and ammo history for this player are created here so
    that every operation can find its sibling cycler (the main quiver and
    the launcher quiver refer to each other) through the context.
    """

    def __init__(
        self,
        hooks: GameHooks,
        *,
        spells: SpellRegistry | None = None,
        abilities: AbilityRegistry | None = None,
        options: QuiverOptions | None = None,
    ) -> None:
        from fletcher.quiver.cycler import ActionCycler, LauncherActionCycler
        from fletcher.quiver.history import AmmoHistory

        self.hooks = hooks
        self.spell_registry = spells or SpellRegistry()
        self.ability_registry = abilities or AbilityRegistry()
        self.options = options or QuiverOptions()

        self.inv: list[Item | None] = [None] * config.ENDOFPACK
        self.equip: dict[EquipSlot, InventorySlot] = {}
        self.spell_letters: dict[str, SpellId] = {}
        self.talents: list[AbilityId] = []

        self.hp = 10
        self.max_hp = 10
        self.mp = 0
        self.max_mp = 0
        self.position: WorldTilePos = (0, 0)
        self.confused = False
        self.can_grasp_missiles = True
        self.can_throw_large_rocks = False
        self.projectile_spell_active = False

        # Keyed storage persisted by the save layer.
        self.props: dict[str, Any] = {}

        # Set by the quiver, cleared by whoever redraws.
        self.redraw_quiver = False
        self.wield_change = False
        self.turn_is_over = False

        self.quiver_history: AmmoHistory = AmmoHistory(self)
        self.quiver_action: ActionCycler = ActionCycler(self)
        self.launcher_action: LauncherActionCycler = LauncherActionCycler(self)

    # ------------------------------------------------------------------
    # Inventory
    # ------------------------------------------------------------------

    def item_at(self, slot: InventorySlot) -> Item | None:
        """Return the defined item in ``slot``, or None for any bad slot."""
        if not 0 <= slot < config.ENDOFPACK:
            return None
        item = self.inv[slot]
        if item is None or not item.defined():
            return None
        return item

    def add_item(self, slot: InventorySlot, item: Item) -> Item:
        """Place ``item`` in ``slot``, updating its link and letter."""
        item.link = slot
        if not item.slot:
            item.slot = config.PACK_LETTERS[slot]
        self.inv[slot] = item
        return item

    def remove_item(self, slot: InventorySlot) -> None:
        item = self.inv[slot]
        if item is not None:
            item.link = -1
        self.inv[slot] = None

    def weapon(self) -> Item | None:
        slot = self.equip.get(EquipSlot.WEAPON)
        return None if slot is None else self.item_at(slot)

    def item_is_equipped(self, slot: InventorySlot) -> bool:
        return slot in self.equip.values()

    def is_worn(self, slot: InventorySlot) -> bool:
        return any(
            equip_slot in WORN_SLOTS and equipped == slot
            for equip_slot, equipped in self.equip.items()
        )

    # ------------------------------------------------------------------
    # Spells and abilities
    # ------------------------------------------------------------------

    def spell_by_letter(self, letter: str) -> SpellId | None:
        return self.spell_letters.get(letter)

    def has_spell(self, spell: SpellId) -> bool:
        return spell in self.spell_letters.values()

    def knows_ability(self, ability: AbilityId) -> bool:
        return ability in self.talents

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------

    def enough_hp(self, amount: int) -> bool:
        # Evoking may not kill the player outright.
        return self.hp > amount

    def enough_mp(self, amount: int) -> bool:
        return self.mp >= amount
