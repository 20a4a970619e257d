"""Last-used ammo memory, one entry per launcher category.

When the player changes weapons, the quiver wants to pick ammo they've
actually used with that kind of launcher before (stones versus sling
bullets, say). :class:`AmmoHistory` keeps a detached snapshot of the last
explicitly fired or quivered item for each :class:`Launcher` category and
resolves it back to a live pack slot on demand.

Snapshots are only ever compared against the pack; their quantity is pinned
to 1 to mark them as defined and has nothing to do with the real stack.

The history is persisted as a fixed-format big-endian record::

    int16   cookie (0xb015)
    item    legacy placeholder (always an empty item)
    int32   legacy placeholder (always 0)
    int32   count
    item    count x history entries

Each item is written as ``int16 base_type, int16 sub_type, int32 quantity,
int16 plus, int16 link`` followed by the brand, inscription, pack letter and
artefact name as length-prefixed UTF-8 strings. An empty item has quantity 0.
"""

from __future__ import annotations

import logging
import struct
from typing import TYPE_CHECKING

from fletcher import config
from fletcher.events import QuiverRedrawEvent, publish_event
from fletcher.game.enums import Launcher, LaunchResult, ObjectClass
from fletcher.game.items import (
    ArtefactEntry,
    Item,
    is_launched,
    items_similar,
    weapon_ammo_type,
)

if TYPE_CHECKING:
    from fletcher.game.player import PlayerContext
    from fletcher.types import InventorySlot

logger = logging.getLogger(__name__)

_OBJECT_CLASSES: tuple[ObjectClass, ...] = tuple(ObjectClass)


class HistoryFormatError(ValueError):
    """Raised when a persisted ammo history record can't be read."""


def _items_similar(a: Item, b: Item, force: bool) -> bool:
    # Without force the pack letter must match too, i.e. the same item.
    return items_similar(a, b) and (force or a.slot == b.slot)


class AmmoHistory:
    """Remembers the last ammo used for each launcher category."""

    def __init__(self, player: PlayerContext) -> None:
        self.player = player
        self.last_used_of_type: list[Item | None] = [None] * len(Launcher)

    def set_quiver(self, item: Item, category: Launcher) -> None:
        """Store ``item`` as the last used ammo for ``category``."""
        self.last_used_of_type[category] = item.snapshot()
        self._mark_redraw()

    def record_use(self, item: Item, explicit_choice: bool) -> None:
        """Note that ``item`` was fired.

        Ammo that was merely auto-selected doesn't change the history. Ammo
        launched by the wielded weapon is filed under that launcher's
        category, anything else fit for throwing under THROW.
        """
        if not explicit_choice:
            self._mark_redraw()
            return

        weapon = self.player.weapon()
        if weapon is not None and item.launched_by(weapon):
            self.last_used_of_type[weapon_ammo_type(weapon)] = item.snapshot()
        else:
            if is_launched(self.player, weapon, item) is LaunchResult.FUMBLED:
                return
            self.last_used_of_type[Launcher.THROW] = item.snapshot()

        self._mark_redraw()

    def last_ammo_for(self, launcher: Item | Launcher | None) -> InventorySlot:
        """Pack slot holding the last ammo used with ``launcher``, or -1.

        ``launcher`` may be a weapon (None meaning bare hands) or a category.
        """
        category = (
            launcher if isinstance(launcher, Launcher) else weapon_ammo_type(launcher)
        )
        return self._get_pack_slot(self.last_used_of_type[category])

    def _get_pack_slot(self, item: Item | None) -> InventorySlot:
        if item is None or not item.defined():
            return config.NO_SLOT

        player = self.player
        linked = player.item_at(item.link)
        if linked is not None and _items_similar(item, linked, False):
            return item.link

        # First try to find the exact same item.
        for slot in range(config.ENDOFPACK):
            inv_item = player.item_at(slot)
            if inv_item is not None and _items_similar(item, inv_item, False):
                return slot

        # If that fails, try to find an item sufficiently similar.
        for slot in range(config.ENDOFPACK):
            inv_item = player.item_at(slot)
            if inv_item is not None and _items_similar(item, inv_item, True):
                # =f keeps an item out of the fire order.
                if "=f" in inv_item.inscription:
                    return config.NO_SLOT
                return slot

        return config.NO_SLOT

    def _mark_redraw(self) -> None:
        self.player.redraw_quiver = True
        publish_event(QuiverRedrawEvent())

    # ------------------------------------------------------------------
    # Save/load
    # ------------------------------------------------------------------

    def save(self) -> bytes:
        writer = _RecordWriter()
        writer.int16(config.QUIVER_COOKIE)
        writer.item(None)  # legacy: last weapon
        writer.int32(0)  # legacy: last used type
        writer.int32(len(self.last_used_of_type))
        for item in self.last_used_of_type:
            writer.item(item)
        return writer.getvalue()

    def load(self, data: bytes) -> None:
        """Restore the history from ``save()`` output.

        Called while loading a game, possibly before the pack is in place,
        so nothing here looks at the inventory. Records with more entries
        than there are categories are truncated.
        """
        reader = _RecordReader(data)
        cookie = reader.int16()
        if cookie != config.QUIVER_COOKIE:
            raise HistoryFormatError(
                f"Bad quiver history cookie {cookie:#06x}, "
                f"expected {config.QUIVER_COOKIE:#06x}"
            )
        reader.item()  # legacy: last weapon
        reader.int32()  # legacy: last used type

        count = reader.int32()
        if count < 0:
            raise HistoryFormatError(f"Negative quiver history count {count}")

        history: list[Item | None] = [None] * len(Launcher)
        for i in range(count):
            item = reader.item()
            if i < len(history):
                history[i] = item
        if count > len(history):
            logger.debug(
                f"Quiver history has {count} entries, keeping {len(history)}"
            )
        self.last_used_of_type = history


class _RecordWriter:
    def __init__(self) -> None:
        self._chunks: list[bytes] = []

    def int16(self, value: int) -> None:
        self._chunks.append(struct.pack(">H", value & 0xFFFF))

    def int32(self, value: int) -> None:
        self._chunks.append(struct.pack(">i", value))

    def string(self, value: str) -> None:
        encoded = value.encode("utf-8")
        self.int16(len(encoded))
        self._chunks.append(encoded)

    def item(self, item: Item | None) -> None:
        if item is None or not item.defined():
            self._chunks.append(struct.pack(">hhihh", 0, 0, 0, 0, -1))
            for _ in range(4):
                self.string("")
            return
        self._chunks.append(
            struct.pack(
                ">hhihh",
                _OBJECT_CLASSES.index(item.base_type),
                item.sub_type,
                item.quantity,
                item.plus,
                item.link,
            )
        )
        self.string(item.brand)
        self.string(item.inscription)
        self.string(item.slot)
        self.string(item.artefact.name if item.artefact is not None else "")

    def getvalue(self) -> bytes:
        return b"".join(self._chunks)


class _RecordReader:
    def __init__(self, data: bytes) -> None:
        self._data = data
        self._offset = 0

    def _unpack(self, fmt: str) -> tuple:
        size = struct.calcsize(fmt)
        if self._offset + size > len(self._data):
            raise HistoryFormatError("Quiver history record is truncated")
        values = struct.unpack_from(fmt, self._data, self._offset)
        self._offset += size
        return values

    def int16(self) -> int:
        return self._unpack(">H")[0]

    def int32(self) -> int:
        return self._unpack(">i")[0]

    def string(self) -> str:
        length = self.int16()
        end = self._offset + length
        if end > len(self._data):
            raise HistoryFormatError("Quiver history record is truncated")
        raw = self._data[self._offset : end]
        self._offset = end
        return raw.decode("utf-8")

    def item(self) -> Item | None:
        base_index, sub_type, quantity, plus, link = self._unpack(">hhihh")
        brand = self.string()
        inscription = self.string()
        slot = self.string()
        artefact_name = self.string()
        if quantity <= 0:
            return None
        if not 0 <= base_index < len(_OBJECT_CLASSES):
            raise HistoryFormatError(f"Unknown object class {base_index}")
        return Item(
            base_type=_OBJECT_CLASSES[base_index],
            sub_type=sub_type,
            quantity=quantity,
            inscription=inscription,
            plus=plus,
            brand=brand,
            slot=slot,
            link=link,
            artefact=ArtefactEntry(artefact_name) if artefact_name else None,
        )
