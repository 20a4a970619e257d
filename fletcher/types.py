from __future__ import annotations

from typing import NewType

# =============================================================================
# IDENTIFIERS
# =============================================================================

# Index into the player's pack, 0..ENDOFPACK-1. -1 means "no slot".
InventorySlot = int

# Opaque spell/ability identifiers handed out by the registries.
SpellId = NewType("SpellId", int)
AbilityId = NewType("AbilityId", int)

# =============================================================================
# COORDINATES
# =============================================================================

TileCoord = int  # Always integer tile position

# Game world coordinates - absolute positions on the game map
WorldTilePos = tuple[TileCoord, TileCoord]  # Example: (5, 3) = tile 5,3 on map
