"""
Configuration constants.

Centralizes the magic numbers and default option values used by the quiver
engine. Organized by functional area for easy maintenance. Runtime-tunable
options live on :class:`fletcher.game.player.QuiverOptions`; the values here
are only its defaults.
"""

# =============================================================================
# INVENTORY
# =============================================================================

# Number of pack slots, lettered a-z then A-Z.
ENDOFPACK = 52
PACK_LETTERS = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"

# Returned by slot lookups that find nothing.
NO_SLOT = -1

# Weapon slots used by the auto weapon switch feature.
AUTOSWITCH_PRIMARY_SLOT = 0  # 'a'
AUTOSWITCH_SECONDARY_SLOT = 1  # 'b'

# =============================================================================
# FIRE ORDER
# =============================================================================

# Option-string form of the default fire order. Commas separate ranks, and
# "/" joins several kinds into a single rank.
DEFAULT_FIRE_ORDER = "launcher, javelin / boomerang / dart / stone / rock / net, inscribed"

# First pack slot considered when building the ammo fire order.
DEFAULT_FIRE_ITEMS_START = 0

# Spells whose fail severity reaches this value are skipped when cycling.
DEFAULT_FAIL_SEVERITY_TO_QUIVER = 3

# Bits reserved for the pack slot inside a composite fire order sort key.
FIRE_ORDER_SLOT_BITS = 16
FIRE_ORDER_SLOT_MASK = (1 << FIRE_ORDER_SLOT_BITS) - 1

# Number of spell letters scanned for the spell fire order.
SPELL_LETTER_COUNT = 52

# =============================================================================
# PERSISTENCE
# =============================================================================

# Props key prefix used when cyclers save themselves.
QUIVER_PROPS_KEY = "quiver"
LAUNCHER_QUIVER_PROPS_KEY = "launcher_quiver"

# Version cookie written at the head of the ammo history record.
QUIVER_COOKIE = 0xB015

# =============================================================================
# FEEDBACK
# =============================================================================

# Sound played when the quivered action changes.
CHANGE_QUIVER_SOUND = "change_quiver"
