from enum import Enum, Flag, IntEnum, auto


class ObjectClass(Enum):
    """Broad item classes that decide which quiver action an item maps to."""

    WEAPON = auto()
    MISSILE = auto()
    ARMOUR = auto()
    WAND = auto()
    MISCELLANY = auto()
    JEWELLERY = auto()
    POTION = auto()
    SCROLL = auto()
    OTHER = auto()


class WeaponType(IntEnum):
    CLUB = 0
    DAGGER = 1
    LONG_SWORD = 2
    QUARTERSTAFF = 3
    HUNTING_SLING = 4
    FUSTIBALUS = 5
    SHORTBOW = 6
    LONGBOW = 7
    HAND_CROSSBOW = 8
    ARBALEST = 9
    TRIPLE_CROSSBOW = 10


class MissileType(IntEnum):
    DART = 0
    STONE = 1
    SLING_BULLET = 2
    ARROW = 3
    BOLT = 4
    JAVELIN = 5
    LARGE_ROCK = 6
    THROWING_NET = 7
    BOOMERANG = 8


class WandType(IntEnum):
    FLAME = 0
    ICEBLAST = 1
    PARALYSIS = 2
    DIGGING = 3
    POLYMORPH = 4
    ACID = 5


class MiscType(IntEnum):
    PHIAL_OF_FLOODS = 0
    LIGHTNING_ROD = 1
    PHANTOM_MIRROR = 2
    TIN_OF_TREMORSTONES = 3
    HORN_OF_GERYON = 4
    BOX_OF_BEASTS = 5
    CONDENSER_VANE = 6
    ZIGGURAT = 7


class Launcher(IntEnum):
    """Ammo categories. One history slot is kept per category.

    The integer values are the on-disk history indices and must not change.
    """

    SLING = 0
    BOW = 1
    CROSSBOW = 2
    THROW = 3


class LaunchResult(Enum):
    """How an item would leave the player's hand with a given launcher."""

    LAUNCHED = auto()
    THROWN = auto()
    FUMBLED = auto()


class FireType(Flag):
    """Fire order categories. A rank in the fire order may combine several."""

    NONE = 0
    LAUNCHER = auto()
    DART = auto()
    STONE = auto()
    ROCK = auto()
    JAVELIN = auto()
    NET = auto()
    BOOMERANG = auto()
    INSCRIBED = auto()
    ALL = LAUNCHER | DART | STONE | ROCK | JAVELIN | NET | BOOMERANG | INSCRIBED


class TargetCommand(Enum):
    """Side-channel command a direction chooser hands back to the quiver."""

    NO_CMD = auto()
    FIRE = auto()
    CYCLE_QUIVER_FORWARD = auto()
    CYCLE_QUIVER_BACKWARD = auto()
    SELECT_ACTION = auto()


class EquipSlot(Enum):
    WEAPON = auto()
    CLOAK = auto()
    HELMET = auto()
    GLOVES = auto()
    BOOTS = auto()
    SHIELD = auto()
    BODY_ARMOUR = auto()
    LEFT_RING = auto()
    RIGHT_RING = auto()
    AMULET = auto()


# Slots whose items count as "worn" and so can never be quivered.
WORN_SLOTS = frozenset(slot for slot in EquipSlot if slot is not EquipSlot.WEAPON)


class SpellFlag(Flag):
    NONE = 0
    DIR_OR_TARGET = auto()
    TARGET = auto()
    OBJ = auto()
    HELPFUL = auto()
    AREA = auto()
    # Only the targeting flags make a spell "dynamically" targeted.
    TARGETING_MASK = DIR_OR_TARGET | TARGET | OBJ


class InscriptionOperation(Enum):
    """Operations that a warning inscription (e.g. ``!f``) can guard."""

    FIRE = auto()
    EVOKE = auto()
    QUIVER = auto()
