# Type alias for RGB colors
Color = tuple[int, int, int]

# Basic colors
WHITE: Color = (255, 255, 255)
RED: Color = (255, 0, 0)
YELLOW: Color = (255, 255, 0)
ORANGE: Color = (255, 165, 0)
GREY: Color = (128, 128, 128)
LIGHT_GREY: Color = (200, 200, 200)
DARK_GREY: Color = (50, 50, 50)
MAGENTA: Color = (255, 0, 255)

# Quiver display colors
QUIVER_DEFAULT: Color = LIGHT_GREY
QUIVER_DISABLED: Color = DARK_GREY
QUIVER_EMPTY: Color = DARK_GREY

# Spell failure colors, from safest to riskiest.
FAIL_RATE_COLORS: tuple[Color, ...] = (WHITE, YELLOW, ORANGE, RED)
SPELL_USELESS: Color = DARK_GREY
SPELL_FORBIDDEN: Color = MAGENTA

# Message channel colors
MESSAGE_PLAIN: Color = WHITE
MESSAGE_WARNING: Color = YELLOW
MESSAGE_ERROR: Color = RED
