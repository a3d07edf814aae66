"""Shared constants for SGR rendering."""

# ANSI escape sequences
ESC = "\x1b"
CSI = f"{ESC}["
RESET = f"{CSI}0m"

# Leading parameter of each color role (38;5;n / 48;2;r;g;b / 58;...)
FG = 38
BG = 48
UL = 58

# Terminal-default color codes, one per role
DEFAULT_FG = 39
DEFAULT_BG = 49
DEFAULT_UL = 59

# Standard 16-color reference palette (xterm defaults)
ANSI16: tuple[tuple[int, int, int], ...] = (
    (0, 0, 0),        # 0 black
    (205, 0, 0),      # 1 red
    (0, 205, 0),      # 2 green
    (205, 205, 0),    # 3 yellow
    (0, 0, 238),      # 4 blue
    (205, 0, 205),    # 5 magenta
    (0, 205, 205),    # 6 cyan
    (229, 229, 229),  # 7 white
    (127, 127, 127),  # 8 bright black
    (255, 0, 0),      # 9 bright red
    (0, 255, 0),      # 10 bright green
    (255, 255, 0),    # 11 bright yellow
    (92, 92, 255),    # 12 bright blue
    (255, 0, 255),    # 13 bright magenta
    (0, 255, 255),    # 14 bright cyan
    (255, 255, 255),  # 15 bright white
)

# Standard 16-color names (index into ANSI16)
COLORS_16 = {
    # Standard colors (30-37 fg, 40-47 bg)
    "black": 0,
    "red": 1,
    "green": 2,
    "yellow": 3,
    "blue": 4,
    "magenta": 5,
    "cyan": 6,
    "white": 7,
    # Bright colors (90-97 fg, 100-107 bg)
    "bright_black": 8,
    "bright_red": 9,
    "bright_green": 10,
    "bright_yellow": 11,
    "bright_blue": 12,
    "bright_magenta": 13,
    "bright_cyan": 14,
    "bright_white": 15,
}
