# CHIP-8 machine constants.
# Memory - 4096 bytes: 0x000-0x1FF holds the font, programs are loaded from 0x200.
# Display - 64x32 monochrome, each pixel is either on or off (0 || 1).
# Cowgod's CHIP-8 Technical reference http://devernay.free.fr/hacks/chip8/C8TECH10.HTM

MEMORY_SIZE = 4096
PROGRAM_BASE = 0x200
FONT_BASE = 0x000

REGISTER_COUNT = 16
FLAG_REGISTER = 0xF
STACK_DEPTH = 16
KEY_COUNT = 16

width, height = 64, 32
SPRITE_WIDTH = 8

# timers tick at 60Hz, measured in microseconds
TIMER_PERIOD_US = 16700

# set fonts (binary pixel patterns)
GLYPH_SIZE = 5
FONTSET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])  # notice 80 bytes

#  configuration defaults
CPU_HZ = 500
SCALE = 10
TONE_HZ = 441

# map binding keys (textual keycodes -> CHIP-8 keypad)
DEFAULT_KEYMAP = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}
