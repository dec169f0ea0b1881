# Runtime configuration: clock rates, window scale, tone pitch, keymap and quirks.

import json
from dataclasses import dataclass, field

from .constants import CPU_HZ, SCALE, TONE_HZ, KEY_COUNT, DEFAULT_KEYMAP


@dataclass(frozen=True)
class Quirks:
    """Behaviours that differ between COSMAC VIP and later interpreters.

    The defaults are the VIP ones: 8xy6/8xyE shift Vy into Vx, 8xy1/8xy2/8xy3
    zero VF, and Fx55/Fx65 leave I pointing past the last byte touched.
    """

    shift_uses_vy: bool = True
    logic_resets_vf: bool = True
    memory_increments_i: bool = True

    @classmethod
    def legacy(cls):
        # SUPER-CHIP / CHIP-48 behaviour
        return cls(shift_uses_vy=False, logic_resets_vf=False, memory_increments_i=False)


@dataclass
class Config:
    cpu_hz: int = CPU_HZ
    scale: int = SCALE
    tone_hz: int = TONE_HZ
    keymap: dict = field(default_factory=lambda: dict(DEFAULT_KEYMAP))
    quirks: Quirks = field(default_factory=Quirks)


def normalize_keycode(name):
    """'q' -> 'Q', '_1' -> '1' (pyglet names digit keys _0.._9)."""
    name = str(name).strip().upper()
    if len(name) == 2 and name[0] == "_" and name[1].isdigit():
        name = name[1]
    return name


def parse_keymap(mapping):
    """Validate a {keycode: hex key} mapping and normalise its keycodes."""
    if not isinstance(mapping, dict):
        raise ValueError("keymap must be an object of keycode -> key")
    keymap = {}
    for name, value in mapping.items():
        if isinstance(value, str):
            try:
                value = int(value, 16)
            except ValueError:
                raise ValueError("keymap entry %r: %r is not a hex digit" % (name, value)) from None
        if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value < KEY_COUNT:
            raise ValueError("keymap entry %r: key must be 0x0-0xF, got %r" % (name, value))
        keymap[normalize_keycode(name)] = value
    return keymap


def load_keymap(path):
    with open(path, "r", encoding="utf-8") as f:
        try:
            mapping = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError("keymap %s is not valid JSON: %s" % (path, e)) from e
    return parse_keymap(mapping)
