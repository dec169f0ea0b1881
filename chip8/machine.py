# CHIP-8 machine state.
# We will be storing register values as 16 zeros, plus the I register and the program counter.
# The stack holds 16 return addresses, the framebuffer is a 64x32 grid of on/off pixels and
# the input latch keeps the state of the 16 hex keys.
# All of it is owned by the interpreter, nothing here runs instructions.

import numpy as np

from .constants import (MEMORY_SIZE, PROGRAM_BASE, REGISTER_COUNT, STACK_DEPTH,
                        KEY_COUNT, width, height, SPRITE_WIDTH)
from .errors import OutOfBoundsError, StackOverflowError, StackUnderflowError
from .timers import Timers


class Memory:
    """Flat 4096 byte store. Every access is bounds-checked."""

    def __init__(self, size=MEMORY_SIZE):
        self.size = size
        self.data = bytearray(size)

    def __len__(self):
        return self.size

    def check(self, address, length=1):
        """Raise OutOfBoundsError unless [address, address+length) fits."""
        if address < 0:
            raise OutOfBoundsError(address)
        if address + length > self.size:
            # first byte that falls outside the extent
            raise OutOfBoundsError(max(address, self.size))

    def read(self, address):
        self.check(address)
        return self.data[address]

    def write(self, address, value):
        self.check(address)
        self.data[address] = value & 0xFF

    def read_word(self, address):
        # instructions are stored big endian
        self.check(address, 2)
        return (self.data[address] << 8) | self.data[address + 1]

    def read_block(self, address, length):
        self.check(address, length)
        return bytes(self.data[address:address + length])

    def write_block(self, address, values):
        values = bytes(values)
        self.check(address, len(values))
        self.data[address:address + len(values)] = values

    def clear(self):
        self.data[:] = bytes(self.size)


class CallStack:
    def __init__(self, depth=STACK_DEPTH):
        self.depth = depth
        self.entries = np.zeros(depth, dtype=np.uint16)
        self.sp = 0

    def __len__(self):
        return self.sp

    def push(self, address):
        if self.sp >= self.depth:
            raise StackOverflowError()
        self.entries[self.sp] = address
        self.sp += 1

    def pop(self):
        if self.sp == 0:
            raise StackUnderflowError()
        self.sp -= 1
        return int(self.entries[self.sp])

    def clear(self):
        self.entries[:] = 0
        self.sp = 0


class Framebuffer:
    """Monochrome pixel grid, indexed [row, column]."""

    def __init__(self, cols=width, rows=height):
        self.width = cols
        self.height = rows
        self.pixels = np.zeros((rows, cols), dtype=np.uint8)

    def clear(self):
        self.pixels[:] = 0

    def is_lit(self, x, y):
        return bool(self.pixels[y, x])

    def blit(self, x, y, sprite):
        """XOR sprite rows onto the grid starting at (x, y).

        Rows past the bottom edge and columns past the right edge are clipped.
        Returns True if any lit pixel was turned off.
        """
        collision = False
        cols = min(SPRITE_WIDTH, self.width - x)
        for row, byte in enumerate(sprite):
            if y + row >= self.height:
                break
            bits = np.unpackbits(np.array([byte], dtype=np.uint8))[:cols]
            region = self.pixels[y + row, x:x + cols]
            if np.any(region & bits):
                collision = True
            region ^= bits
        return collision

    def rows_visible(self, y, count):
        """Number of sprite rows starting at y that land on screen."""
        return max(0, min(count, self.height - y))


class InputLatch:
    def __init__(self, count=KEY_COUNT):
        self.keys = np.zeros(count, dtype=np.uint8)

    def __len__(self):
        return len(self.keys)

    def is_pressed(self, key):
        return bool(self.keys[key & 0xF])

    def set(self, key, pressed):
        self.keys[key & 0xF] = 1 if pressed else 0

    def clear(self):
        self.keys[:] = 0


class Machine:
    """All VM state in one record: registers, memory, stack, timers, framebuffer, keys."""

    def __init__(self, audio=None):
        self.memory = Memory()
        self.V = [0] * REGISTER_COUNT
        self.I = 0
        self.pc = PROGRAM_BASE
        self.stack = CallStack()
        self.timers = Timers(audio)
        self.framebuffer = Framebuffer()
        self.keys = InputLatch()

    def reset(self):
        self.memory.clear()
        self.V = [0] * REGISTER_COUNT
        self.I = 0
        self.pc = PROGRAM_BASE
        self.stack.clear()
        self.timers.reset()
        self.framebuffer.clear()
        self.keys.clear()
