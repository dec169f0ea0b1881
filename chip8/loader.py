# Load ROM and font into memory.
# Font goes at 0x000 (5 bytes per hex digit), the program is copied verbatim from 0x200.

import logging
from collections import namedtuple

from .constants import FONTSET, FONT_BASE, PROGRAM_BASE
from .errors import LoadError

logger = logging.getLogger(__name__)

LoadedProgram = namedtuple("LoadedProgram", ["base", "end", "size"])


def install_font(memory, base=FONT_BASE):
    memory.write_block(base, FONTSET)


def load_program(memory, data, base=PROGRAM_BASE):
    """Copy program bytes into memory at base.

    Raises LoadError if any byte would land at or past the end of memory.
    ``end`` is the address of the last program byte.
    """
    data = bytes(data)
    if base < 0 or base + len(data) > len(memory):
        raise LoadError("program of %d bytes does not fit at 0x%03X (memory is %d bytes)"
                        % (len(data), base, len(memory)))
    memory.write_block(base, data)
    program = LoadedProgram(base=base, end=base + len(data) - 1, size=len(data))
    logger.info("Program base: 0x%03X, Program end: 0x%03X, Total: %d bytes",
                program.base, program.end, program.size)
    return program


def read_rom(path):
    logger.info("Loading ROM: %s", path)
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise LoadError(e.strerror or str(e), path=str(path)) from e


def load_rom(memory, path, base=PROGRAM_BASE):
    data = read_rom(path)
    try:
        return load_program(memory, data, base)
    except LoadError as e:
        e.path = str(path)
        raise
