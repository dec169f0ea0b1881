"""CHIP-8 virtual machine."""

from .config import Config, Quirks
from .driver import Driver, KeyEvent, QUIT
from .errors import (Chip8Error, OutOfBoundsError, StackOverflowError,
                     StackUnderflowError, LoadError, UnknownOpcode)
from .interpreter import Interpreter
from .machine import Machine

__version__ = "0.1.0"
