"""Faults raised (or recorded) by the virtual machine."""


class Chip8Error(Exception):
    """Base class for fatal machine faults.

    ``pc`` is the address of the instruction that faulted. The interpreter
    fills it in on the way out of ``step()`` when the raiser did not know it.
    """

    kind = "Chip8Error"

    def __init__(self, message="", pc=None):
        super().__init__(message)
        self.message = message
        self.pc = pc

    def __str__(self):
        text = self.kind
        if self.message:
            text += ": " + self.message
        if self.pc is not None:
            text += " (PC=0x%03X)" % self.pc
        return text


class OutOfBoundsError(Chip8Error):
    kind = "OutOfBounds"

    def __init__(self, address, pc=None):
        super().__init__("address 0x%03X outside memory" % address, pc)
        self.address = address


class StackOverflowError(Chip8Error):
    kind = "StackOverflow"

    def __init__(self, pc=None):
        super().__init__("call with 16 return addresses already on the stack", pc)


class StackUnderflowError(Chip8Error):
    kind = "StackUnderflow"

    def __init__(self, pc=None):
        super().__init__("return with an empty call stack", pc)


class LoadError(Chip8Error):
    kind = "LoadFailure"

    def __init__(self, reason, path=None):
        if path is not None:
            reason = "%s: %s" % (path, reason)
        super().__init__(reason)
        self.path = path


class UnknownOpcode:
    """Non-fatal record of an instruction word that matched no family."""

    kind = "UnknownOpcode"

    def __init__(self, pc, word):
        self.pc = pc
        self.word = word

    def __repr__(self):
        return "UnknownOpcode(pc=0x%03X, word=0x%04X)" % (self.pc, self.word)

    def __eq__(self, other):
        if not isinstance(other, UnknownOpcode):
            return NotImplemented
        return (self.pc, self.word) == (other.pc, other.word)
