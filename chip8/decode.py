# Instruction decoding.
# Every instruction is 2 bytes, big endian. The top nibble picks the family, and the
# operand fields below are pulled out once here so handlers never re-mask the word.
#   nnn - lowest 12 bits (address)
#   n   - lowest 4 bits
#   x   - bits 8-11 (register)
#   y   - bits 4-7 (register)
#   kk  - lowest 8 bits (byte)

from collections import namedtuple

Instruction = namedtuple("Instruction", ["word", "family", "x", "y", "n", "kk", "nnn"])


def decode(word):
    return Instruction(
        word=word,
        family=(word >> 12) & 0xF,
        x=(word >> 8) & 0xF,
        y=(word >> 4) & 0xF,
        n=word & 0xF,
        kk=word & 0xFF,
        nnn=word & 0x0FFF,
    )


def mnemonic(ins):
    """Cowgod-style assembly text for log lines, e.g. 'ADD V0, V1'."""
    f, x, y, n, kk, nnn = ins.family, ins.x, ins.y, ins.n, ins.kk, ins.nnn
    if ins.word == 0x00E0:
        return "CLS"
    if ins.word == 0x00EE:
        return "RET"
    if f == 0x0:
        return "SYS %03X" % nnn
    if f == 0x1:
        return "JP %03X" % nnn
    if f == 0x2:
        return "CALL %03X" % nnn
    if f == 0x3:
        return "SE V%X, %02X" % (x, kk)
    if f == 0x4:
        return "SNE V%X, %02X" % (x, kk)
    if f == 0x5:
        return "SE V%X, V%X" % (x, y)
    if f == 0x6:
        return "LD V%X, %02X" % (x, kk)
    if f == 0x7:
        return "ADD V%X, %02X" % (x, kk)
    if f == 0x8:
        name = {0x0: "LD", 0x1: "OR", 0x2: "AND", 0x3: "XOR", 0x4: "ADD",
                0x5: "SUB", 0x6: "SHR", 0x7: "SUBN", 0xE: "SHL"}.get(n)
        if name:
            return "%s V%X, V%X" % (name, x, y)
    if f == 0x9:
        return "SNE V%X, V%X" % (x, y)
    if f == 0xA:
        return "LD I, %03X" % nnn
    if f == 0xB:
        return "JP V0, %03X" % nnn
    if f == 0xC:
        return "RND V%X, %02X" % (x, kk)
    if f == 0xD:
        return "DRW V%X, V%X, %X" % (x, y, n)
    if f == 0xE and kk == 0x9E:
        return "SKP V%X" % x
    if f == 0xE and kk == 0xA1:
        return "SKNP V%X" % x
    if f == 0xF:
        text = {0x07: "LD V%X, DT", 0x0A: "LD V%X, K", 0x15: "LD DT, V%X",
                0x18: "LD ST, V%X", 0x1E: "ADD I, V%X", 0x29: "LD F, V%X",
                0x33: "LD B, V%X", 0x55: "LD [I], V%X", 0x65: "LD V%X, [I]"}.get(kk)
        if text:
            return text % x
    return "??? %04X" % ins.word
