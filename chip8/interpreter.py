# CHIP-8 interpreter: fetch, decode, execute.
# CPU - Cowgod's CHIP-8 Technical reference http://devernay.free.fr/hacks/chip8/C8TECH10.HTM
#
# step() runs exactly one instruction. PC is advanced past the instruction before the
# handler runs, so jumps/calls/returns just overwrite it and skips add 2 more.
# Handlers that define a VF result return it instead of writing VF themselves; step()
# stores it after everything else, so with x == F the flag wins over the arithmetic result.

import logging
import random

from .config import Quirks
from .constants import FLAG_REGISTER, FONT_BASE, GLYPH_SIZE, PROGRAM_BASE
from .decode import decode, mnemonic
from .errors import Chip8Error, UnknownOpcode
from .loader import install_font, load_program, load_rom
from .machine import Machine

logger = logging.getLogger(__name__)


class Interpreter:

    def __init__(self, machine=None, quirks=None, display=None, rng=None):
        if machine is None:
            machine = Machine()
            install_font(machine.memory)
        self.machine = machine
        self.quirks = quirks or Quirks()
        self.display = display
        self.rng = rng or random.Random()
        self.program = None
        self.waiting_register = None  # set while blocked on Fx0A
        self.unknown_opcodes = []
        self.cycle_count = 0
        self._present_pending = False

        # dispatch table, first match wins
        self.opcodes = [
            (0xFFFF, 0x00E0, self.op_CLS),
            (0xFFFF, 0x00EE, self.op_RET),
            (0xF000, 0x0000, self.op_SYS),

            (0xF000, 0x1000, self.op_JP),
            (0xF000, 0x2000, self.op_CALL),
            (0xF000, 0x3000, self.op_SE_Vx_kk),
            (0xF000, 0x4000, self.op_SNE_Vx_kk),
            (0xF000, 0x5000, self.op_SE_Vx_Vy),
            (0xF000, 0x6000, self.op_LD_Vx_kk),
            (0xF000, 0x7000, self.op_ADD_Vx_kk),

            (0xF00F, 0x8000, self.op_LD_Vx_Vy),
            (0xF00F, 0x8001, self.op_OR),
            (0xF00F, 0x8002, self.op_AND),
            (0xF00F, 0x8003, self.op_XOR),
            (0xF00F, 0x8004, self.op_ADD),
            (0xF00F, 0x8005, self.op_SUB),
            (0xF00F, 0x8006, self.op_SHR),
            (0xF00F, 0x8007, self.op_SUBN),
            (0xF00F, 0x800E, self.op_SHL),

            (0xF000, 0x9000, self.op_SNE_Vx_Vy),
            (0xF000, 0xA000, self.op_LD_I),
            (0xF000, 0xB000, self.op_JP_V0),
            (0xF000, 0xC000, self.op_RND),
            (0xF000, 0xD000, self.op_DRW),

            (0xF0FF, 0xE09E, self.op_SKP),
            (0xF0FF, 0xE0A1, self.op_SKNP),

            (0xF0FF, 0xF007, self.op_LD_Vx_DT),
            (0xF0FF, 0xF00A, self.op_WAITKEY),
            (0xF0FF, 0xF015, self.op_LD_DT_Vx),
            (0xF0FF, 0xF018, self.op_LD_ST_Vx),
            (0xF0FF, 0xF01E, self.op_ADD_I_Vx),
            (0xF0FF, 0xF029, self.op_FONT),
            (0xF0FF, 0xF033, self.op_BCD),
            (0xF0FF, 0xF055, self.op_STORE),
            (0xF0FF, 0xF065, self.op_LOAD),
        ]

    # ---- program loading ----
    def load_program(self, data, base=PROGRAM_BASE):
        self.program = load_program(self.machine.memory, data, base)
        self.machine.pc = base
        return self.program

    def load_rom(self, path, base=PROGRAM_BASE):
        self.program = load_rom(self.machine.memory, path, base)
        self.machine.pc = base
        return self.program

    def reset(self):
        self.machine.reset()
        install_font(self.machine.memory)
        self.program = None
        self.waiting_register = None
        self.unknown_opcodes = []
        self.cycle_count = 0

    # ---- input ----
    @property
    def waiting_for_key(self):
        return self.waiting_register is not None

    def key_down(self, key):
        self.machine.keys.set(key, True)

    def key_up(self, key):
        keys = self.machine.keys
        if self.waiting_register is not None and keys.is_pressed(key):
            self.machine.V[self.waiting_register] = key & 0xF
            logger.debug("key %X released, V%X = %X", key, self.waiting_register, key)
            self.waiting_register = None
        keys.set(key, False)

    # ---- cycle ----
    def lookup(self, word):
        for mask, pattern, handler in self.opcodes:
            if (word & mask) == pattern:
                return handler
        return None

    def step(self):
        """Execute one instruction. Returns it, or None while waiting for a key."""
        if self.waiting_register is not None:
            return None

        m = self.machine
        pc = m.pc
        try:
            ins = decode(m.memory.read_word(pc))
            m.pc = (pc + 2) & 0xFFFF
            handler = self.lookup(ins.word)
            if handler is None:
                self._unknown(pc, ins.word)
            else:
                if logger.isEnabledFor(logging.DEBUG):
                    logger.debug("%03X: %04X  %s", pc, ins.word, mnemonic(ins))
                flag = handler(ins)
                if flag is not None:
                    m.V[FLAG_REGISTER] = flag
        except Chip8Error as e:
            m.pc = pc
            self._present_pending = False
            if e.pc is None:
                e.pc = pc
            logger.error("%s", e)
            raise

        self.cycle_count += 1
        if self._present_pending:
            self._present_pending = False
            if self.display is not None:
                self.display.present(m.framebuffer)
        return ins

    def _unknown(self, pc, word):
        record = UnknownOpcode(pc, word)
        self.unknown_opcodes.append(record)
        logger.warning("Unknown opcode: %04X at PC=0x%03X", word, pc)

    # ---- opcode handlers ----

    # 00E0 - CLS
    def op_CLS(self, ins):
        self.machine.framebuffer.clear()

    # 00EE - RET
    def op_RET(self, ins):
        self.machine.pc = self.machine.stack.pop()

    # 0nnn - SYS addr, ignored on modern interpreters
    def op_SYS(self, ins):
        logger.debug("SYS call ignored (%04X)", ins.word)

    # 1nnn - JP addr
    def op_JP(self, ins):
        self.machine.pc = ins.nnn

    # 2nnn - CALL addr
    def op_CALL(self, ins):
        m = self.machine
        m.stack.push(m.pc)
        m.pc = ins.nnn

    def _skip_if(self, condition):
        if condition:
            self.machine.pc = (self.machine.pc + 2) & 0xFFFF

    # 3xkk - SE Vx, byte
    def op_SE_Vx_kk(self, ins):
        self._skip_if(self.machine.V[ins.x] == ins.kk)

    # 4xkk - SNE Vx, byte
    def op_SNE_Vx_kk(self, ins):
        self._skip_if(self.machine.V[ins.x] != ins.kk)

    # 5xy0 - SE Vx, Vy (low nibble ignored)
    def op_SE_Vx_Vy(self, ins):
        V = self.machine.V
        self._skip_if(V[ins.x] == V[ins.y])

    # 6xkk - LD Vx, byte
    def op_LD_Vx_kk(self, ins):
        self.machine.V[ins.x] = ins.kk

    # 7xkk - ADD Vx, byte (no carry)
    def op_ADD_Vx_kk(self, ins):
        V = self.machine.V
        V[ins.x] = (V[ins.x] + ins.kk) & 0xFF

    # 8xy0 - LD Vx, Vy
    def op_LD_Vx_Vy(self, ins):
        V = self.machine.V
        V[ins.x] = V[ins.y]

    def _logic_flag(self):
        return 0 if self.quirks.logic_resets_vf else None

    # 8xy1 - OR Vx, Vy
    def op_OR(self, ins):
        V = self.machine.V
        V[ins.x] |= V[ins.y]
        return self._logic_flag()

    # 8xy2 - AND Vx, Vy
    def op_AND(self, ins):
        V = self.machine.V
        V[ins.x] &= V[ins.y]
        return self._logic_flag()

    # 8xy3 - XOR Vx, Vy
    def op_XOR(self, ins):
        V = self.machine.V
        V[ins.x] ^= V[ins.y]
        return self._logic_flag()

    # 8xy4 - ADD Vx, Vy, VF = carry
    def op_ADD(self, ins):
        V = self.machine.V
        total = V[ins.x] + V[ins.y]
        V[ins.x] = total & 0xFF
        return 1 if total > 0xFF else 0

    # 8xy5 - SUB Vx, Vy, VF = NOT borrow
    def op_SUB(self, ins):
        V = self.machine.V
        flag = 1 if V[ins.x] >= V[ins.y] else 0
        V[ins.x] = (V[ins.x] - V[ins.y]) & 0xFF
        return flag

    def _shift_source(self, ins):
        V = self.machine.V
        return V[ins.y] if self.quirks.shift_uses_vy else V[ins.x]

    # 8xy6 - SHR Vx {, Vy}, VF = bit shifted out
    def op_SHR(self, ins):
        value = self._shift_source(ins)
        self.machine.V[ins.x] = value >> 1
        return value & 1

    # 8xy7 - SUBN Vx, Vy, VF = NOT borrow
    def op_SUBN(self, ins):
        V = self.machine.V
        flag = 1 if V[ins.y] >= V[ins.x] else 0
        V[ins.x] = (V[ins.y] - V[ins.x]) & 0xFF
        return flag

    # 8xyE - SHL Vx {, Vy}, VF = bit shifted out
    def op_SHL(self, ins):
        value = self._shift_source(ins)
        self.machine.V[ins.x] = (value << 1) & 0xFF
        return (value >> 7) & 1

    # 9xy0 - SNE Vx, Vy (low nibble ignored)
    def op_SNE_Vx_Vy(self, ins):
        V = self.machine.V
        self._skip_if(V[ins.x] != V[ins.y])

    # Annn - LD I, addr
    def op_LD_I(self, ins):
        self.machine.I = ins.nnn

    # Bnnn - JP V0, addr
    def op_JP_V0(self, ins):
        self.machine.pc = ins.nnn + self.machine.V[0]

    # Cxkk - RND Vx, byte
    def op_RND(self, ins):
        self.machine.V[ins.x] = self.rng.randint(0, 255) & ins.kk

    # Dxyn - DRW Vx, Vy, nibble, VF = collision
    def op_DRW(self, ins):
        m = self.machine
        fb = m.framebuffer
        # VF is cleared before the coordinates are read, so VF as a coordinate means 0
        x = 0 if ins.x == FLAG_REGISTER else m.V[ins.x] % fb.width
        y = 0 if ins.y == FLAG_REGISTER else m.V[ins.y] % fb.height
        # rows that would fall off the bottom are clipped, so they are never read
        sprite = m.memory.read_block(m.I, fb.rows_visible(y, ins.n))
        collision = fb.blit(x, y, sprite)
        self._present_pending = True
        return 1 if collision else 0

    # Ex9E - SKP Vx
    def op_SKP(self, ins):
        m = self.machine
        self._skip_if(m.keys.is_pressed(m.V[ins.x]))

    # ExA1 - SKNP Vx
    def op_SKNP(self, ins):
        m = self.machine
        self._skip_if(not m.keys.is_pressed(m.V[ins.x]))

    # Fx07 - LD Vx, DT
    def op_LD_Vx_DT(self, ins):
        m = self.machine
        m.V[ins.x] = m.timers.delay.value

    # Fx0A - LD Vx, K: halt until a key goes down and back up
    def op_WAITKEY(self, ins):
        self.machine.keys.clear()
        self.waiting_register = ins.x
        logger.debug("waiting for key into V%X", ins.x)

    # Fx15 - LD DT, Vx
    def op_LD_DT_Vx(self, ins):
        m = self.machine
        m.timers.delay.set(m.V[ins.x])

    # Fx18 - LD ST, Vx
    def op_LD_ST_Vx(self, ins):
        m = self.machine
        m.timers.sound.set(m.V[ins.x])

    # Fx1E - ADD I, Vx
    def op_ADD_I_Vx(self, ins):
        m = self.machine
        m.I = (m.I + m.V[ins.x]) & 0xFFFF

    # Fx29 - LD F, Vx
    def op_FONT(self, ins):
        m = self.machine
        m.I = FONT_BASE + m.V[ins.x] * GLYPH_SIZE

    # Fx33 - LD B, Vx
    def op_BCD(self, ins):
        m = self.machine
        v = m.V[ins.x]
        m.memory.write_block(m.I, (v // 100, (v // 10) % 10, v % 10))

    # Fx55 - LD [I], Vx
    def op_STORE(self, ins):
        m = self.machine
        m.memory.write_block(m.I, m.V[:ins.x + 1])
        if self.quirks.memory_increments_i:
            m.I = (m.I + ins.x + 1) & 0xFFFF

    # Fx65 - LD Vx, [I]
    def op_LOAD(self, ins):
        m = self.machine
        m.V[:ins.x + 1] = list(m.memory.read_block(m.I, ins.x + 1))
        if self.quirks.memory_increments_i:
            m.I = (m.I + ins.x + 1) & 0xFFFF
