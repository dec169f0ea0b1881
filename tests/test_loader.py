import pytest

from chip8.constants import FONTSET
from chip8.errors import Chip8Error, LoadError
from chip8.interpreter import Interpreter
from chip8.loader import install_font, load_program, load_rom, read_rom
from chip8.machine import Memory


class TestFont:

    def test_font_is_16_glyphs_of_5_bytes(self):
        assert len(FONTSET) == 80

    def test_installed_at_zero(self):
        mem = Memory()
        install_font(mem)
        assert mem.read_block(0, 80) == FONTSET
        assert mem.read(80) == 0

    def test_new_interpreter_has_font(self):
        vm = Interpreter()
        assert vm.machine.memory.read_block(0x4B, 5) == bytes([0xF0, 0x80, 0xF0, 0x80, 0x80])


class TestLoadProgram:

    def test_copied_verbatim_at_base(self):
        mem = Memory()
        program = load_program(mem, b"\x60\x03\x12\x00")
        assert program.base == 0x200
        assert program.end == 0x203
        assert program.size == 4
        assert mem.read_block(0x200, 4) == b"\x60\x03\x12\x00"

    def test_largest_program_fits(self):
        mem = Memory()
        program = load_program(mem, bytes([0xAA]) * (4096 - 0x200))
        assert program.end == 0xFFF
        assert mem.read(0xFFF) == 0xAA

    def test_one_byte_too_many(self):
        mem = Memory()
        with pytest.raises(LoadError) as info:
            load_program(mem, bytes(4096 - 0x200 + 1))
        assert isinstance(info.value, Chip8Error)
        assert "LoadFailure" in str(info.value)
        assert mem.read(0x200) == 0

    def test_interpreter_starts_at_base(self):
        vm = Interpreter()
        vm.machine.pc = 0x400
        vm.load_program(b"\x00\xE0", base=0x300)
        assert vm.machine.pc == 0x300
        assert vm.program.end == 0x301


class TestLoadRom:

    def test_from_file(self, tmp_path):
        rom = tmp_path / "test.ch8"
        rom.write_bytes(b"\xA2\x02")
        mem = Memory()
        program = load_rom(mem, rom)
        assert program.size == 2
        assert mem.read_word(0x200) == 0xA202

    def test_missing_file(self, tmp_path):
        with pytest.raises(LoadError) as info:
            read_rom(tmp_path / "nope.ch8")
        assert info.value.path.endswith("nope.ch8")

    def test_oversized_file_names_path(self, tmp_path):
        rom = tmp_path / "big.ch8"
        rom.write_bytes(bytes(4000))
        with pytest.raises(LoadError) as info:
            Interpreter().load_rom(rom)
        assert info.value.path == str(rom)
