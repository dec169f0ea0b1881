import json

import pytest

from chip8.cli import build_parser, config_from_args, main
from chip8.config import Config, Quirks, load_keymap, normalize_keycode, parse_keymap
from chip8.constants import DEFAULT_KEYMAP


class TestKeymap:

    def test_default_layout_covers_all_keys(self):
        assert sorted(Config().keymap.values()) == list(range(16))

    @pytest.mark.parametrize("name, expected", [("q", "Q"), ("_1", "1"), ("up", "UP"), (" x ", "X")])
    def test_normalize(self, name, expected):
        assert normalize_keycode(name) == expected

    def test_hex_strings_and_ints(self):
        assert parse_keymap({"q": "a", "_1": 1}) == {"Q": 0xA, "1": 1}

    @pytest.mark.parametrize("bad", [{"Q": "G"}, {"Q": 16}, {"Q": -1}, {"Q": True}, ["Q"]])
    def test_rejects_bad_entries(self, bad):
        with pytest.raises(ValueError):
            parse_keymap(bad)

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "keys.json"
        path.write_text(json.dumps({"UP": "5", "DOWN": "8"}))
        assert load_keymap(path) == {"UP": 5, "DOWN": 8}

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "keys.json"
        path.write_text("{not json")
        with pytest.raises(ValueError):
            load_keymap(path)


class TestArgs:

    def test_defaults(self):
        args = build_parser().parse_args(["game.ch8"])
        config = config_from_args(args)
        assert config.cpu_hz == 500
        assert config.scale == 10
        assert config.quirks == Quirks()
        assert config.keymap == DEFAULT_KEYMAP

    def test_legacy_quirks_and_keymap(self, tmp_path):
        path = tmp_path / "keys.json"
        path.write_text(json.dumps({"SPACE": "0"}))
        args = build_parser().parse_args(
            ["game.ch8", "--legacy-quirks", "--keymap", str(path), "--cpu-hz", "700"])
        config = config_from_args(args)
        assert config.quirks == Quirks.legacy()
        assert config.keymap == {"SPACE": 0}
        assert config.cpu_hz == 700


class TestMain:

    def test_headless_run(self, tmp_path):
        rom = tmp_path / "loop.ch8"
        rom.write_bytes(bytes([0x60, 0x03, 0x61, 0x04, 0x80, 0x14, 0x12, 0x00]))
        assert main([str(rom), "--headless", "--max-cycles", "8", "--cpu-hz", "10000"]) == 0

    def test_fatal_fault_exit_status(self, tmp_path, capsys):
        rom = tmp_path / "ret.ch8"
        rom.write_bytes(bytes([0x00, 0xEE]))
        assert main([str(rom), "--headless"]) == 1
        err = capsys.readouterr().err
        assert "StackUnderflow" in err
        assert "PC=0x200" in err

    def test_missing_rom(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.ch8"), "--headless"]) == 1
        assert "LoadFailure" in capsys.readouterr().err

    def test_bad_keymap(self, tmp_path, capsys):
        path = tmp_path / "keys.json"
        path.write_text(json.dumps({"Q": 99}))
        assert main(["game.ch8", "--keymap", str(path), "--headless"]) == 2
