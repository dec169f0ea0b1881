import pytest

from chip8.decode import decode, mnemonic


def test_fields():
    ins = decode(0xD7A5)
    assert ins.family == 0xD
    assert ins.x == 0x7
    assert ins.y == 0xA
    assert ins.n == 0x5
    assert ins.kk == 0xA5
    assert ins.nnn == 0x7A5


@pytest.mark.parametrize("word, text", [
    (0x00E0, "CLS"),
    (0x00EE, "RET"),
    (0x0123, "SYS 123"),
    (0x2ABC, "CALL ABC"),
    (0x8014, "ADD V0, V1"),
    (0x812E, "SHL V1, V2"),
    (0xB300, "JP V0, 300"),
    (0xD015, "DRW V0, V1, 5"),
    (0xE29E, "SKP V2"),
    (0xF30A, "LD V3, K"),
    (0xF265, "LD V2, [I]"),
    (0x5121, "SE V1, V2"),
    (0x8128, "??? 8128"),
    (0xF1FF, "??? F1FF"),
])
def test_mnemonic(word, text):
    assert mnemonic(decode(word)) == text
