import pytest

from chip8.driver import AudioSink, FramebufferSink
from chip8.interpreter import Interpreter


def assemble(*words):
    return b"".join(word.to_bytes(2, "big") for word in words)


class RecordingAudio(AudioSink):
    def __init__(self):
        self.events = []

    def tone_on(self):
        self.events.append("on")

    def tone_off(self):
        self.events.append("off")


class RecordingDisplay(FramebufferSink):
    def __init__(self):
        self.presented = 0

    def present(self, framebuffer):
        self.presented += 1


@pytest.fixture
def make_vm():
    """Build an interpreter with the given instruction words loaded at 0x200."""
    def factory(*words, **kwargs):
        vm = Interpreter(**kwargs)
        vm.load_program(assemble(*words))
        return vm
    return factory


@pytest.fixture
def audio():
    return RecordingAudio()


@pytest.fixture
def display():
    return RecordingDisplay()
