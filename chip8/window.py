# pyglet front end.
# We're subclassing pyglet (that'll handle graphics, sound output, and keyboard handling)
# and overriding whatever def we need from there. The VM itself never imports pyglet.

import logging

import numpy as np
import pyglet
from pyglet.window import key
from pyglet.media import synthesis

from .config import Config, normalize_keycode
from .driver import AudioSink, Driver, FramebufferSink, QueuedInput
from .errors import Chip8Error

logger = logging.getLogger(__name__)


def generate_tone(frequency, duration=1.0, sample_rate=44100):
    # Use a Sine waveform from pyglet.media.synthesis
    wave = synthesis.Sine(duration=duration, frequency=frequency, sample_rate=sample_rate)
    return pyglet.media.StaticSource(wave)


class ToneAudio(AudioSink):
    """Loops a sine tone for as long as the sound timer is running."""

    def __init__(self, frequency):
        self.source = generate_tone(frequency)
        self.player = None
        self.playing = False

    def tone_on(self):
        if self.playing:
            return
        if self.player is None:
            self.player = pyglet.media.Player()
            self.player.loop = True
            self.player.queue(self.source)
        self.player.play()
        self.playing = True

    def tone_off(self):
        if self.player is not None and self.playing:
            self.player.pause()
        self.playing = False

    def close(self):
        if self.player is not None:
            self.player.delete()
            self.player = None
        self.playing = False


class Chip8Window(pyglet.window.Window, FramebufferSink):

    def __init__(self, interpreter, config=None, caption="CHIP-8 Emulator"):
        self.config = config or Config()
        fb = interpreter.machine.framebuffer
        self.scale = self.config.scale
        super().__init__(
            width=fb.width * self.scale,
            height=fb.height * self.scale,
            caption=caption,
            resizable=False,
            vsync=False,
        )

        self.interpreter = interpreter
        self.keymap = {normalize_keycode(name): k for name, k in self.config.keymap.items()}
        self.input = QueuedInput()
        self.audio = ToneAudio(self.config.tone_hz)
        interpreter.display = self
        interpreter.machine.timers.audio = self.audio
        self.driver = Driver(interpreter, self.input)
        self.error = None
        self.should_draw = True
        self._level_before_trace = None

        # 64x32 RGBA, upscaled with numpy.repeat when it changes
        self._small_framebuf = np.zeros((fb.height, fb.width, 4), dtype=np.uint8)
        self._small_framebuf[..., 3] = 255
        self.image = pyglet.image.ImageData(
            self.width, self.height, 'RGBA', self._scaled_bytes())

        pyglet.clock.schedule_interval(self._cpu_tick, 1.0 / self.config.cpu_hz)

    # ---- FramebufferSink ----
    def present(self, framebuffer):
        self.should_draw = True

    def _scaled_bytes(self):
        pixels = self.interpreter.machine.framebuffer.pixels
        # pyglet images start at the bottom row
        self._small_framebuf[..., :3] = np.flipud(pixels)[..., None] * 255
        scaled = np.repeat(np.repeat(self._small_framebuf, self.scale, axis=0), self.scale, axis=1)
        return scaled.tobytes()

    # ---- Drawing ----
    def on_draw(self):
        self.clear()
        if self.should_draw:
            self.image.set_data('RGBA', self.width * 4, self._scaled_bytes())
            self.should_draw = False
        self.image.blit(0, 0)

    # ---- Input ----
    def on_key_press(self, symbol, modifiers):
        if symbol == key.ESCAPE:
            self.input.quit()
            return
        if symbol == key.F1:
            self.toggle_trace()
            return
        code = self.keymap.get(normalize_keycode(key.symbol_string(symbol)))
        if code is not None:
            self.input.press(code)

    def toggle_trace(self):
        """F1: switch DEBUG instruction tracing on, or back to the level it replaced."""
        log = logging.getLogger("chip8")
        if self._level_before_trace is None:
            self._level_before_trace = log.level
            log.setLevel(logging.DEBUG)
            log.debug("instruction trace on")
        else:
            log.debug("instruction trace off")
            log.setLevel(self._level_before_trace)
            self._level_before_trace = None

    def on_key_release(self, symbol, modifiers):
        code = self.keymap.get(normalize_keycode(key.symbol_string(symbol)))
        if code is not None:
            self.input.release(code)

    # ---- CPU cycle ----
    def _cpu_tick(self, dt):
        # the clock rarely fires at cpu_hz, so catch up in one go
        steps = max(1, int(round(dt * self.config.cpu_hz)))
        try:
            for _ in range(steps):
                self.driver.tick(dt / steps)
                if not self.driver.running or self.driver.past_program_end:
                    self.close()
                    return
        except Chip8Error as e:
            self.error = e
            self.close()

    def close(self):
        pyglet.clock.unschedule(self._cpu_tick)
        self.audio.close()
        super().close()


def run_window(interpreter, config=None):
    """Open the window and run until it closes. Returns the fatal error, if any."""
    window = Chip8Window(interpreter, config)
    pyglet.app.run()
    return window.error
