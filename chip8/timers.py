# Delay and sound timers.
# Both count down at 60Hz of real time, not per CPU cycle. The driver hands us elapsed
# time in seconds; we keep it in microseconds, fractions included, and compare with a
# small tolerance so a run of deltas adding up to one period always lands on it.

import logging

from .constants import TIMER_PERIOD_US

# float error allowed when comparing the accumulator against a period
EPSILON_US = 1e-3

logger = logging.getLogger(__name__)


class CountdownTimer:
    def __init__(self, period_us=TIMER_PERIOD_US):
        self.period_us = period_us
        self.value = 0
        self.accum_us = 0.0

    def set(self, value):
        self.value = value & 0xFF
        self.accum_us = 0.0

    def advance(self, dt):
        """Add dt seconds; return how many times the timer decremented."""
        if self.value == 0:
            return 0
        self.accum_us += dt * 1_000_000
        ticks = 0
        while self.accum_us + EPSILON_US >= self.period_us and self.value > 0:
            self.value -= 1
            self.accum_us -= self.period_us
            self.accum_us = max(0.0, self.accum_us)
            ticks += 1
        if self.value == 0:
            self.accum_us = 0.0
        return ticks

    def reset(self):
        self.value = 0
        self.accum_us = 0.0


class SoundTimer(CountdownTimer):
    """Countdown timer that keeps a tone playing while it is above zero."""

    def __init__(self, audio=None, period_us=TIMER_PERIOD_US):
        super().__init__(period_us)
        self.audio = audio

    def set(self, value):
        was_sounding = self.value > 0
        super().set(value)
        if self.value > 0:
            self._tone_on()
        elif was_sounding:
            self._tone_off()

    def advance(self, dt):
        was_sounding = self.value > 0
        ticks = super().advance(dt)
        if was_sounding and self.value == 0:
            self._tone_off()
        return ticks

    def reset(self):
        if self.value > 0:
            self._tone_off()
        super().reset()

    def _tone_on(self):
        logger.debug("tone on (sound=%d)", self.value)
        if self.audio is not None:
            self.audio.tone_on()

    def _tone_off(self):
        logger.debug("tone off")
        if self.audio is not None:
            self.audio.tone_off()


class Timers:
    def __init__(self, audio=None, period_us=TIMER_PERIOD_US):
        self.delay = CountdownTimer(period_us)
        self.sound = SoundTimer(audio, period_us)

    @property
    def audio(self):
        return self.sound.audio

    @audio.setter
    def audio(self, sink):
        self.sound.audio = sink

    def advance(self, dt):
        self.delay.advance(dt)
        self.sound.advance(dt)

    def reset(self):
        self.delay.reset()
        self.sound.reset()
