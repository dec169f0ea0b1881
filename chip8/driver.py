# Driver loop and the collaborators the VM talks to.
#
# Each tick: execute one instruction (skipped while Fx0A is waiting), advance the timers
# by the elapsed time, then deliver pending key events. Timers and input keep going while
# the interpreter is blocked on a key, otherwise the key it is waiting for could never arrive.

import logging
import time
from collections import namedtuple

logger = logging.getLogger(__name__)

KeyEvent = namedtuple("KeyEvent", ["key", "pressed"])


class QuitEvent:
    def __repr__(self):
        return "QUIT"


QUIT = QuitEvent()


class FramebufferSink:
    """Receives the framebuffer once per draw instruction."""

    def present(self, framebuffer):
        pass


class AudioSink:
    def tone_on(self):
        pass

    def tone_off(self):
        pass


class InputSource:
    """Hands over key transitions (KeyEvent) and QUIT, in arrival order."""

    def poll(self):
        return ()


class QueuedInput(InputSource):
    """Input source fed by someone else's event callbacks (a window, a test)."""

    def __init__(self):
        self.pending = []

    def press(self, key):
        self.pending.append(KeyEvent(key, True))

    def release(self, key):
        self.pending.append(KeyEvent(key, False))

    def quit(self):
        self.pending.append(QUIT)

    def poll(self):
        events, self.pending = self.pending, []
        return events


class Driver:

    def __init__(self, interpreter, input_source=None, stop_at_program_end=True):
        self.interpreter = interpreter
        self.input = input_source
        self.stop_at_program_end = stop_at_program_end
        self.running = True

    def stop(self):
        self.running = False

    @property
    def past_program_end(self):
        program = self.interpreter.program
        if program is None:
            return False
        return self.interpreter.machine.pc > program.end

    def tick(self, dt):
        """One driver tick. Chip8Error propagates out and ends the run."""
        vm = self.interpreter
        if not vm.waiting_for_key:
            vm.step()
        vm.machine.timers.advance(dt)
        self.pump_input()

    def pump_input(self):
        if self.input is None:
            return
        vm = self.interpreter
        for event in self.input.poll():
            if event is QUIT:
                logger.info("Quit event detected")
                self.stop()
            elif event.pressed:
                vm.key_down(event.key)
            else:
                vm.key_up(event.key)

    def run(self, max_ticks=None, cpu_hz=None, clock=time.perf_counter, sleep=time.sleep):
        """Tick until quit, program end, or max_ticks. Returns the number of ticks run.

        With cpu_hz set each tick is padded out to 1/cpu_hz seconds.
        """
        frame = 1.0 / cpu_hz if cpu_hz else 0.0
        ticks = 0
        last = clock()
        while self.running:
            if self.stop_at_program_end and self.past_program_end:
                logger.info("PC 0x%03X ran past end of program", self.interpreter.machine.pc)
                break
            if max_ticks is not None and ticks >= max_ticks:
                break
            now = clock()
            self.tick(now - last)
            last = now
            ticks += 1
            if frame:
                spent = clock() - now
                if spent < frame:
                    sleep(frame - spent)
        return ticks
