from chip8.timers import CountdownTimer, SoundTimer, Timers

PERIOD = 0.0167


class TestCountdownTimer:

    def test_one_period_in_pieces_decrements_once(self):
        timer = CountdownTimer()
        timer.set(3)
        for dt in (0.005, 0.005, 0.0067):
            timer.advance(dt)
        assert timer.value == 2

    def test_sub_microsecond_deltas_add_up(self):
        timer = CountdownTimer()
        timer.set(3)
        # 41750 x 0.4us is one 16700us period
        for _ in range(41750):
            timer.advance(0.0000004)
        assert timer.value == 2

    def test_many_tiny_deltas_over_several_periods(self):
        timer = CountdownTimer()
        timer.set(10)
        for _ in range(3 * 167):
            timer.advance(0.0001)
        assert timer.value == 7

    def test_short_of_a_period_does_nothing(self):
        timer = CountdownTimer()
        timer.set(3)
        timer.advance(0.0166)
        assert timer.value == 3
        timer.advance(0.0001)
        assert timer.value == 2

    def test_stops_at_zero(self):
        timer = CountdownTimer()
        timer.set(2)
        timer.advance(PERIOD * 10)
        assert timer.value == 0
        timer.advance(PERIOD)
        assert timer.value == 0

    def test_long_delta_counts_every_period(self):
        timer = CountdownTimer()
        timer.set(10)
        assert timer.advance(PERIOD * 3) == 3
        assert timer.value == 7

    def test_write_resets_accumulator(self):
        timer = CountdownTimer()
        timer.set(5)
        timer.advance(0.015)
        timer.set(5)
        timer.advance(0.015)
        assert timer.value == 5

    def test_idle_timer_does_not_bank_time(self):
        timer = CountdownTimer()
        timer.advance(1.0)
        timer.set(4)
        timer.advance(0.001)
        assert timer.value == 4

    def test_value_is_8_bit(self):
        timer = CountdownTimer()
        timer.set(0x1FF)
        assert timer.value == 0xFF


class TestSoundTimer:

    def test_tone_on_then_single_tone_off(self, audio):
        timer = SoundTimer(audio)
        timer.set(2)
        assert audio.events == ["on"]
        timer.advance(PERIOD)
        assert audio.events == ["on"]
        timer.advance(PERIOD)
        assert audio.events == ["on", "off"]
        for _ in range(5):
            timer.advance(PERIOD)
        assert audio.events == ["on", "off"]

    def test_writing_zero_does_not_start_tone(self, audio):
        timer = SoundTimer(audio)
        timer.set(0)
        assert audio.events == []

    def test_writing_zero_silences_running_tone(self, audio):
        timer = SoundTimer(audio)
        timer.set(9)
        timer.set(0)
        assert audio.events == ["on", "off"]

    def test_without_audio_sink(self):
        timer = SoundTimer()
        timer.set(1)
        timer.advance(PERIOD)
        assert timer.value == 0


def test_timers_advance_together(audio):
    timers = Timers(audio)
    timers.delay.set(2)
    timers.sound.set(1)
    timers.advance(PERIOD)
    assert timers.delay.value == 1
    assert timers.sound.value == 0
    assert audio.events == ["on", "off"]
