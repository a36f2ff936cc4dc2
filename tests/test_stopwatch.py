"""Tests for the stopwatch variants."""
from server_timing.stopwatch import NOP_STOPWATCH, ActiveStopwatch


class FakeClock:
    def __init__(self, *readings_ns):
        self.readings = list(readings_ns)

    def __call__(self):
        return self.readings.pop(0)


class TestActiveStopwatch:
    def test_elapsed_milliseconds(self):
        """Nanoseconds are converted to milliseconds."""
        submitted = []
        stopwatch = ActiveStopwatch("addText", submitted.append, clock=FakeClock(0, 250_420_000))
        stopwatch.complete()
        assert [entry.header_value() for entry in submitted] == ["addText;dur=250.42"]
        assert submitted[0].duration == 250.42

    def test_not_reset_between_completions(self):
        """Each completion measures from the original start."""
        submitted = []
        clock = FakeClock(1_000_000, 3_000_000, 8_000_000)
        stopwatch = ActiveStopwatch("load", submitted.append, clock=clock)
        stopwatch.complete()
        stopwatch.complete()
        assert [entry.duration for entry in submitted] == [2.0, 7.0]

    def test_context_manager(self):
        submitted = []
        with ActiveStopwatch("block", submitted.append, clock=FakeClock(0, 500_000)) as stopwatch:
            assert stopwatch.name == "block"
        assert submitted[0].header_value() == "block;dur=0.5"


class TestInertStopwatch:
    def test_complete_is_noop(self):
        NOP_STOPWATCH.complete()
        NOP_STOPWATCH.complete()

    def test_context_manager_is_noop(self):
        with NOP_STOPWATCH:
            pass
