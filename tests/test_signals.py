from __future__ import annotations

import datetime as dt
import math

import numpy as np
import pytest

from ziq import signals
from ziq.errors import ConstructionError
from ziq.timebase import MILLISECOND, SECOND, seconds


def test_constant_ignores_time():
    const = signals.Constant(1.0)
    offsets = np.linspace(0, 5 * SECOND, 10).astype(np.int64)

    assert all(const(int(t)) == 1.0 for t in offsets)
    np.testing.assert_array_equal(const.sample(offsets), np.ones(10))


def test_sine_oscillator_quarter_periods():
    osc = signals.SineOscillator(signals.Constant(1.0))
    expected = [0.0, 1.0, 0.0, -1.0, 0.0]

    for t, value in zip([0.0, 0.25, 0.5, 0.75, 1.0], expected):
        assert osc(seconds(t)) == pytest.approx(value, abs=1e-9)


def test_sine_oscillator_follows_frequency_signal():
    # 2 Hz for the first half second, then 4 Hz
    freq = signals.Limit(signals.Constant(2.0), signals.Constant(4.0), seconds(0.5))
    osc = signals.SineOscillator(freq)

    assert osc(seconds(0.125)) == pytest.approx(math.sin(2 * math.pi * 0.125 * 2.0))
    assert osc(seconds(0.5625)) == pytest.approx(math.sin(2 * math.pi * 0.5625 * 4.0))


def test_amplitude_multiplies():
    amp = signals.Amplitude(signals.Lerp(0.0, 1.0, SECOND), signals.Constant(0.5))

    assert amp(seconds(0.5)) == pytest.approx(0.25)


@pytest.mark.parametrize("k", [0, 1, 2, 7, 1000])
def test_loop_is_periodic(k):
    period = seconds(0.3)
    source = signals.SineOscillator(signals.Lerp(100.0, 900.0, SECOND))
    looped = signals.Loop(source, period)
    t = seconds(0.1234567)

    assert looped(t + k * period) == looped(t)
    assert looped(t) == source(t)


def test_loop_wraps_on_boundary():
    looped = signals.Loop(signals.Lerp(0.0, 1.0, SECOND), 500 * MILLISECOND)

    assert looped(500 * MILLISECOND) == 0.0
    assert looped(499 * MILLISECOND) == pytest.approx(0.499)
    # floor modulo keeps negative offsets inside the period
    assert looped(-100 * MILLISECOND) == pytest.approx(0.4)


@pytest.mark.parametrize("period", [0, -SECOND])
def test_loop_rejects_non_positive_period(period):
    with pytest.raises(ConstructionError):
        signals.Loop(signals.Constant(1.0), period)


def test_limit_switches_at_threshold_inclusive():
    before = signals.Constant(1.0)
    after = signals.Constant(-1.0)
    limit = signals.Limit(before, after, SECOND)

    assert limit(SECOND) == -1.0
    assert limit(SECOND - 1) == 1.0
    assert limit(0) == 1.0
    assert limit(10 * SECOND) == -1.0


def test_limit_evaluates_operands_at_same_time():
    ramp = signals.Lerp(0.0, 1.0, SECOND)
    limit = signals.Limit(signals.Constant(0.0), ramp, seconds(0.5))

    assert limit(seconds(0.75)) == pytest.approx(0.75)


def test_combine_is_arithmetic_mean():
    a = signals.SineOscillator(signals.Constant(3.0))
    b = signals.Lerp(-2.0, 5.0, seconds(1.5))
    mix = signals.Combine(a, b)

    for t in (0, seconds(0.1), seconds(0.37), seconds(2.2)):
        assert mix(t) == (a(t) + b(t)) / 2


def test_combine_single_operand_is_identity():
    ramp = signals.Lerp(0.0, 4.0, SECOND)
    assert signals.Combine(ramp)(seconds(0.3)) == ramp(seconds(0.3))


def test_combine_requires_operands():
    with pytest.raises(ConstructionError):
        signals.Combine()


def test_combine_rejects_non_signal():
    with pytest.raises(TypeError):
        signals.Combine(signals.Constant(1.0), 2.0)


def test_lerp_extrapolates_past_duration():
    ramp = signals.Lerp(440.0, 880.0, SECOND)

    assert ramp(0) == 440.0
    assert ramp(SECOND) == 880.0
    assert ramp(seconds(0.5)) == pytest.approx(660.0)
    assert ramp(2 * SECOND) == pytest.approx(1320.0)


@pytest.mark.parametrize("duration", [0, -1])
def test_lerp_rejects_non_positive_duration(duration):
    with pytest.raises(ConstructionError):
        signals.Lerp(0.0, 1.0, duration)


def test_shift_reads_ahead_and_behind():
    ramp = signals.Lerp(0.0, 1.0, SECOND)

    assert signals.Shift(ramp, seconds(0.25))(seconds(0.5)) == pytest.approx(0.75)
    assert signals.Shift(ramp, -seconds(0.25))(seconds(0.5)) == pytest.approx(0.25)


def test_speed_scales_time():
    ramp = signals.Lerp(0.0, 1.0, SECOND)

    assert signals.Speed(ramp, 2.0)(seconds(0.25)) == pytest.approx(0.5)
    assert signals.Speed(ramp, 0.5)(seconds(1.0)) == pytest.approx(0.5)
    assert signals.Speed(ramp, -1.0)(seconds(0.5)) == pytest.approx(-0.5)


def test_speed_zero_freezes_source():
    frozen = signals.Speed(signals.Lerp(3.0, 5.0, SECOND), 0)

    assert {frozen(t) for t in (0, seconds(0.4), seconds(9.0))} == {3.0}


def test_speed_rejects_non_finite_factor():
    with pytest.raises(ConstructionError):
        signals.Speed(signals.Constant(1.0), float("nan"))


def test_durations_accept_timedelta_and_reject_floats():
    looped = signals.Loop(signals.Lerp(0.0, 1.0, SECOND), dt.timedelta(milliseconds=250))
    assert looped.period == 250 * MILLISECOND

    with pytest.raises(TypeError):
        signals.Loop(signals.Constant(1.0), 0.25)
    with pytest.raises(TypeError):
        signals.Constant(1.0)(0.5)


def test_signals_are_immutable():
    looped = signals.Loop(signals.Constant(1.0), SECOND)

    with pytest.raises(AttributeError):
        looped.period = 2 * SECOND


def test_evaluation_is_repeatable_and_matches_sample():
    graph = signals.Combine(
        signals.Amplitude(signals.SineOscillator(signals.Lerp(220.0, 440.0, SECOND)), signals.Constant(0.5)),
        signals.Loop(signals.Lerp(-1.0, 1.0, seconds(0.1)), seconds(0.1)),
    )
    offsets = np.arange(0, SECOND, seconds(0.01), dtype=np.int64)

    first = graph.sample(offsets)
    second = graph.sample(offsets)

    np.testing.assert_array_equal(first, second)
    np.testing.assert_allclose(first, [graph(int(t)) for t in offsets], rtol=1e-12, atol=1e-12)


def test_sample_rejects_float_times():
    with pytest.raises(TypeError):
        signals.Constant(1.0).sample(np.array([0.5]))


def test_describe_mirrors_composition():
    graph = signals.Loop(
        signals.Combine(signals.Constant(2.0), signals.SineOscillator(signals.Constant(440.0))),
        SECOND,
    )

    assert graph.describe() == {
        "type": "Loop",
        "period": SECOND,
        "inputs": [
            {
                "type": "Combine",
                "inputs": [
                    {"type": "Constant", "value": 2.0},
                    {"type": "SineOscillator", "inputs": [{"type": "Constant", "value": 440.0}]},
                ],
            }
        ],
    }


def test_structural_equality():
    assert signals.Loop(signals.Constant(1.0), SECOND) == signals.Loop(signals.Constant(1.0), SECOND)
    assert signals.Constant(1.0) != signals.Constant(2.0)
