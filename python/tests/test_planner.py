import random
from fractions import Fraction

import pytest

from splitter.errors import InvalidArgumentError, InvalidPlanError, PartTooLargeError
from splitter.planner import (
    DEFAULT_MAX_BYTES,
    DURATION_LIMIT_SEC,
    fits_limits,
    plan_chunks,
    plan_equal_parts,
    usable_bytes,
)
from splitter.units import bytes_for_duration, duration_for_bytes


def _starts(plan):
    return [window.start_sec for window in plan]


def _assert_covers(plan, total):
    windows = list(plan)
    assert windows
    assert windows[0].start_sec == 0
    assert windows[-1].end_sec == total
    for left, right in zip(windows, windows[1:]):
        assert left.end_sec == right.start_sec
    for idx, window in enumerate(windows):
        assert window.idx == idx
        assert window.start_sec < window.end_sec
    assert sum(window.duration_sec for window in windows) == total


def test_chunk_plan_matches_reference_boundaries():
    plan = plan_chunks(3600, 228_000, 25_000_000, DURATION_LIMIT_SEC)

    assert _starts(plan) == [0, 864, 1728, 2592, 3456]
    assert [window.duration_sec for window in plan] == [864, 864, 864, 864, 144]
    assert plan[-1].end_sec == 3600
    _assert_covers(plan, 3600)


def test_chunk_plan_accepts_float_duration():
    plan = plan_chunks(3600.0, 228_000, 25_000_000, 1400.0)
    assert _starts(plan) == [0, 864, 1728, 2592, 3456]
    assert plan[-1].end_sec == 3600


def test_chunk_plan_is_duration_bound_for_low_bitrate():
    plan = plan_chunks(4000, 128_000, 25_000_000, DURATION_LIMIT_SEC)

    assert [window.duration_sec for window in plan] == [1400, 1400, 1200]
    _assert_covers(plan, 4000)


def test_chunk_plan_keeps_fractional_remainder_in_last_window():
    total = Fraction("3600.024")
    plan = plan_chunks(total, 228_000, 25_000_000, DURATION_LIMIT_SEC)

    assert len(plan) == 5
    assert plan[-1].start_sec == 3456
    assert plan[-1].end_sec == total
    assert plan[-1].duration_sec == Fraction("144.024")
    _assert_covers(plan, total)


def test_chunk_plan_exact_multiple_has_no_trailing_window():
    plan = plan_chunks(1728, 228_000, 25_000_000, DURATION_LIMIT_SEC)

    assert _starts(plan) == [0, 864]
    assert plan[-1].end_sec == 1728


def test_chunk_plan_returns_single_window_when_source_fits():
    plan = plan_chunks(600, 128_000, 25_000_000, DURATION_LIMIT_SEC)

    assert len(plan) == 1
    assert plan[0].start_sec == 0
    assert plan[0].end_sec == 600
    assert plan.is_whole_source


def test_chunk_plan_single_window_uses_full_byte_budget():
    # 1560s at 128 kbit/s is 24.96 MB: inside the limit but above the planning headroom.
    plan = plan_chunks(1560, 128_000, 25_000_000, 2000)
    assert len(plan) == 1


def test_chunk_plan_splits_when_only_duration_is_exceeded():
    plan = plan_chunks(1401, 8_000, 25_000_000, DURATION_LIMIT_SEC)

    assert [window.duration_sec for window in plan] == [1400, 1]
    assert not plan.is_whole_source


def test_chunk_plan_rejects_limits_that_cannot_hold_a_second():
    with pytest.raises(InvalidPlanError):
        plan_chunks(100, 1_000_000, 100_000, DURATION_LIMIT_SEC)
    with pytest.raises(InvalidPlanError):
        plan_chunks(100, 128_000, 25_000_000, Fraction(1, 2))


@pytest.mark.parametrize(
    ("duration", "bitrate", "max_bytes", "max_duration"),
    [
        (0, 228_000, 25_000_000, 1400),
        (-10, 228_000, 25_000_000, 1400),
        (10, 0, 25_000_000, 1400),
        (10, 228_000, 0, 1400),
        (10, 228_000, 25_000_000, 0),
    ],
)
def test_chunk_plan_rejects_invalid_inputs(duration, bitrate, max_bytes, max_duration):
    with pytest.raises(InvalidArgumentError):
        plan_chunks(duration, bitrate, max_bytes, max_duration)


def test_chunk_plan_properties_over_random_inputs():
    rng = random.Random(20240611)
    checked = 0
    for _ in range(400):
        total = Fraction(rng.randint(1, 20_000_000), 1000)
        bitrate = rng.randint(8_000, 1_536_000)
        max_bytes = rng.randint(50_000, 50_000_000)
        max_duration = rng.randint(1, 3000)

        if not fits_limits(total, bitrate, max_bytes, max_duration) and duration_for_bytes(usable_bytes(max_bytes), bitrate) == 0:
            with pytest.raises(InvalidPlanError):
                plan_chunks(total, bitrate, max_bytes, max_duration)
            continue

        plan = plan_chunks(total, bitrate, max_bytes, max_duration)
        _assert_covers(plan, total)
        for window in plan:
            assert bytes_for_duration(window.duration_sec, bitrate) <= max_bytes
            assert window.duration_sec <= max_duration
        if fits_limits(total, bitrate, max_bytes, max_duration):
            assert len(plan) == 1
        else:
            lengths = {window.duration_sec for window in list(plan)[:-1]}
            assert len(lengths) <= 1
        assert plan == plan_chunks(total, bitrate, max_bytes, max_duration)
        checked += 1

    assert checked > 100


def test_equal_parts_divides_with_floor_and_remainder():
    plan = plan_equal_parts(100, 3, 128_000)

    assert _starts(plan) == [0, 33, 66]
    assert [window.duration_sec for window in plan] == [33, 33, 34]
    _assert_covers(plan, 100)


def test_equal_parts_keeps_fractional_tail():
    total = Fraction("1200.5")
    plan = plan_equal_parts(total, 4, 128_000)

    assert [window.duration_sec for window in plan] == [300, 300, 300, Fraction("300.5")]
    _assert_covers(plan, total)


def test_equal_parts_single_part_spans_whole_chunk():
    plan = plan_equal_parts(Fraction("59.9"), 1, 128_000)

    assert len(plan) == 1
    assert plan.is_whole_source


@pytest.mark.parametrize("parts", [0, -1, 2.5, True])
def test_equal_parts_rejects_bad_part_count(parts):
    with pytest.raises(InvalidArgumentError):
        plan_equal_parts(100, parts, 128_000)


def test_equal_parts_rejects_more_parts_than_seconds():
    with pytest.raises(InvalidPlanError):
        plan_equal_parts(Fraction(5, 2), 3, 128_000)


def test_equal_parts_rejects_parts_over_the_duration_limit():
    with pytest.raises(PartTooLargeError):
        plan_equal_parts(3000, 2, 8_000)


def test_equal_parts_rejects_parts_over_the_byte_limit():
    with pytest.raises(PartTooLargeError):
        plan_equal_parts(1200, 2, 512_000, max_bytes=DEFAULT_MAX_BYTES)


def test_equal_parts_properties():
    rng = random.Random(7)
    for _ in range(200):
        total = Fraction(rng.randint(1_000, 1_400_000), 1000)
        parts = rng.randint(1, 40)
        if total < parts:
            continue
        plan = plan_equal_parts(total, parts, 64_000)

        assert len(plan) == parts
        _assert_covers(plan, total)
        head = [window.duration_sec for window in list(plan)[:-1]]
        assert all(length == int(total // parts) for length in head)


def test_chunk_plan_whole_file_check_can_use_a_looser_duration():
    plan = plan_chunks(1350, 64_000, 25_000_000, 1300, fit_duration_sec=1400)

    assert len(plan) == 1
    assert plan.is_whole_source


def test_chunk_plan_cuts_with_planning_window_when_source_does_not_fit():
    plan = plan_chunks(1401, 64_000, 25_000_000, 1300, fit_duration_sec=1400)

    assert [window.duration_sec for window in plan] == [1300, 101]


def test_chunk_plan_rejects_non_positive_fit_duration():
    with pytest.raises(InvalidArgumentError):
        plan_chunks(100, 64_000, 25_000_000, 1300, fit_duration_sec=0)
