import logging

import pytest

from accounting.delta import count_delta, duration_delta
from accounting.snapshot import TimeVal


def _errors(caplog):
    return [r for r in caplog.records if r.levelno == logging.ERROR]


@pytest.mark.parametrize(
    "begin, end, expected",
    [
        (TimeVal(1000, 0), TimeVal(1002, 250000), 2250000),
        (TimeVal(0, 500000), TimeVal(0, 800000), 300000),
        (TimeVal(5, 999999), TimeVal(6, 0), 1),
        (TimeVal(7, 123456), TimeVal(7, 123456), 0),
    ],
)
def test_duration_delta_valid_pairs(begin, end, expected, caplog):
    """Test: microsecond difference, no anomaly report."""
    with caplog.at_level(logging.DEBUG, logger="accounting.delta"):
        assert duration_delta(begin, end) == expected
    assert _errors(caplog) == []


def test_duration_delta_same_value_is_zero():
    sample = TimeVal(1234, 567)
    assert duration_delta(sample, sample) == 0


@pytest.mark.parametrize(
    "begin, end",
    [
        (TimeVal(10, 0), TimeVal(9, 999999)),
        (TimeVal(10, 500), TimeVal(10, 499)),
    ],
)
def test_duration_delta_regression_is_clamped(begin, end, caplog):
    """Test: end before begin returns 0 with exactly one report."""
    assert duration_delta(begin, end, "ACC_time") == 0

    errors = _errors(caplog)
    assert len(errors) == 1
    assert "Timetraveling [ACC_time]" in errors[0].getMessage()
    assert str(begin) in errors[0].getMessage()
    assert str(end) in errors[0].getMessage()


def test_duration_delta_compares_seconds_first(caplog):
    """Larger micros cannot outweigh a smaller seconds field."""
    assert duration_delta(TimeVal(1, 999999), TimeVal(2, 0)) == 1
    assert _errors(caplog) == []


@pytest.mark.parametrize("begin, end, expected", [(10, 12, 2), (5, 9, 4), (3, 3, 0), (0, 0, 0)])
def test_count_delta_valid_pairs(begin, end, expected, caplog):
    assert count_delta(begin, end) == expected
    assert _errors(caplog) == []


def test_count_delta_regression_is_clamped(caplog):
    """Test: block counter going down publishes 0 with one report."""
    assert count_delta(20, 15, "ACC_inblock") == 0

    errors = _errors(caplog)
    assert len(errors) == 1
    message = errors[0].getMessage()
    assert "Negative blockcount [ACC_inblock]" in message
    assert "begin(20 blocks)" in message
    assert "end(15 blocks)" in message


def test_label_does_not_change_result():
    assert duration_delta(TimeVal(1, 0), TimeVal(2, 0), "x") == duration_delta(TimeVal(1, 0), TimeVal(2, 0))
    assert count_delta(1, 4, "y") == count_delta(1, 4)
