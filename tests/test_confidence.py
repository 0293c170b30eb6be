import pytest

from utils.confidence import to_percent


def test_rounds_half_up_not_truncates():
    assert to_percent(0.947) == 95
    assert to_percent(0.945) == 95
    assert to_percent(0.944) == 94


def test_bounds_and_clamping():
    assert to_percent(0) == 0
    assert to_percent(1) == 100
    assert to_percent(1.2) == 100
    assert to_percent(-0.1) == 0


def test_accepts_numeric_strings():
    assert to_percent("0.5") == 50


@pytest.mark.parametrize("bad", [None, "high", float("nan"), True])
def test_rejects_non_numeric(bad):
    with pytest.raises(ValueError):
        to_percent(bad)
