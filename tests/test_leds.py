import pytest

from motorboard.leds import HIGH, LOW, LedBank


def _bank():
    writes = []
    return LedBank(write=lambda i, level: writes.append((i, level))), writes


def test_first_display_writes_all():
    bank, writes = _bank()
    assert bank.display([0, 1, 0]) is True
    assert writes == [(0, HIGH), (1, LOW), (2, HIGH)]


def test_unchanged_pattern_not_rewritten():
    bank, writes = _bank()
    bank.display([1, 0, 0])
    writes.clear()
    assert bank.display([1, 0, 0]) is False
    assert writes == []


def test_changed_pattern_rewritten():
    bank, writes = _bank()
    bank.display([1, 0, 0])
    assert bank.display([0, 0, 1]) is True
    assert bank.states == [HIGH, HIGH, LOW]


def test_wrong_length():
    bank, _ = _bank()
    with pytest.raises(ValueError):
        bank.display([1, 1])