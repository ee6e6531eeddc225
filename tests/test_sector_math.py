import pytest

from imgbuilder.packing.layout import sector_pad, sectors_for


@pytest.mark.parametrize(
    "size,expected",
    [(0, 0), (1, 1), (2047, 1), (2048, 1), (2049, 2), (4096, 2), (4097, 3)],
)
def test_sectors_for(size, expected):
    assert sectors_for(size) == expected


def test_sectors_for_no_overflow_near_u32():
    size = 2**32 - 2048
    assert sectors_for(size) == 2**21 - 1
    assert sectors_for(2**32) == 2**21


def test_sector_pad():
    assert sector_pad(0) == 0
    assert sector_pad(1) == 2047
    assert sector_pad(2048) == 0
    assert sector_pad(72) == 1976


def test_negative_size_rejected():
    with pytest.raises(ValueError):
        sectors_for(-1)
