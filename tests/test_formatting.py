from __future__ import annotations

from streamcollect.core.formatting import FIXED_FIELD_COUNT, OutputMode, format_sample
from streamcollect.core.models import SampleRecord


def _sample(sense_data=(1, 2, 3)) -> SampleRecord:
    return SampleRecord(
        tx_id=10,
        rx_id=20,
        rx_timestamp=1000,
        rss=-42,
        sense_data=tuple(sense_data),
    )


def test_decimal_line() -> None:
    line = format_sample(_sample(), OutputMode.DECIMAL)
    assert line == "20\t1000\t10\t0\t-42\t0x00\tExtra:3\t1\t2\t3\n"


def test_hex_line_uses_clock_for_time_field() -> None:
    line = format_sample(_sample(), OutputMode.HEX, clock=lambda: 1700000000123)
    assert line == "14\t18bcfe5687b\ta\t0\t-42\t0x00\tExtra:3\t1\t2\t3\n"


def test_hex_line_can_keep_sample_timestamp() -> None:
    line = format_sample(
        _sample(),
        OutputMode.HEX,
        clock=lambda: 1700000000123,
        hex_uses_clock=False,
    )
    assert line.split("\t")[:3] == ["14", "1000", "a"]


def test_decimal_mode_never_reads_clock() -> None:
    def clock() -> int:
        raise AssertionError("clock must not be read in decimal mode")

    assert format_sample(_sample(), OutputMode.DECIMAL, clock=clock).startswith("20\t1000\t")


def test_empty_sense_data_ends_after_extra_count() -> None:
    line = format_sample(_sample(sense_data=()))
    assert line.endswith("\tExtra:0\n")
    assert len(line.rstrip("\n").split("\t")) == FIXED_FIELD_COUNT


def test_field_count_tracks_sense_data_length() -> None:
    for count in (0, 1, 5, 40):
        sample = _sample(sense_data=range(count))
        for mode in OutputMode:
            fields = format_sample(sample, mode, clock=lambda: 1).rstrip("\n").split("\t")
            assert len(fields) == FIXED_FIELD_COUNT + count


def test_formatting_is_idempotent() -> None:
    sample = _sample()
    for mode in OutputMode:
        first = format_sample(sample, mode, clock=lambda: 42)
        second = format_sample(sample, mode, clock=lambda: 42)
        assert first == second


def test_large_identifiers_and_fractional_rss() -> None:
    sample = SampleRecord(
        tx_id=2**128 - 1,
        rx_id=2**64,
        rx_timestamp=5,
        rss=-71.5,
        sense_data=(255, 0),
    )
    assert format_sample(sample, OutputMode.HEX, clock=lambda: 9) == (
        "10000000000000000\t9\t" + "f" * 32 + "\t0\t-71.5\t0x00\tExtra:2\t255\t0\n"
    )
    assert format_sample(sample).startswith(f"{2**64}\t5\t{2**128 - 1}\t0\t-71.5\t")


def test_hex_clock_is_printed_in_hex() -> None:
    line = format_sample(_sample(), OutputMode.HEX, clock=lambda: 255)
    assert line.split("\t")[1] == "ff"


def test_float_rss_uses_six_significant_digits() -> None:
    for rss, expected in [(-71.123456, "-71.1235"), (1e7, "1e+07"), (-42.0, "-42"), (-71.5, "-71.5")]:
        sample = SampleRecord(tx_id=1, rx_id=2, rx_timestamp=3, rss=rss)
        assert format_sample(sample).split("\t")[4] == expected
