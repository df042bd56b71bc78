"""Tests for the .IDX index decoder."""

import io

import pytest
from conftest import (
    CLIP,
    ECC_23_98P,
    ECC_25P,
    ECC_29_97P,
    ECC_50I,
    ECC_59_94I,
    ECC_INVALID,
    SIGNAL_SD,
    make_header,
    make_record,
)

from hdvsync.decoder import (
    clip_date_time,
    decode_index,
    decode_technical,
    find_file_record,
    parse_file_record,
    parse_header,
    read_index_record,
    timecode_format,
)
from hdvsync.errors import CorruptIndex, InvalidClipName, RecordNotFound, TruncatedIndex
from hdvsync.models import FrameRate


def _decode(ecc_tb=ECC_29_97P, signal_mode=0x01, **record_kwargs):
    header = parse_header(make_header(ecc_tb=ecc_tb, signal_mode=signal_mode))
    record = parse_file_record(make_record(**record_kwargs))
    return decode_technical(header, record)


class TestHeader:
    """Test header parsing."""

    def test_fields(self):
        header = parse_header(make_header(count=1234, ecc_tb=0x84, signal_mode=0x80))
        assert header.identifier == b"HDVINDEX"
        assert header.valid_flag == 1
        assert header.file_count == 1234
        assert header.is_progressive is True
        assert header.frame_rate_code == 4
        assert header.is_standard_definition is True

    def test_interlaced_code_offset(self):
        header = parse_header(make_header(ecc_tb=0x04))
        assert header.is_progressive is False
        assert header.frame_rate_code == 12

    def test_short_header(self):
        with pytest.raises(TruncatedIndex):
            parse_header(make_header()[:10])

    def test_count_digits_must_be_ascii(self):
        data = make_header()[:12] + b"00\x0012"
        with pytest.raises(CorruptIndex):
            parse_header(data)


class TestFileRecord:
    """Test file-info record parsing and scanning."""

    def test_fields(self):
        record = parse_file_record(make_record(total_frames=0x01020304))
        assert record.type_tag == b"DT"
        assert record.has_date is True
        assert record.total_frames == 0x01020304
        assert record.date_time_suffix == "2007-08-06_165555"

    def test_find_stops_at_first_match(self):
        header = parse_header(make_header(count=3))
        data = make_record(second=1) + make_record(total_frames=7) + make_record(total_frames=9)
        stream = io.BytesIO(data)
        record = find_file_record(stream, header, "2007-08-06_165555")
        assert record is not None
        assert record.total_frames == 7
        assert stream.tell() == 32

    def test_find_exhausted_count(self):
        header = parse_header(make_header(count=2))
        stream = io.BytesIO(make_record(second=1) + make_record(second=2) + make_record())
        assert find_file_record(stream, header, "2007-08-06_165555") is None

    def test_find_short_read(self):
        header = parse_header(make_header(count=50))
        stream = io.BytesIO(make_record(second=1) + make_record(second=2) + make_record(second=3))
        with pytest.raises(TruncatedIndex):
            find_file_record(stream, header, "2007-08-06_165555")


class TestReadIndexRecord:
    """Test reading the matched record from a file."""

    def test_digest_bytes_are_header_then_record(self, tmp_path):
        header = make_header(count=2)
        wanted = make_record(total_frames=42)
        path = tmp_path / "clip.IDX"
        path.write_bytes(header + make_record(second=1) + wanted)

        record = read_index_record(path, CLIP)
        assert record.header_bytes == header
        assert record.record_bytes == wanted
        assert record.digest_bytes == header + wanted

    def test_record_not_found(self, tmp_path):
        path = tmp_path / "clip.IDX"
        path.write_bytes(make_header(count=1) + make_record(second=1))
        with pytest.raises(RecordNotFound):
            read_index_record(path, CLIP)

    def test_truncated_stream(self, tmp_path):
        path = tmp_path / "clip.IDX"
        records = make_record(second=1) + make_record(second=2) + make_record(second=3)
        path.write_bytes(make_header(count=50) + records)
        with pytest.raises(TruncatedIndex):
            read_index_record(path, CLIP)

    def test_match_before_truncation(self, tmp_path):
        path = tmp_path / "clip.IDX"
        path.write_bytes(make_header(count=50) + make_record(second=1) + make_record())
        assert read_index_record(path, CLIP).record.second == 55

    def test_truncated_header(self, tmp_path):
        path = tmp_path / "clip.IDX"
        path.write_bytes(b"HDV")
        with pytest.raises(TruncatedIndex):
            read_index_record(path, CLIP)

    def test_clip_name_checked_before_io(self, tmp_path):
        with pytest.raises(InvalidClipName):
            read_index_record(tmp_path / "missing.IDX", CLIP + "_extra")
        with pytest.raises(InvalidClipName):
            clip_date_time("00_0001")

    def test_clip_date_time(self):
        assert clip_date_time(CLIP) == "2007-08-06_165555"


class TestFrameRate:
    """Test frame-rate code mapping."""

    @pytest.mark.parametrize(
        ("ecc_tb", "scale", "size", "label"),
        [
            (ECC_23_98P, 24000, 1001, "23.98p"),
            (ECC_25P, 25, 1, "25p"),
            (ECC_29_97P, 30000, 1001, "29.97p"),
            (ECC_50I, 25, 1, "50i"),
            (ECC_59_94I, 30000, 1001, "59.94i"),
        ],
    )
    def test_known_codes(self, ecc_tb, scale, size, label):
        tech = _decode(ecc_tb=ecc_tb)
        assert tech.sample_scale == scale
        assert tech.sample_size == size
        assert tech.frame_rate_label == label
        assert tech.duration_scale == f"{size}/{scale}"

    def test_code_zero_suppresses_rate_fields(self):
        tech = _decode(ecc_tb=ECC_INVALID)
        assert tech.frame_rate_code == 0
        assert tech.frame_rate is None
        assert tech.start_timecode is None
        assert tech.timecode_format is None
        assert tech.duration_scale is None

    def test_unlisted_code(self):
        tech = _decode(ecc_tb=0x82)
        assert tech.frame_rate_code == 2
        assert tech.frame_rate is None


class TestTimecode:
    """Test start timecode decoding."""

    def test_drop_frame(self):
        tech = _decode(ecc_tb=ECC_29_97P)
        tc = tech.start_timecode
        assert (tc.hours, tc.minutes, tc.seconds, tc.frames) == (1, 2, 3, 4)
        assert tc.drop_frame is True
        assert tc.formatted == "01;02;03;04"
        assert tech.timecode_format == "2997DropTimecode"

    def test_drop_bit_ignored_for_integral_rate(self):
        tech = _decode(ecc_tb=ECC_25P)
        assert tech.start_timecode.formatted == "01:02:03:04"
        assert tech.timecode_format == "25Timecode"

    def test_drop_bit_ignored_for_23_98(self):
        tech = _decode(ecc_tb=ECC_23_98P)
        assert tech.start_timecode.drop_frame is False
        assert tech.timecode_format == "23976NonDropTimecode"

    def test_non_drop_59_94i(self):
        tech = _decode(ecc_tb=ECC_59_94I, timecode=bytes([0x29, 0x59, 0x59, 0x23]))
        assert tech.start_timecode.formatted == "23:59:59:29"
        assert tech.timecode_format == "2997NonDropTimecode"

    def test_tens_masks(self):
        # Bits outside the tens masks must not leak into the digits
        tech = _decode(ecc_tb=ECC_25P, timecode=bytes([0x92, 0x85, 0xC4, 0xD3]))
        assert tech.start_timecode.formatted == "13:44:05:12"

    def test_invalid_pairing_is_programming_error(self):
        with pytest.raises(AssertionError):
            timecode_format(FrameRate(code=99, sample_scale=30, sample_size=1, label="30p"), False)
        with pytest.raises(AssertionError):
            timecode_format(
                FrameRate(code=99, sample_scale=48000, sample_size=1001, label="x"), True
            )
        with pytest.raises(AssertionError):
            timecode_format(FrameRate(code=99, sample_scale=25, sample_size=2, label="x"), True)


class TestTechnical:
    """Test derived technical metadata."""

    def test_hd_frame_size(self):
        tech = _decode()
        assert tech.resolution == "1440x1080"
        assert tech.frame_unit == "pixels"
        assert tech.pixel_aspect_ratio == "4/3"
        assert tech.is_standard_definition is False

    @pytest.mark.parametrize("signal_mode", [0x00, 0x80])
    def test_sd_has_no_frame_size(self, signal_mode):
        tech = _decode(signal_mode=signal_mode)
        assert tech.is_standard_definition is True
        assert tech.frame_width is None
        assert tech.pixel_aspect_ratio is None

    def test_creation_date_requires_marker(self):
        assert _decode().creation_date == "2007-08-06T16:55:55Z"
        assert _decode(tag=b"\0\0").creation_date is None

    def test_total_frames_and_duration(self):
        tech = _decode(ecc_tb=ECC_25P, total_frames=250)
        assert tech.total_frames == 250
        assert tech.duration_seconds == pytest.approx(10.0)

    def test_decode_index(self, tmp_path):
        path = tmp_path / "clip.IDX"
        path.write_bytes(make_header(signal_mode=SIGNAL_SD) + make_record())
        decoded = decode_index(path, CLIP)
        assert decoded.technical.is_standard_definition is True
        assert decoded.record.record.total_frames == 1800
