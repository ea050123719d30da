import struct

import pytest

from gbatools.aif2pcm import (
    AifData,
    aif2pcm,
    aif_to_pcm,
    main,
    new_file_extension,
    pcm2aif,
    pcm_to_aif,
    read_aif,
)
from gbatools.delta import delta_compress
from gbatools.extended import write_extended

SAMPLES = bytes([0, 10, 20, 30, 40, 50, 60, 70, 80, 90])


def make_pcm(flags, rate, loop_offset, samples, count=None):
    if count is None:
        count = len(samples)
    return struct.pack("<IIII", flags, rate * 1024, loop_offset, count - 1) + samples


def make_aif(channels=1, sample_size=8, form_type=b"AIFF", samples=b"\x01\x02\x03"):
    comm = b"COMM" + struct.pack(">IhIh", 18, channels, len(samples), sample_size)
    comm += write_extended(8000.0)
    ssnd = b"SSND" + struct.pack(">III", len(samples) + 8, 0, 0) + samples
    body = form_type + comm + ssnd
    return b"FORM" + struct.pack(">I", len(body)) + body


def test_round_trip_with_loop():
    pcm = make_pcm(0x40000000, 8000, 2, SAMPLES)
    assert aif_to_pcm(pcm_to_aif(pcm), False) == pcm


def test_round_trip_without_loop():
    pcm = make_pcm(0, 11025, 0, SAMPLES)
    assert aif_to_pcm(pcm_to_aif(pcm)) == pcm


def test_round_trip_compressed():
    samples = bytes([5] * 10)
    pcm = make_pcm(0x40000001, 8000, 0, delta_compress(samples), count=10)
    aif = pcm_to_aif(pcm)
    assert read_aif(aif).samples == samples
    assert aif_to_pcm(aif, True) == pcm


def test_aif_layout():
    aif = pcm_to_aif(make_pcm(0, 8000, 0, SAMPLES))
    assert aif[:4] == b"FORM"
    assert aif[8:12] == b"AIFF"
    assert int.from_bytes(aif[4:8], "big") == len(aif) - 8
    assert aif[12:22] == b"COMM\x00\x00\x00\x12\x00\x01"
    assert aif.endswith(SAMPLES)
    assert b"MARK" not in aif


def test_read_aif_fields():
    pcm = make_pcm(0x40000000, 8000, 3, SAMPLES)
    data = read_aif(pcm_to_aif(pcm, 72))
    assert isinstance(data, AifData)
    assert data.midi_note == 72
    assert data.has_loop is True
    assert data.loop_offset == 3
    assert data.num_samples == len(SAMPLES)
    assert data.sample_rate == 8000.0
    assert data.real_num_samples == len(SAMPLES)


def test_read_aif_minimal_file():
    data = read_aif(make_aif())
    assert data.samples == b"\x01\x02\x03"
    assert data.num_samples == 3
    assert data.has_loop is False


def test_read_aif_bad_header():
    bad = b"RIFF" + make_aif()[4:]
    with pytest.raises(ValueError, match="invalid header"):
        read_aif(bad)


def test_read_aif_size_mismatch():
    with pytest.raises(ValueError, match="doesn't match"):
        read_aif(make_aif() + b"\x00")


def test_read_aif_wrong_form_type():
    with pytest.raises(ValueError, match="must be AIFF"):
        read_aif(make_aif(form_type=b"AIFC"))


def test_read_aif_rejects_stereo():
    with pytest.raises(ValueError, match="numChannels"):
        read_aif(make_aif(channels=2))


def test_read_aif_rejects_16_bit():
    with pytest.raises(ValueError, match="sampleSize"):
        read_aif(make_aif(sample_size=16))


def test_pcm_to_aif_short_header():
    with pytest.raises(ValueError):
        pcm_to_aif(b"\x00" * 8)


def test_pcm_to_aif_loop_beyond_data():
    with pytest.raises(ValueError, match="Loop offset"):
        pcm_to_aif(make_pcm(0x40000000, 8000, 50, SAMPLES))


@pytest.mark.parametrize(
    "filename, ext, expected",
    [
        ("sound/a.aif", "bin", "sound/a.bin"),
        ("noext", "aif", "noext.aif"),
        (".hidden", "bin", ".hidden.bin"),
    ],
)
def test_new_file_extension(filename, ext, expected):
    assert new_file_extension(filename, ext) == expected


def test_file_conversions(tmp_path):
    pcm = make_pcm(0x40000000, 8000, 2, SAMPLES)
    bin_path = tmp_path / "s.bin"
    aif_path = tmp_path / "s.aif"
    back_path = tmp_path / "back.bin"
    bin_path.write_bytes(pcm)
    pcm2aif(bin_path, aif_path)
    aif2pcm(aif_path, back_path)
    assert back_path.read_bytes() == pcm
    assert read_aif(aif_path.read_bytes()).midi_note == 60


def test_main_bin_to_aif_default_output(tmp_path):
    bin_path = tmp_path / "s.bin"
    bin_path.write_bytes(make_pcm(0, 8000, 0, SAMPLES))
    assert main([str(bin_path)]) == 0
    assert (tmp_path / "s.aif").read_bytes()[:4] == b"FORM"


def test_main_aif_to_bin_compressed(tmp_path):
    aif_path = tmp_path / "s.aif"
    out_path = tmp_path / "out.bin"
    aif_path.write_bytes(make_aif(samples=bytes([7] * 6)))
    assert main([str(aif_path), str(out_path), "--compress"]) == 0
    flags = struct.unpack_from("<I", out_path.read_bytes())[0]
    assert flags & 1 == 1


def test_main_errors(tmp_path, capsys):
    assert main([]) == 1
    assert main([str(tmp_path / "x.txt")]) == 1
    assert "must be .aif or .bin" in capsys.readouterr().err
    assert main([str(tmp_path / "missing.bin")]) == 1