"""Conversion between mono 8-bit AIFF files and GBA sample (.bin) files."""

from __future__ import annotations

import math
import struct
import sys
from collections.abc import Sequence
from dataclasses import dataclass

from .delta import delta_compress, delta_decompress
from .extended import EXTENDED_SIZE, read_extended, write_extended
from .util import GfxError, PathType, read_whole_file, write_whole_file

HEADER_SIZE = 0x10
FLAG_LOOP = 0x40000000
FLAG_COMPRESSED = 1
DEFAULT_BASE_NOTE = 60

_USAGE = (
    "Usage: aif2pcm bin_file [aif_file]\n"
    "       aif2pcm aif_file [bin_file] [--compress]"
)


@dataclass
class AifData:
    """The parts of an AIFF file that a GBA sample needs."""

    num_samples: int = 0
    samples: bytes = b""
    midi_note: int = 0
    has_loop: bool = False
    loop_offset: int = 0
    sample_rate: float = 0.0

    @property
    def real_num_samples(self) -> int:
        """Number of bytes actually present in the sound data chunk."""
        return len(self.samples)


class _Reader:
    """Sequential big-endian reader over a byte string."""

    def __init__(self, data: bytes, pos: int = 0) -> None:
        self.data = data
        self.pos = pos

    def take(self, count: int) -> bytes:
        if count < 0 or self.pos + count > len(self.data):
            raise ValueError("Unexpected end of AIFF data.")
        chunk = self.data[self.pos:self.pos + count]
        self.pos += count
        return chunk

    def u8(self) -> int:
        return self.take(1)[0]

    def s16(self) -> int:
        return int.from_bytes(self.take(2), "big", signed=True)

    def u16(self) -> int:
        return int.from_bytes(self.take(2), "big")

    def u32(self) -> int:
        return int.from_bytes(self.take(4), "big")


def _c_string(raw: bytes) -> bytes:
    return raw.split(b"\0", 1)[0]


def _read_comm(reader: _Reader, aif: AifData) -> None:
    num_channels = reader.s16()
    if num_channels != 1:
        raise ValueError(f"numChannels ({num_channels}) in the COMM Chunk must be 1!")
    num_sample_frames = reader.u32()
    sample_size = reader.s16()
    if sample_size != 8:
        raise ValueError(f"sampleSize ({sample_size}) in the COMM Chunk must be 8!")
    aif.sample_rate = read_extended(reader.take(EXTENDED_SIZE))
    if aif.num_samples == 0:
        aif.num_samples = num_sample_frames


def _read_mark(reader: _Reader, aif: AifData) -> None:
    for _ in range(reader.u16()):
        reader.u16()  # marker id
        position = reader.u32()
        name = _c_string(reader.take(reader.u8()))
        if name == b"START":
            aif.loop_offset = position
            aif.has_loop = True
        elif name == b"END":
            if not aif.has_loop:
                aif.loop_offset = position
                aif.has_loop = True
            aif.num_samples = position


def read_aif(data: bytes) -> AifData:
    """Parse a mono 8-bit AIFF file."""
    data = bytes(data)
    if len(data) < 12:
        raise ValueError("Input .aif file is too short.")
    reader = _Reader(data)

    chunk_name = reader.take(4)
    if chunk_name != b"FORM":
        raise ValueError(
            f"Input .aif file has invalid header Chunk '{chunk_name.decode('latin-1')}'!"
        )

    whole_chunk_size = reader.u32()
    expected = len(data) - 8
    if whole_chunk_size != expected:
        raise ValueError(
            f"FORM Chunk ckSize '{whole_chunk_size}' doesn't match actual size '{expected}'!"
        )

    form_type = reader.take(4)
    if form_type != b"AIFF":
        raise ValueError(f"FORM Type is '{form_type.decode('latin-1')}', but it must be AIFF!")

    aif = AifData()
    while reader.pos + 8 < len(data):
        name = reader.take(4)
        chunk_size = reader.u32()
        if reader.pos + chunk_size > len(data):
            raise ValueError(
                f"{name.decode('latin-1')} chunk at 0x{reader.pos:x} "
                "reached end of file before finishing"
            )

        if name == b"COMM":
            _read_comm(reader, aif)
        elif name == b"MARK":
            _read_mark(reader, aif)
        elif name == b"INST":
            aif.midi_note = reader.u8()
            reader.take(19)
        elif name == b"SSND":
            if chunk_size < 8:
                raise ValueError("SSND chunk is too small.")
            reader.take(8)  # offset and blockSize
            aif.samples = reader.take(chunk_size - 8)
        else:
            reader.take(chunk_size)
    return aif


def aif_to_pcm(aif_bytes: bytes, compress: bool = False) -> bytes:
    """Turn AIFF file contents into a GBA sample with a 16-byte header."""
    aif = read_aif(aif_bytes)
    body = delta_compress(aif.samples) if compress else aif.samples

    scaled = aif.sample_rate * 1024
    if not math.isfinite(scaled):
        raise ValueError(f"Sample rate {aif.sample_rate} cannot be stored.")

    flags = 0
    if aif.has_loop:
        flags |= FLAG_LOOP
    if compress:
        flags |= FLAG_COMPRESSED

    header = struct.pack(
        "<IIII",
        flags,
        int(scaled) & 0xFFFFFFFF,
        aif.loop_offset & 0xFFFFFFFF,
        (aif.num_samples - 1) & 0xFFFFFFFF,
    )
    return header + body


def _pascal(text: bytes) -> bytes:
    return bytes([len(text)]) + text


def pcm_to_aif(pcm_bytes: bytes, base_note: int = DEFAULT_BASE_NOTE) -> bytes:
    """Turn a GBA sample with a 16-byte header into AIFF file contents."""
    pcm_bytes = bytes(pcm_bytes)
    if len(pcm_bytes) < HEADER_SIZE:
        raise ValueError("Sample data is shorter than its 16-byte header.")

    flags, pitch_adjust, loop_offset, stored_samples = struct.unpack_from("<IIII", pcm_bytes)
    has_loop = bool(flags & FLAG_LOOP)
    compressed = bool(flags & FLAG_COMPRESSED)
    sample_rate = pitch_adjust / 1024.0
    num_samples = stored_samples + 1

    body = pcm_bytes[HEADER_SIZE:]
    samples = delta_decompress(body, num_samples) if compressed else body

    if loop_offset > len(samples):
        raise ValueError(
            f"Loop offset ({loop_offset}) lies beyond the sample data ({len(samples)} bytes)."
        )

    out = bytearray(b"FORM")
    out += bytes(4)  # filled in once the length is known
    out += b"AIFF"

    out += b"COMM" + struct.pack(">IhIh", 18, 1, num_samples & 0xFFFFFFFF, 8)
    out += write_extended(sample_rate)

    if has_loop:
        out += b"MARK" + struct.pack(">IH", 24, 2)
        out += struct.pack(">HI", 1, loop_offset) + _pascal(b"START")
        out += struct.pack(">HI", 2, num_samples & 0xFFFFFFFF) + _pascal(b"END")

    out += b"INST" + struct.pack(">I", 20)
    out += bytes([base_note & 0xFF, 0, 0, 127, 1, 127, 0, 0])
    loop = struct.pack(">HHH", 1, 1, 2)  # forward looping between markers 1 and 2
    out += loop + loop

    out += b"SSND" + struct.pack(">III", (len(samples) + 8) & 0xFFFFFFFF, 0, 0)
    out += samples

    out[4:8] = (len(out) - 8).to_bytes(4, "big")
    return bytes(out)


def aif2pcm(aif_path: PathType, pcm_path: PathType, compress: bool = False) -> None:
    """Convert an .aif file into a .bin sample file."""
    write_whole_file(pcm_path, aif_to_pcm(read_whole_file(aif_path), compress))


def pcm2aif(pcm_path: PathType, aif_path: PathType, base_note: int = DEFAULT_BASE_NOTE) -> None:
    """Convert a .bin sample file into an .aif file."""
    write_whole_file(aif_path, pcm_to_aif(read_whole_file(pcm_path), base_note))


def new_file_extension(filename: str, ext: str) -> str:
    """Replace the extension of ``filename`` (or append one) with ``ext``."""
    index = filename.rfind(".")
    if index <= 0:
        index = len(filename)
    return f"{filename[:index]}.{ext}"


def _extension(filename: str) -> str | None:
    index = filename.rfind(".")
    if index <= 0:
        return None
    return filename[index + 1:]


def _run(argv: Sequence[str]) -> None:
    input_file = argv[0]
    compressed = "--compress" in argv[2:]
    extension = _extension(input_file)

    if extension in ("aif", "aiff"):
        output_file = argv[1] if len(argv) >= 2 else new_file_extension(input_file, "bin")
        aif2pcm(input_file, output_file, compressed)
    elif extension == "bin":
        output_file = argv[1] if len(argv) >= 2 else new_file_extension(input_file, "aif")
        pcm2aif(input_file, output_file, DEFAULT_BASE_NOTE)
    else:
        raise ValueError(f"Input file must be .aif or .bin: '{input_file}'")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the converter; return 0 on success and 1 on error."""
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)
    if not argv:
        print(_USAGE, file=sys.stderr)
        return 1
    try:
        _run(argv)
    except (ValueError, GfxError) as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())