# tests/jpeg_builders.py
# In-memory JPEG and HEIC files with hand-packed EXIF (GPS IFD and IFD1 thumbnail)

from __future__ import annotations

from io import BytesIO
import random
import struct

from PIL import Image
from pillow_heif import register_heif_opener

register_heif_opener()

_ASCII = 2
_LONG = 4
_RATIONAL = 5


def _dms_rationals(value: float) -> bytes:
    value = abs(value)
    degrees = int(value)
    minutes = int((value - degrees) * 60)
    seconds_milli = round(((value - degrees) * 60 - minutes) * 60 * 1000)
    return struct.pack("<6I", degrees, 1, minutes, 1, seconds_milli, 1000)


def _ifd(entries: list[tuple[int, int, int, bytes]], next_offset: int) -> bytes:
    """Pack an IFD whose entry values are already inline (4 bytes each)."""
    out = struct.pack("<H", len(entries))
    for tag, typ, count, value in entries:
        out += struct.pack("<HHI", tag, typ, count) + value
    return out + struct.pack("<I", next_offset)


def build_exif(
    lat: float | None = None, lon: float | None = None, thumbnail: bytes | None = None
) -> bytes:
    """Build a little-endian EXIF block with optional GPS IFD and IFD1 thumbnail.

    Offsets are relative to the TIFF header, as stored in a JPEG APP1 segment.
    """
    has_gps = lat is not None and lon is not None
    ifd0_size = 2 + 12 * (1 if has_gps else 0) + 4
    gps_offset = 8 + ifd0_size
    gps_size = (2 + 12 * 4 + 4) if has_gps else 0
    lat_offset = gps_offset + gps_size
    lon_offset = lat_offset + (24 if has_gps else 0)
    ifd1_offset = lon_offset + (24 if has_gps else 0)
    thumb_offset = ifd1_offset + 2 + 12 * 2 + 4

    ifd0_entries = []
    if has_gps:
        ifd0_entries.append((0x8825, _LONG, 1, struct.pack("<I", gps_offset)))
    body = b"II*\x00" + struct.pack("<I", 8)
    body += _ifd(ifd0_entries, ifd1_offset if thumbnail else 0)

    if has_gps:
        lat_ref = b"N\x00\x00\x00" if lat >= 0 else b"S\x00\x00\x00"
        lon_ref = b"E\x00\x00\x00" if lon >= 0 else b"W\x00\x00\x00"
        body += _ifd(
            [
                (1, _ASCII, 2, lat_ref),
                (2, _RATIONAL, 3, struct.pack("<I", lat_offset)),
                (3, _ASCII, 2, lon_ref),
                (4, _RATIONAL, 3, struct.pack("<I", lon_offset)),
            ],
            0,
        )
        body += _dms_rationals(lat) + _dms_rationals(lon)

    if thumbnail:
        body += _ifd(
            [
                (0x0201, _LONG, 1, struct.pack("<I", thumb_offset)),
                (0x0202, _LONG, 1, struct.pack("<I", len(thumbnail))),
            ],
            0,
        )
        body += thumbnail
    return b"Exif\x00\x00" + body


def small_jpeg(color: tuple[int, int, int] = (200, 20, 20)) -> bytes:
    out = BytesIO()
    Image.new("RGB", (16, 12), color=color).save(out, format="JPEG")
    return out.getvalue()


def make_jpeg(
    lat: float | None = None,
    lon: float | None = None,
    thumbnail: bytes | None = None,
    size: tuple[int, int] = (64, 48),
) -> bytes:
    """Build an in-memory JPEG, optionally GPS-tagged and with an IFD1 thumbnail."""
    img = Image.new("RGB", size, color=(100, 150, 200))
    out = BytesIO()
    if (lat is not None and lon is not None) or thumbnail:
        img.save(out, format="JPEG", exif=build_exif(lat, lon, thumbnail))
    else:
        img.save(out, format="JPEG")
    return out.getvalue()




def make_heic(lat: float, lon: float, side: int = 1024) -> bytes:
    """Build a GPS-tagged HEIC whose noisy pixels push it well past a header prefix."""
    rng = random.Random(side)
    img = Image.frombytes("RGB", (side, side), rng.randbytes(side * side * 3))
    out = BytesIO()
    img.save(out, format="HEIF", quality=90, exif=build_exif(lat, lon))
    return out.getvalue()
