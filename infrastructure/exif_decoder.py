"""EXIF metadata decoding via Pillow.

Extracts the GPS position and the embedded IFD1 JPEG thumbnail from the
leading bytes of an image file. Pixel data is never loaded. A truncated prefix of a JPEG or TIFF is
sufficient; HEIF containers must be handed over whole.
"""

from __future__ import annotations

from io import BytesIO
from typing import Any

from PIL import ExifTags, Image
from loguru import logger
from pillow_heif import register_heif_opener

from core.models import Location
from core.services.interfaces import DecodeError, GeoThumbnail

register_heif_opener()

_EXIF_HEADER = b"Exif\x00\x00"

# ISO-BMFF brands handled by libheif, which needs the complete container
HEIF_BRANDS = {
    b"heic",
    b"heix",
    b"heim",
    b"heis",
    b"hevc",
    b"hevx",
    b"hevm",
    b"hevs",
    b"mif1",
    b"msf1",
    b"avif",
    b"avis",
}


def is_heif_container(header: bytes) -> bool:
    """Return True if `header` starts with an `ftyp` box naming a HEIF brand."""
    if len(header) < 16 or header[4:8] != b"ftyp":
        return False
    box_size = int.from_bytes(header[0:4], "big")
    brands = [header[8:12]]
    # compatible brands follow the major brand and minor version
    end = min(box_size, len(header))
    brands.extend(header[i : i + 4] for i in range(16, end - 3, 4))
    return any(b in HEIF_BRANDS for b in brands)


def convert_dms_to_degrees(dms: Any) -> float:
    """Convert a (degrees, minutes, seconds) triple to decimal degrees.

    Accepts Pillow `IFDRational` values or legacy (numerator, denominator)
    tuples.
    """
    try:
        d = dms[0][0] / dms[0][1]
        m = dms[1][0] / dms[1][1]
        s = dms[2][0] / dms[2][1]
    except TypeError:
        d = float(dms[0])
        m = float(dms[1])
        s = float(dms[2])
    return d + (m / 60.0) + (s / 3600.0)


def _ref_text(value: Any) -> str:
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="ignore")
    return str(value or "").strip("\x00 ").upper()


def _signed_coordinate(dms: Any, ref: Any, negative_ref: str) -> float | None:
    if dms is None:
        return None
    try:
        value = convert_dms_to_degrees(dms)
    except (IndexError, TypeError, ValueError, ZeroDivisionError):
        return None
    return -value if _ref_text(ref) == negative_ref else value


def read_location(exif: Image.Exif) -> Location | None:
    """Return the GPS location recorded in `exif`, or None."""
    gps = exif.get_ifd(ExifTags.IFD.GPSInfo)
    if not gps:
        return None
    lat = _signed_coordinate(
        gps.get(ExifTags.GPS.GPSLatitude), gps.get(ExifTags.GPS.GPSLatitudeRef), "S"
    )
    lon = _signed_coordinate(
        gps.get(ExifTags.GPS.GPSLongitude), gps.get(ExifTags.GPS.GPSLongitudeRef), "W"
    )
    if lat is None or lon is None:
        return None
    return Location(latitude=lat, longitude=lon)


def read_thumbnail(exif: Image.Exif, raw_exif: bytes | None) -> bytes | None:
    """Slice the IFD1 JPEG thumbnail out of the raw EXIF block, if present."""
    if not raw_exif:
        return None
    if raw_exif.startswith(_EXIF_HEADER):
        raw_exif = raw_exif[len(_EXIF_HEADER) :]
    ifd1 = exif.get_ifd(ExifTags.IFD.IFD1)
    offset = ifd1.get(ExifTags.Base.JpegIFOffset)
    length = ifd1.get(ExifTags.Base.JpegIFByteCount)
    if not isinstance(offset, int) or not isinstance(length, int) or length <= 0:
        return None
    if offset < 0 or offset + length > len(raw_exif):
        # thumbnail lies beyond the bytes we were given
        return None
    return raw_exif[offset : offset + length]


class ExifGeoDecoder:
    """Decoder returning location and thumbnail from an image header."""

    def decode(self, data: bytes) -> GeoThumbnail:
        """Decode `data`; raise `DecodeError` when Pillow cannot parse it."""
        try:
            with Image.open(BytesIO(data)) as im:
                exif = im.getexif()
                location = read_location(exif)
                try:
                    thumbnail = read_thumbnail(exif, im.info.get("exif"))
                except (KeyError, TypeError, ValueError) as ex:
                    logger.debug("Thumbnail extraction failed: {}", ex)
                    thumbnail = None
        except (OSError, SyntaxError, ValueError) as ex:
            raise DecodeError(str(ex)) from ex
        return GeoThumbnail(location=location, thumbnail=thumbnail)

    def needs_full_file(self, header: bytes) -> bool:
        """HEIF/HEIC files cannot be opened from a truncated prefix."""
        return is_heif_container(header)
