"""Content-type sniffing from leading bytes.

Implements the WHATWG MIME sniffing table used by HTTP libraries: an ordered
list of magic-byte signatures, then a text check, then a generic binary
fallback. Only the first 512 bytes are ever considered.
"""

from typing import List, Optional, Tuple

SNIFF_LENGTH = 512

OCTET_STREAM = "application/octet-stream"
TEXT_PLAIN = "text/plain; charset=utf-8"

_WHITESPACE = b"\t\n\x0c\r "

_HTML_TAGS = (
    b"<!DOCTYPE HTML",
    b"<HTML",
    b"<HEAD",
    b"<SCRIPT",
    b"<IFRAME",
    b"<H1",
    b"<DIV",
    b"<FONT",
    b"<TABLE",
    b"<A",
    b"<STYLE",
    b"<TITLE",
    b"<B",
    b"<BODY",
    b"<BR",
    b"<P",
    b"<!--",
)

_BINARY_BYTES = frozenset(
    list(range(0x00, 0x09)) + [0x0B] + list(range(0x0E, 0x1B)) + list(range(0x1C, 0x20))
)


def _exact(prefix: bytes, content_type: str) -> Tuple[bytes, bytes, str]:
    return prefix, b"\xff" * len(prefix), content_type


def _riff(kind: bytes, content_type: str) -> Tuple[bytes, bytes, str]:
    pattern = b"RIFF\x00\x00\x00\x00" + kind
    mask = b"\xff\xff\xff\xff\x00\x00\x00\x00" + b"\xff" * len(kind)
    return pattern, mask, content_type


# (pattern, mask, content type), checked in order against the raw data
_SIGNATURES: List[Tuple[bytes, bytes, str]] = [
    _exact(b"%PDF-", "application/pdf"),
    _exact(b"%!PS-Adobe-", "application/postscript"),
    _exact(b"\xfe\xff", "text/plain; charset=utf-16be"),
    _exact(b"\xff\xfe", "text/plain; charset=utf-16le"),
    _exact(b"\xef\xbb\xbf", TEXT_PLAIN),
    _exact(b"\x00\x00\x01\x00", "image/x-icon"),
    _exact(b"\x00\x00\x02\x00", "image/x-icon"),
    _exact(b"BM", "image/bmp"),
    _exact(b"GIF87a", "image/gif"),
    _exact(b"GIF89a", "image/gif"),
    _riff(b"WEBPVP", "image/webp"),
    _exact(b"\x89PNG\r\n\x1a\n", "image/png"),
    _exact(b"\xff\xd8\xff", "image/jpeg"),
    (b"FORM\x00\x00\x00\x00AIFF", b"\xff\xff\xff\xff\x00\x00\x00\x00\xff\xff\xff\xff", "audio/aiff"),
    _exact(b"ID3", "audio/mpeg"),
    _exact(b"OggS\x00", "application/ogg"),
    _exact(b"MThd\x00\x00\x00\x06", "audio/midi"),
    _riff(b"AVI ", "video/avi"),
    _riff(b"WAVE", "audio/wave"),
]

# checked after the mp4 box test
_LATE_SIGNATURES: List[Tuple[bytes, bytes, str]] = [
    _exact(b"\x1a\x45\xdf\xa3", "video/webm"),
    (b"\x00" * 34 + b"LP", b"\x00" * 34 + b"\xff\xff", "application/vnd.ms-fontobject"),
    _exact(b"\x00\x01\x00\x00", "font/ttf"),
    _exact(b"OTTO", "font/otf"),
    _exact(b"ttcf", "font/collection"),
    _exact(b"wOFF", "font/woff"),
    _exact(b"wOF2", "font/woff2"),
    _exact(b"\x1f\x8b\x08", "application/x-gzip"),
    _exact(b"PK\x03\x04", "application/zip"),
    _exact(b"Rar!\x1a\x07\x00", "application/x-rar-compressed"),
    _exact(b"Rar!\x1a\x07\x01\x00", "application/x-rar-compressed"),
    _exact(b"\x00asm", "application/wasm"),
]


def _skip_whitespace(data: bytes) -> bytes:
    return data.lstrip(_WHITESPACE)


def _match_html(data: bytes) -> bool:
    for tag in _HTML_TAGS:
        end = len(tag)
        if len(data) < end + 1:
            continue
        if data[:end].upper() != tag:
            continue
        # tag must be terminated by a space or '>'
        if data[end] in b" >":
            return True
    return False


def _match_masked(data: bytes, pattern: bytes, mask: bytes) -> bool:
    if len(data) < len(pattern):
        return False
    return all((byte & m) == p for byte, m, p in zip(data, mask, pattern))


def _match_mp4(data: bytes) -> bool:
    if len(data) < 12:
        return False
    box_size = int.from_bytes(data[:4], "big")
    if len(data) < box_size or box_size % 4 != 0:
        return False
    if data[4:8] != b"ftyp":
        return False
    for start in range(8, box_size, 4):
        if start == 12:
            # minor version number
            continue
        if data[start : start + 3] == b"mp4":
            return True
    return False


def _match_table(data: bytes, table: List[Tuple[bytes, bytes, str]]) -> Optional[str]:
    for pattern, mask, content_type in table:
        if _match_masked(data, pattern, mask):
            return content_type
    return None


def is_binary_data(data: bytes) -> bool:
    """Return True if ``data`` contains a byte that never appears in text."""
    return any(byte in _BINARY_BYTES for byte in data)


def detect_content_type(data: bytes) -> str:
    """
    Guess the MIME type of ``data`` from its leading bytes.

    Args:
        data: File content; anything past the first 512 bytes is ignored

    Returns:
        A MIME type, ``application/octet-stream`` when nothing more specific
        matches
    """
    data = data[:SNIFF_LENGTH]
    stripped = _skip_whitespace(data)

    if _match_html(stripped):
        return "text/html; charset=utf-8"
    if stripped.startswith(b"<?xml"):
        return "text/xml; charset=utf-8"

    content_type = _match_table(data, _SIGNATURES)
    if content_type is None and _match_mp4(data):
        content_type = "video/mp4"
    if content_type is None:
        content_type = _match_table(data, _LATE_SIGNATURES)
    if content_type is not None:
        return content_type

    if not is_binary_data(stripped):
        return TEXT_PLAIN

    return OCTET_STREAM
