"""Entity and character reference decoding, and UTF-16 input conversion."""

from __future__ import annotations

import re
from typing import Mapping, Optional

WHITESPACE = " \t\n\r\v\f"

_CHARREF = re.compile(r"&#(?:x([0-9a-fA-F]+)|([0-9]+));")


def _normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _find_entity(text: str, pos: int, entities: Mapping[str, str]) -> Optional[str]:
    for name in entities:
        if text.startswith(name, pos):
            return name
    return None


def decode(text: str, entities: Mapping[str, str], mode: str) -> str:
    """Decode references in ``text`` and normalise line endings.

    ``entities`` maps names ending in ``;`` to replacement text. ``mode`` is
    ``"&"`` for general entities, ``"%"`` for parameter entities, ``"c"`` for
    CDATA sections, ``" "`` for attribute values and ``"*"`` for non-CDATA
    attribute values, which also get their spaces collapsed and trimmed.
    Replacement text is decoded again in turn.
    """
    text = _normalize_newlines(text)
    i = 0
    while i < len(text):
        ch = text[i]
        if mode != "c" and text.startswith("&#", i):
            match = _CHARREF.match(text, i)
            if match is None:
                i += 1
                continue
            hex_digits, dec_digits = match.groups()
            code = int(hex_digits, 16) if hex_digits else int(dec_digits)
            if code == 0 or code > 0x10FFFF:
                i += 1
                continue
            text = text[:i] + chr(code) + text[match.end():]
            i += 1
        elif (ch == "&" and mode in "& *") or (ch == "%" and mode == "%"):
            name = _find_entity(text, i + 1, entities)
            if name is None:
                i += 1
                continue
            semi = text.find(";", i)
            text = text[:i] + entities[name] + text[semi + 1:]
        elif mode in " *" and ch in WHITESPACE:
            text = text[:i] + " " + text[i + 1:]
            i += 1
        else:
            i += 1

    if mode == "*":
        text = " ".join(part for part in text.split(" ") if part)
    return text


def entity_ok(name: str, text: str, entities: Mapping[str, str]) -> bool:
    """Return False if ``text`` refers to entity ``name``, directly or through others."""
    pos = text.find("&")
    while pos != -1:
        if text.startswith(name, pos + 1):
            return False
        other = _find_entity(text, pos + 1, entities)
        if other is not None and not entity_ok(name, entities[other], entities):
            return False
        pos = text.find("&", pos + 1)
    return True


def utf16_to_utf8(data: bytes) -> Optional[bytes]:
    """Convert UTF-16 data that starts with a byte order mark to UTF-8.

    Returns None when the data does not start with a UTF-16 mark.
    """
    if not data:
        return None
    if data[0] == 0xFE:
        big_endian = True
    elif data[0] == 0xFF:
        big_endian = False
    else:
        return None

    def unit(pos: int) -> int:
        hi, lo = (data[pos], data[pos + 1]) if big_endian else (data[pos + 1], data[pos])
        return (hi << 8) | lo

    out = bytearray()
    pos = 2
    length = len(data)
    while pos < length - 1:
        code = unit(pos)
        if 0xD800 <= code <= 0xDFFF:
            pos += 2
            if pos < length - 1:
                low = unit(pos)
                code = (((code & 0x3FF) << 10) | (low & 0x3FF)) + 0x10000
        out += chr(code).encode("utf-8", "surrogatepass")
        pos += 2
    return bytes(out)