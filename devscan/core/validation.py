"""
String validation helpers for device specifiers.

All helpers are pure. Rejections are reported as False, or 0 for the
numeric decoders, never as exceptions.
"""

import string

HEX_DIGITS = frozenset(string.hexdigits)
DECIMAL_DIGITS = frozenset(string.digits)
ALPHA_NUMERIC = frozenset(string.ascii_letters + string.digits)

# Characters allowed inside a decoded serial number string
_SERIAL_CHARS = frozenset(string.ascii_letters + string.digits + " -")

MAX_HEX_SERIAL_DIGITS = 16


def is_hex_digit(char: str) -> bool:
    return char in HEX_DIGITS


def is_decimal_digit(char: str) -> bool:
    return char in DECIMAL_DIGITS


def is_alpha_numeric(text: str) -> bool:
    """True if every character is an ASCII letter or digit (empty passes)."""
    return all(char in ALPHA_NUMERIC for char in text)


def is_legal_decimal_number(text: str, max_length: int = 2) -> bool:
    """True if ``text`` has at most ``max_length`` characters, all decimal digits."""
    if len(text) > max_length:
        return False
    return all(is_decimal_digit(char) for char in text)


def is_legal_serial_number(text: str) -> bool:
    """Serial numbers are 8 or 9 alphanumeric characters."""
    if len(text) not in (8, 9):
        return False
    return is_alpha_numeric(text)


def is_legal_hex_serial_number(text: str) -> int:
    """
    Decode a legacy hex-encoded serial number such as ``0x3236333331375458``.

    Args:
        text: Hex digits with an optional ``0x`` prefix.

    Returns:
        The 64-bit value, or 0 if the string is too short, has more than 16
        hex digits or contains a non-hex character.
    """
    if len(text) < 3:
        return 0
    hex_str = text.lower()
    if hex_str.startswith("0x"):
        hex_str = hex_str[2:]
    if len(hex_str) > MAX_HEX_SERIAL_DIGITS:
        return 0
    if not hex_str or not all(is_hex_digit(char) for char in hex_str):
        return 0
    return int(hex_str.rjust(MAX_HEX_SERIAL_DIGITS, "0"), 16)


def serial_number_to_string(serial_number: int) -> str:
    """
    Render a 64-bit serial number as its 8-character text form.

    The low byte holds the first character. A zero serial, or one containing
    anything other than letters, digits, blanks and dashes, yields "".
    """
    raw = (serial_number & 0xFFFFFFFFFFFFFFFF).to_bytes(8, "little")
    chars = []
    for byte in raw:
        if byte == 0:
            break
        char = chr(byte)
        if char not in _SERIAL_CHARS:
            return ""
        chars.append(char)
    return "".join(chars)


def serial_string_to_number(serial: str) -> int:
    """Inverse of serial_number_to_string; returns 0 for unencodable input."""
    if not serial or len(serial) > 8 or not all(char in _SERIAL_CHARS for char in serial):
        return 0
    return int.from_bytes(serial.encode("ascii").ljust(8, b"\0"), "little")
