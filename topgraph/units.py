"""Byte-size conversions, temperature conversion and locale number fixes."""

from __future__ import annotations

KB = 1 << 10
MB = 1 << 20
GB = 1 << 30
TB = 1 << 40


def celsius_to_fahrenheit(c: int) -> int:
    """Convert whole degrees Celsius to Fahrenheit, truncating toward zero."""
    product = c * 9
    quotient = abs(product) // 5
    if product < 0:
        quotient = -quotient
    return quotient + 32


def bytes_to_kb(b: int) -> float:
    """Return *b* bytes expressed in kibibytes."""
    return b / KB


def bytes_to_mb(b: int) -> float:
    """Return *b* bytes expressed in mebibytes."""
    return b / MB


def bytes_to_gb(b: int) -> float:
    """Return *b* bytes expressed in gibibytes."""
    return b / GB


def bytes_to_tb(b: int) -> float:
    """Return *b* bytes expressed in tebibytes."""
    return b / TB


def convert_bytes(b: int) -> tuple[float, str]:
    """Scale *b* bytes to the largest unit below it and return (value, unit)."""
    if b < KB:
        return float(b), "B"
    if b < MB:
        return bytes_to_kb(b), "KB"
    if b < GB:
        return bytes_to_mb(b), "MB"
    if b < TB:
        return bytes_to_gb(b), "GB"
    return bytes_to_tb(b), "TB"


def convert_localized_string(s: str) -> str:
    """Turn the first decimal comma of a localized number into a point."""
    if "," in s:
        return s.replace(",", ".", 1)
    return s