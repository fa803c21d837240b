from __future__ import annotations
import logging
from pathlib import Path
from typing import List

from ..core.cache_config import CacheConfig
from ..core.errors import AddressOutOfRangeError, ConfigurationError, InvalidAddressTextError

logger = logging.getLogger(__name__)

# Prefix -> base. Anything without a prefix is read as decimal.
_PREFIXES = {
    "0x": 16,
    "0b": 2,
    "0o": 8,
}

_DIGITS = {
    16: "0123456789abcdef",
    10: "0123456789",
    8: "01234567",
    2: "01",
}

ADDRESS_POLICIES = ("wrap", "warn", "reject")


def parse_address(text: str) -> int:
    """Parses hex (0x), binary (0b), octal (0o) or decimal text into a non-negative address."""
    cleaned = text.strip().lower()
    if not cleaned:
        raise InvalidAddressTextError("Invalid address: empty input")

    base = 10
    digits = cleaned
    prefix = cleaned[:2]
    if prefix in _PREFIXES:
        base = _PREFIXES[prefix]
        digits = cleaned[2:]

    # Only bare digits and single "_" separators; no signs or nested prefixes
    allowed = _DIGITS[base]
    if (not digits or digits.startswith("_") or digits.endswith("_") or "__" in digits
            or any(c not in allowed and c != "_" for c in digits)):
        raise InvalidAddressTextError(
            f"Invalid address: {text!r}. Use hex (0x...), binary (0b...), octal (0o...) or decimal.")
    return int(digits.replace("_", ""), base)


def to_address(value) -> int:
    """Accepts an address already given as an int (e.g. from YAML) or as text."""
    if isinstance(value, bool) or not isinstance(value, int):
        return parse_address(str(value))
    if value < 0:
        raise InvalidAddressTextError(f"Invalid address: {value}. Addresses must be non-negative.")
    return value


def parse_address_list(text: str) -> List[int]:
    """Parses a trace: addresses separated by commas or whitespace, '#' starts a comment."""
    addresses = []
    for line in text.splitlines():
        line = line.split("#", 1)[0]
        for token in line.replace(",", " ").split():
            addresses.append(parse_address(token))
    return addresses


def load_trace(path: str) -> List[int]:
    return parse_address_list(Path(path).read_text())


def check_address_range(address: int, config: CacheConfig, policy: str = "warn") -> int:
    """
    Applies the host's policy for addresses beyond the configured memory.

    The core masks such addresses silently. 'reject' raises, 'warn' logs and
    passes the address through, 'wrap' passes it through quietly.
    """
    if policy not in ADDRESS_POLICIES:
        raise ConfigurationError(f"Unknown address policy: {policy}. Choose from {', '.join(ADDRESS_POLICIES)}")
    if address < config.memory_bytes:
        return address
    message = f"Address 0x{address:X} is outside memory of {config.memory_bytes} bytes"
    if policy == "reject":
        raise AddressOutOfRangeError(message)
    if policy == "warn":
        logger.warning("%s; high bits will be discarded", message)
    return address
