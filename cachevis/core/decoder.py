from __future__ import annotations
from dataclasses import dataclass
from typing import Dict

from .cache_config import CacheConfig


@dataclass(frozen=True)
class AddressComponents:
    """The fields of one memory address as seen by a particular cache geometry."""
    address: int
    tag: int
    index: int
    offset: int
    block_number: int

    def to_binary_string(self, tag_bits: int, index_bits: int, offset_bits: int) -> str:
        """Renders 'tag | index | offset' with each field zero-padded to its width."""
        tag = format(self.tag, "b").zfill(tag_bits)
        index = format(self.index, "b").zfill(index_bits)
        offset = format(self.offset, "b").zfill(offset_bits)
        return f"{tag} | {index} | {offset}"

    def to_hex_string(self) -> str:
        return f"0x{self.address:X}"

    def to_dict(self) -> Dict[str, int]:
        return {
            "address": self.address,
            "tag": self.tag,
            "index": self.index,
            "offset": self.offset,
            "block_number": self.block_number,
        }

    def __str__(self) -> str:
        return (f"Address: 0x{self.address:X} -> Tag: {self.tag}, Index: {self.index}, "
                f"Offset: {self.offset}, Block: {self.block_number}")


class AddressDecoder:
    """
    Splits addresses into | tag | index | offset | for a cache configuration.

    offset_bits = log2(block size), index_bits = log2(number of sets) and the
    tag takes whatever remains of the address width. Addresses wider than the
    configured memory are not rejected; bits above the tag field are masked off.
    """
    def __init__(self, config: CacheConfig):
        self.config = config

        # Sizes are powers of two after validation, so bit_length() - 1 is an exact log2
        self.offset_bits = config.block_bytes.bit_length() - 1
        self.index_bits = config.number_of_sets.bit_length() - 1
        self.tag_bits = config.address_bits - self.offset_bits - self.index_bits

        self.offset_mask = (1 << self.offset_bits) - 1
        self.index_mask = (1 << self.index_bits) - 1
        self.tag_mask = (1 << max(self.tag_bits, 0)) - 1

    def decode(self, address: int) -> AddressComponents:
        """Decomposes a non-negative address into its components."""
        if address < 0:
            raise ValueError(f"Address must be non-negative, got {address}")
        offset = address & self.offset_mask
        index = (address >> self.offset_bits) & self.index_mask
        tag = (address >> (self.offset_bits + self.index_bits)) & self.tag_mask
        block_number = address // self.config.block_bytes
        return AddressComponents(address=address, tag=tag, index=index,
                                 offset=offset, block_number=block_number)

    def bit_counts(self) -> Dict[str, int]:
        return {
            "tag": self.tag_bits,
            "index": self.index_bits,
            "offset": self.offset_bits,
            "total": self.config.address_bits,
        }

    def describe_structure(self) -> str:
        """Multi-line summary of the address layout for console hosts."""
        return (
            f"Address Structure ({self.config.address_bits} bits total):\n"
            f"  Tag:    {self.tag_bits} bits\n"
            f"  Index:  {self.index_bits} bits\n"
            f"  Offset: {self.offset_bits} bits\n"
            "\n"
            "Configuration:\n"
            f"  Number of Sets: {self.config.number_of_sets}\n"
            f"  Cache Lines: {self.config.total_lines}\n"
            f"  Block Size: {self.config.block_bytes} bytes"
        )
