from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from .errors import (
    AssociativityMismatchError,
    CacheNotSmallerThanMemoryError,
    ConfigurationError,
    NotPowerOfTwoError,
)
from .types import MappingType, ReplacementPolicy


def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def _coerce(enum_cls, value, what: str):
    try:
        return enum_cls(value)
    except ValueError:
        choices = ", ".join(m.value for m in enum_cls)
        raise ConfigurationError(f"Unknown {what}: {value!r}. Choose from {choices}") from None


@dataclass(frozen=True)
class CacheConfig:
    """Geometry and policy of a simulated cache in front of a byte-addressed memory."""
    memory_bytes: int = 16 * 1024
    cache_bytes: int = 1024
    block_bytes: int = 16
    mapping_type: MappingType = MappingType.DIRECT_MAPPED
    associativity: int = 1
    replacement_policy: ReplacementPolicy = ReplacementPolicy.FIFO

    def __post_init__(self):
        # Accept plain strings such as "LRU" or "SetAssociative" from YAML/CLI input
        object.__setattr__(self, "mapping_type", _coerce(MappingType, self.mapping_type, "mapping type"))
        object.__setattr__(self, "replacement_policy",
                           _coerce(ReplacementPolicy, self.replacement_policy, "replacement policy"))

    @classmethod
    def for_mapping(
        cls,
        memory_bytes: int,
        cache_bytes: int,
        block_bytes: int,
        mapping_type: MappingType | str,
        associativity: Optional[int] = None,
        replacement_policy: ReplacementPolicy | str = ReplacementPolicy.FIFO,
    ) -> CacheConfig:
        """Builds a config, deriving the associativity the mapping type implies when omitted."""
        mapping_type = _coerce(MappingType, mapping_type, "mapping type")
        if associativity is None:
            if mapping_type == MappingType.DIRECT_MAPPED:
                associativity = 1
            elif mapping_type == MappingType.FULLY_ASSOCIATIVE:
                associativity = cache_bytes // block_bytes if block_bytes > 0 else 0
            else:
                associativity = 2
        return cls(memory_bytes, cache_bytes, block_bytes, mapping_type, associativity, replacement_policy)

    @classmethod
    def from_kilobytes(
        cls,
        memory_kb: int,
        cache_kb: int,
        block_bytes: int,
        mapping_type: MappingType | str = MappingType.DIRECT_MAPPED,
        associativity: Optional[int] = None,
        replacement_policy: ReplacementPolicy | str = ReplacementPolicy.FIFO,
    ) -> CacheConfig:
        return cls.for_mapping(memory_kb * 1024, cache_kb * 1024, block_bytes,
                               mapping_type, associativity, replacement_policy)

    # --- Derived geometry ---
    @property
    def address_bits(self) -> int:
        """ceil(log2(memory_bytes)), computed exactly on integers."""
        return (self.memory_bytes - 1).bit_length() if self.memory_bytes > 1 else 0

    @property
    def total_lines(self) -> int:
        return self.cache_bytes // self.block_bytes if self.block_bytes > 0 else 0

    @property
    def number_of_sets(self) -> int:
        if self.mapping_type == MappingType.FULLY_ASSOCIATIVE or self.associativity <= 0:
            return 1
        return self.total_lines // self.associativity

    @property
    def total_memory_blocks(self) -> int:
        return self.memory_bytes // self.block_bytes if self.block_bytes > 0 else 0

    def validate(self) -> None:
        """Raises a ConfigurationError subclass describing the first violated rule."""
        if not is_power_of_two(self.block_bytes):
            raise NotPowerOfTwoError("Block size must be a power of 2")
        if not is_power_of_two(self.cache_bytes):
            raise NotPowerOfTwoError("Cache size must be a power of 2")
        if self.cache_bytes >= self.memory_bytes:
            raise CacheNotSmallerThanMemoryError("Cache size must be smaller than memory size")
        if self.block_bytes > self.cache_bytes:
            raise ConfigurationError("Block size must not exceed cache size")

        total_lines = self.total_lines
        if self.mapping_type == MappingType.FULLY_ASSOCIATIVE:
            if self.associativity != total_lines:
                raise AssociativityMismatchError(
                    "Fully associative requires associativity = total cache lines")
        elif self.mapping_type == MappingType.DIRECT_MAPPED:
            if self.associativity != 1:
                raise AssociativityMismatchError("Direct mapping requires associativity = 1")
        else:
            if self.associativity <= 1 or self.associativity >= total_lines:
                raise AssociativityMismatchError(
                    "Set associative requires 1 < associativity < total cache lines")
            if total_lines % self.associativity != 0:
                raise AssociativityMismatchError(
                    "Set associative requires associativity to divide total cache lines evenly")

    def is_valid(self) -> bool:
        try:
            self.validate()
        except ConfigurationError:
            return False
        return True

    def describe(self) -> str:
        return (f"Memory: {self.memory_bytes}B, Cache: {self.cache_bytes}B, Block: {self.block_bytes}B, "
                f"Lines: {self.total_lines}, Mapping: {self.mapping_type}, "
                f"Associativity: {self.associativity}-way, Policy: {self.replacement_policy}")

    def to_dict(self) -> dict:
        return {
            "memory_bytes": self.memory_bytes,
            "cache_bytes": self.cache_bytes,
            "block_bytes": self.block_bytes,
            "mapping_type": str(self.mapping_type),
            "associativity": self.associativity,
            "replacement_policy": str(self.replacement_policy),
            "address_bits": self.address_bits,
            "total_lines": self.total_lines,
            "number_of_sets": self.number_of_sets,
        }
