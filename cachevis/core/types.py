from enum import Enum


class MappingType(str, Enum):
    """Cache placement techniques."""

    DIRECT_MAPPED = "DirectMapped"
    SET_ASSOCIATIVE = "SetAssociative"
    FULLY_ASSOCIATIVE = "FullyAssociative"

    def __str__(self) -> str:
        return self.value


class ReplacementPolicy(str, Enum):
    """Victim selection policies for associative caches."""

    FIFO = "FIFO"
    LRU = "LRU"
    RANDOM = "Random"

    def __str__(self) -> str:
        return self.value
