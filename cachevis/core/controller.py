from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Type

from .cache_config import CacheConfig
from .cache_line import CacheLine, LineStore
from .decoder import AddressComponents, AddressDecoder
from .errors import ConfigurationMismatchError
from .replacement import ReplacementSelector
from .types import MappingType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessResult:
    """Outcome of one cache access."""
    is_hit: bool
    cache_line_index: int
    tag: int
    previous_tag: int
    was_valid: bool
    access_time: int
    replaced_line: int
    address_components: AddressComponents

    def describe(self) -> str:
        if self.is_hit:
            return f"CACHE HIT at Line {self.cache_line_index}"
        if self.was_valid:
            return (f"CACHE MISS at Line {self.cache_line_index} "
                    f"(Replaced tag 0x{self.previous_tag:X} with 0x{self.tag:X})")
        return (f"CACHE MISS at Line {self.cache_line_index} "
                f"(Loaded tag 0x{self.tag:X} into empty line)")

    def to_dict(self) -> Dict[str, object]:
        return {
            "address": self.address_components.address,
            "hit": self.is_hit,
            "line": self.cache_line_index,
            "tag": self.tag,
            "previous_tag": self.previous_tag,
            "was_valid": self.was_valid,
            "access_time": self.access_time,
            "replaced_line": self.replaced_line,
            "index": self.address_components.index,
            "offset": self.address_components.offset,
            "block_number": self.address_components.block_number,
        }


@dataclass(frozen=True)
class Statistics:
    total_accesses: int = 0
    hits: int = 0
    misses: int = 0

    @property
    def hit_rate(self) -> float:
        return self.hits / self.total_accesses if self.total_accesses else 0.0

    @property
    def miss_rate(self) -> float:
        return self.misses / self.total_accesses if self.total_accesses else 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "total_accesses": self.total_accesses,
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": self.hit_rate,
            "miss_rate": self.miss_rate,
        }

    def describe(self, title: str = "Cache Statistics") -> str:
        return (f"{title}:\n"
                f"  Total Accesses: {self.total_accesses}\n"
                f"  Hits: {self.hits}\n"
                f"  Misses: {self.misses}\n"
                f"  Hit Rate: {self.hit_rate:.2%}\n"
                f"  Miss Rate: {self.miss_rate:.2%}")


class CacheController:
    """
    Common access algorithm shared by the three mapping techniques.

    Subclasses only decide which lines are candidates for an address and
    which value is compared against the stored tags. Everything else (hit
    search, empty-line fill, victim selection, statistics) lives here.
    """
    mapping_type: MappingType
    title = "Cache Statistics"

    def __init__(self, config: CacheConfig, seed: Optional[int] = None):
        if config.mapping_type != self.mapping_type:
            raise ConfigurationMismatchError(
                f"Configuration must be for {self.mapping_type} mapping, got {config.mapping_type}")
        config.validate()

        self.config = config
        self.decoder = AddressDecoder(config)
        self.store = LineStore(config.total_lines)
        self.selector = ReplacementSelector(config.replacement_policy, seed=seed)

        self.total_accesses = 0
        self.hits = 0
        self.misses = 0
        self.history: List[AccessResult] = []

    def _candidates(self, components: AddressComponents) -> Tuple[List[CacheLine], int]:
        """Returns (candidate lines in way order, effective tag) for an address."""
        raise NotImplementedError

    def _select_victim(self, candidates: List[CacheLine]) -> CacheLine:
        return self.selector.select_victim(candidates)

    @property
    def access_counter(self) -> int:
        return self.store.clock

    def access(self, address: int) -> AccessResult:
        """Performs one access and returns its outcome."""
        self.total_accesses += 1
        now = self.store.tick()

        components = self.decoder.decode(address)
        candidates, effective_tag = self._candidates(components)

        hit_line = next((line for line in candidates if line.matches(effective_tag)), None)
        if hit_line is not None:
            self.hits += 1
            hit_line.record_access(now)
            result = AccessResult(
                is_hit=True,
                cache_line_index=hit_line.line_number,
                tag=effective_tag,
                previous_tag=hit_line.tag,
                was_valid=True,
                access_time=now,
                replaced_line=-1,
                address_components=components,
            )
        else:
            self.misses += 1
            target = next((line for line in candidates if not line.valid), None)
            if target is None:
                target = self._select_victim(candidates)
            was_valid = target.valid
            previous_tag = target.tag
            target.load_block(effective_tag, now)
            result = AccessResult(
                is_hit=False,
                cache_line_index=target.line_number,
                tag=effective_tag,
                previous_tag=previous_tag,
                was_valid=was_valid,
                access_time=now,
                replaced_line=target.line_number if was_valid else -1,
                address_components=components,
            )

        logger.debug("0x%X -> %s", address, result.describe())
        self.history.append(result)
        return result

    def reset(self):
        self.store.invalidate_all()
        self.total_accesses = 0
        self.hits = 0
        self.misses = 0
        self.history = []

    def get_statistics(self) -> Statistics:
        return Statistics(total_accesses=self.total_accesses, hits=self.hits, misses=self.misses)

    def get_line(self, index: int) -> CacheLine:
        return self.store.get(index).snapshot()

    def get_all_lines(self) -> List[CacheLine]:
        return [line.snapshot() for line in self.store.get_all()]

    def get_access_history(self, limit: Optional[int] = None) -> List[AccessResult]:
        """Results since the last reset, oldest first; only the last `limit` when given."""
        if limit is None:
            return list(self.history)
        return self.history[-limit:] if limit > 0 else []

    def describe_statistics(self) -> str:
        return self.get_statistics().describe(self.title)


class DirectMappedController(CacheController):
    """Each block maps to exactly one line: line = index field. No policy is consulted."""
    mapping_type = MappingType.DIRECT_MAPPED
    title = "Direct Mapping Statistics"

    def _candidates(self, components: AddressComponents) -> Tuple[List[CacheLine], int]:
        return [self.store.get(components.index)], components.tag

    def _select_victim(self, candidates: List[CacheLine]) -> CacheLine:
        # The single candidate is always the victim
        return candidates[0]


class SetAssociativeController(CacheController):
    """Each block maps to one set (index field) and may occupy any of its ways."""
    mapping_type = MappingType.SET_ASSOCIATIVE
    title = "Set Associative Statistics"

    def _candidates(self, components: AddressComponents) -> Tuple[List[CacheLine], int]:
        ways = self.config.associativity
        return self.store.slice_set(components.index, ways), components.tag

    def describe_statistics(self) -> str:
        return f"{super().describe_statistics()}\n  Replacement Policy: {self.config.replacement_policy}"


class FullyAssociativeController(CacheController):
    """
    Any block may occupy any line.

    There is no index field in this layout, so the full block number is stored
    and compared as the tag. The decoder still reports an index, which is
    informational only.
    """
    mapping_type = MappingType.FULLY_ASSOCIATIVE
    title = "Fully Associative Statistics"

    def _candidates(self, components: AddressComponents) -> Tuple[List[CacheLine], int]:
        return self.store.get_all(), components.block_number

    def describe_statistics(self) -> str:
        return f"{super().describe_statistics()}\n  Replacement Policy: {self.config.replacement_policy}"


CONTROLLERS: Dict[MappingType, Type[CacheController]] = {
    MappingType.DIRECT_MAPPED: DirectMappedController,
    MappingType.SET_ASSOCIATIVE: SetAssociativeController,
    MappingType.FULLY_ASSOCIATIVE: FullyAssociativeController,
}


def create_controller(config: CacheConfig, seed: Optional[int] = None) -> CacheController:
    """Builds the controller matching the configuration's mapping type."""
    return CONTROLLERS[config.mapping_type](config, seed=seed)
