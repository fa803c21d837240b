import pytest
from cachevis.core.cache_config import CacheConfig
from cachevis.core.types import MappingType, ReplacementPolicy


@pytest.fixture
def demo_config():
    """16 KiB memory, 1 KiB direct-mapped cache, 16-byte blocks (64 lines)."""
    return CacheConfig(memory_bytes=16384, cache_bytes=1024, block_bytes=16,
                       mapping_type=MappingType.DIRECT_MAPPED, associativity=1)


@pytest.fixture
def four_way_config():
    """Same geometry as demo_config split into 16 sets of 4 ways."""
    return CacheConfig(memory_bytes=16384, cache_bytes=1024, block_bytes=16,
                       mapping_type=MappingType.SET_ASSOCIATIVE, associativity=4,
                       replacement_policy=ReplacementPolicy.LRU)
