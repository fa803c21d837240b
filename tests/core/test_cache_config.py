import pytest
from cachevis.core.cache_config import CacheConfig, is_power_of_two
from cachevis.core.errors import (
    AssociativityMismatchError,
    CacheNotSmallerThanMemoryError,
    ConfigurationError,
    NotPowerOfTwoError,
)
from cachevis.core.types import MappingType, ReplacementPolicy


def test_derived_geometry_direct_mapped(demo_config):
    """Tests the values derived from the classroom configuration."""
    assert demo_config.address_bits == 14
    assert demo_config.total_lines == 64
    assert demo_config.number_of_sets == 64
    assert demo_config.total_memory_blocks == 1024


def test_address_bits_rounds_up_for_non_power_of_two_memory():
    # ceil(log2(10000)) == 14
    config = CacheConfig(memory_bytes=10000, cache_bytes=1024, block_bytes=16)
    assert config.address_bits == 14
    config.validate()


@pytest.mark.parametrize("mapping, assoc, expected_sets", [
    (MappingType.DIRECT_MAPPED, None, 64),
    (MappingType.SET_ASSOCIATIVE, 2, 32),
    (MappingType.SET_ASSOCIATIVE, 4, 16),
    (MappingType.SET_ASSOCIATIVE, 32, 2),
    (MappingType.FULLY_ASSOCIATIVE, None, 1),
])
def test_lines_equal_sets_times_ways(mapping, assoc, expected_sets):
    """For every valid configuration, total_lines == number_of_sets * associativity."""
    config = CacheConfig.for_mapping(16384, 1024, 16, mapping, assoc)
    config.validate()
    assert config.number_of_sets == expected_sets
    assert config.total_lines == config.number_of_sets * config.associativity


def test_for_mapping_derives_associativity():
    assert CacheConfig.for_mapping(16384, 1024, 16, "DirectMapped").associativity == 1
    assert CacheConfig.for_mapping(16384, 1024, 16, "FullyAssociative").associativity == 64
    assert CacheConfig.for_mapping(16384, 1024, 16, "SetAssociative").associativity == 2


def test_from_kilobytes_matches_byte_sizes():
    config = CacheConfig.from_kilobytes(16, 1, 16, MappingType.SET_ASSOCIATIVE, 4, ReplacementPolicy.LRU)
    assert config.memory_bytes == 16384
    assert config.cache_bytes == 1024
    assert config.associativity == 4
    assert config.replacement_policy == ReplacementPolicy.LRU


def test_strings_are_coerced_to_enums():
    config = CacheConfig(mapping_type="SetAssociative", associativity=2, replacement_policy="Random")
    assert config.mapping_type is MappingType.SET_ASSOCIATIVE
    assert config.replacement_policy is ReplacementPolicy.RANDOM


def test_unknown_mapping_name_is_rejected():
    with pytest.raises(ConfigurationError, match="Unknown mapping type: 'TwoLevel'"):
        CacheConfig(mapping_type="TwoLevel")


def test_unknown_policy_name_is_rejected():
    with pytest.raises(ConfigurationError, match="Choose from FIFO, LRU, Random"):
        CacheConfig.for_mapping(16384, 1024, 16, "SetAssociative", 2, "MRU")


def test_config_is_immutable(demo_config):
    with pytest.raises(AttributeError):
        demo_config.cache_bytes = 2048


@pytest.mark.parametrize("kwargs, error, message", [
    (dict(block_bytes=12), NotPowerOfTwoError, "Block size must be a power of 2"),
    (dict(block_bytes=0), NotPowerOfTwoError, "Block size"),
    (dict(cache_bytes=1000), NotPowerOfTwoError, "Cache size must be a power of 2"),
    (dict(cache_bytes=16384), CacheNotSmallerThanMemoryError, "smaller than memory"),
    (dict(cache_bytes=32768), CacheNotSmallerThanMemoryError, "smaller than memory"),
    (dict(associativity=2), AssociativityMismatchError, "Direct mapping requires associativity = 1"),
    (dict(mapping_type=MappingType.FULLY_ASSOCIATIVE, associativity=32),
     AssociativityMismatchError, "Fully associative"),
    (dict(mapping_type=MappingType.SET_ASSOCIATIVE, associativity=1),
     AssociativityMismatchError, "1 < associativity"),
    (dict(mapping_type=MappingType.SET_ASSOCIATIVE, associativity=64),
     AssociativityMismatchError, "1 < associativity"),
    (dict(mapping_type=MappingType.SET_ASSOCIATIVE, associativity=3),
     AssociativityMismatchError, "divide"),
])
def test_validate_reports_first_violation(kwargs, error, message):
    base = dict(memory_bytes=16384, cache_bytes=1024, block_bytes=16,
                mapping_type=MappingType.DIRECT_MAPPED, associativity=1)
    base.update(kwargs)
    config = CacheConfig(**base)

    with pytest.raises(error, match=message):
        config.validate()
    assert not config.is_valid()


def test_block_larger_than_cache_is_rejected():
    config = CacheConfig(memory_bytes=16384, cache_bytes=256, block_bytes=512)
    with pytest.raises(ConfigurationError, match="Block size must not exceed"):
        config.validate()


def test_configuration_errors_are_value_errors():
    assert issubclass(NotPowerOfTwoError, ValueError)
    assert issubclass(AssociativityMismatchError, ConfigurationError)


def test_is_power_of_two():
    assert [n for n in range(-2, 20) if is_power_of_two(n)] == [1, 2, 4, 8, 16]


def test_describe_and_to_dict(four_way_config):
    text = four_way_config.describe()
    assert "Lines: 64" in text
    assert "SetAssociative" in text
    assert "4-way" in text

    data = four_way_config.to_dict()
    assert data["mapping_type"] == "SetAssociative"
    assert data["replacement_policy"] == "LRU"
    assert data["number_of_sets"] == 16
