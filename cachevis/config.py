from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import List, Optional
import logging
import yaml
from pathlib import Path

from .core.cache_config import CacheConfig

logger = logging.getLogger(__name__)


@dataclass
class SimConfig:
    """Run configuration for the cachevis host, defaults match the classroom demo."""
    # Geometry
    memory_bytes: int = 16 * 1024
    cache_bytes: int = 1024
    block_bytes: int = 16

    # Placement and replacement
    mapping_type: str = "DirectMapped"  # DirectMapped, SetAssociative, FullyAssociative
    associativity: Optional[int] = None  # None: 1 for direct, all lines for fully, 2 for set
    replacement_policy: str = "FIFO"  # FIFO, LRU, Random
    seed: Optional[int] = None

    # What to do with addresses past the end of memory: wrap, warn, reject
    address_policy: str = "warn"

    # Inputs
    config_file: str = ""
    trace: str = ""
    addresses: List[str] = field(default_factory=list)

    # Reporting
    report_dir: str = ""
    ascii: bool = False

    def to_cache_config(self) -> CacheConfig:
        """Builds the core configuration. Validation is left to the controller."""
        return CacheConfig.for_mapping(
            memory_bytes=self.memory_bytes,
            cache_bytes=self.cache_bytes,
            block_bytes=self.block_bytes,
            mapping_type=self.mapping_type,
            associativity=self.associativity,
            replacement_policy=self.replacement_policy,
        )

    def update_from_yaml(self, yaml_path: str):
        """Copies known keys from a YAML mapping onto this config."""
        with open(yaml_path, 'r') as f:
            yaml_config = yaml.safe_load(f) or {}
        for key, value in yaml_config.items():
            if hasattr(self, key):
                setattr(self, key, value)
            else:
                logger.warning("Ignoring unknown config key '%s' in %s", key, yaml_path)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_args(cls, args) -> SimConfig:
        """Builds a run config: defaults, then the YAML file named by -c, then explicit CLI values."""
        config = cls()

        # YAML first
        if getattr(args, 'config', None):
            config.config_file = args.config
            if Path(config.config_file).exists():
                config.update_from_yaml(config.config_file)
            else:
                logger.warning("Config file %s not found.", config.config_file)

        # Flags left at their None/False default do not override the file
        arg_dict = vars(args)
        for key, value in arg_dict.items():
            if key == 'addresses' and not value:
                continue
            if value is not None and value is not False and hasattr(config, key):
                setattr(config, key, value)

        return config
