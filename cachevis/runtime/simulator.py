from __future__ import annotations
import logging
from typing import Iterable, List, Tuple, Union

from ..config import SimConfig
from ..core.controller import AccessResult, CacheController, create_controller
from ..host.address_parser import check_address_range, load_trace, to_address

logger = logging.getLogger(__name__)


def collect_addresses(config: SimConfig) -> List[int]:
    """Gathers the addresses named on the command line/YAML followed by those in the trace file."""
    addresses = [to_address(a) for a in config.addresses]
    if config.trace:
        addresses.extend(load_trace(config.trace))
    return addresses


def run(addresses: Iterable[Union[int, str]], config: SimConfig) -> Tuple[List[AccessResult], CacheController]:
    """
    Runs an address trace through a fresh cache built from `config`.

    Returns the per-access results in order together with the controller,
    which holds the final line state and statistics.
    """
    cache_config = config.to_cache_config()
    controller = create_controller(cache_config, seed=config.seed)
    logger.info("Running trace on %s", cache_config.describe())

    results = []
    for raw in addresses:
        address = to_address(raw)
        address = check_address_range(address, cache_config, config.address_policy)
        results.append(controller.access(address))

    stats = controller.get_statistics()
    logger.info("Finished %d accesses: %d hits, %d misses", stats.total_accesses, stats.hits, stats.misses)
    return results, controller
