"""Canned teaching scenarios.

Each scenario builds one or more caches, feeds them a short address sequence
and returns everything a host needs to narrate the outcome. Nothing here
prints; `Scenario.render()` produces the console text.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np

from ..core.cache_config import CacheConfig
from ..core.controller import AccessResult, Statistics, create_controller
from ..core.types import MappingType, ReplacementPolicy


@dataclass
class ScenarioStep:
    address: int
    result: AccessResult
    note: str = ""


@dataclass
class ScenarioRun:
    label: str
    config: CacheConfig
    steps: List[ScenarioStep]
    statistics: Statistics
    statistics_text: str
    bit_counts: Dict[str, int]


@dataclass
class Scenario:
    name: str
    title: str
    runs: List[ScenarioRun] = field(default_factory=list)
    conclusion: str = ""

    def render(self, show_steps: bool = True) -> str:
        lines = [self.title, "=" * 51]
        for run in self.runs:
            lines.append("")
            lines.append(f"{run.label}: {run.config.describe()}")
            bits = run.bit_counts
            lines.append(f"  Tag: {bits['tag']} bits, Index: {bits['index']} bits, Offset: {bits['offset']} bits")
            if show_steps:
                for i, step in enumerate(run.steps, start=1):
                    comp = step.result.address_components
                    note = f" - {step.note}" if step.note else ""
                    lines.append(f"  {i}. Address 0x{step.address:04X}{note}")
                    lines.append(f"     Tag={comp.tag}, Index={comp.index}, Offset={comp.offset}")
                    lines.append(f"     {step.result.describe()}")
            lines.append(run.statistics_text)
        if self.conclusion:
            lines.append("")
            lines.append(f"Conclusion: {self.conclusion}")
        return "\n".join(lines)


def _run(label: str, config: CacheConfig, addresses: Sequence[int],
         notes: Optional[Sequence[str]] = None, seed: Optional[int] = None) -> ScenarioRun:
    controller = create_controller(config, seed=seed)
    notes = notes or [""] * len(addresses)
    steps = [ScenarioStep(address=a, result=controller.access(a), note=n) for a, n in zip(addresses, notes)]
    return ScenarioRun(
        label=label,
        config=config,
        steps=steps,
        statistics=controller.get_statistics(),
        statistics_text=controller.describe_statistics(),
        bit_counts=controller.decoder.bit_counts(),
    )


def basic_direct_mapping() -> Scenario:
    config = CacheConfig.from_kilobytes(16, 1, 16, MappingType.DIRECT_MAPPED)
    addresses = [0x0000, 0x0010, 0x0020, 0x0000, 0x0400]
    notes = [
        "First access - cold miss",
        "Different block - compulsory miss",
        "Another block - compulsory miss",
        "Repeat access - cache hit!",
        "Same index, different tag - conflict miss",
    ]
    run = _run("Direct mapped", config, addresses, notes)
    return Scenario("basic", "DEMO 1: Basic Direct Mapping", [run],
                    "A repeated block hits; a block sharing its index evicts it.")


def conflict_misses() -> Scenario:
    config = CacheConfig.from_kilobytes(16, 1, 16, MappingType.DIRECT_MAPPED)
    # All four map to line 0 with different tags
    run = _run("Direct mapped", config, [0x0000, 0x0400, 0x0800, 0x0000])
    hits = run.statistics.hits
    return Scenario("conflict", "DEMO 2: Cache Conflicts in Direct Mapping", [run],
                    f"{hits} hit(s): blocks that share line 0 keep evicting each other.")


def cache_size_comparison() -> Scenario:
    # 0x000/0x400 and 0x200/0x600 collide in a 1 KB direct-mapped cache
    pattern = [0x0000, 0x0200, 0x0400, 0x0600] * 2
    runs = []
    for cache_kb in (1, 2, 4):
        config = CacheConfig.from_kilobytes(16, cache_kb, 16, MappingType.DIRECT_MAPPED)
        runs.append(_run(f"{cache_kb} KB cache ({config.total_lines} lines)", config, pattern))
    return Scenario("sizes", "DEMO 3: Impact of Cache Size", runs,
                    "A larger cache spreads colliding blocks over more lines.")


def access_patterns() -> Scenario:
    config = CacheConfig.from_kilobytes(16, 1, 16, MappingType.DIRECT_MAPPED)
    sequential = (np.arange(8) * 16).tolist() * 2
    strided = (np.arange(8) * 1024).tolist() * 2
    runs = [
        _run("A) Sequential access", config, sequential),
        _run("B) Strided access (stride 1024)", config, strided),
    ]
    return Scenario("patterns", "DEMO 4: Access Pattern Analysis", runs,
                    "Access pattern matters!")


def set_associative_lru() -> Scenario:
    config = CacheConfig.from_kilobytes(16, 1, 16, MappingType.SET_ASSOCIATIVE, 2, ReplacementPolicy.LRU)
    run = _run("2-way LRU", config, [0x0000, 0x0040, 0x0080, 0x0000, 0x00C0, 0x0040])
    return Scenario("set-assoc", "DEMO 5: 2-Way Set Associative Mapping", [run],
                    "Blocks in different sets never compete; a repeated block hits in the way it was loaded into.")


def fully_associative_fifo() -> Scenario:
    config = CacheConfig.from_kilobytes(16, 1, 16, MappingType.FULLY_ASSOCIATIVE,
                                        replacement_policy=ReplacementPolicy.FIFO)
    run = _run("Fully associative FIFO", config, [0x0000, 0x1000, 0x2000, 0x0000, 0x3000])
    return Scenario("fully-assoc", "DEMO 6: Fully Associative Mapping", [run],
                    "Any block can use any line, so only the first touch of each block misses.")


def policy_comparison() -> Scenario:
    # Fill set 0, touch the oldest block, then force one eviction
    addresses = [0x0000, 0x0400, 0x0800, 0x0C00, 0x0000, 0x1000, 0x0000]
    runs = []
    for policy in (ReplacementPolicy.FIFO, ReplacementPolicy.LRU):
        config = CacheConfig.from_kilobytes(16, 1, 16, MappingType.SET_ASSOCIATIVE, 4, policy)
        runs.append(_run(f"Using {policy}", config, addresses))
    return Scenario("policies", "DEMO 7: Comparing Replacement Policies", runs,
                    "The policy decides which of the four ways is sacrificed once a set is full.")


SCENARIOS: Dict[str, Callable[[], Scenario]] = {
    "basic": basic_direct_mapping,
    "conflict": conflict_misses,
    "sizes": cache_size_comparison,
    "patterns": access_patterns,
    "set-assoc": set_associative_lru,
    "fully-assoc": fully_associative_fifo,
    "policies": policy_comparison,
}


def run_scenario(name: str) -> Scenario:
    if name not in SCENARIOS:
        raise ValueError(f"Unknown scenario: {name}. Choose from {', '.join(SCENARIOS)}")
    return SCENARIOS[name]()


def run_all() -> List[Scenario]:
    return [factory() for factory in SCENARIOS.values()]
