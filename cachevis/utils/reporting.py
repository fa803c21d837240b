from __future__ import annotations
import json
from pathlib import Path
from typing import List, Dict, Any
from ..config import SimConfig
from ..core.controller import AccessResult, CacheController
from . import viz

def _build_timeline(results: List[AccessResult]) -> List[Dict[str, Any]]:
    """Per-access rows with the running hit rate after each access."""
    timeline = []
    hits = 0
    for n, result in enumerate(results, start=1):
        if result.is_hit:
            hits += 1
        row = result.to_dict()
        row['hit_rate'] = hits / n
        timeline.append(row)
    return timeline

def _count_evictions(results: List[AccessResult]) -> int:
    return sum(1 for r in results if r.replaced_line != -1)

def generate_report_json(results: List[AccessResult], controller: CacheController) -> Dict[str, Any]:
    """Generates a JSON-compatible dictionary describing a finished run."""
    stats = controller.get_statistics().to_dict()
    stats['evictions'] = _count_evictions(results)

    report_data = {
        "config": controller.config.to_dict(),
        "bit_counts": controller.decoder.bit_counts(),
        "statistics": stats,
        "timeline": _build_timeline(results),
        "lines": [line.to_dict() for line in controller.get_all_lines()],
    }
    return report_data

def generate_report(results: List[AccessResult], controller: CacheController, config: SimConfig):
    """Generates all report artifacts."""
    report_data = generate_report_json(results, controller)
    output_dir = Path(config.report_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    with open(output_dir / "report.json", "w") as f:
        json.dump(report_data, f, indent=4)

    viz.export_hit_rate(report_data['timeline'], str(output_dir / "report.html"))

    print(viz.export_cache_lines_ascii(report_data['lines']))

    print(f"\nReports generated in {output_dir.absolute()}")
    stats = report_data['statistics']
    print(f"Hit Rate: {stats['hit_rate']:.2%} ({stats['hits']}/{stats['total_accesses']}), "
          f"Evictions: {stats['evictions']}")
    return report_data
