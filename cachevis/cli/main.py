from __future__ import annotations
import argparse
import logging
from ..config import SimConfig
from ..core.controller import create_controller
from ..core.decoder import AddressDecoder
from ..core.errors import CacheSimError
from ..core.types import MappingType, ReplacementPolicy
from ..host.address_parser import ADDRESS_POLICIES, parse_address
from ..runtime.scenarios import SCENARIOS, run_all, run_scenario
from ..runtime.simulator import collect_addresses, run as run_sim
from ..utils.logging import get_logger
from ..utils.reporting import generate_report
from ..utils.viz import export_cache_lines_ascii


def cmd_run(args):
    """Handles the 'run' command."""
    config = SimConfig.from_args(args)

    addresses = collect_addresses(config)
    results, controller = run_sim(addresses, config)

    print(controller.config.describe())
    print(controller.decoder.describe_structure())
    print()
    for i, result in enumerate(results, start=1):
        print(f"{i:>4}. 0x{result.address_components.address:04X}  {result.describe()}")
    print()
    print(controller.describe_statistics())

    # generate_report prints the same table
    if config.ascii and not config.report_dir:
        print()
        print(export_cache_lines_ascii([line.to_dict() for line in controller.get_all_lines()]))

    if config.report_dir:
        generate_report(results, controller, config)
    return 0


def cmd_decode(args):
    """Handles the 'decode' command."""
    config = SimConfig.from_args(args)
    cache_config = config.to_cache_config()
    cache_config.validate()
    decoder = AddressDecoder(cache_config)

    print(decoder.describe_structure())
    for text in args.addresses:
        components = decoder.decode(parse_address(text))
        print()
        print(f"  {components}")
        print(f"  Binary: {components.to_binary_string(decoder.tag_bits, decoder.index_bits, decoder.offset_bits)}")
    return 0


def cmd_demo(args):
    """Handles the 'demo' command."""
    scenarios = [run_scenario(args.name)] if args.name else run_all()
    for scenario in scenarios:
        print(scenario.render(show_steps=not args.summary))
        print()
    return 0


def _add_geometry_args(p: argparse.ArgumentParser):
    p.add_argument("-c", "--config", type=str, default=None,
                   help="Path to YAML config file to override defaults")
    geo = p.add_argument_group('Cache Geometry')
    geo.add_argument("--memory-bytes", type=int, default=None, dest="memory_bytes",
                     help="Main memory size in bytes")
    geo.add_argument("--cache-bytes", type=int, default=None, dest="cache_bytes",
                     help="Cache size in bytes (power of two)")
    geo.add_argument("--block-bytes", type=int, default=None, dest="block_bytes",
                     help="Block size in bytes (power of two)")
    geo.add_argument("--mapping", type=str, default=None, dest="mapping_type",
                     choices=[m.value for m in MappingType], help="Placement technique")
    geo.add_argument("--associativity", type=int, default=None,
                     help="Ways per set (derived from the mapping when omitted)")
    geo.add_argument("--policy", type=str, default=None, dest="replacement_policy",
                     choices=[p.value for p in ReplacementPolicy], help="Replacement policy")


def build_parser():
    p = argparse.ArgumentParser(
        prog="cachevis",
        description="Cache memory organization simulator",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Log every access")
    sub = p.add_subparsers(dest="cmd", required=True)

    # --- Run Command ---
    pr = sub.add_parser("run", help="Run an address trace through a cache",
                        formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    pr.add_argument("addresses", nargs='*', default=[],
                    help="Addresses in hex (0x..), binary (0b..), octal (0o..) or decimal")
    _add_geometry_args(pr)
    pr.add_argument("--trace", type=str, default=None,
                    help="File with addresses separated by commas or whitespace")
    pr.add_argument("--seed", type=int, default=None,
                    help="Seed for the Random replacement policy")
    pr.add_argument("--address-policy", type=str, default=None, dest="address_policy",
                    choices=list(ADDRESS_POLICIES),
                    help="Handling of addresses beyond the configured memory")
    pr.add_argument("--report", type=str, default=None, dest="report_dir",
                    help="Directory to save report.json and report.html")
    pr.add_argument("--ascii", action="store_true",
                    help="Print the final cache lines as an ASCII table")
    pr.set_defaults(func=cmd_run)

    # --- Decode Command ---
    pd = sub.add_parser("decode", help="Show the tag/index/offset split of addresses",
                        formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    pd.add_argument("addresses", nargs='+', help="Addresses to decode")
    _add_geometry_args(pd)
    pd.set_defaults(func=cmd_decode)

    # --- Demo Command ---
    pm = sub.add_parser("demo", help="Run the built-in teaching scenarios",
                        formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    pm.add_argument("name", nargs='?', default=None, choices=list(SCENARIOS),
                    help="Scenario to run (all when omitted)")
    pm.add_argument("--summary", action="store_true",
                    help="Only print statistics, not every access")
    pm.set_defaults(func=cmd_demo)

    return p


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    get_logger("cachevis", logging.DEBUG if args.verbose else logging.INFO)
    try:
        return args.func(args)
    except (CacheSimError, FileNotFoundError) as e:
        print(f"ERROR: {e}")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
