import json
from pathlib import Path

import pytest
import yaml
from cachevis.cli.main import build_parser, main


def test_run_prints_each_access(capsys):
    # when
    code = main(["run", "0x0000", "0x0010", "0x0000", "0x0400"])

    # then
    out = capsys.readouterr().out
    assert code == 0
    assert "Address Structure (14 bits total):" in out
    assert "   3. 0x0000  CACHE HIT at Line 0" in out
    assert "   4. 0x0400  CACHE MISS at Line 0 (Replaced tag 0x0 with 0x1)" in out
    assert "Direct Mapping Statistics:" in out
    assert "Hit Rate: 25.00%" in out


def test_run_set_associative_from_flags(capsys):
    code = main(["run", "0x0", "0x100", "0x0", "--mapping", "SetAssociative",
                 "--associativity", "4", "--policy", "LRU", "--ascii"])

    out = capsys.readouterr().out
    assert code == 0
    assert "Associativity: 4-way" in out
    assert "Replacement Policy: LRU" in out
    assert "2/64 lines valid" in out


def test_run_from_yaml_and_trace(tmp_path: Path, capsys):
    config_file = tmp_path / "cache.yaml"
    config_file.write_text(yaml.dump({"mapping_type": "FullyAssociative", "replacement_policy": "FIFO"}))
    trace = tmp_path / "trace.txt"
    trace.write_text("0x0000, 0x1000, 0x2000, 0x0000, 0x3000\n")

    code = main(["run", "-c", str(config_file), "--trace", str(trace)])

    out = capsys.readouterr().out
    assert code == 0
    assert "Fully Associative Statistics:" in out
    assert "Hits: 1" in out


def test_run_writes_report(tmp_path: Path, capsys):
    out_dir = tmp_path / "report"

    code = main(["run", "0x0", "0x0", "--report", str(out_dir)])

    assert code == 0
    data = json.loads((out_dir / "report.json").read_text())
    assert data["statistics"]["hits"] == 1
    assert "Reports generated in" in capsys.readouterr().out


@pytest.mark.parametrize("argv, message", [
    (["run", "0x0", "--block-bytes", "12"], "ERROR: Block size must be a power of 2"),
    (["run", "0xZZ"], "ERROR: Invalid address"),
    (["run", "0x4000", "--address-policy", "reject"], "ERROR: Address 0x4000 is outside memory"),
    (["run", "--trace", "does-not-exist.txt"], "ERROR:"),
    (["decode", "0x10", "--mapping", "SetAssociative", "--associativity", "3"], "ERROR: Set associative"),
])
def test_errors_exit_with_code_2(argv, message, capsys):
    code = main(argv)
    assert code == 2
    assert message in capsys.readouterr().out


def test_decode(capsys):
    code = main(["decode", "0x400", "1040"])

    out = capsys.readouterr().out
    assert code == 0
    assert "Address: 0x400 -> Tag: 1, Index: 0, Offset: 0, Block: 64" in out
    assert "Binary: 0001 | 000000 | 0000" in out
    assert "Address: 0x410 -> Tag: 1, Index: 1, Offset: 0, Block: 65" in out


def test_demo_single_scenario(capsys):
    code = main(["demo", "policies", "--summary"])

    out = capsys.readouterr().out
    assert code == 0
    assert "DEMO 7: Comparing Replacement Policies" in out
    assert "Address 0x" not in out


def test_demo_all(capsys):
    assert main(["demo"]) == 0
    out = capsys.readouterr().out
    for n in range(1, 8):
        assert f"DEMO {n}:" in out


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_parser_rejects_unknown_policy():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["run", "--policy", "MRU"])


def test_run_resolves_trace_relative_to_cwd(tmp_path: Path, monkeypatch, capsys):
    # given
    (tmp_path / "trace.txt").write_text("# warm up then reuse\n0x10 0x10\n")
    monkeypatch.chdir(tmp_path)

    # when
    code = main(["run", "--trace", "trace.txt"])

    # then
    assert code == 0
    assert "Hits: 1" in capsys.readouterr().out


@pytest.mark.parametrize("body, message", [
    ({"mapping_type": "Direct"}, "ERROR: Unknown mapping type: 'Direct'"),
    ({"replacement_policy": "MRU"}, "ERROR: Unknown replacement policy"),
    ({"address_policy": "bogus"}, "ERROR: Unknown address policy: bogus"),
    ({"addresses": [-5]}, "ERROR: Invalid address: -5"),
])
def test_bad_yaml_values_exit_with_code_2(tmp_path: Path, body, message, capsys):
    """Values from a config file get the same error handling as CLI flags."""
    # given
    config_file = tmp_path / "bad.yaml"
    config_file.write_text(yaml.dump({"addresses": [0], **body}))

    # when
    code = main(["run", "-c", str(config_file)])

    # then
    assert code == 2
    assert message in capsys.readouterr().out


def test_ascii_table_printed_once_with_report(tmp_path: Path, capsys):
    code = main(["run", "0x0", "0x10", "--ascii", "--report", str(tmp_path / "out")])

    assert code == 0
    assert capsys.readouterr().out.count("Cache Lines (ASCII)") == 1
