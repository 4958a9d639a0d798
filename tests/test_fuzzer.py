"""
End-to-end tests for the fuzzer entry point

Run with: pytest tests/test_fuzzer.py -v
"""

import json
import random

import pytest

from mini_fuzz_py import fuzzer
from mini_fuzz_py.core.corpus import generate_candidates
from mini_fuzz_py.core.monitor import Monitor
from mini_fuzz_py.core.seed import load_seed
from mini_fuzz_py.mutators.registry import build_default_mutators
from mini_fuzz_py.targets import command_target
from mini_fuzz_py.targets.command_target import CommandTarget

from conftest import posix_only, write_script

DEFAULT_SEED = '<html a="value">...</html>'


@posix_only
class TestEndToEnd:
    """Full runs against small shell / Python targets."""

    def test_echo_target_finds_nothing(self, tmp_path, echo_target, capsys):
        rc = fuzzer.main([f"./{echo_target}", "--workdir", str(tmp_path),
                          "--trials", "1", "--rng-seed", "1"])
        out = capsys.readouterr().out
        assert rc == 0
        assert "Exit code:" not in out
        assert "tagName: html" in out
        assert "No input caused a non-zero exit code." in out

    def test_tag_checker_faults(self, tmp_path, tag_checking_target, capsys):
        rc = fuzzer.main([f"./{tag_checking_target}", "--workdir", str(tmp_path),
                          "--trials", "1", "--rng-seed", "1"])
        captured = capsys.readouterr()
        assert rc == 1
        assert "Exit code: 2" in captured.out
        assert "Input: <html a=\"value\">...\n" in captured.out
        assert "Input:  a=\"value\">...</html>" in captured.out
        assert "At least one input caused a non-zero exit code." in captured.err

    def test_tag_checker_fault_log(self, tmp_path, tag_checking_target, capsys):
        seed = load_seed(DEFAULT_SEED)
        candidates = generate_candidates(seed, build_default_mutators(seed, trials=1),
                                         random.Random(0))
        target = CommandTarget(f"./{tag_checking_target}", workdir=str(tmp_path))
        monitor = Monitor(quiet=True)
        assert fuzzer.fuzz_loop(target, monitor, seed, candidates) is True
        faulted = {f.candidate.mutator for f in monitor.faults}
        assert {"remove_closing_tag", "strip_open_tag"} <= faulted
        # 种子本身先运行且通过
        assert monitor.records[0].mutator == "seed"
        assert monitor.records[0].fault is None
        assert len(monitor.records) == len(candidates) + 1

    def test_errors_do_not_stop_the_loop(self, tmp_path, capsys):
        seed = load_seed(DEFAULT_SEED)
        candidates = generate_candidates(seed, build_default_mutators(seed, trials=1),
                                         random.Random(0))
        target = CommandTarget("./x", workdir=str(tmp_path / "missing"))
        monitor = Monitor(quiet=True)
        assert fuzzer.fuzz_loop(target, monitor, seed, candidates) is False
        assert len(monitor.errors) == len(candidates) + 1

    def test_timeout_option(self, tmp_path, capsys):
        name = write_script(tmp_path, "hang.sh", "#!/bin/sh\nsleep 30\n")
        config = tmp_path / "fuzz.json"
        config.write_text(json.dumps({"trials": 0}))
        rc = fuzzer.main([f"./{name}", "--workdir", str(tmp_path), "--timeout", "0.2",
                          "--config", str(config), "--seed-input", "<a>b</a>"])
        assert rc == 1
        assert "Timeout: candidate #0 (seed)" in capsys.readouterr().out

    def test_outdir_export(self, tmp_path, echo_target, capsys):
        out_dir = tmp_path / "out"
        rc = fuzzer.main([f"./{echo_target}", "--workdir", str(tmp_path),
                          "--trials", "1", "--outdir", str(out_dir)])
        assert rc == 0
        with open(out_dir / "run_records.json", encoding="utf-8") as f:
            data = json.load(f)
        assert data["summary"]["fault_found"] is False
        assert (out_dir / "run_timeline.csv").exists()


class TestStartupErrors:
    """Configuration errors abort before any process is spawned."""

    @pytest.fixture(autouse=True)
    def no_spawn(self, monkeypatch):
        def _fail(*args, **kwargs):
            raise AssertionError("subprocess spawned")
        monkeypatch.setattr(command_target.subprocess, "Popen", _fail)

    def test_missing_command(self, tmp_path, capsys):
        rc = fuzzer.main(["./does-not-exist", "--workdir", str(tmp_path)])
        captured = capsys.readouterr()
        assert rc == 1
        assert "could not find command" in captured.err
        assert "Exit code:" not in captured.out

    def test_usage_error_exits_one(self, capsys):
        with pytest.raises(SystemExit) as exc:
            fuzzer.main([])
        assert exc.value.code == 1

    def test_seed_mismatch(self, tmp_path, echo_target, capsys):
        rc = fuzzer.main([f"./{echo_target}", "--workdir", str(tmp_path),
                          "--seed-input", "<a>b</c>"])
        assert rc == 1
        assert "does not match" in capsys.readouterr().err

    def test_bad_config(self, tmp_path, echo_target, capsys):
        config = tmp_path / "fuzz.json"
        config.write_text("{")
        rc = fuzzer.main([f"./{echo_target}", "--workdir", str(tmp_path),
                          "--config", str(config)])
        assert rc == 1

    def test_config_value_of_wrong_type(self, tmp_path, echo_target, capsys):
        config = tmp_path / "fuzz.json"
        config.write_text(json.dumps({"timeout": "5"}))
        rc = fuzzer.main([f"./{echo_target}", "--workdir", str(tmp_path),
                          "--config", str(config)])
        assert rc == 1
        assert "timeout" in capsys.readouterr().err


def test_build_config_precedence(tmp_path):
    config = tmp_path / "fuzz.json"
    config.write_text(json.dumps({"trials": 3, "timeout": 2.0}))
    args = fuzzer.parse_args(["./t", "--config", str(config), "--trials", "5"])
    merged = fuzzer.build_config(args)
    assert merged["trials"] == 5
    assert merged["timeout"] == 2.0
    assert merged["workdir"] == "./"
