import json

from csim.__main__ import main


def test_run_writes_summary_and_results(yi_trace, tmp_path, capsys):
    results = tmp_path / "res"
    rc = main(["-s", "4", "-E", "1", "-b", "4", "-t", yi_trace, "--results", str(results)])
    assert rc == 0
    assert capsys.readouterr().out == "hits:4 misses:5 evictions:3\n"
    assert results.read_text() == "4 5 3\n"


def test_default_results_file(yi_trace, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main(["-s", "4", "-E", "1", "-b", "4", "-t", yi_trace]) == 0
    assert (tmp_path / ".csim_results").read_text() == "4 5 3\n"


def test_verbose(yi_trace, tmp_path, capsys):
    rc = main(
        ["-v", "-s", "4", "-E", "1", "-b", "4", "-t", yi_trace, "--results", str(tmp_path / "r")]
    )
    assert rc == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "L 10,1 miss"
    assert lines[-2] == "M 12,1 miss eviction hit"
    assert lines[-1] == "hits:4 misses:5 evictions:3"


def test_missing_argument(tmp_path, capsys):
    assert main(["-s", "4", "-E", "1", "-t", "x.trace"]) == 1
    err = capsys.readouterr().err
    assert "Missing required command line argument" in err
    assert "usage:" in err


def test_zero_is_missing(yi_trace, capsys):
    assert main(["-s", "0", "-E", "1", "-b", "4", "-t", yi_trace]) == 1
    assert "Missing required" in capsys.readouterr().err


def test_unreadable_trace(tmp_path, capsys):
    missing = str(tmp_path / "missing.trace")
    assert main(["-s", "1", "-E", "1", "-b", "1", "-t", missing]) == 1
    err = capsys.readouterr().err
    assert err.startswith(f"{missing}: ")
    assert "No such file" in err


def test_config_file_with_override(yi_trace, tmp_path, capsys):
    cfg = tmp_path / "geom.py"
    cfg.write_text(f"config = {{'s': 4, 'E': 4, 'b': 4, 'trace': {yi_trace!r}}}\n")
    rc = main(["--config", str(cfg), "-E", "1", "--results", str(tmp_path / "r")])
    assert rc == 0
    assert capsys.readouterr().out == "hits:4 misses:5 evictions:3\n"


def test_output_stats_json(yi_trace, tmp_path):
    out = tmp_path / "stats.json"
    rc = main(
        [
            "-s", "4", "-E", "1", "-b", "4", "-t", yi_trace,
            "--results", str(tmp_path / "r"),
            "--output-stats", str(out),
        ]
    )
    assert rc == 0
    data = json.loads(out.read_text())
    assert (data["hits"], data["misses"], data["evictions"]) == (4, 5, 3)
    assert data["records"] == 7


def test_progress(yi_trace, tmp_path, capsys):
    rc = main(
        ["-s", "4", "-E", "1", "-b", "4", "-t", yi_trace, "--results", str(tmp_path / "r"),
         "--progress", "3"]
    )
    assert rc == 0
    assert "[csim] 6 records replayed" in capsys.readouterr().err


def test_allocation_failure(yi_trace, tmp_path, capsys):
    rc = main(["-s", "62", "-E", "1", "-b", "1", "-t", yi_trace, "--results", str(tmp_path / "r")])
    assert rc == 1
    captured = capsys.readouterr()
    assert f"csim: cannot allocate {1 << 62} sets of 1 lines" in captured.err
    assert captured.out == ""
    assert not (tmp_path / "r").exists()
