import pytest
from click.testing import CliRunner

from cachesim.cli import main


def _run(*args):
    return CliRunner().invoke(main, [str(arg) for arg in args])


@pytest.mark.ci
def test_summary_line(traces_dir):
    result = _run("-s", 4, "-E", 1, "-b", 4, "-t", traces_dir / "yi.trace")
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "hits:4 misses:5 evictions:3"


def test_verbose(traces_dir):
    result = _run("-v", "-s", 4, "-E", 1, "-b", 4, "-t", traces_dir / "yi.trace")
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0] == "L 10,1 miss"
    assert lines[1] == "M 20,1 miss hit"
    assert lines[-2] == "M 12,1 miss eviction hit"
    assert lines[-1] == "hits:4 misses:5 evictions:3"


def test_verbose_skips_instructions(write_trace):
    trace = write_trace(["I 0400d7d4,8", " L 0,1"])
    result = _run("-v", "-s", 1, "-E", 1, "-b", 1, "-t", trace)
    assert result.output.splitlines() == ["L 0,1 miss", "hits:0 misses:1 evictions:0"]


def test_batch_uses_fresh_cache(write_trace):
    first = write_trace([" L 0,1"], name="first.trace")
    second = write_trace([" L 0,1"], name="second.trace")
    result = _run("-s", 1, "-E", 1, "-b", 1, "-t", first, "-t", second)
    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == [
        f"{first}: hits:0 misses:1 evictions:0",
        f"{second}: hits:0 misses:1 evictions:0",
    ]


def test_config_file(tmp_path, traces_dir):
    config = tmp_path / "sim.yaml"
    config.write_text(
        f"cache:\n  s: 4\n  E: 1\n  b: 4\ntraces:\n  - {traces_dir / 'yi.trace'}\n")
    result = _run("-c", config)
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "hits:4 misses:5 evictions:3"

    result = _run("-c", config, "-E", 2)
    assert result.output.strip() == "hits:4 misses:5 evictions:2"


def test_missing_arguments(traces_dir):
    result = _run("-s", 4, "-b", 4, "-t", traces_dir / "yi.trace")
    assert result.exit_code == 2
    assert "Missing required command line argument" in result.output

    result = _run("-s", 4, "-E", 1, "-b", 4)
    assert result.exit_code == 2
    assert "-t <tracefile>" in result.output


def test_invalid_geometry(traces_dir):
    result = _run("-s", 40, "-E", 1, "-b", 30, "-t", traces_dir / "yi.trace")
    assert result.exit_code == 2
    assert "s + b" in result.output


def test_missing_trace_file(tmp_path):
    result = _run("-s", 1, "-E", 1, "-b", 1, "-t", tmp_path / "nope.trace")
    assert result.exit_code == 2


def test_malformed_trace(write_trace):
    trace = write_trace([" L 0,1", " Q 1,1"])
    result = _run("-s", 1, "-E", 1, "-b", 1, "-t", trace)
    assert result.exit_code == 1
    assert "line 2" in result.output


def test_help():
    result = _run("-h")
    assert result.exit_code == 0
    assert "Number of set index bits" in result.output
    assert "csim -s 4 -E 1 -b 4 -t traces/yi.trace" in result.output


def test_log_file(tmp_path, traces_dir):
    log_file = tmp_path / "logs" / "csim.log"
    result = _run("--log-level", "info", "--log-file", log_file,
                  "-s", 4, "-E", 1, "-b", 4, "-t", traces_dir / "yi.trace")
    assert result.exit_code == 0, result.output
    assert "hits:4 misses:5 evictions:3" in log_file.read_text()


def test_float_geometry_in_config(tmp_path, traces_dir):
    config = tmp_path / "sim.yaml"
    config.write_text(
        f"cache:\n  s: 4.7\n  E: 1.9\n  b: 4\ntraces:\n  - {traces_dir / 'yi.trace'}\n")
    result = _run("-c", config)
    assert result.exit_code == 2
    assert "invalid config file" in result.output


@pytest.mark.parametrize("include", [None, ""])
def test_bad_include_in_config(tmp_path, include):
    if include is not None:
        (tmp_path / "geometry.yaml").write_text(include)
    config = tmp_path / "sim.yaml"
    config.write_text("cache: !include geometry.yaml\n")
    result = _run("-c", config, "-t", tmp_path / "sim.yaml")
    assert result.exit_code == 2
    assert "invalid config file" in result.output
    assert not isinstance(result.exception, (OSError, AssertionError))


def test_binary_trace(tmp_path):
    trace = tmp_path / "binary.trace"
    trace.write_bytes(b" L 0,1\n\xff\xfe L 1,1\n")
    result = _run("-s", 1, "-E", 1, "-b", 1, "-t", trace)
    assert result.exit_code == 1
    assert "not a text trace" in result.output
