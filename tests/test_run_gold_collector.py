"""Tests for the command line runner."""

import io

import pytest

import run_gold_collector
from gold_collector import ConfigError, InsufficientRowsError
from run_gold_collector import RunConfig, build_config, load_config, main, run


def test_run_prints_map_and_gold(capsys):
    gold = run(RunConfig(quiet=True), stdin=io.StringIO("3 3\nP.G\n...\n#T#\n"))

    out = capsys.readouterr().out
    assert gold == 1
    assert "Parsed Map:" in out
    assert "'P' '.' 'G' " in out
    assert out.splitlines()[-1] == "Maximum gold collected: 1"


def test_run_without_player(capsys):
    gold = run(RunConfig(quiet=True), stdin=io.StringIO("2 1\n.G\n"))

    assert gold is None
    assert capsys.readouterr().out.splitlines()[-1] == "No player found on the map."


def test_run_reads_input_file(maps_dir, capsys):
    gold = run(RunConfig(input=str(maps_dir / "cave.txt"), quiet=True))

    assert gold == 2


def test_run_with_console_sink(capsys):
    run(RunConfig(sink="console", update_mode="single"), stdin=io.StringIO("3 1\nP.G\n"))

    captured = capsys.readouterr()
    assert "[board] declared 3 nodes" in captured.out
    assert "[board] update 3: 1 visited (0_2)" in captured.out
    assert "Visited 3 tiles along 2 edges" in captured.err


def test_run_propagates_parse_errors():
    with pytest.raises(InsufficientRowsError):
        run(RunConfig(quiet=True), stdin=io.StringIO("3 3\nP.G\n"))


def test_build_config_applies_overrides_and_coerces():
    config = build_config(
        {"sink": "console", "delay": "0.25", "quiet": "yes"},
        {"sink": "none", "update_mode": None},
    )

    assert config.sink == "none"
    assert config.update_mode == "batched"
    assert config.delay == 0.25
    assert config.quiet is True


@pytest.mark.parametrize("raw", [
    {"sink": "rerun"},
    {"update_mode": "everything"},
    {"unknown_tiles": "pad"},
    {"sink_failure": "ignore"},
    {"delay": "soon"},
    {"delay": -1},
    {"colour": "red"},
])
def test_build_config_rejects_bad_values(raw):
    with pytest.raises(ConfigError):
        build_config(raw)


def test_load_config_reads_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("sink: console\ndelay: 0.5\n")

    assert load_config(str(path)) == {"sink": "console", "delay": 0.5}


def test_load_config_errors(tmp_path):
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "missing.yaml"))

    bad = tmp_path / "bad.yaml"
    bad.write_text("- just\n- a list\n")
    with pytest.raises(ConfigError):
        load_config(str(bad))


def test_load_config_without_default_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    assert load_config(None) == {}


def test_main_reads_stdin(monkeypatch, tmp_path, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GOLD_COLLECTOR_CONFIG", raising=False)
    monkeypatch.setattr("sys.stdin", io.StringIO("3 1\nPTG\n"))

    main(["--quiet"])

    assert capsys.readouterr().out.splitlines()[-1] == "Maximum gold collected: 0"


def test_main_uses_config_from_environment(monkeypatch, tmp_path, capsys, maps_dir):
    monkeypatch.chdir(tmp_path)
    config_path = tmp_path / "custom.yaml"
    config_path.write_text(f"input: {maps_dir / 'small.txt'}\nquiet: true\n")
    monkeypatch.setenv("GOLD_COLLECTOR_CONFIG", str(config_path))

    main([])

    assert capsys.readouterr().out.splitlines()[-1] == "Maximum gold collected: 1"


def test_main_exits_nonzero_on_malformed_header(monkeypatch, tmp_path, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GOLD_COLLECTOR_CONFIG", raising=False)
    monkeypatch.setattr("sys.stdin", io.StringIO("three by three\n"))

    with pytest.raises(SystemExit) as exc_info:
        main([])

    assert exc_info.value.code == 1
    assert "Error: Malformed map header" in capsys.readouterr().err


def test_main_exits_nonzero_on_missing_input_file(monkeypatch, tmp_path, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GOLD_COLLECTOR_CONFIG", raising=False)

    with pytest.raises(SystemExit) as exc_info:
        main(["--input", str(tmp_path / "nope.txt")])

    assert exc_info.value.code == 1


def test_main_reports_interrupt(monkeypatch, tmp_path, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GOLD_COLLECTOR_CONFIG", raising=False)

    def interrupted(config, stdin=None):
        raise KeyboardInterrupt

    monkeypatch.setattr(run_gold_collector, "run", interrupted)

    with pytest.raises(SystemExit) as exc_info:
        main([])

    assert exc_info.value.code == 130
    assert "Interrupted." in capsys.readouterr().err


def test_matplotlib_frames_keep_result_as_last_line(tmp_path, capsys):
    frames = tmp_path / "frames"

    gold = run(RunConfig(sink="matplotlib", output_dir=str(frames), quiet=True), stdin=io.StringIO("3 1\nP.G\n"))

    captured = capsys.readouterr()
    assert gold == 1
    assert captured.out.splitlines()[-1] == "Maximum gold collected: 1"
    assert "Traversal frames saved" not in captured.out
    assert "Traversal frames saved" not in captured.err
    assert (frames / "final.png").exists()


def test_rerun_sink_writes_recording(tmp_path, capsys):
    gold = run(RunConfig(sink="rerun", output_dir=str(tmp_path), quiet=True), stdin=io.StringIO("3 3\nP.G\n...\n#T#\n"))

    assert gold == 1
    assert capsys.readouterr().out.splitlines()[-1] == "Maximum gold collected: 1"
    assert (tmp_path / "board.rrd").stat().st_size > 0


def test_build_config_accepts_rerun_url():
    config = build_config({"sink": "rerun", "rerun_url": "rerun+http://127.0.0.1:9876/proxy"})

    assert config.sink == "rerun"
    assert config.rerun_url == "rerun+http://127.0.0.1:9876/proxy"
