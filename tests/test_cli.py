from __future__ import annotations

from pathlib import Path

import pytest

from mesh_log_annotator.cli import main


def test_cli_text_mode(capsys) -> None:
    main(["--text", "from: 2885173132", "--node-id", "-1409794164", "--no-color"])
    out = capsys.readouterr().out
    assert out == "from: 2885173132 (!abf83f8c)\n"


def test_cli_text_mode_color(capsys) -> None:
    main(["--text", "num: 7", "--node-id", "!00000007", "--color"])
    out = capsys.readouterr().out
    assert "\x1b[3;36m(!00000007)\x1b[0m" in out


def test_cli_log_file(tmp_path: Path, write_records, capsys) -> None:
    path = tmp_path / "mesh.jsonl"
    write_records(path)

    main([str(path), "--types", "packet", "--no-color"])

    out = capsys.readouterr().out
    assert out.startswith("Packet  2020-09-28T00:00:58+00:00\nfrom: 2885173132 (!abf83f8c)\n")
    assert "Rendered 1 records." in out


def test_cli_missing_file(tmp_path: Path, capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        main([str(tmp_path / "missing.jsonl")])
    assert exc.value.code == 2
    assert "not found" in capsys.readouterr().err


def test_cli_bad_limit(tmp_path: Path, write_records, capsys) -> None:
    path = tmp_path / "mesh.jsonl"
    write_records(path)

    with pytest.raises(SystemExit) as exc:
        main([str(path), "--limit", "0"])
    assert exc.value.code == 2
    assert "Error: limit must be > 0" in capsys.readouterr().err


def test_cli_invalid_node_id() -> None:
    with pytest.raises(SystemExit) as exc:
        main(["--text", "x", "--node-id", "zzz"])
    assert exc.value.code == 2
