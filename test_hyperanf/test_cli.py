import csv
import logging

import pytest

from hyperanf.cli import main


@pytest.fixture
def edge_file(tmp_path):
    path = tmp_path / "graph.txt"
    path.write_text("# a small graph\n0 1\n0 2\n1 3\n2 3\n3 4\n")
    return path


def test_writes_every_round(edge_file, tmp_path):
    out = tmp_path / "out.csv"
    assert main([str(edge_file), str(out), "8", "--workers", "2"]) == 0

    with open(out, newline="") as f:
        rows = list(csv.reader(f))
    rounds = sorted({int(r[0]) for r in rows})
    assert rounds == list(range(len(rounds)))
    assert rounds[-1] <= 3
    assert len(rows) == 5 * len(rounds)
    assert {r[1] for r in rows} == {"0", "1", "2", "3", "4"}


def test_logs_progress(edge_file, tmp_path, caplog):
    caplog.set_level(logging.INFO)
    main([str(edge_file), str(tmp_path / "out.csv")])
    assert "Nodes: 5" in caplog.text
    assert "t = 0" in caplog.text
    assert "Average distance" in caplog.text


def test_invalid_precision_is_a_configuration_error(edge_file):
    with pytest.raises(SystemExit) as excinfo:
        main([str(edge_file), "out.csv", "99"])
    assert excinfo.value.code == 2


def test_missing_input(tmp_path, caplog):
    assert main([str(tmp_path / "nope.txt"), str(tmp_path / "out.csv")]) == 1
    assert "Cannot load graph" in caplog.text


def test_malformed_input(tmp_path, caplog):
    path = tmp_path / "bad.txt"
    path.write_text("0 1\n2\n")
    assert main([str(path), str(tmp_path / "out.csv")]) == 1
    assert "line 2" in caplog.text


def test_export_failure_does_not_stop_propagation(edge_file, tmp_path, caplog):
    caplog.set_level(logging.INFO)
    out = tmp_path / "missing" / "out.csv"
    assert main([str(edge_file), str(out), "--max-rounds", "10"]) == 1
    assert "Could not write round 0" in caplog.text
    assert "Converged" in caplog.text


def test_undecodable_input(tmp_path, caplog):
    path = tmp_path / "binary.txt"
    path.write_bytes(b"0 1\n\xff\xfe 2\n")
    assert main([str(path), str(tmp_path / "out.csv")]) == 1
    assert "Cannot load graph" in caplog.text
    assert "line 2" in caplog.text
