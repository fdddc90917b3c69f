"""Tests for the command-line entry point."""

import pandas as pd
import pytest

from bootstab.cli import main


@pytest.fixture
def simulated_csv(tmp_path):
    path = tmp_path / "data" / "sim.csv"
    assert main(["simulate", str(path), "--rows", "40", "--forced", "2", "--candidates", "3", "--seed", "5"]) == 0
    return path


def test_simulate_writes_csv(simulated_csv) -> None:
    df = pd.read_csv(simulated_csv)

    assert df.columns.tolist() == ["y", "f1", "f2", "x1", "x2", "x3"]
    assert len(df) == 40


def test_run_prints_and_exports(simulated_csv, tmp_path, capsys) -> None:
    out_dir = tmp_path / "results"

    code = main(
        [
            "run",
            str(simulated_csv),
            "--outcome",
            "y",
            "--forced",
            "f1",
            "f2",
            "--bootstrap",
            "20",
            "--seed",
            "3",
            "--out",
            str(out_dir),
        ],
    )

    assert code == 0
    printed = capsys.readouterr().out
    assert "boot_inclusion" in printed
    assert "EPV: 8.0" in printed
    assert (out_dir / "overview.csv").exists()
    assert (out_dir / "model_frequencies.csv").exists()


def test_run_missing_outcome_column(simulated_csv, capsys) -> None:
    code = main(["run", str(simulated_csv), "--outcome", "nope", "--bootstrap", "5"])

    assert code == 2
    assert "error:" in capsys.readouterr().err


def test_run_missing_file(tmp_path, capsys) -> None:
    code = main(["run", str(tmp_path / "missing.csv"), "--outcome", "y"])

    assert code == 2
    assert "not found" in capsys.readouterr().err


def test_command_required() -> None:
    with pytest.raises(SystemExit):
        main([])
