from __future__ import annotations

from pathlib import Path

import pytest

from circuit_game.ui.main import (
    LEVEL_ENV_VAR,
    PROGRESS_ENV_VAR,
    SOLUTION_ENV_VAR,
    UIDirectories,
    bootstrap_directories,
    main,
    resolve_directories,
)


@pytest.fixture(autouse=True)
def isolated_progress(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    path = tmp_path / "progress.json"
    monkeypatch.setenv(PROGRESS_ENV_VAR, str(path))
    return path


def test_resolve_directories_returns_package_defaults(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv(LEVEL_ENV_VAR, raising=False)
    monkeypatch.delenv(SOLUTION_ENV_VAR, raising=False)

    directories = resolve_directories()

    assert isinstance(directories, UIDirectories)
    assert directories.level_root.exists()
    assert directories.solution_root.exists()


def test_resolve_directories_honours_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    level_dir = tmp_path / "levels"
    solution_dir = tmp_path / "solutions"
    level_dir.mkdir()
    solution_dir.mkdir()

    monkeypatch.setenv(LEVEL_ENV_VAR, str(level_dir))
    monkeypatch.setenv(SOLUTION_ENV_VAR, str(solution_dir))

    directories = resolve_directories()

    assert directories.level_root == level_dir
    assert directories.solution_root == solution_dir
    assert directories.progress_path == tmp_path / "progress.json"


def test_resolve_directories_errors_on_missing_paths(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv(LEVEL_ENV_VAR, str(tmp_path / "missing_levels"))

    with pytest.raises(FileNotFoundError):
        resolve_directories()

    assert resolve_directories(check_exists=False).level_root == tmp_path / "missing_levels"


def test_bootstrap_prints_message(capsys: pytest.CaptureFixture[str]):
    directories = bootstrap_directories()
    output = capsys.readouterr().out

    assert "Circuit Puzzle bootstrap" in output
    assert str(directories.level_root) in output
    assert str(directories.progress_path) in output


def test_cli_lists_levels(capsys: pytest.CaptureFixture[str]):
    exit_code = main(["--list-levels"])
    output = capsys.readouterr().out

    assert exit_code == 0
    assert "Available levels" in output
    assert "level_01: #1 Spark" in output
    assert "[locked]" in output


def test_cli_replay_reports_verdict(capsys: pytest.CaptureFixture[str]):
    exit_code = main(["--replay", "level_03"])
    output = capsys.readouterr().out

    assert exit_code == 0
    assert "Verdict: victory (2 stars)" in output


def test_cli_replay_of_unfinished_solution_fails(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys):
    solutions = tmp_path / "solutions"
    solutions.mkdir()
    (solutions / "level_03.json").write_text('{"moves": [[2, 0]]}')
    monkeypatch.setenv(SOLUTION_ENV_VAR, str(solutions))

    assert main(["--replay", "level_03"]) == 1
    assert "incomplete" in capsys.readouterr().out
