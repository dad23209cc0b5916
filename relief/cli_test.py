"""Tests for the relief command line interface."""

import pytest
from typer.testing import CliRunner

from relief.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    monkeypatch.setenv("RELIEF_BASE_PATH", str(tmp_path))
    monkeypatch.delenv("RELIEF_BACKEND", raising=False)
    monkeypatch.delenv("RELIEF_SEED_SAMPLE_DATA", raising=False)
    return tmp_path


def test_init_creates_database(isolated_settings):
    result = runner.invoke(app, ["--backend", "database", "init"])

    assert result.exit_code == 0, result.output
    assert "Database ready" in result.output
    assert (isolated_settings / "data" / "relief.db").exists()


def test_seed_then_list_from_database():
    seeded = runner.invoke(app, ["--backend", "database", "seed"])
    assert seeded.exit_code == 0, seeded.output
    assert "2 disasters" in seeded.output

    listed = runner.invoke(app, ["--backend", "database", "disasters", "--tag", "fire"])

    assert listed.exit_code == 0, listed.output
    assert "California Wildfire Alert" in listed.output
    assert "NYC Flood Emergency" not in listed.output


def test_near_with_negative_longitude():
    runner.invoke(app, ["-b", "database", "seed"])

    result = runner.invoke(
        app, ["-b", "database", "near", "--radius", "5000", "--", "40.7074", "-73.9776"]
    )

    assert result.exit_code == 0, result.output
    assert "Found 0 resources" in result.output


def test_memory_backend_starts_empty():
    result = runner.invoke(app, ["disasters"])

    assert result.exit_code == 0, result.output
    assert "No disasters found." in result.output


def test_stats_with_seeded_memory(monkeypatch):
    monkeypatch.setenv("RELIEF_SEED_SAMPLE_DATA", "true")

    result = runner.invoke(app, ["stats"])

    assert result.exit_code == 0, result.output
    assert '"activeDisasters": 2' in result.output
    assert '"totalResources": 3' in result.output


def test_sweep_cache():
    result = runner.invoke(app, ["-b", "database", "sweep-cache"])

    assert result.exit_code == 0, result.output
    assert "Removed 0 expired cache entries" in result.output


def test_invalid_backend():
    result = runner.invoke(app, ["--backend", "postgres", "disasters"])
    assert result.exit_code == 2


def test_seed_twice_against_same_database():
    first = runner.invoke(app, ["--backend", "database", "seed"])
    second = runner.invoke(app, ["--backend", "database", "seed"])

    assert first.exit_code == 0, first.output
    assert second.exit_code == 0, second.output
    assert "already present" in second.output
    assert "2 disasters" in second.output
