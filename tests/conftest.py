"""Root pytest configuration for envbind tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner

from envbind.schema import Schema
from envbind.sources import MappingSource

type Binder = Callable[..., Schema]


@pytest.fixture(scope="session")
def tests_dir() -> Path:
    """Get tests directory path.

    Returns
    -------
    Path
        Path to tests directory
    """
    return Path(__file__).parent


@pytest.fixture
def bind() -> Binder:
    """Build a schema over destinations and bind an in-memory environment.

    Returns
    -------
    Binder
        Function taking ``(envs, *destinations)`` and returning the bound
        schema.
    """

    def _bind(envs: dict[str, str], *destinations: object) -> Schema:
        schema = Schema(*destinations)
        schema.bind(MappingSource(envs))
        return schema

    return _bind


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide Click CLI test runner.

    Returns
    -------
    CliRunner
        Click test runner.
    """
    return CliRunner()


@pytest.fixture
def values_file(tmp_path: Path) -> Path:
    """Create a YAML values file for the sample settings.

    Parameters
    ----------
    tmp_path : Path
        Temporary directory path provided by pytest.

    Returns
    -------
    Path
        Path to the created YAML file.
    """
    path = tmp_path / "values.yaml"
    path.write_text(
        """
SAMPLE_HOST: 0.0.0.0
SAMPLE_PORT: 9000
SAMPLE_TAGS:
  - blue
  - green
"""
    )
    return path
