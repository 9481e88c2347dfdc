"""Shared pytest fixtures for the typenote test suite."""

from __future__ import annotations

import pytest
from click.testing import CliRunner


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_file(tmp_path):
    """Write a typenote.toml with one replacement and one import origin."""
    path = tmp_path / "typenote.toml"
    path.write_text(
        '[replace]\n"dom.Node" = "Node"\n'
        '[imports]\nNode = "prosemirror-model"\n'
        '[render]\nnullable = "null"\n'
    )
    return path
