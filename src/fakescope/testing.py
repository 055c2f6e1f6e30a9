#!/usr/bin/env python3
#
# Copyright 2025 Google LLC
# SPDX-License-Identifier: Apache-2.0

"""pytest fixtures for fakescope.

Enable them from a ``conftest.py``::

    pytest_plugins = ['fakescope.testing']

then ask for ``fake_scope`` in any test::

    def test_greeting(fake_scope: Scope) -> None:
        fake_scope.arguments.set_arguments(['the-file.txt'])
        ...

The scope is torn down by the fixture, after the test, whether it passed or
failed.
"""

from collections.abc import Iterator

import pytest

from fakescope.core.config import load_config
from fakescope.core.logging import configure_logging
from fakescope.core.scope import Scope, ScopeManager


def pytest_configure(config: pytest.Config) -> None:
    """Keep framework logs off stdout; show debug events with ``-vv``."""
    configure_logging(verbose=config.getoption('verbose') > 1)


@pytest.fixture(scope='session')
def fakescope_manager(request: pytest.FixtureRequest) -> ScopeManager:
    """Session-wide manager configured from the project's ``pyproject.toml``."""
    return ScopeManager(config=load_config(request.config.rootpath))


@pytest.fixture
def fake_scope(fakescope_manager: ScopeManager) -> Iterator[Scope]:
    """A fresh scope for one test."""
    with fakescope_manager.scope() as scope:
        yield scope
