# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

"""Shared fixtures for fakescope tests."""

import pytest

from fakescope.collaborators import register_builtins
from fakescope.core.registry import Registry
from fakescope.core.scope import ScopeManager

pytest_plugins = ['fakescope.testing']


@pytest.fixture
def registry() -> Registry:
    """A fresh, unfrozen registry with the built-in kinds."""
    registry = Registry()
    register_builtins(registry)
    return registry


@pytest.fixture
def scope_manager(registry: Registry) -> ScopeManager:
    """A manager over a fresh registry, so tests never freeze the default one."""
    return ScopeManager(registry=registry)
