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

"""Scope-isolated fakes for a program's external collaborators.

Code under test looks its collaborators up instead of receiving them::

    from fakescope import console_sink

    def greet(name: str) -> None:
        console_sink().write(f'Hello, {name}!')

Tests run it inside a scope and inspect the fakes afterwards::

    from fakescope import ScopeManager

    def test_greet() -> None:
        with ScopeManager().scope() as scope:
            greet('world')
        assert scope.console.written_lines() == ...

Outside a scope the same lookups return the real implementations.
"""

from fakescope.collaborators import (
    ArgumentSource,
    ClockSource,
    ConsoleSink,
    FakeArgumentSource,
    FakeClockSource,
    FakeConsoleSink,
    FakeFileSource,
    FileSource,
    RealArgumentSource,
    RealClockSource,
    RealConsoleSink,
    RealFileSource,
    register_builtins,
)
from fakescope.core.bridge import (
    argument_source,
    clock_source,
    console_sink,
    current_scope,
    file_source,
    propagating,
    resolve,
    start_thread,
)
from fakescope.core.config import FakeScopeConfig, load_config
from fakescope.core.error import (
    ErrorCode,
    FakeScopeError,
    InvalidArgumentError,
    NotConfiguredError,
    ScheduleExhaustedError,
    ScopeAlreadyTornDownError,
    SimulatedBrokenPipeError,
    SimulatedFailure,
    SimulatedFileNotFoundError,
    SimulatedPermissionError,
)
from fakescope.core.fake import Fake, FakeFactory, FakeState, Interaction
from fakescope.core.kinds import CollaboratorKind, ScopeId, ScopeState
from fakescope.core.logging import configure_logging, get_logger
from fakescope.core.registry import Registry, default_registry
from fakescope.core.scope import Scope, ScopeManager, live_scope_ids

__all__ = [
    'ArgumentSource',
    'ClockSource',
    'CollaboratorKind',
    'ConsoleSink',
    'ErrorCode',
    'Fake',
    'FakeArgumentSource',
    'FakeClockSource',
    'FakeConsoleSink',
    'FakeFactory',
    'FakeFileSource',
    'FakeScopeConfig',
    'FakeScopeError',
    'FakeState',
    'FileSource',
    'Interaction',
    'InvalidArgumentError',
    'NotConfiguredError',
    'RealArgumentSource',
    'RealClockSource',
    'RealConsoleSink',
    'RealFileSource',
    'Registry',
    'ScheduleExhaustedError',
    'Scope',
    'ScopeAlreadyTornDownError',
    'ScopeId',
    'ScopeManager',
    'ScopeState',
    'SimulatedBrokenPipeError',
    'SimulatedFailure',
    'SimulatedFileNotFoundError',
    'SimulatedPermissionError',
    'argument_source',
    'clock_source',
    'configure_logging',
    'console_sink',
    'current_scope',
    'default_registry',
    'file_source',
    'get_logger',
    'live_scope_ids',
    'load_config',
    'propagating',
    'register_builtins',
    'resolve',
    'start_thread',
]
