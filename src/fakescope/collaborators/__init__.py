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

"""Built-in collaborators.

Each module defines, for one :class:`~fakescope.core.kinds.CollaboratorKind`:

- a ``Protocol`` describing the capability interface code under test uses,
- the real implementation,
- the fake implementation.

| Kind              | Protocol         | Real                 | Fake                 |
|-------------------|------------------|----------------------|----------------------|
| `argument-source` | `ArgumentSource` | `RealArgumentSource` | `FakeArgumentSource` |
| `clock-source`    | `ClockSource`    | `RealClockSource`    | `FakeClockSource`    |
| `console-sink`    | `ConsoleSink`    | `RealConsoleSink`    | `FakeConsoleSink`    |
| `file-source`     | `FileSource`     | `RealFileSource`     | `FakeFileSource`     |
"""

from fakescope.core.kinds import CollaboratorKind
from fakescope.core.registry import Registry

from .arguments import ArgumentSource, FakeArgumentSource, RealArgumentSource
from .clock import ClockSource, FakeClockSource, RealClockSource
from .console import ConsoleSink, FakeConsoleSink, RealConsoleSink
from .files import FakeFileSource, FileSource, RealFileSource


def register_builtins(registry: Registry) -> None:
    """Register the four built-in collaborator kinds with ``registry``."""
    registry.register(CollaboratorKind.FILE_SOURCE, real=RealFileSource, fake=FakeFileSource)
    registry.register(CollaboratorKind.CONSOLE_SINK, real=RealConsoleSink, fake=FakeConsoleSink)
    registry.register(CollaboratorKind.CLOCK_SOURCE, real=RealClockSource, fake=FakeClockSource)
    registry.register(CollaboratorKind.ARGUMENT_SOURCE, real=RealArgumentSource, fake=FakeArgumentSource)


__all__ = [
    'ArgumentSource',
    'ClockSource',
    'ConsoleSink',
    'FakeArgumentSource',
    'FakeClockSource',
    'FakeConsoleSink',
    'FakeFileSource',
    'FileSource',
    'RealArgumentSource',
    'RealClockSource',
    'RealConsoleSink',
    'RealFileSource',
    'register_builtins',
]
