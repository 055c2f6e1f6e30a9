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

"""Console sink collaborator: write one line of output."""

from __future__ import annotations

import sys
from collections.abc import Callable
from typing import Protocol, runtime_checkable

from fakescope.core.error import InvalidArgumentError, SimulatedBrokenPipeError
from fakescope.core.fake import Fake, FakeState
from fakescope.core.kinds import CollaboratorKind


@runtime_checkable
class ConsoleSink(Protocol):
    """Capability interface of the console sink."""

    def write(self, line: str) -> None:
        """Emit ``line`` followed by a newline."""
        ...


class RealConsoleSink:
    """Writes lines to standard output."""

    def write(self, line: str) -> None:
        _check_line(line)
        print(line, file=sys.stdout, flush=True)  # noqa: T201 - this is the console


def _check_line(line: object) -> None:
    if not isinstance(line, str):
        raise TypeError(f'write() argument must be str, not {type(line).__name__}')


class _ConsoleState(FakeState):
    def __init__(self) -> None:
        super().__init__()
        self.lines: list[str] = []
        self.failure: Callable[[], BaseException] | None = None


class FakeConsoleSink(Fake[_ConsoleState]):
    """Console sink that records every line instead of printing it."""

    kind = CollaboratorKind.CONSOLE_SINK

    def _initial_state(self) -> _ConsoleState:
        return _ConsoleState()

    def fail_with(self, error: BaseException | None = None) -> None:
        """Make every later ``write`` raise ``error``.

        Args:
            error: The exception to raise. Defaults to a ``BrokenPipeError``,
                which is what writing to a closed pipe raises.
        """
        if error is not None and not isinstance(error, BaseException):
            raise InvalidArgumentError(
                f'error must be an exception instance, got {type(error).__name__}', **self._where('fail_with')
            )

        def configure(state: _ConsoleState) -> None:
            state.failure = SimulatedBrokenPipeError if error is None else (lambda: error)

        self._configure('fail_with', configure)

    def write(self, line: str) -> None:
        _check_line(line)

        def serve(state: _ConsoleState) -> None:
            if state.failure is not None:
                raise state.failure()
            state.lines.append(line)

        self._serve('write', (line,), serve)

    def written_lines(self) -> tuple[str, ...]:
        """Return every line written so far, in call order."""
        return self._observe('written_lines', lambda s: tuple(s.lines))
