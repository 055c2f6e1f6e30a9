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

"""Clock source collaborator: a monotonic clock in whole microseconds."""

from __future__ import annotations

import time
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from fakescope.core.error import InvalidArgumentError, ScheduleExhaustedError
from fakescope.core.fake import Fake, FakeState
from fakescope.core.kinds import CollaboratorKind


@runtime_checkable
class ClockSource(Protocol):
    """Capability interface of the clock source."""

    def now(self) -> int:
        """Return the current instant in microseconds.

        Only differences between instants are meaningful.
        """
        ...


class RealClockSource:
    """Reads the process monotonic clock."""

    def now(self) -> int:
        return time.monotonic_ns() // 1000


class _ClockState(FakeState):
    def __init__(self) -> None:
        super().__init__()
        self.values: list[int] = []
        self.cursor = 0


class FakeClockSource(Fake[_ClockState]):
    """Clock that replays a schedule of instants.

    Each ``now()`` consumes the next scheduled value. Reading past the end of
    the schedule raises
    :class:`~fakescope.core.error.ScheduleExhaustedError`.
    """

    kind = CollaboratorKind.CLOCK_SOURCE

    def _initial_state(self) -> _ClockState:
        return _ClockState()

    def set_schedule(self, values: Iterable[int]) -> None:
        """Append ``values`` to the schedule.

        Raises:
            InvalidArgumentError: If a value is not a non-negative integer, or
                the schedule would go backwards.
        """
        new_values = list(values)
        for value in new_values:
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise InvalidArgumentError(
                    f'schedule values must be non-negative integers, got {value!r}', **self._where('set_schedule')
                )

        def configure(state: _ClockState) -> None:
            previous = state.values[-1] if state.values else 0
            for value in new_values:
                if value < previous:
                    raise InvalidArgumentError(
                        f'schedule must not go backwards: {value} after {previous}', **self._where('set_schedule')
                    )
                previous = value
            state.values.extend(new_values)

        self._configure('set_schedule', configure)

    def now(self) -> int:
        def serve(state: _ClockState) -> int:
            if state.cursor >= len(state.values):
                raise ScheduleExhaustedError(
                    f'Clock read #{state.cursor + 1} but only {len(state.values)} value(s) were scheduled',
                    **self._where('now'),
                )
            value = state.values[state.cursor]
            state.cursor += 1
            return value

        return self._serve('now', (), serve)

    def consumed(self) -> tuple[int, ...]:
        """Return the values already returned by ``now()``."""
        return self._observe('consumed', lambda s: tuple(s.values[: s.cursor]))

    def remaining(self) -> tuple[int, ...]:
        """Return the scheduled values not yet consumed."""
        return self._observe('remaining', lambda s: tuple(s.values[s.cursor :]))
