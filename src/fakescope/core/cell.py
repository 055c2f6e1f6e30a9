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

"""Isolated, serialized state owned by a single fake.

A :class:`StateCell` owns one state object and a private lock. Callers never
get the state itself; they hand the cell a function and the cell runs it
against the state while holding the lock::

    cell = StateCell(kind, scope_id, ClockState())
    cell.configure('set_schedule', lambda s: s.values.extend([1, 2]))
    value = cell.apply('now', lambda s: s.advance())

The three entry points behave identically with respect to locking; they
differ in intent (and in the operation label used in errors and logs):

- ``configure``: "given" operations that script the fake.
- ``apply``: real operations invoked by the code under test.
- ``observe``: "then" operations; the function must return a snapshot.

Calls are serialized, not queued: the lock does not promise FIFO order
between threads.

Once :meth:`StateCell.release` has run, every entry point raises
:class:`~fakescope.core.error.ScopeAlreadyTornDownError`.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Generic, TypeVar

from fakescope.core.error import ScopeAlreadyTornDownError
from fakescope.core.kinds import CollaboratorKind, ScopeId

S = TypeVar('S')
R = TypeVar('R')


class StateCell(Generic[S]):
    """Serializing access point to the private state of one fake.

    Calls on the same cell run one at a time, in lock acquisition order.
    Calls made from one thread are therefore applied in the order they were
    made. Calls racing from different threads are applied in whichever order
    they win the lock, which need not be the order they arrived in.
    Calls on different cells never contend with each other.

    Attributes:
        kind: Kind of the fake owning this cell.
        scope_id: Scope of the fake owning this cell.
    """

    def __init__(self, kind: CollaboratorKind, scope_id: ScopeId, state: S) -> None:
        self.kind = kind
        self.scope_id = scope_id
        self._state: S | None = state
        self._released = False
        self._lock = threading.Lock()

    @property
    def released(self) -> bool:
        """Whether the owning scope has been torn down."""
        with self._lock:
            return self._released

    def configure(self, operation: str, fn: Callable[[S], R]) -> R:
        """Run a configuration operation against the state."""
        return self._run(operation, fn)

    def apply(self, operation: str, fn: Callable[[S], R]) -> R:
        """Run a real operation against the state."""
        return self._run(operation, fn)

    def observe(self, operation: str, fn: Callable[[S], R]) -> R:
        """Run an observation against the state; ``fn`` must return a snapshot."""
        return self._run(operation, fn)

    def release(self) -> None:
        """Drop the state. Idempotent; later calls to any entry point fail."""
        with self._lock:
            self._state = None
            self._released = True

    def _run(self, operation: str, fn: Callable[[S], R]) -> R:
        with self._lock:
            if self._released:
                raise ScopeAlreadyTornDownError(
                    f'{self.kind} fake used after its scope was torn down',
                    kind=self.kind,
                    scope_id=self.scope_id,
                    operation=operation,
                )
            return fn(self._state)  # type: ignore[arg-type]
