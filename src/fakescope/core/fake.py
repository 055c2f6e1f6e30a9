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

"""Base class shared by every fake collaborator.

A fake is a typed surface over exactly one :class:`StateCell`. Subclasses
declare their :class:`CollaboratorKind`, build their initial state and expose
three groups of methods:

- the real operations of the collaborator (served through :meth:`Fake._serve`),
- configuration operations (through :meth:`Fake._configure`),
- observation operations (through :meth:`Fake._observe`).

Every real operation served by a fake is recorded as an :class:`Interaction`
when the scope's config enables recording.
"""

from __future__ import annotations

import abc
from collections.abc import Callable
from typing import Any, ClassVar, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict

from fakescope.core.cell import StateCell
from fakescope.core.config import FakeScopeConfig
from fakescope.core.kinds import CollaboratorKind, ScopeId
from fakescope.core.logging import get_logger

logger = get_logger(__name__)

R = TypeVar('R')


class Interaction(BaseModel):
    """One real operation served by a fake.

    Attributes:
        kind: Kind of the fake that served the call.
        operation: Name of the real operation, e.g. ``read``.
        arguments: Positional arguments of the call.
        outcome: Whether the call returned or raised.
        error: Type name of the raised exception, if any.
    """

    model_config = ConfigDict(frozen=True, extra='forbid')

    kind: CollaboratorKind
    operation: str
    arguments: tuple[Any, ...] = ()
    outcome: Literal['returned', 'raised']
    error: str | None = None


class FakeState:
    """Base class for the private state held in a fake's cell."""

    def __init__(self) -> None:
        self.interactions: list[Interaction] = []


S = TypeVar('S', bound=FakeState)


class Fake(abc.ABC, Generic[S]):
    """A scripted, inspectable stand-in for one collaborator kind.

    The class itself is a valid fake factory: ``FakeClockSource(scope_id,
    config)`` builds a fresh fake with a fresh cell.

    Attributes:
        kind: The collaborator kind this fake substitutes.
        scope_id: The scope owning this fake.
    """

    kind: ClassVar[CollaboratorKind]

    def __init__(self, scope_id: ScopeId, config: FakeScopeConfig | None = None) -> None:
        self.scope_id = scope_id
        self._record = (config or FakeScopeConfig()).record_interactions
        self._cell: StateCell[S] = StateCell(self.kind, scope_id, self._initial_state())

    @abc.abstractmethod
    def _initial_state(self) -> S:
        """Build the empty state for a fresh cell."""

    @property
    def released(self) -> bool:
        """Whether this fake's scope has been torn down."""
        return self._cell.released

    def release(self) -> None:
        """Release the cell. Called by the scope manager at teardown."""
        self._cell.release()

    def interactions(self) -> tuple[Interaction, ...]:
        """Return every recorded real operation, in call order."""
        return self._observe('interactions', lambda s: tuple(s.interactions))

    def _where(self, operation: str) -> dict[str, str]:
        """Location arguments for framework errors raised by this fake."""
        return {'kind': self.kind, 'scope_id': self.scope_id, 'operation': operation}

    def _configure(self, operation: str, fn: Callable[[S], R]) -> R:
        return self._cell.configure(operation, fn)

    def _observe(self, operation: str, fn: Callable[[S], R]) -> R:
        return self._cell.observe(operation, fn)

    def _serve(self, operation: str, arguments: tuple[Any, ...], fn: Callable[[S], R]) -> R:
        """Run a real operation against the cell, recording its outcome."""

        def run(state: S) -> R:
            try:
                result = fn(state)
            except Exception as exc:
                logger.debug('fake raised', kind=str(self.kind), operation=operation, error=exc)
                if self._record:
                    state.interactions.append(
                        Interaction(
                            kind=self.kind,
                            operation=operation,
                            arguments=arguments,
                            outcome='raised',
                            error=type(exc).__name__,
                        )
                    )
                raise
            if self._record:
                state.interactions.append(
                    Interaction(kind=self.kind, operation=operation, arguments=arguments, outcome='returned')
                )
            return result

        return self._cell.apply(operation, run)

    def __repr__(self) -> str:
        return f'{type(self).__name__}(scope_id={self.scope_id!r})'


# Builds the fake for one kind in a new scope.
FakeFactory = Callable[[ScopeId, FakeScopeConfig], Fake[Any]]
