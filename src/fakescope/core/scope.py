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

"""Scope lifecycle: creation, publication and teardown of a test's fakes.

Overview
--------

A :class:`Scope` is the set of fakes belonging to one test: exactly one fake
per registered :class:`CollaboratorKind`, each with its own state cell. The
:class:`ScopeManager` is the only thing that creates or destroys scopes.

Lifecycle::

    manager.enter()                      manager.exit(scope)
         │                                      │
         ▼                                      ▼
    ┌─────────┐  all fakes built  ┌────────┐  cells released  ┌───────────┐
    │ created │ ────────────────► │ active │ ───────────────► │ torn-down │
    └─────────┘                   └────────┘                  └───────────┘
         │ a factory raised
         ▼
    cells built so far released, FS-SCOPE-SETUP-FAILED raised

The preferred entry point is the context manager, which guarantees teardown
on every exit path of the body::

    manager = ScopeManager()
    with manager.scope() as scope:
        scope.clock.set_schedule([1000, 1234])
        run_code_under_test()
        assert scope.console.written_lines() == (...)

or, equivalently, ``manager.run(body)`` / ``await manager.arun(body)``.
"""

from __future__ import annotations

import threading
import uuid
from collections.abc import Awaitable, Callable, Iterator, Mapping
from contextlib import contextmanager
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, TypeVar

from fakescope.core import bridge
from fakescope.core.config import FakeScopeConfig
from fakescope.core.error import E, ERRORS, FakeScopeError, ScopeAlreadyTornDownError
from fakescope.core.fake import Fake, FakeFactory
from fakescope.core.kinds import CollaboratorKind, ScopeId, ScopeState
from fakescope.core.logging import bind_scope, get_logger
from fakescope.core.registry import Registry, default_registry

if TYPE_CHECKING:
    from fakescope.collaborators import FakeArgumentSource, FakeClockSource, FakeConsoleSink, FakeFileSource

logger = get_logger(__name__)

R = TypeVar('R')

# Ids of every live scope in the process, across all managers.
_live_ids: set[ScopeId] = set()
_live_ids_lock = threading.Lock()


def live_scope_ids() -> frozenset[ScopeId]:
    """Return the ids of all scopes currently entered and not yet exited."""
    with _live_ids_lock:
        return frozenset(_live_ids)


class Scope:
    """The fakes of one test, and their shared lifecycle.

    Attributes:
        scope_id: Unique identifier, never shared with another live scope.
        instances: Read-only mapping of kind to fake.
        parent: The scope that was current when this one was entered, if any.
    """

    def __init__(
        self,
        scope_id: ScopeId,
        instances: Mapping[CollaboratorKind, Fake[Any]],
        parent: Scope | None = None,
    ) -> None:
        self.scope_id = scope_id
        self.parent = parent
        self.instances: Mapping[CollaboratorKind, Fake[Any]] = MappingProxyType(dict(instances))
        self._state = ScopeState.CREATED
        self._token: Any = None

    @property
    def state(self) -> ScopeState:
        """Current lifecycle state."""
        return self._state

    def get(self, kind: CollaboratorKind) -> Fake[Any]:
        """Return this scope's fake for ``kind``.

        Raises:
            ScopeAlreadyTornDownError: If the scope has exited.
            FakeScopeError: If no fake of that kind exists in this scope.
        """
        if self._state is ScopeState.TORN_DOWN:
            raise ScopeAlreadyTornDownError(
                f'Scope has no live "{kind}" fake',
                kind=kind,
                scope_id=self.scope_id,
                operation='get',
            )
        try:
            return self.instances[kind]
        except KeyError:
            raise FakeScopeError(
                code=E.UNKNOWN_KIND,
                message=f'Scope has no fake for kind "{kind}"',
                kind=str(kind),
                scope_id=self.scope_id,
                operation='get',
            ) from None

    @property
    def files(self) -> FakeFileSource:
        """The file source fake."""
        return self.get(CollaboratorKind.FILE_SOURCE)  # type: ignore[return-value]

    @property
    def console(self) -> FakeConsoleSink:
        """The console sink fake."""
        return self.get(CollaboratorKind.CONSOLE_SINK)  # type: ignore[return-value]

    @property
    def clock(self) -> FakeClockSource:
        """The clock source fake."""
        return self.get(CollaboratorKind.CLOCK_SOURCE)  # type: ignore[return-value]

    @property
    def arguments(self) -> FakeArgumentSource:
        """The argument source fake."""
        return self.get(CollaboratorKind.ARGUMENT_SOURCE)  # type: ignore[return-value]

    def __repr__(self) -> str:
        return f'Scope(scope_id={self.scope_id!r}, state={self._state.value!r})'


class ScopeManager:
    """Creates scopes, publishes them to the bridge and tears them down.

    A manager can be shared by any number of concurrently running tests. The
    only lock it takes guards the process-wide set of live scope ids, and only
    during enter and exit.

    Args:
        registry: The capability registry. Defaults to the process-wide
            :func:`~fakescope.core.registry.default_registry`.
        config: Settings applied to every scope. Defaults to
            :class:`FakeScopeConfig` defaults.
    """

    def __init__(self, registry: Registry | None = None, config: FakeScopeConfig | None = None) -> None:
        self.registry = registry or default_registry()
        self.config = config or FakeScopeConfig()

    def enter(self, overrides: Mapping[CollaboratorKind, FakeFactory] | None = None) -> Scope:
        """Create a scope and make it current in the calling context.

        Prefer :meth:`scope`, which guarantees the matching :meth:`exit`.

        Args:
            overrides: Fake factories replacing the registered ones, for this
                scope only.

        Returns:
            The active scope.

        Raises:
            FakeScopeError: ``FS-SCOPE-SETUP-FAILED`` if any fake factory
                raised, ``FS-UNKNOWN-KIND`` if an override names an
                unregistered kind.
        """
        self.registry.freeze()
        kinds = self.registry.kinds()
        overrides = dict(overrides or {})
        for kind in overrides:
            if kind not in kinds:
                raise FakeScopeError(
                    code=E.UNKNOWN_KIND,
                    message=f'Cannot override unregistered kind "{kind}"',
                    kind=str(kind),
                    operation='enter',
                )

        scope_id = self._allocate_id()
        built: dict[CollaboratorKind, Fake[Any]] = {}
        try:
            for kind in kinds:
                factory = overrides.get(kind) or self.registry.fake_factory(kind)
                built[kind] = factory(scope_id, self.config)
        except Exception as exc:
            for fake in built.values():
                fake.release()
            self._free_id(scope_id)
            logger.debug('scope setup failed', scope_id=scope_id, kind=str(kind), error=exc)
            raise FakeScopeError(
                code=E.SCOPE_SETUP_FAILED,
                message=f'Failed to build "{kind}" fake: {exc!r}',
                hint=ERRORS[E.SCOPE_SETUP_FAILED].hint,
                kind=kind,
                scope_id=scope_id,
                operation='enter',
            ) from exc

        scope = Scope(scope_id, built, parent=bridge.current_scope())
        scope._token = bridge._bind(scope)
        bind_scope(scope_id)
        scope._state = ScopeState.ACTIVE
        logger.debug('scope entered', kinds=[str(k) for k in built])
        return scope

    def exit(self, scope: Scope) -> None:
        """Tear a scope down: release every cell and clear the binding.

        Nested scopes may exit in any order. Afterwards the calling context
        resolves to the nearest enclosing scope that is still live, or to the
        real implementations when there is none.

        Raises:
            ScopeAlreadyTornDownError: If the scope was already exited.
        """
        with _live_ids_lock:
            if scope.state is ScopeState.TORN_DOWN:
                raise ScopeAlreadyTornDownError(
                    'Scope was already torn down',
                    scope_id=scope.scope_id,
                    operation='exit',
                )
            scope._state = ScopeState.TORN_DOWN
            _live_ids.discard(scope.scope_id)

        for fake in scope.instances.values():
            fake.release()
        logger.debug('scope torn down')
        live = bridge._unbind(scope)
        bind_scope(live.scope_id if live is not None else None)

    @contextmanager
    def scope(self, overrides: Mapping[CollaboratorKind, FakeFactory] | None = None) -> Iterator[Scope]:
        """Run a block with a fresh scope, tearing it down on every exit path.

        Args:
            overrides: Fake factories replacing the registered ones, for this
                scope only.

        Yields:
            The active scope.
        """
        active = self.enter(overrides)
        try:
            yield active
        finally:
            self.exit(active)

    def run(
        self,
        body: Callable[[Scope], R],
        overrides: Mapping[CollaboratorKind, FakeFactory] | None = None,
    ) -> R:
        """Call ``body(scope)`` inside a fresh scope and return its result."""
        with self.scope(overrides) as active:
            return body(active)

    async def arun(
        self,
        body: Callable[[Scope], Awaitable[R]],
        overrides: Mapping[CollaboratorKind, FakeFactory] | None = None,
    ) -> R:
        """Await ``body(scope)`` inside a fresh scope and return its result.

        Run each concurrent scope in its own task (``asyncio.gather`` and
        ``asyncio.create_task`` do this) so their bindings stay apart.
        """
        with self.scope(overrides) as active:
            return await body(active)

    def _allocate_id(self) -> ScopeId:
        with _live_ids_lock:
            while True:
                scope_id = ScopeId(f'{self.config.scope_id_prefix}-{uuid.uuid4().hex}')
                if scope_id not in _live_ids:
                    _live_ids.add(scope_id)
                    return scope_id

    def _free_id(self, scope_id: ScopeId) -> None:
        with _live_ids_lock:
            _live_ids.discard(scope_id)
