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

"""Context-aware lookup from collaborator kinds to implementations.

Code under test never receives its collaborators as parameters. It asks the
bridge instead::

    from fakescope import clock_source, console_sink

    def report() -> None:
        console_sink().write(f'now={clock_source().now()}')

The active scope is held in a ``ContextVar``:

*   Inside a scope, lookups return that scope's fake for the kind.
*   Outside any scope, lookups return the real implementation from the
    registry.

asyncio tasks copy the context of the code that creates them, so tasks
spawned inside a scope resolve to the same fakes. Threads do not inherit
context; use :func:`propagating` or :func:`start_thread` to carry it over.
"""

from __future__ import annotations

import contextvars
import functools
import threading
from collections.abc import Callable
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, ParamSpec, TypeVar

from fakescope.core.error import ScopeAlreadyTornDownError
from fakescope.core.kinds import CollaboratorKind, ScopeState
from fakescope.core.registry import Registry, default_registry

if TYPE_CHECKING:
    from fakescope.collaborators import ArgumentSource, ClockSource, ConsoleSink, FileSource
    from fakescope.core.scope import Scope

P = ParamSpec('P')
R = TypeVar('R')

_active_scope: ContextVar[Scope | None] = ContextVar('fakescope_active_scope', default=None)


def current_scope() -> Scope | None:
    """Return the scope active in the calling context, or ``None``."""
    return _active_scope.get()


def resolve(kind: CollaboratorKind, registry: Registry | None = None) -> Any:  # noqa: ANN401 - depends on kind
    """Return the implementation of ``kind`` for the calling context.

    Args:
        kind: The collaborator kind to look up.
        registry: Registry consulted outside any scope. Defaults to
            :func:`~fakescope.core.registry.default_registry`.

    Returns:
        The active scope's fake, or the real implementation.

    Raises:
        ScopeAlreadyTornDownError: If the context still points at a scope that
            has been torn down.
        FakeScopeError: If the kind is unknown.
    """
    scope = _active_scope.get()
    if scope is None:
        return (registry or default_registry()).resolve(kind)
    if scope.state is ScopeState.TORN_DOWN:
        raise ScopeAlreadyTornDownError(
            f'Cannot resolve "{kind}": scope was already torn down',
            kind=kind,
            scope_id=scope.scope_id,
            operation='resolve',
        )
    return scope.get(kind)


def file_source() -> FileSource:
    """Return the file source for the calling context."""
    return resolve(CollaboratorKind.FILE_SOURCE)


def console_sink() -> ConsoleSink:
    """Return the console sink for the calling context."""
    return resolve(CollaboratorKind.CONSOLE_SINK)


def clock_source() -> ClockSource:
    """Return the clock source for the calling context."""
    return resolve(CollaboratorKind.CLOCK_SOURCE)


def argument_source() -> ArgumentSource:
    """Return the argument source for the calling context."""
    return resolve(CollaboratorKind.ARGUMENT_SOURCE)


def propagating(fn: Callable[P, R]) -> Callable[P, R]:
    """Bind ``fn`` to a copy of the caller's context.

    The returned callable can run on any thread and still resolves
    collaborators to the scope that was active when it was wrapped::

        with manager.scope():
            future = executor.submit(propagating(worker), item)

    Each call runs in its own copy, so the wrapper may be invoked
    concurrently.
    """
    ctx = contextvars.copy_context()

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        return ctx.copy().run(fn, *args, **kwargs)

    return wrapper


def start_thread(target: Callable[..., Any], *args: Any, **kwargs: Any) -> threading.Thread:  # noqa: ANN401
    """Start a thread running ``target`` in the caller's context.

    Returns:
        The started thread. The caller is responsible for joining it before
        the scope exits.
    """
    thread = threading.Thread(target=propagating(target), args=args, kwargs=kwargs, daemon=True)
    thread.start()
    return thread


def _bind(scope: Scope) -> contextvars.Token[Scope | None]:
    return _active_scope.set(scope)


def _unbind(scope: Scope) -> Scope | None:
    """Take an exiting scope out of the calling context.

    Scopes may exit out of order, so the value put back may itself be torn
    down; the binding then falls back to its nearest live ancestor, or to no
    scope at all.

    Returns:
        The scope current in the calling context afterwards.
    """
    if _active_scope.get() is scope:
        try:
            _active_scope.reset(scope._token)
        except ValueError:
            # Exited from a different context than the one that entered.
            _active_scope.set(scope.parent)

    current = _active_scope.get()
    live = current
    while live is not None and live.state is ScopeState.TORN_DOWN:
        live = live.parent
    if live is not current:
        _active_scope.set(live)
    return live
