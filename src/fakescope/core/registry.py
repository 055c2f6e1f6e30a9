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

"""Registry binding collaborator kinds to their real and fake implementations.

Each kind is registered once, at program start, with:

- a zero-argument factory for the real implementation, built lazily on first
  resolution and cached for the life of the process;
- a :data:`~fakescope.core.fake.FakeFactory` the scope manager calls once per
  scope.

After :meth:`Registry.freeze` (called by the scope manager when the first
scope is entered) the bindings are read-only.

Example::

    registry = Registry()
    registry.register(CollaboratorKind.CLOCK_SOURCE, real=RealClockSource, fake=FakeClockSource)
    registry.resolve(CollaboratorKind.CLOCK_SOURCE).now()
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from fakescope.core.error import E, ERRORS, FakeScopeError
from fakescope.core.fake import FakeFactory
from fakescope.core.kinds import CollaboratorKind
from fakescope.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class _Binding:
    real: Callable[[], Any]
    fake: FakeFactory
    instance: Any = None


class Registry:
    """Central table of collaborator kinds.

    This class is thread-safe. Lookups after :meth:`freeze` read an immutable
    table; the lock only guards registration and the one-time construction of
    each real implementation.
    """

    def __init__(self) -> None:
        """Initialize an empty, unfrozen Registry."""
        self._bindings: dict[CollaboratorKind, _Binding] = {}
        self._frozen = False
        self._lock = threading.RLock()

    @property
    def frozen(self) -> bool:
        """Whether registration is closed."""
        return self._frozen

    def register(self, kind: CollaboratorKind, *, real: Callable[[], Any], fake: FakeFactory) -> None:
        """Bind a collaborator kind to its real and fake implementations.

        Args:
            kind: The collaborator kind.
            real: Zero-argument factory for the real implementation.
            fake: Factory building a fresh fake for a scope.

        Raises:
            FakeScopeError: If the registry is frozen or the kind is already
                registered.
        """
        with self._lock:
            if self._frozen:
                raise FakeScopeError(
                    code=E.REGISTRY_FROZEN,
                    message=f'Cannot register "{kind}" after scopes have started',
                    hint=ERRORS[E.REGISTRY_FROZEN].hint,
                    kind=kind,
                    operation='register',
                )
            if kind in self._bindings:
                raise FakeScopeError(
                    code=E.KIND_ALREADY_REGISTERED,
                    message=f'Collaborator kind "{kind}" is already registered',
                    hint=ERRORS[E.KIND_ALREADY_REGISTERED].hint,
                    kind=kind,
                    operation='register',
                )
            self._bindings[kind] = _Binding(real=real, fake=fake)
        logger.debug('registered collaborator', kind=str(kind))

    def freeze(self) -> None:
        """Close registration. Idempotent."""
        with self._lock:
            if not self._frozen:
                self._frozen = True
                logger.debug('registry frozen', kinds=[str(k) for k in self._bindings])

    def kinds(self) -> list[CollaboratorKind]:
        """Return the registered kinds, in registration order."""
        with self._lock:
            return list(self._bindings)

    def resolve(self, kind: CollaboratorKind) -> Any:  # noqa: ANN401 - capability type depends on kind
        """Return the real implementation for a kind.

        Raises:
            FakeScopeError: If the kind is not registered.
        """
        binding = self._binding(kind, 'resolve')
        if binding.instance is None:
            with self._lock:
                if binding.instance is None:
                    binding.instance = binding.real()
        return binding.instance

    def fake_factory(self, kind: CollaboratorKind) -> FakeFactory:
        """Return the fake factory for a kind.

        Raises:
            FakeScopeError: If the kind is not registered.
        """
        return self._binding(kind, 'fake_factory').fake

    def _binding(self, kind: CollaboratorKind, operation: str) -> _Binding:
        if self._frozen:
            # The table no longer changes once frozen.
            binding = self._bindings.get(kind)
        else:
            with self._lock:
                binding = self._bindings.get(kind)
        if binding is None:
            raise FakeScopeError(
                code=E.UNKNOWN_KIND,
                message=f'No collaborator registered for kind "{kind}"',
                hint=ERRORS[E.UNKNOWN_KIND].hint,
                kind=str(kind),
                operation=operation,
            )
        return binding


_default_registry: Registry | None = None
_default_lock = threading.Lock()


def default_registry() -> Registry:
    """Return the process-wide registry with the built-in kinds wired."""
    global _default_registry
    with _default_lock:
        if _default_registry is None:
            from fakescope.collaborators import register_builtins

            registry = Registry()
            register_builtins(registry)
            _default_registry = registry
        return _default_registry
