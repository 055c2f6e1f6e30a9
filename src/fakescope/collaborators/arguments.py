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

"""Argument source collaborator: the program's command-line arguments."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from fakescope.core.error import InvalidArgumentError, NotConfiguredError
from fakescope.core.fake import Fake, FakeState
from fakescope.core.kinds import CollaboratorKind


@runtime_checkable
class ArgumentSource(Protocol):
    """Capability interface of the argument source."""

    def arguments(self) -> list[str]:
        """Return the command-line arguments, without the program name."""
        ...


class RealArgumentSource:
    """Reads ``sys.argv``."""

    def arguments(self) -> list[str]:
        return list(sys.argv[1:])


class _ArgumentState(FakeState):
    def __init__(self) -> None:
        super().__init__()
        self.values: list[str] | None = None


class FakeArgumentSource(Fake[_ArgumentState]):
    """Argument source returning a configured list."""

    kind = CollaboratorKind.ARGUMENT_SOURCE

    def _initial_state(self) -> _ArgumentState:
        return _ArgumentState()

    def set_arguments(self, values: Iterable[str]) -> None:
        """Replace the configured arguments. An empty list is a valid setting."""
        if isinstance(values, str):
            raise InvalidArgumentError(
                'arguments must be a sequence of strings, not a single string', **self._where('set_arguments')
            )
        new_values = list(values)
        for value in new_values:
            if not isinstance(value, str):
                raise InvalidArgumentError(
                    f'arguments must be strings, got {type(value).__name__}', **self._where('set_arguments')
                )

        def configure(state: _ArgumentState) -> None:
            state.values = new_values

        self._configure('set_arguments', configure)

    def arguments(self) -> list[str]:
        def serve(state: _ArgumentState) -> list[str]:
            if state.values is None:
                raise NotConfiguredError('No arguments configured', **self._where('arguments'))
            return list(state.values)

        return self._serve('arguments', (), serve)
