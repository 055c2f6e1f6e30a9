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

"""File source collaborator: read a text file by path."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import Protocol, runtime_checkable

from fakescope.core.error import (
    InvalidArgumentError,
    NotConfiguredError,
    SimulatedFileNotFoundError,
    SimulatedPermissionError,
)
from fakescope.core.fake import Fake, FakeState
from fakescope.core.kinds import CollaboratorKind

@runtime_checkable
class FileSource(Protocol):
    """Capability interface of the file source."""

    def read(self, path: str | os.PathLike[str]) -> str:
        """Return the text contents of ``path``."""
        ...


class RealFileSource:
    """Reads files from the local filesystem as UTF-8 text."""

    def read(self, path: str | os.PathLike[str]) -> str:
        return Path(path).read_text(encoding='utf-8')


class _FileState(FakeState):
    def __init__(self) -> None:
        super().__init__()
        self.contents: dict[str, str] = {}
        self.failures: dict[str, Callable[[], BaseException]] = {}
        self.read_paths: list[str] = []


class FakeFileSource(Fake[_FileState]):
    """Scripted file source.

    Given::

        scope.files.set_contents('the-file.txt', 'world')
        scope.files.set_missing('gone.txt')

    Then ``read('the-file.txt')`` returns ``'world'``, ``read('gone.txt')``
    raises a ``FileNotFoundError`` like ``open()`` would, and reading any
    other path raises :class:`~fakescope.core.error.NotConfiguredError`.
    """

    kind = CollaboratorKind.FILE_SOURCE

    def _initial_state(self) -> _FileState:
        return _FileState()

    def _key(self, path: str | os.PathLike[str], operation: str) -> str:
        try:
            key = os.fspath(path)
        except TypeError:
            raise InvalidArgumentError(
                f'path must be str or os.PathLike, got {type(path).__name__}', **self._where(operation)
            ) from None
        if not isinstance(key, str) or not key:
            raise InvalidArgumentError('path must be a non-empty string', **self._where(operation))
        return key

    # -- Configuration -------------------------------------------------------

    def set_contents(self, path: str | os.PathLike[str], text: str) -> None:
        """Make ``read(path)`` return ``text``. Overwrites earlier configuration."""
        key = self._key(path, 'set_contents')
        if not isinstance(text, str):
            raise InvalidArgumentError(
                f'contents must be str, got {type(text).__name__}', **self._where('set_contents')
            )

        def configure(state: _FileState) -> None:
            state.failures.pop(key, None)
            state.contents[key] = text

        self._configure('set_contents', configure)

    def set_missing(self, path: str | os.PathLike[str]) -> None:
        """Make ``read(path)`` raise ``FileNotFoundError``."""
        key = self._key(path, 'set_missing')
        self._set_failure(key, lambda: SimulatedFileNotFoundError(key), 'set_missing')

    def set_unreadable(self, path: str | os.PathLike[str]) -> None:
        """Make ``read(path)`` raise ``PermissionError``."""
        key = self._key(path, 'set_unreadable')
        self._set_failure(key, lambda: SimulatedPermissionError(key), 'set_unreadable')

    def fail_with(self, path: str | os.PathLike[str], error: BaseException) -> None:
        """Make ``read(path)`` raise ``error``."""
        key = self._key(path, 'fail_with')
        if not isinstance(error, BaseException):
            raise InvalidArgumentError(
                f'error must be an exception instance, got {type(error).__name__}', **self._where('fail_with')
            )
        self._set_failure(key, lambda: error, 'fail_with')

    def _set_failure(self, key: str, make_error: Callable[[], BaseException], operation: str) -> None:
        def configure(state: _FileState) -> None:
            state.contents.pop(key, None)
            state.failures[key] = make_error

        self._configure(operation, configure)

    # -- Real operations -----------------------------------------------------

    def read(self, path: str | os.PathLike[str]) -> str:
        key = self._key(path, 'read')

        def serve(state: _FileState) -> str:
            state.read_paths.append(key)
            if key in state.failures:
                raise state.failures[key]()
            if key not in state.contents:
                raise NotConfiguredError(f'No contents configured for path "{key}"', **self._where('read'))
            return state.contents[key]

        return self._serve('read', (key,), serve)

    # -- Observation ---------------------------------------------------------

    def read_paths(self) -> tuple[str, ...]:
        """Return every path passed to ``read``, in call order."""
        return self._observe('read_paths', lambda s: tuple(s.read_paths))
