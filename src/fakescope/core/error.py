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

"""Structured errors for fakescope.

There are two families of errors, and they never overlap:

- **Framework errors** derive from :class:`FakeScopeError`. They mean the
  test itself is wrong (a fake was used without being configured, a schedule
  ran out, a scope was used after teardown) and carry an ``FS-NAMED-KEY``
  code plus the kind, scope and operation involved.
- **Simulated failures** are the real exception types the real collaborator
  would raise (``FileNotFoundError``, ``PermissionError``, ...), mixed with
  :class:`SimulatedFailure` so a test can tell them apart if it wants to.
  Code under test handles them through its normal error paths.

Code categories::

    FS-NOT-CONFIGURED / FS-SCHEDULE-EXHAUSTED / FS-INVALID-ARGUMENT
                                 Fake usage errors
    FS-SCOPE-*                   Scope lifecycle errors
    FS-REGISTRY-* / FS-*-KIND*   Capability registry errors
    FS-CONFIG-*                  Configuration errors

Usage::

    from fakescope.core.error import E, FakeScopeError

    raise FakeScopeError(
        code=E.UNKNOWN_KIND,
        message='No collaborator registered for kind "printer"',
        hint='Register it before the first scope is entered.',
    )
"""

from __future__ import annotations

import errno
import os
from dataclasses import dataclass
from enum import Enum


class ErrorCode(str, Enum):
    """Enumeration of all fakescope diagnostic codes."""

    # Fake usage
    NOT_CONFIGURED = 'FS-NOT-CONFIGURED'
    SCHEDULE_EXHAUSTED = 'FS-SCHEDULE-EXHAUSTED'
    INVALID_ARGUMENT = 'FS-INVALID-ARGUMENT'

    # Scope lifecycle
    SCOPE_TORN_DOWN = 'FS-SCOPE-TORN-DOWN'
    SCOPE_SETUP_FAILED = 'FS-SCOPE-SETUP-FAILED'

    # Registry
    UNKNOWN_KIND = 'FS-UNKNOWN-KIND'
    KIND_ALREADY_REGISTERED = 'FS-KIND-ALREADY-REGISTERED'
    REGISTRY_FROZEN = 'FS-REGISTRY-FROZEN'

    # Configuration
    CONFIG_INVALID_KEY = 'FS-CONFIG-INVALID-KEY'
    CONFIG_INVALID_VALUE = 'FS-CONFIG-INVALID-VALUE'


# Convenience alias for shorter imports.
E = ErrorCode


@dataclass(frozen=True)
class ErrorInfo:
    """Metadata for a single error code.

    Attributes:
        code: The ``FS-NAMED-KEY`` error code.
        message: Human-readable description of what went wrong.
        hint: Optional suggestion for how to fix the error.
    """

    code: ErrorCode
    message: str
    hint: str = ''


class FakeScopeError(Exception):
    """Base exception for all framework errors.

    Args:
        code: The error code from :class:`ErrorCode`.
        message: Human-readable description of what went wrong.
        hint: Optional suggestion for how to fix the error.
        kind: The collaborator kind involved, if any.
        scope_id: The scope involved, if any.
        operation: The fake or lifecycle operation that failed, if any.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        hint: str = '',
        *,
        kind: str | None = None,
        scope_id: str | None = None,
        operation: str | None = None,
    ) -> None:
        """Initialize with an error code, message, hint and location."""
        self.info = ErrorInfo(code=code, message=message, hint=hint)
        self.kind = kind
        self.scope_id = scope_id
        self.operation = operation

        where = [
            f'{label}={value}'
            for label, value in (('kind', kind), ('scope', scope_id), ('operation', operation))
            if value is not None
        ]
        suffix = f' ({", ".join(where)})' if where else ''
        super().__init__(f'[{code.value}] {message}{suffix}')

    @property
    def code(self) -> ErrorCode:
        """The error code."""
        return self.info.code

    @property
    def message(self) -> str:
        """The error message without code or location."""
        return self.info.message

    @property
    def hint(self) -> str:
        """Suggestion for fixing this error, or empty string."""
        return self.info.hint


class NotConfiguredError(FakeScopeError):
    """A real operation was invoked on a fake without matching configuration."""

    def __init__(self, message: str, **location: str | None) -> None:
        """Initialize with a message and the kind/scope/operation involved."""
        super().__init__(E.NOT_CONFIGURED, message, ERRORS[E.NOT_CONFIGURED].hint, **location)


class ScheduleExhaustedError(FakeScopeError):
    """More sequential values were consumed than were scheduled."""

    def __init__(self, message: str, **location: str | None) -> None:
        """Initialize with a message and the kind/scope/operation involved."""
        super().__init__(E.SCHEDULE_EXHAUSTED, message, ERRORS[E.SCHEDULE_EXHAUSTED].hint, **location)


class InvalidArgumentError(FakeScopeError, ValueError):
    """A configuration operation received malformed input."""

    def __init__(self, message: str, **location: str | None) -> None:
        """Initialize with a message and the kind/scope/operation involved."""
        super().__init__(E.INVALID_ARGUMENT, message, ERRORS[E.INVALID_ARGUMENT].hint, **location)


class ScopeAlreadyTornDownError(FakeScopeError):
    """A scope, or one of its fakes, was used after the scope exited."""

    def __init__(self, message: str, **location: str | None) -> None:
        """Initialize with a message and the kind/scope/operation involved."""
        super().__init__(E.SCOPE_TORN_DOWN, message, ERRORS[E.SCOPE_TORN_DOWN].hint, **location)


class SimulatedFailure(Exception):
    """Mixin marking an exception as a deliberately configured failure.

    Concrete subclasses also derive from the real exception type, so
    ``except FileNotFoundError`` in code under test catches them.
    """


class SimulatedFileNotFoundError(SimulatedFailure, FileNotFoundError):
    """A missing file, shaped like the error ``open()`` raises."""

    def __init__(self, path: str) -> None:
        """Initialize with the same ``errno``/``strerror``/``filename`` as ``open()``."""
        super().__init__(errno.ENOENT, os.strerror(errno.ENOENT), path)


class SimulatedPermissionError(SimulatedFailure, PermissionError):
    """An unreadable file, shaped like the error ``open()`` raises."""

    def __init__(self, path: str) -> None:
        """Initialize with the same ``errno``/``strerror``/``filename`` as ``open()``."""
        super().__init__(errno.EACCES, os.strerror(errno.EACCES), path)


class SimulatedBrokenPipeError(SimulatedFailure, BrokenPipeError):
    """A console whose reader has gone away."""

    def __init__(self) -> None:
        """Initialize with the ``errno``/``strerror`` a closed pipe reports."""
        super().__init__(errno.EPIPE, os.strerror(errno.EPIPE))


ERRORS: dict[ErrorCode, ErrorInfo] = {
    E.NOT_CONFIGURED: ErrorInfo(
        code=E.NOT_CONFIGURED,
        message='A fake was called with input it was never configured for.',
        hint='Configure the fake in the "given" part of the test before running the code under test.',
    ),
    E.SCHEDULE_EXHAUSTED: ErrorInfo(
        code=E.SCHEDULE_EXHAUSTED,
        message='A fake consumed more scheduled values than were configured.',
        hint='Schedule one value for every read the code under test performs.',
    ),
    E.INVALID_ARGUMENT: ErrorInfo(
        code=E.INVALID_ARGUMENT,
        message="A fake's configuration operation was given malformed input.",
        hint='Check the value types: paths and contents are str, clock instants are non-negative ints.',
    ),
    E.SCOPE_TORN_DOWN: ErrorInfo(
        code=E.SCOPE_TORN_DOWN,
        message='A scope or one of its fakes was used after the scope exited.',
        hint='Keep all use of fakes inside the scope body; do not stash them for later.',
    ),
    E.SCOPE_SETUP_FAILED: ErrorInfo(
        code=E.SCOPE_SETUP_FAILED,
        message='A fake factory failed while a scope was being entered.',
        hint='Check the fake factory registered (or overridden) for the reported kind.',
    ),
    E.REGISTRY_FROZEN: ErrorInfo(
        code=E.REGISTRY_FROZEN,
        message='The capability registry was modified after scopes started.',
        hint='Register all collaborator kinds at program start, before the first scope.',
    ),
    E.UNKNOWN_KIND: ErrorInfo(
        code=E.UNKNOWN_KIND,
        message='A collaborator kind was looked up or overridden but never registered.',
        hint='Register it with Registry.register() before resolving it.',
    ),
    E.KIND_ALREADY_REGISTERED: ErrorInfo(
        code=E.KIND_ALREADY_REGISTERED,
        message='A collaborator kind was registered twice.',
        hint='Register each kind once; use scope overrides to swap a fake for one test.',
    ),
    E.CONFIG_INVALID_KEY: ErrorInfo(
        code=E.CONFIG_INVALID_KEY,
        message='[tool.fakescope] contains an unrecognized key.',
        hint='Valid keys are record_interactions and scope_id_prefix.',
    ),
    E.CONFIG_INVALID_VALUE: ErrorInfo(
        code=E.CONFIG_INVALID_VALUE,
        message='A configuration value has the wrong type or cannot be parsed.',
        hint='record_interactions is a boolean and scope_id_prefix a non-empty string.',
    ),
}


def explain(code: str) -> str | None:
    """Return a detailed explanation for an error code.

    Args:
        code: The error code string, e.g. ``"FS-NOT-CONFIGURED"``.

    Returns:
        A formatted explanation string, or ``None`` if the code is unknown.
    """
    try:
        error_code = ErrorCode(code)
    except ValueError:
        return None

    info = ERRORS.get(error_code)
    if info is None:
        return f'{code}: No detailed explanation available.'

    lines = [f'{code}: {info.message}']
    if info.hint:
        lines.append(f'  Hint: {info.hint}')
    return '\n'.join(lines)


__all__ = [
    'E',
    'ERRORS',
    'ErrorCode',
    'ErrorInfo',
    'FakeScopeError',
    'InvalidArgumentError',
    'NotConfiguredError',
    'ScheduleExhaustedError',
    'ScopeAlreadyTornDownError',
    'SimulatedBrokenPipeError',
    'SimulatedFailure',
    'SimulatedFileNotFoundError',
    'SimulatedPermissionError',
    'explain',
]
