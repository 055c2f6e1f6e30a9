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

"""Structured logging for fakescope.

fakescope runs inside other people's test suites, so it only configures its
own ``fakescope`` logger hierarchy and leaves the root logger (and pytest's
log capture on it) alone. Output is quiet by default: framework events are
debug-level and only show up with ``verbose=True``.

Every event is tagged with the scope it happened in. The scope manager calls
:func:`bind_scope` when a scope becomes current and again when it goes away,
and ``structlog.contextvars`` carries the ``scope_id`` into threads and tasks
along with the scope itself.

Events about a failure pass the exception as ``error=``; the
:func:`add_error_fields` processor expands it::

    logger.debug('fake raised', error=NotConfiguredError(...))
    # -> error='NotConfiguredError', code='FS-NOT-CONFIGURED',
    #    kind='file-source', operation='read', simulated=False

Usage::

    from fakescope.core.logging import configure_logging, get_logger

    configure_logging(verbose=True, json_log=True)
    logger = get_logger(__name__)
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from typing import Any, TextIO

import structlog

from fakescope.core.error import FakeScopeError, SimulatedFailure

LOGGER_NAME = 'fakescope'
SCOPE_ID_KEY = 'scope_id'


def bind_scope(scope_id: str | None) -> None:
    """Tag later events in the calling context with ``scope_id``.

    ``None`` removes the tag, for when no scope is current any more.
    """
    if scope_id is None:
        structlog.contextvars.unbind_contextvars(SCOPE_ID_KEY)
    else:
        structlog.contextvars.bind_contextvars(**{SCOPE_ID_KEY: scope_id})


def add_error_fields(
    logger: Any,  # noqa: ANN401 - structlog processor signature
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Expand an exception passed as ``error=`` into flat, renderable fields."""
    error = event_dict.get('error')
    if not isinstance(error, BaseException):
        return event_dict

    event_dict['error'] = type(error).__name__
    event_dict['simulated'] = isinstance(error, SimulatedFailure)
    if isinstance(error, FakeScopeError):
        event_dict.setdefault('code', error.code.value)
        event_dict.setdefault('error_message', error.message)
        for key in ('kind', 'operation'):
            value = getattr(error, key)
            if value is not None:
                event_dict.setdefault(key, str(value))
    else:
        event_dict.setdefault('error_message', str(error))
    return event_dict


def configure_logging(
    *,
    verbose: bool = False,
    json_log: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Configure the ``fakescope`` loggers.

    Safe to call more than once, e.g. from a ``conftest.py`` and again from a
    single test that wants to capture framework events.

    Args:
        verbose: Emit debug-level framework events. Otherwise only warnings
            and errors are shown.
        json_log: Render one JSON object per line instead of console output.
        stream: Where to write. Defaults to stderr, so that the console sink
            of the code under test (stdout) is never interleaved with logs.
    """
    if json_log:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=(stream or sys.stderr).isatty())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            add_error_fields,
            structlog.processors.TimeStamper(fmt='iso'),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        # Module-level loggers must pick up a later reconfiguration.
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger(LOGGER_NAME)
    for old in list(root.handlers):
        root.removeHandler(old)
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root.propagate = False


def get_logger(name: str = LOGGER_NAME) -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger.

    Args:
        name: Logger name, typically ``__name__``. Names outside the
            ``fakescope`` hierarchy are not affected by
            :func:`configure_logging`.
    """
    return structlog.get_logger(name)


__all__ = [
    'LOGGER_NAME',
    'SCOPE_ID_KEY',
    'add_error_fields',
    'bind_scope',
    'configure_logging',
    'get_logger',
]
