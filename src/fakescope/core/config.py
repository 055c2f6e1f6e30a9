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

"""Configuration reader for fakescope.

Settings come from the ``[tool.fakescope]`` table of the project's
``pyproject.toml``, then environment variables override them::

    [tool.fakescope]
    record_interactions = true     # fakes keep a log of every call
    scope_id_prefix     = "scope"  # ScopeIds look like "scope-<hex>"

A missing file or missing table yields the defaults. Unknown keys are
rejected with a "did you mean" hint; values of the wrong type are rejected
too.

Usage::

    from fakescope.core.config import load_config

    cfg = load_config(Path.cwd())
    manager = ScopeManager(config=cfg)
"""

from __future__ import annotations

import dataclasses
import difflib
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomlkit
import tomlkit.exceptions

from fakescope.core.error import E, ERRORS, FakeScopeError
from fakescope.core.logging import get_logger

if sys.version_info < (3, 11):
    from strenum import StrEnum
else:
    from enum import StrEnum

logger = get_logger(__name__)

PYPROJECT_FILENAME = 'pyproject.toml'

_TRUE_VALUES = frozenset({'1', 'true', 'yes', 'on'})
_FALSE_VALUES = frozenset({'0', 'false', 'no', 'off'})


class EnvVar(StrEnum):
    """Enumerates the environment variables read by fakescope."""

    FAKESCOPE_RECORD_INTERACTIONS = 'FAKESCOPE_RECORD_INTERACTIONS'
    FAKESCOPE_SCOPE_ID_PREFIX = 'FAKESCOPE_SCOPE_ID_PREFIX'


@dataclass(frozen=True)
class FakeScopeConfig:
    """Settings shared by every scope a manager creates.

    Attributes:
        record_interactions: Whether fakes record an :class:`Interaction` for
            every real operation they serve.
        scope_id_prefix: Prefix of generated scope identifiers.
    """

    record_interactions: bool = True
    scope_id_prefix: str = 'scope'


VALID_KEYS: frozenset[str] = frozenset(f.name for f in dataclasses.fields(FakeScopeConfig))


def _suggest_key(unknown: str) -> str | None:
    matches = difflib.get_close_matches(unknown, sorted(VALID_KEYS), n=1, cutoff=0.6)
    return matches[0] if matches else None


def _validate(values: dict[str, Any]) -> dict[str, Any]:  # noqa: ANN401 - dynamic config
    for key in values:
        if key not in VALID_KEYS:
            suggestion = _suggest_key(key)
            raise FakeScopeError(
                code=E.CONFIG_INVALID_KEY,
                message=f'Unknown key "{key}" in [tool.fakescope]',
                hint=f"Did you mean '{suggestion}'?" if suggestion else f'Valid keys: {", ".join(sorted(VALID_KEYS))}',
            )

    record = values.get('record_interactions', True)
    if not isinstance(record, bool):
        raise FakeScopeError(
            code=E.CONFIG_INVALID_VALUE,
            message=f'record_interactions must be a boolean, got {type(record).__name__}',
            hint=ERRORS[E.CONFIG_INVALID_VALUE].hint,
        )

    prefix = values.get('scope_id_prefix', 'scope')
    if not isinstance(prefix, str) or not prefix:
        raise FakeScopeError(
            code=E.CONFIG_INVALID_VALUE,
            message=f'scope_id_prefix must be a non-empty string, got {prefix!r}',
            hint=ERRORS[E.CONFIG_INVALID_VALUE].hint,
        )

    return {'record_interactions': record, 'scope_id_prefix': prefix}


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}

    record = os.getenv(EnvVar.FAKESCOPE_RECORD_INTERACTIONS)
    if record is not None:
        lowered = record.strip().lower()
        if lowered in _TRUE_VALUES:
            overrides['record_interactions'] = True
        elif lowered in _FALSE_VALUES:
            overrides['record_interactions'] = False
        else:
            raise FakeScopeError(
                code=E.CONFIG_INVALID_VALUE,
                message=f'{EnvVar.FAKESCOPE_RECORD_INTERACTIONS} must be a boolean, got {record!r}',
                hint=ERRORS[E.CONFIG_INVALID_VALUE].hint,
            )

    prefix = os.getenv(EnvVar.FAKESCOPE_SCOPE_ID_PREFIX)
    if prefix is not None:
        overrides['scope_id_prefix'] = prefix

    return overrides


def load_config(project_root: Path | None = None) -> FakeScopeConfig:
    """Load settings from ``pyproject.toml`` and the environment.

    Args:
        project_root: Directory containing ``pyproject.toml``. When ``None``
            only environment variables are consulted.

    Returns:
        A validated :class:`FakeScopeConfig`.

    Raises:
        FakeScopeError: If the file cannot be parsed, or a key or value is
            invalid.
    """
    values: dict[str, Any] = {}
    if project_root is not None:
        path = project_root / PYPROJECT_FILENAME
        if path.is_file():
            try:
                doc = tomlkit.parse(path.read_text(encoding='utf-8'))
            except tomlkit.exceptions.ParseError as exc:
                raise FakeScopeError(
                    code=E.CONFIG_INVALID_VALUE,
                    message=f'Failed to parse {path}: {exc}',
                    hint=ERRORS[E.CONFIG_INVALID_VALUE].hint,
                ) from exc
            section = doc.get('tool', {}).get('fakescope', {})
            values = section.unwrap() if hasattr(section, 'unwrap') else dict(section)
        else:
            logger.debug('no pyproject.toml found, using defaults', path=str(path))

    values.update(_env_overrides())
    config = FakeScopeConfig(**_validate(values))
    logger.debug('loaded config', config=dataclasses.asdict(config))
    return config


__all__ = [
    'EnvVar',
    'FakeScopeConfig',
    'load_config',
]
