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

"""Tests for the Fake base class and interaction recording."""

from __future__ import annotations

import pydantic
import pytest

from fakescope.collaborators import FakeClockSource, FakeConsoleSink, FakeFileSource
from fakescope.core.config import FakeScopeConfig
from fakescope.core.error import ScopeAlreadyTornDownError
from fakescope.core.fake import Interaction
from fakescope.core.kinds import CollaboratorKind, ScopeId

SCOPE = ScopeId('scope-fake-test')


def test_class_is_a_fake_factory() -> None:
    """Calling a fake class with a scope id builds an independent fake."""
    first = FakeClockSource(SCOPE, FakeScopeConfig())
    second = FakeClockSource(SCOPE, FakeScopeConfig())
    first.set_schedule([1])
    assert first.remaining() == (1,)
    assert second.remaining() == ()
    assert first.kind is CollaboratorKind.CLOCK_SOURCE
    assert first.scope_id == SCOPE
    assert repr(first) == "FakeClockSource(scope_id='scope-fake-test')"


def test_real_operations_are_recorded() -> None:
    """Returned and raised outcomes are recorded in call order."""
    files = FakeFileSource(SCOPE)
    files.set_contents('a.txt', 'A')
    files.set_missing('b.txt')

    files.read('a.txt')
    with pytest.raises(FileNotFoundError):
        files.read('b.txt')

    assert files.interactions() == (
        Interaction(kind=CollaboratorKind.FILE_SOURCE, operation='read', arguments=('a.txt',), outcome='returned'),
        Interaction(
            kind=CollaboratorKind.FILE_SOURCE,
            operation='read',
            arguments=('b.txt',),
            outcome='raised',
            error='SimulatedFileNotFoundError',
        ),
    )


def test_configuration_is_not_recorded() -> None:
    """Only real operations produce interactions."""
    console = FakeConsoleSink(SCOPE)
    console.fail_with()
    console.written_lines()
    assert console.interactions() == ()


def test_recording_can_be_disabled() -> None:
    """With record_interactions off nothing is recorded."""
    console = FakeConsoleSink(SCOPE, FakeScopeConfig(record_interactions=False))
    console.write('hi')
    assert console.written_lines() == ('hi',)
    assert console.interactions() == ()


def test_interaction_is_immutable() -> None:
    """Interaction records are frozen and reject unknown fields."""
    record = Interaction(kind=CollaboratorKind.CLOCK_SOURCE, operation='now', outcome='returned')
    with pytest.raises(pydantic.ValidationError):
        record.operation = 'later'  # type: ignore[misc]
    with pytest.raises(pydantic.ValidationError):
        Interaction(kind=CollaboratorKind.CLOCK_SOURCE, operation='now', outcome='returned', extra=1)  # type: ignore[call-arg]


def test_release_makes_fake_unusable() -> None:
    """After release every operation on the fake fails."""
    clock = FakeClockSource(SCOPE)
    clock.release()
    assert clock.released
    with pytest.raises(ScopeAlreadyTornDownError):
        clock.now()
    with pytest.raises(ScopeAlreadyTornDownError):
        clock.interactions()
