#!/usr/bin/env python3
#
# Copyright 2025 Google LLC
# SPDX-License-Identifier: Apache-2.0

"""Tests for the capability registry."""

import pytest

from fakescope.collaborators import (
    FakeClockSource,
    RealArgumentSource,
    RealClockSource,
    RealConsoleSink,
    RealFileSource,
)
from fakescope.core.error import E, FakeScopeError
from fakescope.core.kinds import CollaboratorKind
from fakescope.core.registry import Registry, default_registry


def test_register_and_resolve() -> None:
    """Ensure a registered kind resolves to its real implementation."""
    registry = Registry()
    registry.register(CollaboratorKind.CLOCK_SOURCE, real=RealClockSource, fake=FakeClockSource)

    assert isinstance(registry.resolve(CollaboratorKind.CLOCK_SOURCE), RealClockSource)
    assert registry.fake_factory(CollaboratorKind.CLOCK_SOURCE) is FakeClockSource
    assert registry.kinds() == [CollaboratorKind.CLOCK_SOURCE]


def test_real_implementation_is_built_once() -> None:
    """The real factory is called lazily, exactly once."""
    calls = []

    def make_clock() -> RealClockSource:
        calls.append(1)
        return RealClockSource()

    registry = Registry()
    registry.register(CollaboratorKind.CLOCK_SOURCE, real=make_clock, fake=FakeClockSource)
    assert calls == []

    first = registry.resolve(CollaboratorKind.CLOCK_SOURCE)
    second = registry.resolve(CollaboratorKind.CLOCK_SOURCE)
    assert first is second
    assert calls == [1]


def test_register_twice_raises() -> None:
    """A kind can only be registered once."""
    registry = Registry()
    registry.register(CollaboratorKind.CLOCK_SOURCE, real=RealClockSource, fake=FakeClockSource)

    with pytest.raises(FakeScopeError) as exc:
        registry.register(CollaboratorKind.CLOCK_SOURCE, real=RealClockSource, fake=FakeClockSource)
    assert exc.value.code is E.KIND_ALREADY_REGISTERED


def test_register_after_freeze_raises() -> None:
    """Registration is closed once the registry is frozen."""
    registry = Registry()
    registry.freeze()
    registry.freeze()
    assert registry.frozen

    with pytest.raises(FakeScopeError) as exc:
        registry.register(CollaboratorKind.CLOCK_SOURCE, real=RealClockSource, fake=FakeClockSource)
    assert exc.value.code is E.REGISTRY_FROZEN
    assert exc.value.kind == CollaboratorKind.CLOCK_SOURCE


@pytest.mark.parametrize('frozen', [False, True])
def test_unknown_kind_raises(frozen: bool) -> None:
    """Resolving an unregistered kind names the kind."""
    registry = Registry()
    if frozen:
        registry.freeze()

    with pytest.raises(FakeScopeError) as exc:
        registry.resolve(CollaboratorKind.FILE_SOURCE)
    assert exc.value.code is E.UNKNOWN_KIND
    assert exc.value.kind == 'file-source'

    with pytest.raises(FakeScopeError):
        registry.fake_factory(CollaboratorKind.FILE_SOURCE)


def test_default_registry_has_builtins() -> None:
    """The process-wide registry wires all four built-in kinds to real implementations."""
    registry = default_registry()
    assert registry is default_registry()
    assert set(registry.kinds()) == set(CollaboratorKind)
    assert isinstance(registry.resolve(CollaboratorKind.FILE_SOURCE), RealFileSource)
    assert isinstance(registry.resolve(CollaboratorKind.CONSOLE_SINK), RealConsoleSink)
    assert isinstance(registry.resolve(CollaboratorKind.CLOCK_SOURCE), RealClockSource)
    assert isinstance(registry.resolve(CollaboratorKind.ARGUMENT_SOURCE), RealArgumentSource)
