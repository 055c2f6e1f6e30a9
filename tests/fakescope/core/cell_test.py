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

"""Tests for fakescope.core.cell."""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from fakescope.core.cell import StateCell
from fakescope.core.error import ScopeAlreadyTornDownError
from fakescope.core.kinds import CollaboratorKind, ScopeId


def _cell(state: object) -> StateCell:
    return StateCell(CollaboratorKind.CLOCK_SOURCE, ScopeId('scope-test'), state)


def test_entry_points_run_against_state() -> None:
    """configure, apply and observe all see the same private state."""
    cell = _cell([])
    cell.configure('push', lambda s: s.append(1))
    assert cell.apply('pop', lambda s: s.pop()) == 1
    assert cell.observe('size', len) == 0


def test_errors_from_fn_propagate() -> None:
    """Exceptions raised by fn reach the caller and leave the cell usable."""
    cell = _cell({})
    with pytest.raises(KeyError):
        cell.apply('get', lambda s: s['missing'])
    assert cell.observe('size', len) == 0


def test_calls_are_serialized() -> None:
    """Concurrent read-modify-write sequences on one cell never interleave."""
    cell = _cell({'count': 0, 'inside': 0, 'max_inside': 0})

    def bump(state: dict) -> None:
        state['inside'] += 1
        state['max_inside'] = max(state['max_inside'], state['inside'])
        current = state['count']
        time.sleep(0.0001)
        state['count'] = current + 1
        state['inside'] -= 1

    with ThreadPoolExecutor(max_workers=8) as pool:
        for _ in range(200):
            pool.submit(cell.apply, 'bump', bump)

    assert cell.observe('count', lambda s: s['count']) == 200
    assert cell.observe('max_inside', lambda s: s['max_inside']) == 1


def test_different_cells_do_not_block_each_other() -> None:
    """A cell held busy does not delay calls on another cell."""
    busy = _cell(None)
    other = _cell(None)
    entered = threading.Event()
    release = threading.Event()

    def hold(_: object) -> None:
        entered.set()
        release.wait(timeout=5)

    holder = threading.Thread(target=busy.apply, args=('hold', hold))
    holder.start()
    try:
        assert entered.wait(timeout=5)
        assert other.apply('noop', lambda _: 'done') == 'done'
    finally:
        release.set()
        holder.join()


def test_release_fails_later_calls() -> None:
    """After release every entry point raises ScopeAlreadyTornDownError."""
    cell = _cell([1])
    cell.release()
    assert cell.released

    for call in (cell.configure, cell.apply, cell.observe):
        with pytest.raises(ScopeAlreadyTornDownError) as exc:
            call('op', len)
        assert exc.value.kind == CollaboratorKind.CLOCK_SOURCE
        assert exc.value.scope_id == 'scope-test'
        assert exc.value.operation == 'op'


def test_release_is_idempotent() -> None:
    """Releasing twice is harmless."""
    cell = _cell([])
    cell.release()
    cell.release()
    assert cell.released


def test_calls_from_one_thread_apply_in_call_order() -> None:
    """A single caller's operations are applied in the order it made them."""
    cell = _cell([])
    for n in range(100):
        cell.apply('append', lambda s, n=n: s.append(n))
    assert cell.observe('snapshot', list) == list(range(100))
