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

"""End-to-end tests driving the greeting sample through fakes."""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from fakescope.core.error import NotConfiguredError, ScheduleExhaustedError, SimulatedFailure
from fakescope.core.scope import Scope, ScopeManager
from fakescope.samples import greeting


def _given(scope: Scope, name: str, *, path: str = 'the-file.txt', start: int = 1000, end: int = 1234) -> None:
    scope.arguments.set_arguments([path])
    scope.files.set_contents(path, f'{name}\n')
    scope.clock.set_schedule([start, end])


class TestGreeting:
    """Single-scope scenarios."""

    def test_greets_and_reports_elapsed_time(self, scope_manager: ScopeManager) -> None:
        """The program greets the name in the file and reports elapsed microseconds."""
        with scope_manager.scope() as scope:
            _given(scope, 'world')
            assert greeting.main() == 0
            assert scope.console.written_lines() == ('Hello, world!', 'Took 234 microseconds')
            assert scope.files.read_paths() == ('the-file.txt',)
            assert scope.clock.remaining() == ()

    def test_unconfigured_file_is_a_setup_error(self, scope_manager: ScopeManager) -> None:
        """Reading a file the test never configured fails loudly."""
        with scope_manager.scope() as scope:
            scope.arguments.set_arguments(['the-file.txt'])
            scope.clock.set_schedule([1000, 1234])
            with pytest.raises(NotConfiguredError):
                greeting.main()
            assert scope.console.written_lines() == ()

    def test_missing_file_propagates(self, scope_manager: ScopeManager) -> None:
        """A missing file surfaces as FileNotFoundError before anything is written."""
        with scope_manager.scope() as scope:
            scope.arguments.set_arguments(['missing.txt'])
            scope.files.set_missing('missing.txt')
            scope.clock.set_schedule([1000, 1234])
            with pytest.raises(FileNotFoundError) as exc:
                greeting.main()
            assert isinstance(exc.value, SimulatedFailure)
            assert exc.value.filename == 'missing.txt'
            assert scope.files.read_paths() == ('missing.txt',)
            assert scope.console.written_lines() == ()

    def test_usage_without_arguments(self, scope_manager: ScopeManager) -> None:
        """With no arguments the program prints usage and exits with 2."""
        with scope_manager.scope() as scope:
            scope.arguments.set_arguments([])
            scope.clock.set_schedule([0])
            assert greeting.main() == 2
            assert scope.console.written_lines() == ('usage: greeting FILE',)
            assert scope.files.read_paths() == ()

    def test_short_clock_schedule(self, scope_manager: ScopeManager) -> None:
        """A schedule with too few instants fails after the greeting."""
        with scope_manager.scope() as scope:
            scope.arguments.set_arguments(['the-file.txt'])
            scope.files.set_contents('the-file.txt', 'world')
            scope.clock.set_schedule([1000])
            with pytest.raises(ScheduleExhaustedError):
                greeting.main()
            assert scope.console.written_lines() == ('Hello, world!',)

    def test_broken_console(self, scope_manager: ScopeManager) -> None:
        """A failing console propagates out of the program."""
        with scope_manager.scope() as scope:
            _given(scope, 'world')
            scope.console.fail_with()
            with pytest.raises(BrokenPipeError):
                greeting.main()


class TestConcurrentScopes:
    """Many scopes running the same program at once stay isolated."""

    def test_threads(self, scope_manager: ScopeManager) -> None:
        """One hundred threads, each with its own scope and its own file."""

        def one(n: int) -> tuple[str, ...]:
            with scope_manager.scope() as scope:
                _given(scope, f'user{n}', path=f'file-{n}.txt', start=n, end=n + 2 * n)
                assert greeting.main() == 0
                return scope.console.written_lines()

        with ThreadPoolExecutor(max_workers=16) as pool:
            results = list(pool.map(one, range(100)))

        for n, lines in enumerate(results):
            assert lines == (f'Hello, user{n}!', f'Took {2 * n} microseconds')

    @pytest.mark.asyncio
    async def test_tasks(self, scope_manager: ScopeManager) -> None:
        """One hundred asyncio tasks, each with its own scope."""

        async def one(n: int) -> tuple[str, ...]:
            async def body(scope: Scope) -> tuple[str, ...]:
                _given(scope, f'user{n}', path=f'file-{n}.txt', start=10 * n, end=10 * n + n)
                await asyncio.sleep(0)
                assert greeting.main() == 0
                await asyncio.sleep(0)
                return scope.console.written_lines()

            return await scope_manager.arun(body)

        results = await asyncio.gather(*(one(n) for n in range(100)))

        for n, lines in enumerate(results):
            assert lines == (f'Hello, user{n}!', f'Took {n} microseconds')


def test_real_run_outside_scope(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """Outside a scope the program runs against the real collaborators."""
    target = tmp_path / 'the-file.txt'
    target.write_text('world\n', encoding='utf-8')
    monkeypatch.setattr('sys.argv', ['greeting', str(target)])

    assert greeting.main() == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == 'Hello, world!'
    assert lines[1].startswith('Took ')
    assert lines[1].endswith(' microseconds')
    assert int(lines[1].split()[1]) >= 0
