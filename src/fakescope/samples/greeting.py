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

"""Greets whoever is named in a file and reports how long it took.

    $ echo world > the-file.txt
    $ python -m fakescope.samples.greeting the-file.txt
    Hello, world!
    Took 87 microseconds

Every collaborator is looked up through the bridge, so tests drive this
program with fakes without changing its code.
"""

from fakescope.core.bridge import argument_source, clock_source, console_sink, file_source
from fakescope.core.logging import configure_logging


def main() -> int:
    """Run the program. Returns the process exit code."""
    start = clock_source().now()
    args = argument_source().arguments()
    if not args:
        console_sink().write('usage: greeting FILE')
        return 2

    name = file_source().read(args[0]).strip()
    console_sink().write(f'Hello, {name}!')
    elapsed = clock_source().now() - start
    console_sink().write(f'Took {elapsed} microseconds')
    return 0


if __name__ == '__main__':
    configure_logging()
    raise SystemExit(main())
