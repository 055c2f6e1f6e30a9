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

"""Collaborator kinds and scope identifiers."""

import sys
from typing import NewType

if sys.version_info < (3, 11):
    from strenum import StrEnum
else:
    from enum import StrEnum

# Opaque identifier of a single test scope, e.g. ``scope-3f2a...``.
ScopeId = NewType('ScopeId', str)


class CollaboratorKind(StrEnum):
    """Enumerates the external collaborators that can be substituted.

    Each kind has a capability interface (see
    :mod:`fakescope.collaborators`) implemented once for real use and once as
    a scripted fake.
    """

    ARGUMENT_SOURCE = 'argument-source'
    CLOCK_SOURCE = 'clock-source'
    CONSOLE_SINK = 'console-sink'
    FILE_SOURCE = 'file-source'


class ScopeState(StrEnum):
    """Lifecycle of a scope. Each transition happens exactly once."""

    CREATED = 'created'
    ACTIVE = 'active'
    TORN_DOWN = 'torn-down'
