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

"""Core machinery of fakescope.

Leaves first:

| Module     | Responsibility                                             |
|------------|------------------------------------------------------------|
| `kinds`    | Collaborator kinds, scope ids, scope lifecycle states.     |
| `error`    | Framework errors and simulated real-world failures.        |
| `logging`  | structlog configuration.                                   |
| `config`   | `[tool.fakescope]` and environment settings.               |
| `cell`     | Serialized state owned by one fake.                        |
| `fake`     | Base class of every fake; interaction records.             |
| `registry` | Kind → real implementation and fake factory.               |
| `bridge`   | Context-aware lookup used by code under test.              |
| `scope`    | Scope creation, publication and guaranteed teardown.       |
"""
