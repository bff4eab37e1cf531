# Copyright 2026 Extension Intake Authors
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


"""
File list normalisation for archives zipped from a parent folder.
"""

from __future__ import annotations

from .archive_reader import MANIFEST_NAME


def normalize_paths(file_list: list[str]) -> list[str]:
    """Strip a top-level folder that every entry shares.

    Developers often zip ``myext/`` instead of its contents. When no entry is
    a root ``manifest.json`` and all entries start with the same first path
    segment, that segment and its separator are removed. Otherwise a copy of
    the list is returned unchanged.

    Only one folder level is stripped per call, so the function is idempotent
    once ``manifest.json`` is at the root but not for deeper nesting.
    """
    if not file_list or MANIFEST_NAME in file_list:
        return list(file_list)

    prefix = file_list[0].split("/", 1)[0] + "/"
    if not all(path.startswith(prefix) for path in file_list):
        return list(file_list)

    return [path[len(prefix) :] for path in file_list]
