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


"""File inventory checks: required files, forbidden types and package size."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..archive_reader import MANIFEST_NAME
from ..models import ValidationResult

if TYPE_CHECKING:
    from ..submission_policy import SubmissionPolicy


def check_files(file_list: list[str], policy: SubmissionPolicy) -> ValidationResult:
    """Validate the archive's file inventory.

    Extension comparisons are case-insensitive, so ``RUN.BAT`` is caught
    alongside ``run.bat``.
    """
    result = ValidationResult()
    lowered = [path.lower() for path in file_list]

    # -- MISSING_MANIFEST --
    if not any(path == MANIFEST_NAME or path.endswith("/" + MANIFEST_NAME) for path in file_list):
        result.errors.append("Missing manifest.json in root of zip")

    # -- MISSING_ENTRY_FILE --
    entry_exts = policy.files.entry_extensions
    if not any(path.endswith(entry_exts) for path in lowered):
        result.errors.append(f"No entry file found ({', '.join(entry_exts)})")

    # -- FORBIDDEN_FILE_TYPE --
    forbidden_exts = policy.files.forbidden_extensions
    forbidden = [orig for orig, path in zip(file_list, lowered) if path.endswith(forbidden_exts)]
    if forbidden:
        result.errors.append(f"Forbidden file types found: {', '.join(forbidden)}")

    # -- LARGE_PACKAGE --
    if len(file_list) > policy.files.max_file_count_warning:
        result.warnings.append(f"Large extension: {len(file_list)} files")

    return result
