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


"""Stateless validation routines run against an extracted submission.

Every public function follows the pattern::

    def check_<aspect>(<input>, policy: SubmissionPolicy) -> ValidationResult:
        ...

The caller (``SubmissionIntake``) decides which checks run and how their
errors and warnings are combined.
"""

from .file_checks import check_files
from .manifest_checks import check_manifest

__all__ = ["check_files", "check_manifest"]
