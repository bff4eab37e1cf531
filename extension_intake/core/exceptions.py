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


"""Extension Intake exceptions.

This module defines custom exceptions for Extension Intake operations.
All exceptions inherit from ExtensionIntakeError for easy catching.

Example:
    >>> from extension_intake.core.archive_reader import read_archive
    >>> from extension_intake.core.exceptions import ArchiveFormatError
    >>>
    >>> try:
    ...     contents = read_archive(data)
    ... except ArchiveFormatError as e:
    ...     print(f"Not a usable zip archive: {e}")
"""


class ExtensionIntakeError(Exception):
    """Base exception for all Extension Intake errors."""

    pass


class ArchiveFormatError(ExtensionIntakeError):
    """Raised when an uploaded buffer cannot be read as a ZIP archive.

    This typically indicates:
    - No End Of Central Directory record in the trailing 64 KiB
    - A buffer too short to hold any ZIP structure
    """

    pass


class MalformedArchiveError(ArchiveFormatError):
    """Raised when a ZIP length or offset field points outside the buffer.

    This indicates:
    - A central directory offset past the end of the upload
    - Name, extra or comment lengths overrunning the buffer
    - A stored manifest whose declared size exceeds the available bytes
    """

    pass


class SubmissionStorageError(ExtensionIntakeError):
    """Raised when a validated submission cannot be persisted.

    Wraps failures from the blob store or submission store collaborators.
    """

    pass


class PolicyLoadError(ExtensionIntakeError):
    """Raised when a submission policy file cannot be loaded or parsed."""

    pass
