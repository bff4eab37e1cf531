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
Constants for Extension Intake.
"""


class ExtensionIntakeConstants:
    """Default values shared by configuration and the API layer.

    The built-in policy location lives in :mod:`extension_intake.data`.
    """

    # Default values
    DEFAULT_MAX_UPLOAD_MB = 10
    DEFAULT_BLOB_PREFIX = "submissions"
    DEFAULT_BLOB_BASE_URL = "memory://blobs"
    UPLOAD_CHUNK_SIZE = 1024 * 1024
