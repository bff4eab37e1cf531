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


"""Manifest structure, field limit and permission checks."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ..models import ValidationResult

if TYPE_CHECKING:
    from ..submission_policy import SubmissionPolicy

# Plain x.y.z; pre-release and build suffixes are rejected
VERSION_PATTERN = re.compile(r"[0-9]+\.[0-9]+\.[0-9]+")


def _is_nonempty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def _is_set(value: Any) -> bool:
    """Optional fields count as absent only when missing, null or "". Empty arrays and objects are present."""
    return value is not None and not (isinstance(value, str) and value == "")


def check_manifest(manifest: Any, policy: SubmissionPolicy) -> ValidationResult:
    """Validate a decoded ``manifest.json`` against the submission policy.

    Every rule is evaluated so the developer sees all problems at once.
    Sensitive but allowed permissions produce warnings, not errors.
    """
    result = ValidationResult()

    if not isinstance(manifest, Mapping):
        result.errors.append("manifest.json must contain a JSON object")
        return result

    name = manifest.get("name")
    version = manifest.get("version")
    description = manifest.get("description")

    # -- required fields --
    if not _is_nonempty_str(name):
        result.errors.append('Missing or invalid "name" field')
    if not isinstance(version, str) or not VERSION_PATTERN.fullmatch(version):
        result.errors.append('Missing or invalid "version" (must be semver x.y.z)')
    if not _is_nonempty_str(description):
        result.errors.append('Missing or invalid "description" field')
    if not _is_nonempty_str(manifest.get("author")):
        result.errors.append('Missing or invalid "author" field')
    if not _is_nonempty_str(manifest.get("main")):
        result.errors.append('Missing or invalid "main" entry file')

    # -- optional but validated --
    ext_type = manifest.get("type")
    if _is_set(ext_type) and not policy.is_allowed_type(ext_type):
        allowed = ", ".join(sorted(policy.manifest.allowed_types))
        result.errors.append(f'Invalid "type": {ext_type}. Must be one of: {allowed}')

    permissions = manifest.get("permissions")
    if _is_set(permissions):
        if not isinstance(permissions, list):
            result.errors.append('"permissions" must be an array')
        else:
            unknown = [str(p) for p in permissions if not policy.is_allowed_permission(p)]
            if unknown:
                result.errors.append(f"Unknown permissions: {', '.join(unknown)}")

            for permission, warning in policy.permissions.warnings:
                if permission in permissions:
                    result.warnings.append(warning)

    # -- length limits --
    max_name = policy.manifest.max_name_length
    if isinstance(name, str) and len(name) > max_name:
        result.errors.append(f"Name must be {max_name} characters or less")
    max_desc = policy.manifest.max_description_length
    if isinstance(description, str) and len(description) > max_desc:
        result.errors.append(f"Description must be {max_desc} characters or less")

    return result
