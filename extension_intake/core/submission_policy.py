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
Submission policy: the marketplace's whitelists and limits.

A ``SubmissionPolicy`` captures which permissions an extension may request,
which types and categories exist, which file extensions are required or
forbidden, and the numeric limits applied to manifest fields.

Usage
-----
    from extension_intake.core.submission_policy import SubmissionPolicy

    # Built-in defaults (loaded once and shared)
    policy = SubmissionPolicy.default()

    # A marketplace-specific policy, merged on top of the defaults
    policy = SubmissionPolicy.from_yaml("marketplace_policy.yaml")

    # Dump the effective policy for editing
    policy.to_yaml("generated_policy.yaml")

Policies are frozen. Validators receive one as an argument and never mutate
it, so a single instance is safe to share across concurrent requests.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from ..data import DEFAULT_POLICY_PATH
from .exceptions import PolicyLoadError

logger = logging.getLogger(__name__)

_default_policy: SubmissionPolicy | None = None
_default_lock = threading.Lock()


# ---------------------------------------------------------------------------
# Data classes for each policy section
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ManifestPolicy:
    """Field limits and enumerations for ``manifest.json``."""

    max_name_length: int = 50
    max_description_length: int = 300
    allowed_types: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class PermissionPolicy:
    """Requestable permissions and the warnings attached to sensitive ones."""

    allowed: frozenset[str] = field(default_factory=frozenset)
    # Ordered (permission, message) pairs; order is the order warnings are emitted
    warnings: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class CategoryPolicy:
    """Marketplace listing categories."""

    allowed: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class FilePolicy:
    """Rules applied to the archive's file inventory."""

    # File count above which a size warning is raised
    max_file_count_warning: int = 50
    # At least one file must end with one of these
    entry_extensions: tuple[str, ...] = ()
    # Any file ending with one of these rejects the package
    forbidden_extensions: tuple[str, ...] = ()


@dataclass(frozen=True)
class SubmissionDefaults:
    """Values copied onto a submission when neither form nor manifest supply one."""

    category: str = "utilities"
    icon: str = "puzzle"
    type: str = "sidebar"
    api_version: str = "1.0"
    author: str = "Unknown"


# ---------------------------------------------------------------------------
# The top-level policy object
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SubmissionPolicy:
    """Everything the validators treat as configuration."""

    policy_name: str = "default"
    policy_version: str = "1.0"

    manifest: ManifestPolicy = field(default_factory=ManifestPolicy)
    permissions: PermissionPolicy = field(default_factory=PermissionPolicy)
    categories: CategoryPolicy = field(default_factory=CategoryPolicy)
    files: FilePolicy = field(default_factory=FilePolicy)
    defaults: SubmissionDefaults = field(default_factory=SubmissionDefaults)

    # -----------------------------------------------------------------------
    # Construction helpers
    # -----------------------------------------------------------------------

    @classmethod
    def default(cls) -> SubmissionPolicy:
        """Return the built-in policy, parsing the packaged YAML on first use."""
        global _default_policy
        if _default_policy is None:
            with _default_lock:
                if _default_policy is None:
                    _default_policy = cls.from_yaml(DEFAULT_POLICY_PATH)
        return _default_policy

    @classmethod
    def from_yaml(cls, path: str | Path) -> SubmissionPolicy:
        """
        Load a policy from a YAML file.

        Files other than the built-in default are merged on top of it, so a
        marketplace only lists the sections it changes.

        Raises:
            FileNotFoundError: If *path* does not exist
            PolicyLoadError: If the file is not a YAML mapping
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Policy file not found: {path}")

        raw = cls._read_yaml(path)
        if path.resolve() != DEFAULT_POLICY_PATH.resolve():
            raw = cls._deep_merge(cls._read_yaml(DEFAULT_POLICY_PATH), raw)

        policy = cls._from_dict(raw)
        logger.debug("Loaded submission policy %s v%s from %s", policy.policy_name, policy.policy_version, path)
        return policy

    def to_yaml(self, path: str | Path) -> None:
        """Dump the full policy to a YAML file for editing."""
        with open(path, "w", encoding="utf-8") as fh:
            fh.write("# Extension Intake – Submission Policy\n")
            fh.write("# Only include sections you want to override; omitted sections\n")
            fh.write("# will use the built-in defaults.\n\n")
            yaml.safe_dump(self.to_dict(), fh, default_flow_style=False, sort_keys=False, allow_unicode=True, width=120)

    # -----------------------------------------------------------------------
    # Convenience helpers
    # -----------------------------------------------------------------------

    def is_allowed_permission(self, permission: object) -> bool:
        return isinstance(permission, str) and permission in self.permissions.allowed

    def is_allowed_type(self, ext_type: object) -> bool:
        return isinstance(ext_type, str) and ext_type in self.manifest.allowed_types

    def is_allowed_category(self, category: object) -> bool:
        return isinstance(category, str) and category in self.categories.allowed

    # -----------------------------------------------------------------------
    # Internal parsing
    # -----------------------------------------------------------------------

    @staticmethod
    def _read_yaml(path: Path) -> dict[str, Any]:
        try:
            with open(path, encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
        except yaml.YAMLError as e:
            raise PolicyLoadError(f"Failed to parse policy file {path}: {e}") from e
        if not isinstance(raw, dict):
            raise PolicyLoadError(f"Policy file {path} must contain a YAML mapping")
        return raw

    @staticmethod
    def _deep_merge(base: dict, override: dict) -> dict:
        """Recursively merge *override* into *base*; lists in *override* replace."""
        result = dict(base)
        for key, val in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(val, dict):
                result[key] = SubmissionPolicy._deep_merge(result[key], val)
            else:
                result[key] = val
        return result

    @classmethod
    def _from_dict(cls, d: dict[str, Any]) -> SubmissionPolicy:
        mf = d.get("manifest", {})
        pm = d.get("permissions", {})
        ct = d.get("categories", {})
        fl = d.get("files", {})
        sd = d.get("submission_defaults", {})

        try:
            return cls(
                policy_name=str(d.get("policy_name", "default")),
                policy_version=str(d.get("policy_version", "1.0")),
                manifest=ManifestPolicy(
                    max_name_length=int(mf.get("max_name_length", 50)),
                    max_description_length=int(mf.get("max_description_length", 300)),
                    allowed_types=frozenset(mf.get("allowed_types", [])),
                ),
                permissions=PermissionPolicy(
                    allowed=frozenset(pm.get("allowed", [])),
                    warnings=tuple((str(k), str(v)) for k, v in (pm.get("warnings") or {}).items()),
                ),
                categories=CategoryPolicy(
                    allowed=frozenset(ct.get("allowed", [])),
                ),
                files=FilePolicy(
                    max_file_count_warning=int(fl.get("max_file_count_warning", 50)),
                    entry_extensions=tuple(e.lower() for e in fl.get("entry_extensions", [])),
                    forbidden_extensions=tuple(e.lower() for e in fl.get("forbidden_extensions", [])),
                ),
                defaults=SubmissionDefaults(
                    category=sd.get("category", "utilities"),
                    icon=sd.get("icon", "puzzle"),
                    type=sd.get("type", "sidebar"),
                    api_version=str(sd.get("api_version", "1.0")),
                    author=sd.get("author", "Unknown"),
                ),
            )
        except (AttributeError, TypeError, ValueError) as e:
            raise PolicyLoadError(f"Invalid policy structure: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        return {
            "policy_name": self.policy_name,
            "policy_version": self.policy_version,
            "manifest": {
                "max_name_length": self.manifest.max_name_length,
                "max_description_length": self.manifest.max_description_length,
                "allowed_types": sorted(self.manifest.allowed_types),
            },
            "permissions": {
                "allowed": sorted(self.permissions.allowed),
                "warnings": dict(self.permissions.warnings),
            },
            "categories": {
                "allowed": sorted(self.categories.allowed),
            },
            "files": {
                "max_file_count_warning": self.files.max_file_count_warning,
                "entry_extensions": list(self.files.entry_extensions),
                "forbidden_extensions": list(self.files.forbidden_extensions),
            },
            "submission_defaults": {
                "category": self.defaults.category,
                "icon": self.defaults.icon,
                "type": self.defaults.type,
                "api_version": self.defaults.api_version,
                "author": self.defaults.author,
            },
        }
