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
Configuration class for Extension Intake.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from .constants import ExtensionIntakeConstants


@dataclass
class Config:
    """
    Configuration for Extension Intake.

    Explicit constructor arguments win; anything left at its default is
    filled from ``EXTENSION_INTAKE_*`` environment variables.
    """

    # Upload limits
    max_upload_mb: int = ExtensionIntakeConstants.DEFAULT_MAX_UPLOAD_MB

    # Policy file merged over the built-in defaults (None = built-in only)
    policy_path: str | None = None

    # Object storage naming
    blob_prefix: str = ExtensionIntakeConstants.DEFAULT_BLOB_PREFIX
    blob_base_url: str = ExtensionIntakeConstants.DEFAULT_BLOB_BASE_URL

    def __post_init__(self):
        """Load configuration from environment variables if not provided."""

        if self.max_upload_mb == ExtensionIntakeConstants.DEFAULT_MAX_UPLOAD_MB:
            if env_max := os.getenv("EXTENSION_INTAKE_MAX_UPLOAD_MB"):
                try:
                    self.max_upload_mb = int(env_max)
                except ValueError:
                    raise ValueError(f"EXTENSION_INTAKE_MAX_UPLOAD_MB must be an integer, got {env_max!r}") from None

        if self.policy_path is None:
            self.policy_path = os.getenv("EXTENSION_INTAKE_POLICY") or None

        if self.blob_prefix == ExtensionIntakeConstants.DEFAULT_BLOB_PREFIX:
            if env_prefix := os.getenv("EXTENSION_INTAKE_BLOB_PREFIX"):
                self.blob_prefix = env_prefix.strip("/")

        if self.blob_base_url == ExtensionIntakeConstants.DEFAULT_BLOB_BASE_URL:
            if env_base := os.getenv("EXTENSION_INTAKE_BLOB_BASE_URL"):
                self.blob_base_url = env_base

        if self.max_upload_mb <= 0:
            raise ValueError("max_upload_mb must be positive")

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @classmethod
    def from_env(cls) -> "Config":
        """
        Create configuration from environment variables.

        Returns:
            Config instance with values from environment
        """
        return cls()

    @classmethod
    def from_file(cls, config_file: Path) -> "Config":
        """
        Load configuration from .env file.

        Args:
            config_file: Path to .env file

        Returns:
            Config instance
        """
        if config_file.exists():
            with open(config_file) as f:
                for line in f:
                    line = line.strip()
                    if line and not line.startswith("#") and "=" in line:
                        key, value = line.split("=", 1)
                        os.environ[key.strip()] = value.strip()

        return cls.from_env()
