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


"""Stable identifiers derived from extension names."""

from __future__ import annotations

import re

DEFAULT_IDENTIFIER = "ext"

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")


def generate_identifier(name: object) -> str:
    """Slugify a manifest name: ``"My Cool Ext!!"`` becomes ``"my-cool-ext"``.

    Uniqueness is not guaranteed; the submission store owns collisions.
    """
    if not name:
        return DEFAULT_IDENTIFIER
    slug = _NON_ALNUM_RUN.sub("-", str(name).lower()).strip("-")
    return slug or DEFAULT_IDENTIFIER
