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
Minimal ZIP central-directory reader for extension packages.

Reads the file inventory and a STORED ``manifest.json`` straight out of an
in-memory upload without going through :mod:`zipfile`. Only the structures
needed for intake are decoded:

- End Of Central Directory (``PK\\x05\\x06``): entry count and directory offset
- Central directory entries (``PK\\x01\\x02``): names and local header offsets
- The manifest's local file header (``PK\\x03\\x04``): method, size and data

Every offset derived from a length field is checked against the buffer, so a
hostile archive raises :class:`MalformedArchiveError` instead of producing
short reads. Compressed manifests are reported, never inflated.
"""

from __future__ import annotations

import json
import logging
import re
import struct

from .exceptions import ArchiveFormatError, MalformedArchiveError
from .models import ArchiveContents, CentralDirectoryEntry, ManifestStatus

logger = logging.getLogger(__name__)

EOCD_SIGNATURE = 0x06054B50
CENTRAL_DIRECTORY_SIGNATURE = 0x02014B50
LOCAL_HEADER_SIGNATURE = 0x04034B50

EOCD_SIZE = 22
# Fixed EOCD record plus the largest possible archive comment
EOCD_SEARCH_WINDOW = EOCD_SIZE + 0xFFFF
CENTRAL_DIRECTORY_HEADER_SIZE = 46
LOCAL_HEADER_SIZE = 30

COMPRESSION_STORED = 0

MANIFEST_NAME = "manifest.json"
_NESTED_MANIFEST_RE = re.compile(r"[^/]+/manifest\.json")

_EOCD_MAGIC = struct.pack("<I", EOCD_SIGNATURE)


def _u16(data: bytes, offset: int) -> int:
    if offset < 0 or offset + 2 > len(data):
        raise MalformedArchiveError(f"u16 read at offset {offset} is outside the {len(data)}-byte archive")
    return struct.unpack_from("<H", data, offset)[0]


def _u32(data: bytes, offset: int) -> int:
    if offset < 0 or offset + 4 > len(data):
        raise MalformedArchiveError(f"u32 read at offset {offset} is outside the {len(data)}-byte archive")
    return struct.unpack_from("<I", data, offset)[0]


def _slice(data: bytes, start: int, length: int, what: str) -> bytes:
    end = start + length
    if start < 0 or end > len(data):
        raise MalformedArchiveError(f"{what} spans bytes {start}-{end} beyond the {len(data)}-byte archive")
    return data[start:end]


def is_manifest_path(name: str) -> bool:
    """True for ``manifest.json`` at the root or exactly one folder deep."""
    return name == MANIFEST_NAME or _NESTED_MANIFEST_RE.fullmatch(name) is not None


def find_eocd(data: bytes) -> int:
    """Return the offset of the End Of Central Directory record.

    Searches backward from the last position a complete record could start,
    no further than the trailing 64 KiB comment window.

    Raises:
        ArchiveFormatError: If no EOCD signature is present.
    """
    lower = max(0, len(data) - EOCD_SEARCH_WINDOW)
    # rfind end bound is exclusive; the signature must start at or before len - 22
    offset = data.rfind(_EOCD_MAGIC, lower, len(data) - EOCD_SIZE + 4)
    if offset < 0:
        raise ArchiveFormatError("End of central directory record not found")
    return offset


def read_central_directory_entry(data: bytes, offset: int) -> tuple[CentralDirectoryEntry, int]:
    """Parse one central directory entry at *offset*.

    Returns:
        Tuple of (entry, offset of the next entry)
    """
    if offset + CENTRAL_DIRECTORY_HEADER_SIZE > len(data):
        raise MalformedArchiveError(f"Central directory entry at offset {offset} is truncated")

    compression_method = _u16(data, offset + 10)
    name_length = _u16(data, offset + 28)
    extra_length = _u16(data, offset + 30)
    comment_length = _u16(data, offset + 32)
    local_header_offset = _u32(data, offset + 42)
    raw_name = _slice(data, offset + CENTRAL_DIRECTORY_HEADER_SIZE, name_length, "File name")

    next_offset = offset + CENTRAL_DIRECTORY_HEADER_SIZE + name_length + extra_length + comment_length
    if next_offset > len(data):
        raise MalformedArchiveError(f"Central directory entry at offset {offset} overruns the archive")

    entry = CentralDirectoryEntry(
        file_name=raw_name.decode("utf-8", errors="replace"),
        local_header_offset=local_header_offset,
        compression_method=compression_method,
        extra_length=extra_length,
        comment_length=comment_length,
    )
    return entry, next_offset


def read_stored_manifest(data: bytes, local_header_offset: int) -> tuple[ManifestStatus, dict | None]:
    """Decode the manifest stored behind a local file header.

    Returns:
        Tuple of (status, manifest). The manifest is only set for ``FOUND``.

    Raises:
        MalformedArchiveError: If the header or its data run past the buffer.
    """
    if _u32(data, local_header_offset) != LOCAL_HEADER_SIGNATURE:
        logger.debug("No local file header signature at offset %d", local_header_offset)
        return ManifestStatus.CORRUPT, None

    compression_method = _u16(data, local_header_offset + 8)
    compressed_size = _u32(data, local_header_offset + 18)
    name_length = _u16(data, local_header_offset + 26)
    extra_length = _u16(data, local_header_offset + 28)
    data_start = local_header_offset + LOCAL_HEADER_SIZE + name_length + extra_length

    if compression_method != COMPRESSION_STORED:
        logger.debug("Manifest uses compression method %d; only STORED is decoded", compression_method)
        return ManifestStatus.UNSUPPORTED_COMPRESSION, None

    raw = _slice(data, data_start, compressed_size, "Manifest data")
    try:
        manifest = json.loads(raw.decode("utf-8-sig"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.debug("Manifest is not valid JSON: %s", e)
        return ManifestStatus.CORRUPT, None

    if not isinstance(manifest, dict):
        logger.debug("Manifest JSON is a %s, not an object", type(manifest).__name__)
        return ManifestStatus.CORRUPT, None

    return ManifestStatus.FOUND, manifest


def read_archive(data: bytes) -> ArchiveContents:
    """
    Read the file inventory and manifest from a ZIP archive held in memory.

    Args:
        data: The complete uploaded archive

    Returns:
        ArchiveContents with the non-directory file list in central directory
        order and the first decodable ``manifest.json``

    Raises:
        ArchiveFormatError: If there is no EOCD record
        MalformedArchiveError: If any length or offset field points outside *data*
    """
    eocd_offset = find_eocd(data)
    entry_count = _u16(data, eocd_offset + 10)
    cursor = _u32(data, eocd_offset + 16)

    contents = ArchiveContents(declared_entry_count=entry_count)
    manifest_status: ManifestStatus | None = None

    for index in range(entry_count):
        if _u32(data, cursor) != CENTRAL_DIRECTORY_SIGNATURE:
            logger.warning(
                "Central directory signature mismatch at entry %d of %d (offset %d); keeping %d entries",
                index,
                entry_count,
                cursor,
                len(contents.entries),
            )
            contents.truncated = True
            break

        entry, cursor = read_central_directory_entry(data, cursor)
        contents.entries.append(entry)
        if not entry.is_directory:
            contents.file_list.append(entry.file_name)

        if contents.manifest is None and is_manifest_path(entry.file_name):
            status, manifest = read_stored_manifest(data, entry.local_header_offset)
            if status is ManifestStatus.FOUND:
                contents.manifest = manifest
                contents.manifest_path = entry.file_name
                manifest_status = status
            elif manifest_status is None:
                # Report why the first candidate failed unless a later one decodes
                manifest_status = status
                contents.manifest_path = entry.file_name

    contents.manifest_status = manifest_status or ManifestStatus.ABSENT
    return contents


def extract_contents(data: bytes) -> ArchiveContents:
    """Read *data* like :func:`read_archive`, but never raise.

    Unreadable archives come back empty with ``INVALID_ARCHIVE`` status and
    the reason in ``error``.
    """
    try:
        return read_archive(data)
    except ArchiveFormatError as e:
        logger.warning("Unreadable extension archive (%d bytes): %s", len(data), e)
        return ArchiveContents(manifest_status=ManifestStatus.INVALID_ARCHIVE, error=str(e))
    except Exception as e:
        logger.exception("Unexpected failure reading extension archive")
        return ArchiveContents(manifest_status=ManifestStatus.INVALID_ARCHIVE, error=f"Unexpected archive error: {e}")
