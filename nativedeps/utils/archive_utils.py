"""Safe archive extraction utilities.

This module streams ZIP archive members to disk one at a time and protects
against path traversal (Zip Slip) in member names.
"""

import logging
import shutil
import zipfile
from pathlib import Path, PurePosixPath

logger = logging.getLogger("nativedeps.utils.archive_utils")


class ArchiveSecurityError(Exception):
    """Raised when archive contains potentially malicious paths."""

    pass


def remove_extension(file_name: str) -> str:
    """Strip the last extension from a file name.

    Args:
        file_name: Base name of a file, e.g. ``headers.zip``.

    Returns:
        str: The name without its last suffix (``headers``). Names without
        a suffix, and dot-files such as ``.hidden``, are returned unchanged.
    """
    dot = file_name.rfind(".")
    if dot <= 0:
        return file_name
    return file_name[:dot]


def _is_path_safe(member_path: Path, target_dir: Path) -> bool:
    """Check if extracted path stays within target directory.

    Args:
        member_path: Relative path of the archive member.
        target_dir: Target extraction directory (must be resolved).

    Returns:
        bool: True if the path is safe, False otherwise.
    """
    try:
        resolved = (target_dir / member_path).resolve()
        return resolved.is_relative_to(target_dir)
    except (ValueError, RuntimeError):
        return False


def member_destination(member_name: str, target_dir: Path, verify: bool = True) -> Path:
    """Compute where an archive member is written under ``target_dir``.

    Args:
        member_name: Internal path of the member (always '/'-separated).
        target_dir: Extraction root.
        verify: Reject absolute and escaping member paths.

    Returns:
        Path: Destination file path.

    Raises:
        ArchiveSecurityError: If ``verify`` is set and the member escapes
            the target directory.
    """
    member_path = PurePosixPath(member_name)
    if verify:
        if member_path.is_absolute() or ".." in member_path.parts:
            raise ArchiveSecurityError(
                f"Zip Slip detected: {member_name} contains path traversal"
            )
        resolved_target = target_dir.resolve()
        if not _is_path_safe(Path(*member_path.parts), resolved_target):
            raise ArchiveSecurityError(
                f"Zip Slip detected: {member_name} escapes target directory"
            )
    return target_dir.joinpath(*member_path.parts)


def extract_zip_members(archive_path: Path, target_dir: Path, verify: bool = True) -> int:
    """Stream every file member of a ZIP archive into ``target_dir``.

    Directory entries are skipped; parent directories are created from the
    file paths. Member bytes are copied verbatim.

    Args:
        archive_path: Path to ZIP file.
        target_dir: Target extraction directory (created if missing).
        verify: Whether to check member paths for traversal.

    Returns:
        int: Number of files written.

    Raises:
        ArchiveSecurityError: If archive contains path traversal attempts.
        zipfile.BadZipFile: If archive is corrupted.
        OSError: On read or write failures.
    """
    target_dir.mkdir(parents=True, exist_ok=True)
    written = 0

    with zipfile.ZipFile(archive_path, "r") as zip_ref:
        for member in zip_ref.infolist():
            if member.is_dir():
                continue

            out_file = member_destination(member.filename, target_dir, verify=verify)
            out_file.parent.mkdir(parents=True, exist_ok=True)
            with zip_ref.open(member, "r") as source, open(out_file, "wb") as sink:
                shutil.copyfileobj(source, sink)
            written += 1

    logger.debug("Extracted %d file(s) from %s to %s", written, archive_path, target_dir)
    return written


__all__ = [
    "ArchiveSecurityError",
    "extract_zip_members",
    "member_destination",
    "remove_extension",
]
