"""Materialization of packaged header archives into directories.

Header dependencies may be published either as plain directories or as a
single ZIP archive. The compiler can only consume directories, so archives
are extracted into the transform output area before compilation.

Extraction happens in a temporary sibling directory which is renamed into
place once complete. The final directory therefore only ever exists in its
complete form, and an existing one is reused as is.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
import zipfile
from pathlib import Path
from typing import List

from nativedeps.errors import MaterializationError
from nativedeps.resolution.transforms import ArtifactTransform
from nativedeps.utils.archive_utils import (
    ArchiveSecurityError,
    extract_zip_members,
    remove_extension,
)

logger = logging.getLogger("nativedeps.materialize.unzip")


class UnzipTransform(ArtifactTransform):
    """Transforms a header archive into its extracted directory.

    Directories are passed through unchanged.
    """

    name = "unzip"
    verify_member_paths = True

    def destination_for(self, archive: Path) -> Path:
        """Return ``<output-directory>/<archive name without extension>``."""
        return self.output_directory / remove_extension(Path(archive).name)

    def transform(self, artifact: Path) -> List[Path]:
        artifact = Path(artifact)
        if artifact.is_dir():
            logger.debug("Artifact %s is already a directory", artifact)
            return [artifact]

        destination = self.destination_for(artifact)
        if destination.is_dir():
            logger.debug("Reusing extracted headers %s", destination)
            return [destination]

        self._unzip_to(artifact, destination)
        return [destination]

    def _unzip_to(self, archive: Path, destination: Path) -> None:
        staging = None
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            staging = Path(
                tempfile.mkdtemp(
                    prefix=f".{destination.name}.",
                    suffix=".tmp",
                    dir=destination.parent,
                )
            )
            count = extract_zip_members(
                archive, staging, verify=self.verify_member_paths
            )
            try:
                os.replace(staging, destination)
            except OSError:
                if not destination.is_dir():
                    raise
                # Completed concurrently by another process.
                logger.debug("Headers %s were extracted concurrently", destination)
                shutil.rmtree(staging, ignore_errors=True)
                return
        except (
            OSError,
            RuntimeError,
            zipfile.BadZipFile,
            zipfile.LargeZipFile,
            ArchiveSecurityError,
        ) as exc:
            if staging is not None:
                shutil.rmtree(staging, ignore_errors=True)
            raise MaterializationError(archive, destination, str(exc)) from exc

        logger.info("Extracted %d header file(s) from %s to %s", count, archive, destination)


class UncheckedUnzipTransform(UnzipTransform):
    """UnzipTransform variant that trusts member paths."""

    name = "unzip-unchecked"
    verify_member_paths = False


__all__ = ["UncheckedUnzipTransform", "UnzipTransform"]
