"""Copy tagged images into one destination sub-folder per tag."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path

from ..models.base import DistributionReport, FolderNamePolicy, ImageLocation
from ..utils.text import tag_folder_name
from .permissions import AccessProvider, LocalAccessProvider, with_access

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, Path], None]


class BatchDistributor:
    """Fans every (image, tag) pair out to ``destination/<tag>/<file name>``.

    Files already present at the target are left untouched, so running the
    same batch twice copies nothing the second time. Failures are counted
    per pair and never stop the batch.
    """

    def __init__(
        self,
        provider: AccessProvider | None = None,
        *,
        folder_policy: FolderNamePolicy = FolderNamePolicy.REJECT,
    ) -> None:
        self.provider = provider or LocalAccessProvider()
        self.folder_policy = folder_policy

    def distribute(
        self,
        assignments: Mapping[ImageLocation, Iterable[str]],
        destination: Path,
        *,
        progress_callback: ProgressCallback | None = None,
    ) -> DistributionReport:
        report = DistributionReport()
        work = [(image, list(tags)) for image, tags in assignments.items()]
        work = [(image, tags) for image, tags in work if tags]
        total = len(work)

        with with_access(self.provider, destination) as granted:
            if not granted:
                logger.warning("Access to destination %s was refused.", destination)
                for image, tags in work:
                    for tag in tags:
                        report.record_failure(image, tag, "destination not accessible")
                return report

            for index, (image, tags) in enumerate(work, start=1):
                self._distribute_image(image, tags, destination, report)
                if progress_callback:
                    progress_callback(index, total, image)

        logger.info(
            "Distributed into %s: %d copied, %d already present, %d failed",
            destination,
            report.copied,
            report.skipped,
            report.failed,
        )
        return report

    def _distribute_image(
        self,
        image: ImageLocation,
        tags: list[str],
        destination: Path,
        report: DistributionReport,
    ) -> None:
        with with_access(self.provider, image) as granted:
            if not granted:
                logger.warning("Source image %s is not accessible.", image)
                for tag in tags:
                    report.record_failure(image, tag, "source not accessible")
                return
            for tag in tags:
                self._copy_one(image, tag, destination, report)

    def _copy_one(
        self,
        image: ImageLocation,
        tag: str,
        destination: Path,
        report: DistributionReport,
    ) -> None:
        folder_name = tag_folder_name(tag, self.folder_policy)
        if folder_name is None:
            logger.warning("Tag %r cannot be used as a folder name; skipping %s", tag, image)
            report.record_failure(image, tag, "tag is not a usable folder name")
            return

        target_dir = destination / folder_name
        target = target_dir / image.name
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            if target.exists():
                report.skipped += 1
                return
        except OSError as exc:
            logger.warning("Could not prepare %s: %s", target_dir, exc)
            report.record_failure(image, tag, str(exc))
            return

        try:
            shutil.copy2(image, target)
        except OSError as exc:
            logger.warning("Failed to copy %s to %s: %s", image, target, exc)
            report.record_failure(image, tag, str(exc))
            _discard_partial(target)
            return
        report.copied += 1
        logger.debug("Copied %s to %s", image, target)


def _discard_partial(target: Path) -> None:
    try:
        target.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Could not remove partial copy %s: %s", target, exc)
