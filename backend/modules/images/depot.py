"""
Image depot.

Locates recipe and author images on disk and removes images that are no
longer referenced. Storing uploads is handled elsewhere.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

logger = logging.getLogger(__name__)

# Observer for swallowed cleanup failures: (image name, exception)
CleanupErrorHook = Callable[[str, Exception], None]


class ImageDepot:
    """A directory of image files addressed by image name."""

    def __init__(self, depot_path: str | Path) -> None:
        self._root = Path(depot_path)
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, image_name: str) -> Path:
        """Path of an image inside the depot. Only the final name component is used."""
        return self._root / Path(image_name).name

    def remove(self, image_name: str) -> None:
        """
        Delete an image.

        Raises:
            FileNotFoundError: If the image does not exist
        """
        self.path_for(image_name).unlink()

    def discard(
        self,
        image_name: str,
        on_error: Optional[CleanupErrorHook] = None,
    ) -> bool:
        """
        Best-effort removal of an image.

        Never raises. A failure is logged and passed to on_error, so the
        caller's primary operation still succeeds.

        Returns:
            True if the image was removed
        """
        if not image_name:
            return False

        try:
            self.remove(image_name)
        except OSError as e:
            logger.warning("Failed to delete image %s: %s", image_name, e)
            if on_error is not None:
                on_error(image_name, e)
            return False

        logger.debug("Deleted image %s", image_name)
        return True
