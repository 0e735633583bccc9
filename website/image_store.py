"""
Local disk storage for uploaded images.

Images are kept flat in one directory and addressed by file name. Articles
only keep the name; nothing checks that the file is still there.
"""
import logging
import os
import shutil
import tempfile
from typing import BinaryIO, List, Optional

from website.errors import InvalidImageNameError

logger = logging.getLogger(__name__)


def sanitize_image_name(filename: Optional[str]) -> str:
    """
    Reduce a client-supplied file name to a safe base name.

    Args:
        filename: Name as sent by the client (may contain a path)

    Returns:
        Base name usable inside the images directory

    Raises:
        InvalidImageNameError: If nothing usable is left
    """
    if not filename:
        raise InvalidImageNameError("Image name is empty")
    name = os.path.basename(filename.replace("\\", "/")).strip()
    if not name or name.startswith(".") or "\x00" in name:
        raise InvalidImageNameError(f"Invalid image name: {filename!r}")
    return name


class ImageStore:
    """Stores uploaded images on the local filesystem."""

    def __init__(self, images_dir: str = "images"):
        """
        Initialize image storage.

        Args:
            images_dir: Directory for storing images (default: "images")
        """
        self.images_dir = images_dir
        os.makedirs(self.images_dir, exist_ok=True)

    def save(self, filename: Optional[str], fileobj: BinaryIO) -> str:
        """
        Persist an uploaded file, replacing any image with the same name.

        Args:
            filename: Name supplied by the uploader
            fileobj: Readable binary file object

        Returns:
            Stored image name

        Raises:
            InvalidImageNameError: If the name cannot be stored safely
        """
        name = sanitize_image_name(filename)
        path = os.path.join(self.images_dir, name)
        fd, tmp_path = tempfile.mkstemp(dir=self.images_dir, prefix=".tmp-")
        try:
            with os.fdopen(fd, "wb") as f:
                shutil.copyfileobj(fileobj, f)
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
        logger.info("Stored image %s", name)
        return name

    def path_for(self, name: str) -> Optional[str]:
        """
        Resolve an image name to its file path.

        Args:
            name: Image name

        Returns:
            Path to the image, or None if the name is invalid or not stored
        """
        try:
            safe_name = sanitize_image_name(name)
        except InvalidImageNameError:
            return None
        if safe_name != name:
            return None
        path = os.path.join(self.images_dir, safe_name)
        if not os.path.isfile(path):
            return None
        return path

    def list_images(self) -> List[str]:
        """Return the names of all stored images, sorted."""
        return sorted(
            entry for entry in os.listdir(self.images_dir)
            if not entry.startswith(".") and os.path.isfile(os.path.join(self.images_dir, entry))
        )
