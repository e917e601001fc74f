"""
File Cache Manager - Persistent storage for captured photos and videos
"""

import logging
import os
import tempfile
import uuid
from pathlib import Path
from threading import RLock
from typing import Dict, List, Optional, Union

from api.exceptions import FileHandlingError, MaxCacheError
from core.constants import ErrorMessages, StorageConstants
from core.enums import MediaType

logger = logging.getLogger(__name__)


class FileCacheManager:
    """
    Stores captured media in one directory per media kind.

    File names are ``<prefix><uuid>.<ext>`` and each kind has a maximum
    number of files. When ``enforce_limit`` is set, new names are refused
    once a kind is full until files are deleted.
    """

    def __init__(
        self,
        root_dir: Union[str, Path],
        photo_dir_name: str = StorageConstants.PHOTO_DIR_NAME,
        video_dir_name: str = StorageConstants.VIDEO_DIR_NAME,
        file_prefix: str = StorageConstants.FILE_NAME_PREFIX,
        max_photo_files: int = StorageConstants.MAX_PHOTO_FILES,
        max_video_files: int = StorageConstants.MAX_VIDEO_FILES,
        enforce_limit: bool = True,
    ):
        """
        Initialize File Cache Manager

        Args:
            root_dir: Persistent storage root
            photo_dir_name: Directory name for photos under the root
            video_dir_name: Directory name for videos under the root
            file_prefix: Fixed prefix of every cached file name
            max_photo_files: Maximum number of cached photos
            max_video_files: Maximum number of cached videos
            enforce_limit: Refuse new files once a kind is full
        """
        # Locations returned to clients must not depend on the working directory
        self.root_dir = Path(root_dir).resolve()
        self.file_prefix = file_prefix
        self.enforce_limit = enforce_limit

        self._dir_names = {
            MediaType.PHOTO: photo_dir_name,
            MediaType.VIDEO: video_dir_name,
        }
        self._extensions = {
            MediaType.PHOTO: StorageConstants.PHOTO_EXTENSION,
            MediaType.VIDEO: StorageConstants.VIDEO_EXTENSION,
        }
        self._max_files = {
            MediaType.PHOTO: max_photo_files,
            MediaType.VIDEO: max_video_files,
        }

        # Serializes name generation and writes from worker threads
        self.lock = RLock()

        logger.info(
            f"File Cache Manager initialized at {self.root_dir} "
            f"(photos: {max_photo_files}, videos: {max_video_files}, "
            f"limit enforced: {enforce_limit})"
        )

    def directory(self, kind: MediaType) -> Path:
        """Directory holding files of the given kind"""
        return self.root_dir / self._dir_names[MediaType(kind)]

    def max_files(self, kind: MediaType) -> int:
        return self._max_files[MediaType(kind)]

    def ensure_directory(self, kind: MediaType) -> Path:
        """
        Create the directory for a media kind if it does not exist.

        Args:
            kind: Media kind

        Returns:
            Path to the directory

        Raises:
            FileHandlingError: If the path exists but is not a directory
        """
        path = self.directory(kind)
        if path.exists():
            if not path.is_dir():
                raise FileHandlingError(ErrorMessages.NOT_A_DIRECTORY.format(path=path))
            return path

        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create cache directory {path}: {e}")
            raise FileHandlingError(str(e)) from e

        logger.info(f"Created cache directory {path}")
        return path

    def ensure_directories(self):
        """Create all kind directories, logging failures"""
        for kind in MediaType:
            try:
                self.ensure_directory(kind)
            except FileHandlingError as e:
                logger.error(f"Cache directory for {kind.name.lower()} unavailable: {e.message}")

    def list_files(self, kind: MediaType) -> List[Path]:
        """
        List cached files of a media kind.

        Args:
            kind: Media kind

        Returns:
            Sorted list of file paths, empty if nothing is cached
        """
        path = self.directory(kind)
        if not path.is_dir():
            return []

        try:
            return sorted(
                p
                for p in path.iterdir()
                if p.is_file() and not p.name.endswith(StorageConstants.TEMP_FILE_SUFFIX)
            )
        except OSError as e:
            logger.error(f"Failed to list {path}: {e}")
            raise FileHandlingError(str(e)) from e

    def count(self, kind: MediaType) -> int:
        return len(self.list_files(kind))

    def is_cache_limit_reached(self, kind: MediaType) -> bool:
        """Check whether a media kind holds its maximum number of files"""
        return self.count(kind) >= self.max_files(kind)

    def generate_unique_name(self, kind: MediaType) -> Path:
        """
        Generate a collision-free file path for a new file.

        Args:
            kind: Media kind

        Returns:
            Path under the kind directory (file not yet created)

        Raises:
            MaxCacheError: If the cache limit is enforced and reached
        """
        kind = MediaType(kind)
        with self.lock:
            if self.enforce_limit and self.is_cache_limit_reached(kind):
                logger.warning(
                    f"Cache limit reached for {kind.name.lower()} "
                    f"({self.max_files(kind)} files)"
                )
                raise MaxCacheError()

            guid = str(uuid.uuid4()).upper()
            file_name = f"{self.file_prefix}{guid}.{self._extensions[kind]}"
            unique_path = self.directory(kind) / file_name

        logger.debug(f"Generated file name {unique_path}")
        return unique_path

    def save(self, data: bytes, kind: MediaType) -> Path:
        """
        Write media atomically under a freshly generated name.

        Args:
            data: Raw media bytes
            kind: Media kind

        Returns:
            Path of the saved file

        Raises:
            MaxCacheError: If the cache limit is reached
            FileHandlingError: If the file cannot be written
        """
        with self.lock:
            directory = self.ensure_directory(kind)
            target = self.generate_unique_name(kind)

            tmp_path: Optional[str] = None
            try:
                fd, tmp_path = tempfile.mkstemp(
                    dir=directory, prefix=".", suffix=StorageConstants.TEMP_FILE_SUFFIX
                )
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                os.replace(tmp_path, target)
            except OSError as e:
                logger.error(f"Failed to save {target}: {e}")
                if tmp_path and os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise FileHandlingError(ErrorMessages.SAVE_FAILED) from e

        logger.info(f"Saved {len(data)} bytes to {target}")
        return target

    def delete_all(self, kind: MediaType) -> int:
        """
        Delete every cached file of a media kind.

        Args:
            kind: Media kind

        Returns:
            Number of files removed

        Raises:
            FileHandlingError: If nothing is cached or a file cannot be removed
        """
        with self.lock:
            files = self.list_files(kind)
            if not files:
                raise FileHandlingError(ErrorMessages.NO_FILE_CACHED)

            for path in files:
                try:
                    path.unlink()
                except FileNotFoundError:
                    continue
                except OSError as e:
                    logger.error(f"Failed to delete {path}: {e}")
                    raise FileHandlingError(str(e)) from e

        logger.info(f"Deleted {len(files)} cached {MediaType(kind).name.lower()} file(s)")
        return len(files)

    def get_stats(self) -> Dict[str, Dict[str, int]]:
        """Per-kind file counts and limits"""
        return {
            kind.name.lower(): {"count": self.count(kind), "max_files": self.max_files(kind)}
            for kind in MediaType
        }
