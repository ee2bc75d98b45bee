import datetime as dt
import logging
import os
import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional

from portfolio.core.errors import StorageError

log = logging.getLogger(__name__)

CATEGORIES = ("featured", "digital-sketches", "notebook-sketches", "photography")


def valid_category(name: str) -> bool:
    return name in CATEGORIES


def new_photo_id() -> str:
    """16 random bytes, hex encoded (32 chars)."""
    return secrets.token_hex(16)


def split_name(filename: str):
    """Return (stem, ext) the way uploads are named: ``<id><ext>``."""
    stem, ext = os.path.splitext(filename)
    return stem, ext


@dataclass(frozen=True)
class StoredFile:
    photo_id: str
    filename: str
    category: str
    size: int
    modified_at: dt.datetime


class LocalPhotoStorage:
    """Photo bytes on local disk, one directory per category.

    Layout: ``<base>/<category>/<id><ext>``. The directory is also what the
    static ``/photos`` mount serves, so filenames are public.
    """

    def __init__(self, base_dir):
        self.base = Path(base_dir)

    def ensure_layout(self) -> None:
        for category in CATEGORIES:
            (self.base / category).mkdir(parents=True, exist_ok=True)

    def path_for(self, category: str, filename: str) -> Path:
        if not valid_category(category):
            raise ValueError(f"unknown category {category!r}")
        # filenames are generated server-side, but never let one escape its folder
        if Path(filename).name != filename:
            raise ValueError(f"invalid filename {filename!r}")
        return self.base / category / filename

    def save(self, category: str, filename: str, data: bytes) -> Path:
        path = self.path_for(category, filename)
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(path, "wb") as f:
                f.write(data)
        except OSError as exc:
            log.error("Failed to write %s: %s", path, exc)
            self.discard(category, filename)
            raise StorageError("Failed to save file") from exc
        return path

    def delete(self, category: str, filename: str) -> None:
        path = self.path_for(category, filename)
        try:
            path.unlink()
        except FileNotFoundError:
            raise
        except OSError as exc:
            log.error("Failed to delete %s: %s", path, exc)
            raise StorageError("Failed to delete photo") from exc

    def exists(self, category: str, filename: str) -> bool:
        return self.path_for(category, filename).is_file()

    def scan(self, category: str) -> List[StoredFile]:
        """Regular files directly inside a category folder, in directory order."""
        folder = self.base / category
        try:
            entries = list(os.scandir(folder))
        except OSError as exc:
            log.error("Failed to read directory %s: %s", folder, exc)
            raise StorageError("Failed to read directory") from exc

        files = []
        for entry in entries:
            if not entry.is_file():
                continue
            try:
                st = entry.stat()
            except OSError:
                # vanished between listing and stat
                continue
            stem, _ = split_name(entry.name)
            files.append(StoredFile(
                photo_id=stem,
                filename=entry.name,
                category=category,
                size=st.st_size,
                modified_at=dt.datetime.fromtimestamp(st.st_mtime, dt.timezone.utc),
            ))
        return files

    def iter_all(self) -> Iterator[StoredFile]:
        for category in CATEGORIES:
            yield from self.scan(category)

    def find(self, photo_id: str) -> Optional[StoredFile]:
        """Linear search of every category; the id alone does not encode one."""
        for category in CATEGORIES:
            try:
                files = self.scan(category)
            except StorageError:
                continue
            for f in files:
                if f.photo_id == photo_id:
                    return f
        return None

    def discard(self, category: str, filename: str) -> None:
        """Best-effort removal of a file written by a failed upload."""
        path = self.path_for(category, filename)
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            log.warning("Could not remove partial file %s: %s", path, exc)
