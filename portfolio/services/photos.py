"""
Photo catalog: uploads, listings and deletes.

Bytes live in :class:`LocalPhotoStorage`; titles, categories and upload
times live in the ``photos`` table so listings no longer depend on
directory enumeration order or lose the title given at upload.
"""

import datetime as dt
import logging
import mimetypes
from pathlib import PurePath
from typing import List, Optional, Tuple

from tortoise.exceptions import IntegrityError, OperationalError

from portfolio.core.errors import NotFoundError, StorageError, ValidationError
from portfolio.models.photo import ID_MAX_LENGTH, Photo
from portfolio.services.metrics import record_delete, record_upload
from portfolio.services.storage import LocalPhotoStorage, new_photo_id, split_name, valid_category

log = logging.getLogger(__name__)

MAX_TITLE = 255
# Stored names are "<32 hex><ext>" and must fit the filesystem's name limit
MAX_EXTENSION = 16


def _require_category(category: str) -> None:
    if not valid_category(category):
        raise ValidationError("Invalid category")


async def upload(
    store: LocalPhotoStorage,
    category: str,
    filename: Optional[str],
    content_type: Optional[str],
    data: Optional[bytes],
    title: str = "",
    max_bytes: Optional[int] = None,
) -> Photo:
    # Every check runs before anything touches the disk
    _require_category(category)
    if data is None:
        raise ValidationError("Failed to get file from form")
    if not (content_type or "").startswith("image/"):
        record_upload("rejected")
        raise ValidationError("File must be an image")
    if max_bytes is not None and len(data) > max_bytes:
        record_upload("rejected")
        raise ValidationError("File too large")
    _, ext = split_name(PurePath(filename or "").name)
    if len(ext) > MAX_EXTENSION:
        record_upload("rejected")
        raise ValidationError("File extension too long")

    photo_id = new_photo_id()
    stored_name = photo_id + ext

    store.save(category, stored_name, data)
    try:
        photo = await Photo.create(
            id=photo_id,
            filename=stored_name,
            title=(title or "").strip()[:MAX_TITLE] or photo_id,
            category=category,
            content_type=content_type,
            size_bytes=len(data),
            uploaded_at=dt.datetime.now(dt.timezone.utc),
        )
    except (IntegrityError, OperationalError) as exc:
        log.error("Catalog insert failed for %s/%s: %s", category, stored_name, exc)
        store.discard(category, stored_name)
        record_upload("error")
        raise StorageError("Failed to save photo") from exc

    record_upload("success")
    log.info("Uploaded photo %s to %s (%d bytes)", photo_id, category, len(data))
    return photo


async def list_by_category(category: str) -> List[Photo]:
    """Newest upload first; ties broken by id so the order is stable."""
    _require_category(category)
    try:
        return await Photo.filter(category=category).order_by("-uploaded_at", "id")
    except OperationalError as exc:
        log.error("Catalog read failed for %s: %s", category, exc)
        raise StorageError("Failed to read photos") from exc


async def delete(store: LocalPhotoStorage, photo_id: str) -> None:
    photo = await Photo.get_or_none(id=photo_id)
    if photo is not None:
        try:
            store.delete(photo.category, photo.filename)
        except FileNotFoundError:
            log.warning("Photo %s had no file on disk; dropping catalog entry", photo_id)
        await photo.delete()
        record_delete()
        log.info("Deleted photo %s from %s", photo_id, photo.category)
        return

    # Not catalogued: the file may have been dropped in by hand since startup
    stray = store.find(photo_id)
    if stray is None:
        raise NotFoundError("Photo not found")
    try:
        store.delete(stray.category, stray.filename)
    except FileNotFoundError:
        raise NotFoundError("Photo not found")
    record_delete()
    log.info("Deleted uncatalogued photo %s from %s", photo_id, stray.category)


async def sync_catalog(store: LocalPhotoStorage) -> Tuple[int, int]:
    """Reconcile the catalog with the category folders.

    Files without a row are catalogued using the filename stem as id and
    title and the file's mtime as upload time; rows whose file is gone are
    removed. Returns ``(added, removed)``.
    """
    added = removed = 0
    seen = set()

    for photo in await Photo.all():
        if valid_category(photo.category) and store.exists(photo.category, photo.filename):
            seen.add(photo.id)
            continue
        await photo.delete()
        removed += 1

    for f in store.iter_all():
        if f.filename.startswith(".") or f.photo_id in seen:
            continue
        if len(f.photo_id) > ID_MAX_LENGTH:
            log.warning("Skipping %s/%s: name too long to catalog", f.category, f.filename)
            continue
        try:
            await Photo.create(
                id=f.photo_id,
                filename=f.filename,
                title=f.photo_id[:MAX_TITLE],
                category=f.category,
                content_type=mimetypes.guess_type(f.filename)[0],
                size_bytes=f.size,
                uploaded_at=f.modified_at,
            )
        except (UnicodeEncodeError, IntegrityError, OperationalError) as exc:
            # One unreadable name must not keep the app from starting
            log.warning("Skipping %s/%r: cannot catalog it: %s", f.category, f.filename, exc)
            continue
        seen.add(f.photo_id)
        added += 1

    if added or removed:
        log.info("Catalog sync: %d added, %d removed", added, removed)
    return added, removed
