import logging
from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from portfolio.config import settings
from portfolio.core.errors import ValidationError
from portfolio.schemas.envelope import envelope_response
from portfolio.schemas.photo import PhotoOut
from portfolio.services import photos
from portfolio.services.security import AuthUser, require_user
from portfolio.services.storage import LocalPhotoStorage

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/photos", tags=["photos"])


def get_photo_storage(request: Request) -> LocalPhotoStorage:
    return request.app.state.photo_storage


def _base_url(request: Request) -> str:
    # scheme and host of this request; the catalog stores no URLs
    return f"{request.url.scheme}://{request.url.netloc}"


@router.post("/upload", status_code=201)
async def upload_photo(
    request: Request,
    auth: AuthUser = Depends(require_user),
    store: LocalPhotoStorage = Depends(get_photo_storage),
):
    # Form is parsed here, after authentication, not as route parameters
    try:
        form = await request.form()
    except (StarletteHTTPException, MultiPartException) as exc:
        log.info("Unreadable upload form: %s", exc)
        raise ValidationError("Failed to parse form")

    try:
        title = form.get("title") or ""
        category = form.get("category") or ""
        if not isinstance(title, str) or not isinstance(category, str):
            raise ValidationError("Failed to parse form")

        upload = form.get("photo")
        if isinstance(upload, UploadFile):
            filename, content_type = upload.filename, upload.content_type
            data = await upload.read()
        else:
            filename = content_type = data = None

        photo = await photos.upload(
            store,
            category=category,
            filename=filename,
            content_type=content_type,
            data=data,
            title=title,
            max_bytes=settings.MAX_UPLOAD_BYTES,
        )
    finally:
        await form.close()

    log.info("User %s uploaded %s", auth.user_id, photo.id)
    return envelope_response(
        201,
        message="Photo uploaded successfully",
        data=PhotoOut.from_photo(photo, _base_url(request)).as_json(),
    )


@router.get("/{category}")
async def list_photos(request: Request, category: str):
    items = await photos.list_by_category(category)
    base = _base_url(request)
    return envelope_response(200, data=[PhotoOut.from_photo(p, base).as_json() for p in items])


@router.delete("/{photo_id}")
async def delete_photo(
    photo_id: str,
    auth: AuthUser = Depends(require_user),
    store: LocalPhotoStorage = Depends(get_photo_storage),
):
    await photos.delete(store, photo_id)
    log.info("User %s deleted %s", auth.user_id, photo_id)
    return envelope_response(200, message="Photo deleted successfully")
