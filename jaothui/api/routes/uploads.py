import mimetypes

from fastapi import APIRouter, Depends, HTTPException, Response

from jaothui.adapters.fs.filestore import FileSystemStore
from jaothui.api.deps import get_file_store

router = APIRouter()


@router.get("/{path:path}")
def get_upload(
    path: str,
    file_store: FileSystemStore = Depends(get_file_store),
) -> Response:
    """Serve a stored upload; names are generated, so they are safe to cache."""
    try:
        data = file_store.get(path)
    except (FileNotFoundError, ValueError):
        raise HTTPException(status_code=404, detail="ไม่พบไฟล์") from None

    media_type, _ = mimetypes.guess_type(path)
    return Response(
        content=data,
        media_type=media_type or "application/octet-stream",
        headers={
            "Cache-Control": "public, max-age=31536000, immutable",
            "X-Content-Type-Options": "nosniff",
        },
    )
