"""Favorite and comment endpoints for gallery photos."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Request, Response, status

from photo_gallery.api.models import (
    CommentListResponse,
    CommentRequest,
    CommentResponse,
    FavoriteListResponse,
    FavoriteResponse,
    FavoriteToggleResponse,
    PhotoSummaryResponse,
)

if TYPE_CHECKING:
    from photo_gallery.services.gallery import GalleryAnnotationService

router = APIRouter(prefix="/galleries/{gallery_id}", tags=["annotations"])


def _gallery(request: Request, gallery_id: str) -> GalleryAnnotationService:
    try:
        return request.app.state.container.galleries.for_gallery(gallery_id)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc


@router.get("/photos/{photo_id}")
async def photo_summary(
    gallery_id: str, photo_id: str, request: Request
) -> PhotoSummaryResponse:
    """Return the favorite state and comment of a photo."""
    service = _gallery(request, gallery_id)
    return PhotoSummaryResponse.from_summary(service.photo_summary(photo_id))


@router.post("/photos/{photo_id}/favorite/toggle")
async def toggle_favorite(
    gallery_id: str, photo_id: str, request: Request
) -> FavoriteToggleResponse:
    """Flip the favorite mark of a photo."""
    service = _gallery(request, gallery_id)
    service.on_toggle_favorite(photo_id)
    return FavoriteToggleResponse(
        photo_id=photo_id, is_favorite=service.favorites.has(photo_id)
    )


@router.put("/photos/{photo_id}/comment")
async def put_comment(
    gallery_id: str, photo_id: str, body: CommentRequest, request: Request
) -> PhotoSummaryResponse:
    """Create or replace the comment of a photo."""
    service = _gallery(request, gallery_id)
    service.on_add_comment(photo_id, body.text)
    return PhotoSummaryResponse.from_summary(service.photo_summary(photo_id))


@router.delete("/photos/{photo_id}/comment", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(gallery_id: str, photo_id: str, request: Request) -> Response:
    """Remove the comment of a photo."""
    _gallery(request, gallery_id).remove_comment(photo_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/comments")
async def list_comments(gallery_id: str, request: Request) -> CommentListResponse:
    """Return gallery comments, most recently updated first."""
    service = _gallery(request, gallery_id)
    comments = [CommentResponse.from_record(c) for c in service.list_comments()]
    return CommentListResponse(comments=comments, count=len(comments))


@router.delete("/comments", status_code=status.HTTP_204_NO_CONTENT)
async def clear_comments(gallery_id: str, request: Request) -> Response:
    """Remove every comment of a gallery."""
    _gallery(request, gallery_id).clear_comments()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/favorites")
async def list_favorites(gallery_id: str, request: Request) -> FavoriteListResponse:
    """Return gallery favorites, most recently marked first."""
    service = _gallery(request, gallery_id)
    favorites = [FavoriteResponse.from_record(f) for f in service.list_favorites()]
    return FavoriteListResponse(favorites=favorites, count=len(favorites))


@router.delete("/favorites", status_code=status.HTTP_204_NO_CONTENT)
async def clear_favorites(gallery_id: str, request: Request) -> Response:
    """Unmark every favorite of a gallery."""
    _gallery(request, gallery_id).clear_favorites()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
