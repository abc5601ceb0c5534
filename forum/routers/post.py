"""Post endpoints: create a post (translation continues in the background) and fetch one."""

from fastapi import APIRouter, Depends, status

from forum.modules.posts.schemas import PostCreate, PostOut
from forum.services.posts import PostService, get_post_service

router = APIRouter(prefix="/posts", tags=["Posts"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=PostOut)
async def create_post(
    payload: PostCreate,
    service: PostService = Depends(get_post_service),
):
    """Create a post; translation fields are final only when the content was cached."""
    return await service.create_post(payload)


@router.get("/{pid}", response_model=PostOut)
def get_post(pid: int, service: PostService = Depends(get_post_service)):
    return service.get_post(pid)
