"""Post aggregate assembly.

Resolves the owner and the referenced categories, locations and images,
builds the tags, and persists the whole post in the caller's unit of work.
"""

from collections.abc import Sequence

from core.logger import get_logger
from models import Post, PostCategory, Tag
from repositories.member_repository import MemberRepository
from repositories.post_repository import PostRepository
from repositories.reference_repository import (
    CategoryRepository,
    ImageRepository,
    LocationRepository,
)
from schemas import CreatePostRequest

logger = get_logger(__name__)


class PostServiceError(Exception):
    """Base class for post business-rule failures."""


class PostOwnerNotFoundError(PostServiceError):
    """Raised when the owning member of a new post does not exist."""

    def __init__(self, owner_id: int):
        self.owner_id = owner_id
        super().__init__(f"No member with id {owner_id}")


def _warn_unresolved(
    reference: str, requested: Sequence[int], resolved_ids: set[int]
) -> None:
    """Log ids that matched nothing. They are dropped, not rejected."""
    missing = sorted(set(requested) - resolved_ids)
    if missing:
        logger.warning(
            "post.references.unresolved",
            reference=reference,
            requested=len(set(requested)),
            resolved=len(resolved_ids),
            missing_ids=missing,
        )


class PostService:
    def __init__(
        self,
        members: MemberRepository,
        posts: PostRepository,
        categories: CategoryRepository,
        locations: LocationRepository,
        images: ImageRepository,
    ) -> None:
        self._members = members
        self._posts = posts
        self._categories = categories
        self._locations = locations
        self._images = images

    async def create_post(self, owner_id: int, request: CreatePostRequest) -> int:
        """Assemble and persist a post, returning its generated id.

        Unknown category/location/image ids are silently omitted (and logged).
        Tags are created fresh from the raw strings, duplicates included.

        Raises:
            PostOwnerNotFoundError: If owner_id matches no member. Nothing is
                staged in that case.
        """
        owner = await self._members.get_by_id(owner_id)
        if owner is None:
            raise PostOwnerNotFoundError(owner_id)

        locations = await self._locations.get_many_by_ids(request.location_ids)
        images = await self._images.get_many_by_ids(request.image_ids)
        categories = await self._categories.get_many_by_ids(request.category_ids)

        _warn_unresolved(
            "location", request.location_ids, {loc.id for loc in locations}
        )
        _warn_unresolved("image", request.image_ids, {img.id for img in images})
        _warn_unresolved(
            "category", request.category_ids, {cat.id for cat in categories}
        )

        post = Post(
            member=owner,
            title=request.title,
            content=request.content,
            post_categories=[PostCategory(category=cat) for cat in categories],
            locations=locations,
            images=images,
            tags=[Tag(name=name) for name in request.tags],
        )
        await self._posts.add(post)

        logger.info(
            "post.created",
            post_id=post.id,
            member_id=owner.id,
            categories=len(post.post_categories),
            locations=len(locations),
            images=len(images),
            tags=len(post.tags),
        )
        return post.id
