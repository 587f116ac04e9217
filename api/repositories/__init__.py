"""Repository layer for database operations.

Repositories encapsulate all database queries, keeping services focused on
business rules. None of them commit; the unit of work owns the transaction.
"""

from repositories.comment_repository import CommentRepository
from repositories.interaction_repository import InteractionRepository
from repositories.member_repository import MemberRepository
from repositories.post_repository import PostRepository
from repositories.reference_repository import (
    CategoryRepository,
    ImageRepository,
    LocationRepository,
)
from repositories.utils import log_slow_query

__all__ = [
    "CategoryRepository",
    "CommentRepository",
    "ImageRepository",
    "InteractionRepository",
    "LocationRepository",
    "MemberRepository",
    "PostRepository",
    "log_slow_query",
]
