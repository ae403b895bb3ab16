# src/suggestions/schemas.py
from auth.schemas import UserResponse, UserWithProfile


class SuggestedUser(UserWithProfile):
    """A follow suggestion. Suggestions are never already followed."""
    affinity_score: int = 0

    @classmethod
    def from_orm(cls, obj, score: int = 0):
        return cls(**UserResponse.model_validate(obj).model_dump(), is_following=False, affinity_score=score)
