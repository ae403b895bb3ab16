# src/suggestions/services.py
import logging

from sqlalchemy.orm import Session
from typing import List, Optional, Tuple
from auth.models import User
from auth.services import AuthService
from config import settings
from social.services import SocialGraphService
from suggestions.schemas import SuggestedUser
from suggestions.scoring import AffinityScorer, default_scorer

logger = logging.getLogger(__name__)


class SuggestionService:
    @staticmethod
    def rank_candidates(requester: User, candidates: List[User], scorer: AffinityScorer) -> List[Tuple[User, int]]:
        """Score candidates and order them best first; ties keep ascending id order."""
        scored = [(candidate, scorer(requester, candidate)) for candidate in sorted(candidates, key=lambda u: u.id)]
        scored.sort(key=lambda pair: pair[1], reverse=True)
        return scored

    @staticmethod
    def get_suggested_users(
            user_id: int,
            db: Session,
            limit: Optional[int] = None,
            scorer: AffinityScorer = default_scorer
    ) -> List[SuggestedUser]:
        """Users worth following: everyone except the requester and those already followed."""
        requester = AuthService.get_user_or_404(user_id, db)
        limit = limit or settings.SUGGESTION_DEFAULT_LIMIT
        following = SocialGraphService.following_ids_select(user_id)
        candidates = db.query(User).filter(User.id != user_id, User.id.notin_(following)).all()

        ranked = SuggestionService.rank_candidates(requester, candidates, scorer)[:limit]
        logger.info(f"Suggested {len(ranked)} of {len(candidates)} candidates for user {user_id}")
        return [SuggestedUser.from_orm(candidate, score) for candidate, score in ranked]
