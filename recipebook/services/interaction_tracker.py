# recipebook/services/interaction_tracker.py
import logging

from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError

from ..errors import ValidationError
from ..extensions import db
from ..models import FavoriteRecipe, WatchEvent
from ..utils.clock import utcnow
from .types import RecipeRef, RecipeSource

logger = logging.getLogger(__name__)


def _require_user(user_id):
    if user_id is None or user_id == '':
        raise ValidationError("Invalid user_id")


def _ref_filter(model, user_id, ref):
    return model.query.filter_by(user_id=user_id, recipe_id=ref.recipe_id, is_external=ref.is_external)


class InteractionTracker:
    """Per-user favorites and watch history, keyed by (user, recipe id, source)"""

    @staticmethod
    def toggle_favorite(user_id, ref):
        """
        Add the recipe to the user's favorites, or remove it if already there.

        Returns:
            bool: True if the recipe is now a favorite
        """
        _require_user(user_id)
        existing = _ref_filter(FavoriteRecipe, user_id, ref).first()

        if existing:
            db.session.delete(existing)
            is_favorite = False
        else:
            db.session.add(FavoriteRecipe(user_id=user_id, recipe_id=ref.recipe_id, is_external=ref.is_external))
            is_favorite = True

        try:
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            raise

        logger.info("User %s %s favorite %s", user_id, 'added' if is_favorite else 'removed', ref.key())
        return is_favorite

    @staticmethod
    def mark_as_favorite(user_id, ref):
        """Idempotent add"""
        _require_user(user_id)
        if _ref_filter(FavoriteRecipe, user_id, ref).first():
            return
        db.session.add(FavoriteRecipe(user_id=user_id, recipe_id=ref.recipe_id, is_external=ref.is_external))
        try:
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            raise

    @staticmethod
    def is_favorite(user_id, ref):
        _require_user(user_id)
        return _ref_filter(FavoriteRecipe, user_id, ref).first() is not None

    @staticmethod
    def list_favorites(user_id, source=None):
        _require_user(user_id)
        query = FavoriteRecipe.query.filter_by(user_id=user_id)
        if source is not None:
            query = query.filter_by(is_external=source.is_external)
        rows = query.order_by(FavoriteRecipe.created_at, FavoriteRecipe.recipe_id).all()
        return [RecipeRef(r.recipe_id, RecipeSource.from_flag(r.is_external)) for r in rows]

    @classmethod
    def favorite_ids(cls, user_id, source):
        """Ids favorited by the user within one source, for bulk annotation"""
        return {ref.recipe_id for ref in cls.list_favorites(user_id, source)}

    @staticmethod
    def record_watch(user_id, ref, watched_at=None):
        """Insert the watch event, or move its timestamp forward if it already exists"""
        _require_user(user_id)
        watched_at = watched_at or utcnow()
        existing = _ref_filter(WatchEvent, user_id, ref).first()

        if existing:
            existing.watched_at = watched_at
        else:
            db.session.add(WatchEvent(
                user_id=user_id,
                recipe_id=ref.recipe_id,
                is_external=ref.is_external,
                watched_at=watched_at,
            ))

        try:
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            raise

    @staticmethod
    def list_recently_watched(user_id, limit=None, source=None):
        _require_user(user_id)
        if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0):
            raise ValidationError("Limit must be a positive number")

        query = WatchEvent.query.filter_by(user_id=user_id)
        if source is not None:
            query = query.filter_by(is_external=source.is_external)
        query = query.order_by(desc(WatchEvent.watched_at))
        if limit:
            query = query.limit(limit)
        return [RecipeRef(r.recipe_id, RecipeSource.from_flag(r.is_external)) for r in query.all()]
