# recipebook/services/meal_plan.py
import logging
from datetime import date

from sqlalchemy.exc import SQLAlchemyError

from ..errors import NotFound, ValidationError
from ..extensions import db
from ..models import MEAL_TYPES, MealPlanEntry

logger = logging.getLogger(__name__)


class MealPlanService:
    """Recipes a user scheduled for a given day and meal"""

    @staticmethod
    def add_entry(user_id, ref, data, resolver):
        planned_for = data.get('date')
        meal_type = data.get('mealType')
        servings = data.get('servings', 1)

        if not planned_for or not meal_type:
            raise ValidationError("Date and meal type are required")
        if meal_type not in MEAL_TYPES:
            raise ValidationError("Invalid meal type")
        try:
            planned_for = date.fromisoformat(str(planned_for))
        except ValueError:
            raise ValidationError("Date must be in YYYY-MM-DD format")
        if servings is None:
            servings = 1
        if isinstance(servings, bool) or not isinstance(servings, int) or servings <= 0:
            raise ValidationError("servings must be a positive integer")

        if not resolver.exists(ref):
            raise NotFound("Recipe not found")

        entry = MealPlanEntry(
            user_id=user_id,
            recipe_id=ref.recipe_id,
            is_external=ref.is_external,
            planned_for=planned_for,
            meal_type=meal_type,
            servings=servings,
        )
        try:
            db.session.add(entry)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            raise

        logger.info("User %s planned %s for %s %s", user_id, ref.key(), planned_for, meal_type)
        return entry

    @staticmethod
    def list_entries(user_id):
        return MealPlanEntry.query.filter_by(user_id=user_id) \
            .order_by(MealPlanEntry.planned_for, MealPlanEntry.entry_id).all()
