from ..extensions import db

MEAL_TYPES = ('breakfast', 'lunch', 'dinner', 'snack')


class MealPlanEntry(db.Model):
    __tablename__ = 'meal_plan_entries'

    entry_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False, index=True)
    recipe_id = db.Column(db.String(50), nullable=False)
    is_external = db.Column(db.Boolean, nullable=False)
    planned_for = db.Column(db.Date, nullable=False)
    meal_type = db.Column(db.String(16), nullable=False)
    servings = db.Column(db.Integer, nullable=False, default=1)
    created_at = db.Column(db.DateTime, default=db.func.now())

    def to_dict(self):
        return {
            'entry_id': self.entry_id,
            'recipeId': self.recipe_id,
            'isExternal': self.is_external,
            'source': 'spoon' if self.is_external else 'db',
            'date': self.planned_for.isoformat(),
            'mealType': self.meal_type,
            'servings': self.servings,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
