# recipebook/models/recipe.py
from ..extensions import db


class Recipe(db.Model):
    __tablename__ = 'recipes'

    recipe_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    image = db.Column(db.String(255), nullable=True)
    ready_in_minutes = db.Column(db.Integer, nullable=False)
    vegan = db.Column(db.Boolean, nullable=False, default=False)
    vegetarian = db.Column(db.Boolean, nullable=False, default=False)
    gluten_free = db.Column(db.Boolean, nullable=False, default=False)
    servings = db.Column(db.Integer, nullable=False)
    is_family_recipe = db.Column(db.Boolean, nullable=False, default=False)
    family_who = db.Column(db.String(255), nullable=True)
    family_when = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=db.func.current_timestamp())

    # Relationships
    ingredients = db.relationship('RecipeIngredient', backref='recipe', lazy='dynamic',
                                  cascade='all, delete-orphan', passive_deletes=True,
                                  order_by='RecipeIngredient.display_order')
    instructions = db.relationship('RecipeInstruction', backref='recipe', lazy='dynamic',
                                   cascade='all, delete-orphan', passive_deletes=True,
                                   order_by='RecipeInstruction.step_number')

    def family_story(self):
        if not self.is_family_recipe:
            return None
        return {'who': self.family_who, 'when': self.family_when}
