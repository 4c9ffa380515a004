from ..extensions import db


class RecipeIngredient(db.Model):
    __tablename__ = 'ingredients'

    ingredient_id = db.Column(db.Integer, primary_key=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipes.recipe_id', ondelete='CASCADE'), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    quantity = db.Column(db.String(100), nullable=False, default='')  # e.g. "2", "1.5 cups"
    display_order = db.Column(db.Integer, nullable=False, default=0)

    def render(self):
        """Catalog-style ingredient line, e.g. "2 cups Flour"."""
        return ' '.join(part for part in (self.quantity, self.name) if part)
