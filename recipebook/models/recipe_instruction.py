from ..extensions import db

class RecipeInstruction(db.Model):
    __tablename__ = 'recipe_instructions'

    instruction_id = db.Column(db.Integer, primary_key=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipes.recipe_id', ondelete='CASCADE'), nullable=False, index=True)
    step_number = db.Column(db.Integer, nullable=False)
    instruction_text = db.Column(db.Text, nullable=False)
