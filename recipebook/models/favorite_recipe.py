from ..extensions import db


class FavoriteRecipe(db.Model):
    __tablename__ = 'favorite_recipes'

    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id', ondelete='CASCADE'), primary_key=True)
    # catalog ids and local ids share this column, is_external tells them apart
    recipe_id = db.Column(db.String(50), primary_key=True)
    is_external = db.Column(db.Boolean, primary_key=True)
    created_at = db.Column(db.DateTime, default=db.func.now())

    def to_dict(self):
        return {
            'user_id': self.user_id,
            'recipe_id': self.recipe_id,
            'isExternal': self.is_external,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
