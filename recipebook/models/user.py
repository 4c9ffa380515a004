from werkzeug.security import generate_password_hash, check_password_hash
from ..extensions import db
from ..utils.clock import utcnow


class User(db.Model):
    """Registered account; owns authored recipes, favorites, watch history and meal plan"""
    __tablename__ = 'users'

    user_id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(50), unique=True, nullable=False)
    email = db.Column(db.String(100), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    firstname = db.Column(db.String(50), nullable=False)
    lastname = db.Column(db.String(50), nullable=False)
    country = db.Column(db.String(64), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
    last_login = db.Column(db.DateTime, nullable=True)

    # Relationships
    recipes = db.relationship('Recipe', backref='author', lazy='dynamic',
                              cascade='all, delete-orphan', passive_deletes=True)
    favorites = db.relationship('FavoriteRecipe', backref='user', lazy='dynamic',
                                cascade='all, delete-orphan', passive_deletes=True)
    watch_events = db.relationship('WatchEvent', backref='user', lazy='dynamic',
                                   cascade='all, delete-orphan', passive_deletes=True)
    meal_plan = db.relationship('MealPlanEntry', backref='user', lazy='dynamic',
                                cascade='all, delete-orphan', passive_deletes=True)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            'user_id': self.user_id,
            'username': self.username,
            'email': self.email,
            'firstname': self.firstname,
            'lastname': self.lastname,
            'country': self.country,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'last_login': self.last_login.isoformat() if self.last_login else None
        }
