from flask import Blueprint

auth_bp = Blueprint('auth', __name__)
recipes_bp = Blueprint('recipes', __name__)
users_bp = Blueprint('users', __name__)
# Import routes to register them with the blueprint
from . import auth
from . import recipes
from . import users
