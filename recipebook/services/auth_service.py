import logging
import re

from flask_jwt_extended import create_access_token, create_refresh_token
from sqlalchemy.exc import IntegrityError

from ..errors import Conflict, Unauthorized, ValidationError
from ..extensions import db
from ..models.user import User
from ..utils.clock import utcnow

logger = logging.getLogger(__name__)

USERNAME_REGEX = re.compile(r'^[A-Za-z]{3,8}$')
PASSWORD_SPECIALS = re.compile(r'[!@#$%^&*(),.?":{}|<>]')
EMAIL_REGEX = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
REGISTRATION_FIELDS = ('username', 'firstname', 'lastname', 'country', 'password', 'email')


class AuthService:
    """Service class for handling authentication logic"""

    @staticmethod
    def validate_email(email):
        """Validate email format"""
        return EMAIL_REGEX.match(email) is not None

    @staticmethod
    def validate_password(password):
        """5-10 characters with at least one digit and one special character"""
        return 5 <= len(password) <= 10 \
            and any(c.isdigit() for c in password) \
            and PASSWORD_SPECIALS.search(password) is not None

    @staticmethod
    def get_user_by_username(username):
        """Get user by username"""
        return User.query.filter_by(username=username).first()

    @staticmethod
    def get_user_by_email(email):
        """Get user by email"""
        return User.query.filter_by(email=email).first()

    @staticmethod
    def get_user_by_id(user_id):
        """Get user by ID"""
        try:
            return db.session.get(User, int(user_id))
        except (TypeError, ValueError):
            return None

    @staticmethod
    def issue_tokens(user):
        return {
            'access_token': create_access_token(identity=str(user.user_id)),
            'refresh_token': create_refresh_token(identity=str(user.user_id)),
        }

    @classmethod
    def register_user(cls, data, countries):
        """Register a new user. `countries` is the CountryCache used to check the country field."""
        data = data or {}
        details = {field: data.get(field) for field in REGISTRATION_FIELDS}
        if any(not isinstance(v, str) or not v.strip() for v in details.values()):
            raise ValidationError("All fields are required and must be non-empty strings.")

        if not USERNAME_REGEX.match(details['username']):
            raise ValidationError("Username must be 3-8 letters only.")
        if not cls.validate_password(details['password']):
            raise ValidationError(
                "Password must be 5-10 characters, include at least one digit and one special character."
            )
        if not cls.validate_email(details['email']):
            raise ValidationError("Invalid email format.")
        if details['country'] not in countries.get():
            raise ValidationError("Invalid country.")

        if cls.get_user_by_username(details['username']):
            raise Conflict("Username taken")
        if cls.get_user_by_email(details['email']):
            raise Conflict("Email is already registered")

        new_user = User(
            username=details['username'],
            email=details['email'],
            firstname=details['firstname'].strip(),
            lastname=details['lastname'].strip(),
            country=details['country'],
            created_at=utcnow()
        )
        new_user.set_password(details['password'])

        try:
            db.session.add(new_user)
            db.session.commit()
        except IntegrityError:
            # lost a race with a concurrent registration
            db.session.rollback()
            raise Conflict("Username taken")

        logger.info("Registered user %s", new_user.user_id)
        return new_user

    @classmethod
    def login_user(cls, username, password):
        """Login a user"""
        if not isinstance(username, str) or not isinstance(password, str) \
                or not username.strip() or not password.strip():
            raise ValidationError("Invalid username or password")

        user = cls.get_user_by_username(username)
        if not user or not user.check_password(password):
            raise Unauthorized("Invalid username or password")

        # Update last login time
        user.last_login = utcnow()
        db.session.commit()
        return user
