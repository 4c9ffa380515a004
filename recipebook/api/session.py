from flask import current_app
from flask_jwt_extended import get_jwt_identity

from ..errors import Unauthorized
from ..services import AuthService, PersonalizationComposer, RecipeResolver


def current_user_id(required=False):
    """
    User id behind the request's bearer token. A token whose user no longer
    exists counts as anonymous.
    """
    identity = get_jwt_identity()
    user = AuthService.get_user_by_id(identity) if identity is not None else None
    if user is None:
        if required:
            raise Unauthorized("Login required")
        return None
    return user.user_id


def get_resolver():
    return RecipeResolver(current_app.catalog_client)


def get_composer():
    return PersonalizationComposer(get_resolver())
