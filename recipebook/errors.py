class RecipeBookError(Exception):
    """Base error; carries the HTTP status the request boundary maps it to."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {'message': self.message, 'success': False}


class ValidationError(RecipeBookError):
    status_code = 400
    default_message = "Invalid input"


class Unauthorized(RecipeBookError):
    status_code = 401
    default_message = "Login required"


class NotFound(RecipeBookError):
    status_code = 404
    default_message = "Recipe not found"


class Conflict(RecipeBookError):
    status_code = 409
    default_message = "Resource already exists"


class UpstreamError(RecipeBookError):
    status_code = 500
    default_message = "Recipe catalog request failed"

    def __init__(self, message=None, upstream_status=None):
        super().__init__(message)
        self.upstream_status = upstream_status
