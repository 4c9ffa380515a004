from flask import request, jsonify
from flask_jwt_extended import jwt_required

from . import users_bp
from .session import current_user_id, get_composer, get_resolver
from ..errors import NotFound
from ..services import InteractionTracker, MealPlanService, RecipeRef


@users_bp.route('/favorites', methods=['POST'])
@jwt_required()
def toggle_favorite():
    user_id = current_user_id(required=True)
    data = request.get_json(silent=True) or {}
    # no default source here, the caller must say which recipe it means
    ref = RecipeRef.from_flag(data.get('recipeId'), data.get('isExternal'))

    if not get_resolver().exists(ref):
        raise NotFound("Recipe not found")

    is_favorite = InteractionTracker.toggle_favorite(user_id, ref)
    message = "The Recipe successfully added to favorites" if is_favorite \
        else "The Recipe successfully removed from favorites"
    return jsonify({'message': message, 'isFavorite': is_favorite, 'success': True}), 200


@users_bp.route('/favorites', methods=['GET'])
@jwt_required()
def get_favorites():
    return jsonify(get_composer().favorites_view(current_user_id(required=True))), 200


@users_bp.route('/my-recipes', methods=['GET'])
@jwt_required()
def get_my_recipes():
    return jsonify(get_composer().my_recipes_view(current_user_id(required=True))), 200


@users_bp.route('/family-recipes', methods=['GET'])
@jwt_required()
def get_family_recipes():
    return jsonify(get_composer().family_recipes_view(current_user_id(required=True))), 200


@users_bp.route('/meal-plan', methods=['GET'])
@jwt_required()
def get_meal_plan():
    entries = MealPlanService.list_entries(current_user_id(required=True))
    return jsonify([entry.to_dict() for entry in entries]), 200
