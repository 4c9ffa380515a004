from flask import current_app, request, jsonify, session
from flask_jwt_extended import jwt_required

from . import recipes_bp
from .session import current_user_id, get_composer, get_resolver
from ..services import CookingProgressStore, LocalRecipeStore, MealPlanService, RecipeRef
from ..services.personalization import parse_multiplier


def _progress_store(user_id):
    return CookingProgressStore(session, user_id, limit=current_app.config['COOKING_PROGRESS_LIMIT'])


@recipes_bp.route('', methods=['GET'], strict_slashes=False)
@jwt_required(optional=True)
def home_feed():
    """3 random catalog recipes, plus the last 3 watched recipes for logged-in users"""
    return jsonify(get_composer().home_feed(current_user_id())), 200


@recipes_bp.route('', methods=['POST'], strict_slashes=False)
@jwt_required()
def create_recipe():
    user_id = current_user_id(required=True)
    recipe_id = LocalRecipeStore.create(user_id, request.get_json(silent=True))
    return jsonify({'recipe_id': recipe_id, 'message': 'Recipe created', 'success': True}), 201


@recipes_bp.route('/search', methods=['GET'])
@jwt_required(optional=True)
def search_recipes():
    args = request.args
    results = get_composer().search_view(
        args.get('query', ''),
        args.get('number'),
        cuisine=args.getlist('cuisine') or None,
        diet=args.getlist('diet') or None,
        intolerances=args.getlist('intolerances') or None,
        user_id=current_user_id(),
    )
    return jsonify(results), 200


@recipes_bp.route('/<recipe_id>', methods=['GET'])
@jwt_required(optional=True)
def get_recipe(recipe_id):
    ref = RecipeRef.from_query(recipe_id, request.args.get('source'))
    return jsonify(get_composer().recipe_detail_view(ref, current_user_id())), 200


@recipes_bp.route('/<recipe_id>/cooking-mode', methods=['GET'])
@jwt_required(optional=True)
def cooking_mode(recipe_id):
    ref = RecipeRef.from_query(recipe_id, request.args.get('source'))
    multiplier = parse_multiplier(request.args.get('servings'))
    return jsonify(get_composer().cooking_mode_view(ref, multiplier)), 200


@recipes_bp.route('/<recipe_id>/meal-plan', methods=['POST'])
@jwt_required()
def add_to_meal_plan(recipe_id):
    user_id = current_user_id(required=True)
    data = request.get_json(silent=True) or {}
    ref = RecipeRef.from_query(recipe_id, data.get('source'))
    entry = MealPlanService.add_entry(user_id, ref, data, get_resolver())
    return jsonify({'message': 'Recipe added to meal plan', 'mealPlan': entry.to_dict(), 'success': True}), 201


@recipes_bp.route('/<recipe_id>/cooking-progress', methods=['GET'])
@jwt_required()
def get_cooking_progress(recipe_id):
    user_id = current_user_id(required=True)
    ref = RecipeRef.from_query(recipe_id, request.args.get('source'))
    multiplier = parse_multiplier(request.args.get('servings'))
    return jsonify(_progress_store(user_id).get(ref, multiplier)), 200


@recipes_bp.route('/<recipe_id>/cooking-progress', methods=['POST'])
@jwt_required()
def save_cooking_progress(recipe_id):
    user_id = current_user_id(required=True)
    data = request.get_json(silent=True) or {}
    ref = RecipeRef.from_query(recipe_id, data.get('source'))
    multiplier = parse_multiplier(data.get('servingMultiplier'))
    progress = _progress_store(user_id).save(ref, multiplier, data)
    return jsonify({'message': 'Progress saved', 'progress': progress, 'success': True}), 200


@recipes_bp.route('/<recipe_id>/cooking-progress', methods=['DELETE'])
@jwt_required()
def clear_cooking_progress(recipe_id):
    user_id = current_user_id(required=True)
    ref = RecipeRef.from_query(recipe_id, request.args.get('source'))
    _progress_store(user_id).clear(ref, parse_multiplier(request.args.get('servings')))
    return jsonify({'message': 'Progress cleared', 'success': True}), 200
