import logging
import sqlite3

from flask import Blueprint, Flask, current_app, jsonify, request
from flask_migrate import Migrate
from sqlalchemy import event
from sqlalchemy.engine import Engine
from werkzeug.exceptions import HTTPException

from config import get_config
from models import db
from services import (
    PageRequest,
    RecipeServiceError,
    SearchFilters,
    SpoonacularGateway,
    ValidationFailed,
    add_additional_item,
    archive_grocery_list,
    assemble_collection,
    build_rate_budget,
    complete_grocery_list,
    create_meal_plan,
    create_recipe,
    deactivate_meal_plan,
    delete_recipe,
    generate_grocery_list,
    get_grocery_list,
    get_meal_plan,
    get_recipe,
    list_grocery_lists,
    remove_additional_item,
    search_recipes,
    serialize_grocery_list,
    serialize_meal_plan,
    set_slot,
    toggle_favorite,
    toggle_item_checked,
    update_recipe,
)
from services.unified import from_local

logger = logging.getLogger(__name__)

migrate = Migrate()

api = Blueprint('api', __name__, url_prefix='/api')


@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    # Enable SQLite foreign key enforcement
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# ============================================
# REQUEST HELPERS
# ============================================

def current_user_id():
    """Caller identity supplied by the auth layer in front of this service."""
    user_id = request.headers.get('X-User-Id', '').strip()
    return user_id or None


def require_user():
    user_id = current_user_id()
    if not user_id:
        raise ValidationFailed('X-User-Id header is required')
    return user_id


def query_int(name, default=None, source=None):
    """Parse an integer parameter, rejecting anything that is not a whole number."""
    source = request.args if source is None else source
    value = source.get(name)
    if value is None or value == '':
        return default
    try:
        return int(value)
    except (ValueError, TypeError):
        raise ValidationFailed(f'{name} must be a whole number', {name: value})


def required_int(name, source):
    value = query_int(name, source=source)
    if value is None:
        raise ValidationFailed(f'{name} is required')
    return value


def json_body():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationFailed('Request body must be a JSON object')
    return data


def page_from_request(default_limit):
    return PageRequest(
        limit=query_int('limit', default_limit),
        offset=query_int('offset', 0),
    )


def gateway():
    return current_app.extensions['spoonacular']


# ============================================
# ROUTES - RECIPES
# ============================================

@api.route('/recipes/search')
def recipes_search():
    filters = SearchFilters(
        cuisine=request.args.get('cuisine') or None,
        diet=request.args.get('diet') or None,
        max_ready_time=query_int('max_ready_time'),
        sort=request.args.get('sort') or None,
        sort_direction=request.args.get('sort_direction') or None,
    )
    result = search_recipes(
        request.args.get('q', ''),
        filters,
        page_from_request(12),
        caller_id=current_user_id(),
        source=request.args.get('source', 'all'),
        gateway=gateway(),
        local_share=current_app.config['SEARCH_LOCAL_SHARE'],
        max_page_size=current_app.config['MAX_PAGE_SIZE'],
    )
    return jsonify({
        'recipes': [recipe.to_dict() for recipe in result['items']],
        'pagination': result['paging'],
        'source_breakdown': result['source_breakdown'],
    })


@api.route('/recipes/my-collection')
def recipes_my_collection():
    result = assemble_collection(
        require_user(),
        page_from_request(20),
        gateway=gateway(),
        fetch_cap=current_app.config['COLLECTION_EXTERNAL_FETCH_CAP'],
        max_page_size=current_app.config['MAX_PAGE_SIZE'],
    )
    return jsonify({
        'recipes': [recipe.to_dict() for recipe in result['items']],
        'pagination': result['paging'],
        'stats': result['stats'],
    })


@api.route('/recipes', methods=['POST'])
def recipe_create():
    recipe = create_recipe(require_user(), json_body())
    return jsonify({'recipe': from_local(recipe).to_dict()}), 201


@api.route('/recipes/<recipe_id>')
def recipe_view(recipe_id):
    recipe = get_recipe(
        recipe_id,
        caller_id=current_user_id(),
        gateway=gateway(),
        include_nutrition=request.args.get('include_nutrition') == 'true',
    )
    return jsonify({'recipe': recipe.to_dict()})


@api.route('/recipes/<recipe_id>', methods=['PUT', 'PATCH'])
def recipe_edit(recipe_id):
    recipe = update_recipe(recipe_id, require_user(), json_body())
    return jsonify({'recipe': from_local(recipe).to_dict()})


@api.route('/recipes/<recipe_id>', methods=['DELETE'])
def recipe_delete(recipe_id):
    delete_recipe(recipe_id, require_user())
    return jsonify({'message': 'Recipe deleted'})


@api.route('/recipes/<recipe_id>/favorite', methods=['POST'])
def recipe_favorite(recipe_id):
    favorited = toggle_favorite(require_user(), recipe_id)
    return jsonify({'recipe_id': recipe_id, 'favorited': favorited})


# ============================================
# ROUTES - MEAL PLANS
# ============================================

@api.route('/meal-plans', methods=['POST'])
def meal_plan_create():
    data = json_body()
    plan = create_meal_plan(
        required_int('family_group_id', data),
        require_user(),
        data.get('name', ''),
        data.get('week_start_date'),
        notes=data.get('notes', ''),
        meals=data.get('meals'),
    )
    return jsonify({'meal_plan': serialize_meal_plan(plan)}), 201


@api.route('/meal-plans/<int:plan_id>')
def meal_plan_view(plan_id):
    plan = get_meal_plan(plan_id, require_user())
    return jsonify({'meal_plan': serialize_meal_plan(plan)})


@api.route('/meal-plans/<int:plan_id>/slots/<day>/<meal_type>', methods=['PUT'])
def meal_plan_slot_set(plan_id, day, meal_type):
    user_id = require_user()
    set_slot(plan_id, user_id, day, meal_type, json_body())
    return jsonify({'meal_plan': serialize_meal_plan(get_meal_plan(plan_id, user_id))})


@api.route('/meal-plans/<int:plan_id>/slots/<day>/<meal_type>', methods=['DELETE'])
def meal_plan_slot_clear(plan_id, day, meal_type):
    user_id = require_user()
    set_slot(plan_id, user_id, day, meal_type, None)
    return jsonify({'meal_plan': serialize_meal_plan(get_meal_plan(plan_id, user_id))})


@api.route('/meal-plans/<int:plan_id>/deactivate', methods=['POST'])
def meal_plan_deactivate(plan_id):
    plan = deactivate_meal_plan(plan_id, require_user())
    return jsonify({'meal_plan': serialize_meal_plan(plan)})


# ============================================
# ROUTES - GROCERY LISTS
# ============================================

@api.route('/grocery-lists')
def grocery_lists():
    group_id = required_int('family_group_id', request.args)
    lists = list_grocery_lists(group_id, require_user(), status=request.args.get('status') or None)
    return jsonify({'grocery_lists': [serialize_grocery_list(gl) for gl in lists]})


@api.route('/grocery-lists', methods=['POST'])
def grocery_list_create():
    data = json_body()
    grocery_list = generate_grocery_list(
        required_int('family_group_id', data),
        require_user(),
        data.get('name', ''),
        meal_plan_id=query_int('meal_plan_id', source=data),
        ingredients=data.get('ingredients'),
        additional_items=data.get('additional_items'),
    )
    return jsonify({
        'message': 'Grocery list created successfully',
        'grocery_list': serialize_grocery_list(grocery_list),
    }), 201


@api.route('/grocery-lists/<int:list_id>')
def grocery_list_view(list_id):
    grocery_list = get_grocery_list(list_id, require_user())
    return jsonify({'grocery_list': serialize_grocery_list(grocery_list)})


@api.route('/grocery-lists/<int:list_id>/items', methods=['POST'])
def grocery_item_add(list_id):
    user_id = require_user()
    add_additional_item(list_id, user_id, json_body())
    return jsonify({'grocery_list': serialize_grocery_list(get_grocery_list(list_id, user_id))}), 201


@api.route('/grocery-lists/<int:list_id>/items/<int:item_id>', methods=['DELETE'])
def grocery_item_delete(list_id, item_id):
    user_id = require_user()
    remove_additional_item(list_id, item_id, user_id)
    return jsonify({'grocery_list': serialize_grocery_list(get_grocery_list(list_id, user_id))})


@api.route('/grocery-lists/<int:list_id>/items/<int:item_id>/toggle', methods=['POST'])
def grocery_item_toggle(list_id, item_id):
    data = json_body()
    item = toggle_item_checked(list_id, item_id, require_user(), checked=data.get('checked'))
    return jsonify({'item_id': item.id, 'checked': item.checked})


@api.route('/grocery-lists/<int:list_id>/complete', methods=['POST'])
def grocery_list_complete(list_id):
    grocery_list = complete_grocery_list(list_id, require_user())
    return jsonify({'grocery_list': serialize_grocery_list(grocery_list)})


@api.route('/grocery-lists/<int:list_id>/archive', methods=['POST'])
def grocery_list_archive(list_id):
    grocery_list = archive_grocery_list(list_id, require_user())
    return jsonify({'grocery_list': serialize_grocery_list(grocery_list)})


# ============================================
# ROUTES - UPSTREAM STATUS
# ============================================

@api.route('/upstream/status')
def upstream_status():
    return jsonify(gateway().status())


# ============================================
# ERROR HANDLERS
# ============================================

def handle_service_error(error):
    if error.status_code >= 500:
        logger.error("%s: %s", error.code, error.message)
    return jsonify(error.to_dict()), error.status_code


def handle_http_error(error):
    return jsonify({
        'error': (error.name or 'error').lower().replace(' ', '_'),
        'message': error.description,
        'details': {},
    }), error.code


# ============================================
# APPLICATION FACTORY
# ============================================

def create_app(config_name=None, gateway_session=None):
    """
    Build the Flask application.

    Args:
        config_name: 'development', 'production' or 'testing'
        gateway_session: optional requests.Session for the provider client
    """
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    db.init_app(app)
    migrate.init_app(app, db)

    budget = build_rate_budget(app.config)
    app.extensions['rate_budget'] = budget
    app.extensions['spoonacular'] = SpoonacularGateway(
        app.config['SPOONACULAR_API_KEY'],
        app.config['SPOONACULAR_BASE_URL'],
        budget,
        session=gateway_session,
        timeout=app.config['UPSTREAM_TIMEOUT'],
    )
    if not app.config['SPOONACULAR_API_KEY']:
        logger.warning("SPOONACULAR_API_KEY is not set; external recipes are unavailable")

    app.register_blueprint(api)
    app.register_error_handler(RecipeServiceError, handle_service_error)
    app.register_error_handler(HTTPException, handle_http_error)

    @app.cli.command('init-db')
    def init_db():
        """Create all database tables."""
        db.create_all()
        print("Database initialized")

    return app


if __name__ == '__main__':
    application = create_app()
    with application.app_context():
        db.create_all()
    # host='0.0.0.0' allows access from other devices on the network
    application.run(debug=True, host='0.0.0.0', port=5000, use_reloader=False)
