"""Game catalog API routes."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, current_app, jsonify, request

from games.errors import StoreUnavailableError
from games.service import CatalogService
from routes.api_utils import APIError, handle_api_errors

games_blueprint = Blueprint("games", __name__)

EXTENSION_KEY = "game_catalog"


def configure(flask_app, service: CatalogService) -> None:
    """Attach the catalog service used by the game endpoints."""
    flask_app.extensions[EXTENSION_KEY] = service


def _service() -> CatalogService:
    service = current_app.extensions.get(EXTENSION_KEY)
    if service is None:
        raise RuntimeError("games routes missing catalog service")
    return service


def _json_body(*, default: Any = None) -> Any:
    payload = request.get_json(silent=True)
    return default if payload is None else payload


@games_blueprint.route('/api/games', methods=['GET'])
@handle_api_errors
def list_games():
    games = _service().list_all()
    return jsonify([game.to_dict() for game in games])


@games_blueprint.route('/api/games', methods=['POST'])
@handle_api_errors
def create_game():
    game = _service().create_one(_json_body())
    return jsonify(game.to_dict())


@games_blueprint.route('/api/games/<int:game_id>', methods=['PUT'])
@handle_api_errors
def update_game(game_id: int):
    game = _service().update_one(game_id, _json_body())
    return jsonify(game.to_dict())


@games_blueprint.route('/api/games/<int:game_id>', methods=['DELETE'])
@handle_api_errors
def delete_game(game_id: int):
    deleted_id = _service().delete_one(game_id)
    return jsonify({'id': deleted_id})


@games_blueprint.route('/api/games/search', methods=['POST'])
@handle_api_errors
def search_games():
    games = _service().search(_json_body(default={}))
    return jsonify([game.to_dict() for game in games])


@games_blueprint.route('/api/games/populate', methods=['POST'])
@handle_api_errors
def populate_games():
    try:
        result = _service().populate()
    except StoreUnavailableError as exc:
        raise APIError(
            'Failed to populate games database', status_code=503
        ) from exc
    payload = {
        'message': 'Successfully populated games database',
        'count': result.inserted_count,
    }
    payload.update(result.to_dict())
    return jsonify(payload)
