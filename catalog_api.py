#!/usr/bin/env python3
"""
Catalog API - HTTP interface for the personal game catalog.
Exposes create/read/update/delete over JSON and persists through either the
in-memory or the SQL repository, chosen at start-up.
"""

import logging
import argparse
import threading
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from flask import Flask, jsonify, request

import database
from catalog.config import BACKENDS, load_config, setup_logging
from catalog.models import Game
from catalog.repositories import (
    GameRepository, InMemoryGameRepository, SqlGameRepository, StorageError,
)
from catalog.services import GameService, Outcome, SUCCESS_NO_CONTENT

load_dotenv()

app = Flask(__name__)

api_logger = logging.getLogger('catalog.api')

# Global service instance, built lazily from ``app_config``
game_service: Optional[GameService] = None
game_service_lock = threading.Lock()
app_config: Dict[str, Any] = {}

DEMO_GAMES = [
    {'title': 'Witcher 3: Wild Hunt', 'platform': 'PC', 'status': 'Dropped'},
    {'title': 'Cyberpunk 2077', 'platform': 'PS5', 'status': 'Completed'},
    {'title': 'Breath of the Wild', 'platform': 'Switch', 'status': 'Completed'},
]


def build_repository(config: Dict[str, Any]) -> GameRepository:
    """Create the storage backend named by ``config['backend']``.

    Raises:
        ValueError: If the backend name is not one of ``BACKENDS``.
    """
    backend = config.get('backend', 'memory')
    seed: List[Game] = []
    if config.get('seed_demo'):
        seed = [Game.from_dict(g) for g in DEMO_GAMES]

    if backend == 'memory':
        api_logger.info('Using in-memory game repository')
        return InMemoryGameRepository(seed=seed)
    if backend == 'sql':
        api_logger.info('Using SQL game repository')
        repo = SqlGameRepository(database.make_session_factory(config.get('database_url')))
        if seed and repo.count() == 0:
            for draft in seed:
                repo.create(draft)
        return repo
    raise ValueError(f"Unknown backend {backend!r}; expected one of {', '.join(BACKENDS)}")


def init_service(config: Optional[Dict[str, Any]] = None) -> GameService:
    """(Re)build the global service from *config* (or ``load_config()``)."""
    global game_service, app_config
    config = config if config is not None else load_config()
    service = GameService(build_repository(config))
    with game_service_lock:
        app_config = config
        game_service = service
    return service


def get_service() -> GameService:
    """Return the global service, building it on first use."""
    global game_service, app_config
    if game_service is None:
        with game_service_lock:
            if game_service is None:
                app_config = app_config or load_config()
                game_service = GameService(build_repository(app_config))
    return game_service


def _serialise(body: Any) -> Any:
    if isinstance(body, Game):
        return body.to_dict()
    if isinstance(body, list):
        return [_serialise(item) for item in body]
    return body


def _respond(outcome: Outcome, not_found_message: str = 'Game not found'):
    """Convert a service outcome to a Flask response."""
    if outcome.kind == SUCCESS_NO_CONTENT:
        return '', 204
    body = outcome.body
    if body is None:
        body = {'error': not_found_message} if outcome.status_code == 404 else {}
    response = jsonify(_serialise(body))
    response.status_code = outcome.status_code
    if outcome.location:
        response.headers['Location'] = outcome.location
    return response


@app.errorhandler(StorageError)
def handle_storage_error(e):
    api_logger.error('Storage failure while handling %s %s: %s',
                     request.method, request.path, e)
    return jsonify({'error': 'Storage unavailable'}), 503


# ---------------------------------------------------------------------------
# Games endpoints
# ---------------------------------------------------------------------------

@app.route('/api/games', methods=['GET'])
def api_list_games():
    """Return every game in the catalog."""
    return _respond(get_service().list_games())


@app.route('/api/games/<game_id>', methods=['GET'])
def api_get_game(game_id: str):
    """Return a single game."""
    return _respond(get_service().get_game(game_id))


@app.route('/api/games', methods=['POST'])
def api_create_game():
    """Add a game to the catalog.

    Body JSON: {"title": "Elden Ring", "platform": "PC", "status": "Playing"}
    """
    data = request.get_json(silent=True)
    outcome = get_service().create_game(data)
    if outcome.location:
        api_logger.info('Game created at %s', outcome.location)
    return _respond(outcome)


@app.route('/api/games/<game_id>', methods=['PUT'])
def api_update_game(game_id: str):
    """Replace title, platform and status of a game.

    Body JSON: {"id": "<optional, must match URL>", "title": ..., "platform": ..., "status": ...}
    """
    data = request.get_json(silent=True)
    return _respond(get_service().update_game(game_id, data))


@app.route('/api/games/<game_id>', methods=['DELETE'])
def api_delete_game(game_id: str):
    """Remove a game from the catalog."""
    return _respond(get_service().delete_game(game_id))


@app.route('/api/status')
def api_status():
    """Get application status"""
    service = get_service()
    return jsonify({
        'ready': True,
        'backend': app_config.get('backend', 'memory'),
        'total_games': service.repository.count(),
    })


# ---------------------------------------------------------------------------
# API Documentation: OpenAPI 3.0 and Swagger UI
# ---------------------------------------------------------------------------

@app.route('/api/openapi.json')
def api_openapi_spec():
    """Serve the OpenAPI 3.0 specification as JSON."""
    from openapi_spec import build_spec
    server_url = request.url_root.rstrip('/')
    return jsonify(build_spec(server_url=server_url))


@app.route('/api/docs')
def api_swagger_ui():
    """Serve an interactive Swagger UI for the catalog API."""
    openapi_url = '/api/openapi.json'
    html = f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Game Catalog API Documentation</title>
  <link rel="stylesheet"
        href="https://unpkg.com/swagger-ui-dist@5/swagger-ui.css">
</head>
<body>
  <div id="swagger-ui"></div>
  <script src="https://unpkg.com/swagger-ui-dist@5/swagger-ui-bundle.js"></script>
  <script>
    SwaggerUIBundle({{
      url: "{openapi_url}",
      dom_id: "#swagger-ui",
      presets: [SwaggerUIBundle.presets.apis, SwaggerUIBundle.SwaggerUIStandalonePreset],
      layout: "BaseLayout",
      deepLinking: true,
    }});
  </script>
</body>
</html>"""
    return html, 200, {'Content-Type': 'text/html; charset=utf-8'}


def main():
    """Main entry point for the API server"""
    parser = argparse.ArgumentParser(description='Game Catalog API')
    parser.add_argument('--config', default='config.json', help='Path to config file')
    parser.add_argument('--backend', choices=BACKENDS, help='Storage backend (overrides config)')
    parser.add_argument('--demo', action='store_true', help='Seed the catalog with demo games')
    parser.add_argument('--host', help='Interface to bind (overrides config)')
    parser.add_argument('--port', type=int, help='Port to listen on (overrides config)')
    args = parser.parse_args()

    config = load_config(args.config)
    if args.backend:
        config['backend'] = args.backend
    if args.demo:
        config['seed_demo'] = True
    if args.host:
        config['host'] = args.host
    if args.port:
        config['port'] = args.port

    setup_logging(config['log_level'])
    init_service(config)

    print("\n" + "="*60)
    print("Game Catalog API is starting...")
    print("="*60)
    print(f"\nBackend: {config['backend']}")
    print(f"Listening on http://{config['host']}:{config['port']}")
    print(f"API docs at http://{config['host']}:{config['port']}/api/docs")
    print("\nPress Ctrl+C to stop the server")
    print("="*60 + "\n")

    try:
        app.run(host=config['host'], port=config['port'], debug=False, threaded=True)
    except KeyboardInterrupt:
        print("\nGame Catalog API stopped\n")


if __name__ == "__main__":
    main()
