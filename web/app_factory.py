"""Flask application factory, logging setup and service wiring."""
from __future__ import annotations

import logging
import logging.config
import os
from pathlib import Path
from typing import Any, Mapping

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

import config as app_config
from feeds.loader import FeedSource
from games.service import CatalogService
from init import ensure_dirs, initialize_store
from routes import games as routes_games
from routes import web as routes_web

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS: dict[str, Any] = {
    "DB_DSN": app_config.DB_DSN,
    "DB_CONNECT_TIMEOUT_SECONDS": app_config.DB_CONNECT_TIMEOUT_SECONDS,
    "ANDROID_FEED_PATH": app_config.ANDROID_FEED_PATH,
    "IOS_FEED_PATH": app_config.IOS_FEED_PATH,
    "STATIC_DIR": app_config.STATIC_DIR,
    "LOG_FILE": app_config.LOG_FILE,
    "TESTING": False,
}


def _determine_log_level(flask_app: Flask) -> int:
    if flask_app.debug:
        return logging.DEBUG
    if os.environ.get('FLASK_DEBUG', '').lower() in {'1', 'true', 'yes', 'on'}:
        return logging.DEBUG
    return logging.INFO


def configure_logging(flask_app: Flask, log_file: str | os.PathLike[str]) -> None:
    log_level = _determine_log_level(flask_app)
    log_path = Path(log_file)
    ensure_dirs([log_path.parent])

    for handler in list(flask_app.logger.handlers):
        flask_app.logger.removeHandler(handler)

    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'standard': {
                    'format': '%(asctime)s %(levelname)s [%(name)s] %(message)s',
                    'datefmt': '%Y-%m-%d %H:%M:%S',
                }
            },
            'handlers': {
                'console': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'standard',
                    'level': log_level,
                    'stream': 'ext://sys.stdout',
                },
                'file': {
                    'class': 'logging.handlers.RotatingFileHandler',
                    'formatter': 'standard',
                    'level': logging.DEBUG,
                    'filename': os.fspath(log_path),
                    'maxBytes': 5 * 1024 * 1024,
                    'backupCount': 5,
                    'encoding': 'utf-8',
                },
            },
            'root': {
                'level': log_level,
                'handlers': ['console', 'file'],
            },
        }
    )

    flask_app.logger = logging.getLogger(flask_app.import_name)
    flask_app.logger.setLevel(log_level)


def feed_sources_from(settings: Mapping[str, Any]) -> list[FeedSource]:
    """Return the android and ios feed sources named in ``settings``."""

    return [
        FeedSource("android", Path(settings["ANDROID_FEED_PATH"])),
        FeedSource("ios", Path(settings["IOS_FEED_PATH"])),
    ]


def create_app(overrides: Mapping[str, Any] | None = None) -> Flask:
    """Return a configured Flask application instance.

    ``overrides`` replaces entries of :data:`DEFAULT_SETTINGS`, which is how
    tests point the app at temporary databases and feed files.
    """

    settings = {**DEFAULT_SETTINGS, **(overrides or {})}
    flask_app = Flask(
        __name__,
        static_folder=os.fspath(settings["STATIC_DIR"]),
    )
    flask_app.config.update(settings)

    configure_logging(flask_app, settings["LOG_FILE"])

    store = initialize_store(
        settings["DB_DSN"], timeout=settings["DB_CONNECT_TIMEOUT_SECONDS"]
    )
    service = CatalogService(store, feed_sources_from(settings))
    routes_games.configure(flask_app, service)

    flask_app.register_blueprint(routes_games.games_blueprint)
    flask_app.register_blueprint(routes_web.web_blueprint)

    @flask_app.errorhandler(404)
    def handle_not_found(e):
        if request.path.startswith('/api/'):
            return jsonify({'error': 'not found'}), 404
        return "Not Found", 404

    @flask_app.errorhandler(Exception)
    def handle_exception(e):
        if isinstance(e, HTTPException):
            return e
        flask_app.logger.exception("Unhandled exception")
        if request.path.startswith('/api/'):
            return jsonify({'error': 'internal server error'}), 500
        return "Internal Server Error", 500

    logger.info("Game catalog configured with %s feed sources", len(service.feed_sources))
    return flask_app


__all__ = ["DEFAULT_SETTINGS", "configure_logging", "create_app", "feed_sources_from"]
