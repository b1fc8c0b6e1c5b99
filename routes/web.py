"""Static front-end routes."""
from __future__ import annotations

from flask import Blueprint, current_app, send_from_directory

web_blueprint = Blueprint("web", __name__)


@web_blueprint.route("/")
def index():
    return send_from_directory(current_app.static_folder, "index.html")
