"""Pytest fixtures shared across the test suite."""

import pytest

from feeds.loader import FeedSource
from games.service import CatalogService
from routes.games import EXTENSION_KEY

from tests.app_helpers import load_app, make_store, write_default_feeds


@pytest.fixture
def store(tmp_path):
    game_store = make_store(tmp_path)
    yield game_store
    game_store.clear()


@pytest.fixture
def feed_paths(tmp_path):
    feed_dir = tmp_path / "feeds"
    feed_dir.mkdir()
    return write_default_feeds(feed_dir)


@pytest.fixture
def feed_sources(feed_paths):
    android, ios = feed_paths
    return [FeedSource("android", android), FeedSource("ios", ios)]


@pytest.fixture
def service(store, feed_sources):
    return CatalogService(store, feed_sources)


@pytest.fixture
def app(tmp_path):
    return load_app(tmp_path)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_service(app) -> CatalogService:
    return app.extensions[EXTENSION_KEY]
