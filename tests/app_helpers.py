"""Shared testing helpers for feed files, stores and the Flask app."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

from games.records import GameFields
from games.store import GameStore
from init import initialize_store
from web.app_factory import create_app

ANDROID_GAMES = [
    ("PUBG Mobile", "com.tencent.ig"),
    ("Candy Crush Saga", "com.king.candycrushsaga"),
    ("Subway Surfers", "com.kiloo.subwaysurf"),
    ("Free Fire", "com.dts.freefireth"),
    ("Clash of Clans", "com.supercell.clashofclans"),
]

IOS_GAMES = [
    ("Roblox", "431946152"),
    ("Minecraft", "479516143"),
    ("Royal Match", "1482155847"),
    ("Monopoly GO!", "1621328561"),
    ("Among Us!", "1351168404"),
]


def feed_entry(name: str, platform: str, store_id: str, **overrides: Any) -> dict[str, Any]:
    entry = {
        "name": name,
        "platform": platform,
        "publisherId": f"pub-{store_id}",
        "storeId": store_id,
        "bundleId": f"bundle.{store_id}",
        "appVersion": "1.0.0",
    }
    entry.update(overrides)
    return entry


def platform_entries(platform: str) -> list[dict[str, Any]]:
    games = ANDROID_GAMES if platform == "android" else IOS_GAMES
    return [feed_entry(name, platform, store_id) for name, store_id in games]


def write_feed(path: Path, entries: Iterable[dict[str, Any]]) -> Path:
    path.write_text(json.dumps({"games": list(entries)}), encoding="utf-8")
    return path


def write_default_feeds(directory: Path) -> tuple[Path, Path]:
    """Write 5 android and 5 ios games with distinct store ids."""

    android = write_feed(directory / "android.top100.json", platform_entries("android"))
    ios = write_feed(directory / "ios.top100.json", platform_entries("ios"))
    return android, ios


def make_store(tmp_path: Path) -> GameStore:
    return initialize_store(f"sqlite:///{(tmp_path / 'games.db').as_posix()}")


def game_fields(name: str, platform: str, store_id: str, **overrides: Any) -> GameFields:
    values = {
        "publisher_id": "1234567890",
        "name": name,
        "platform": platform,
        "store_id": store_id,
        "bundle_id": f"test.bundle.{store_id}",
        "app_version": "1.0.0",
        "is_published": True,
    }
    values.update(overrides)
    return GameFields(**values)


def load_app(tmp_path: Path, **overrides: Any):
    """Build the Flask app against a database and feeds inside ``tmp_path``."""

    android, ios = write_default_feeds(tmp_path)
    settings = {
        "DB_DSN": f"sqlite:///{(tmp_path / 'app_games.db').as_posix()}",
        "ANDROID_FEED_PATH": android,
        "IOS_FEED_PATH": ios,
        "LOG_FILE": tmp_path / "logs" / "app.log",
        "TESTING": True,
    }
    settings.update(overrides)
    return create_app(settings)
