#!/usr/bin/env python3
"""Populate the games catalog from the android and ios feed files."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from config import (  # noqa: E402
    ANDROID_FEED_PATH,
    DB_CONNECT_TIMEOUT_SECONDS,
    DB_DSN,
    IOS_FEED_PATH,
)
from feeds.loader import FeedSource  # noqa: E402
from games.errors import MalformedFeedError, StoreUnavailableError  # noqa: E402
from games.populate import populate  # noqa: E402
from init import initialize_store  # noqa: E402


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--android", type=Path, default=ANDROID_FEED_PATH,
                        help="android feed file (default: %(default)s)")
    parser.add_argument("--ios", type=Path, default=IOS_FEED_PATH,
                        help="ios feed file (default: %(default)s)")
    parser.add_argument("--dsn", default=DB_DSN, help="database DSN")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    sources = [FeedSource("android", args.android), FeedSource("ios", args.ios)]
    try:
        store = initialize_store(args.dsn, timeout=DB_CONNECT_TIMEOUT_SECONDS)
    except StoreUnavailableError as exc:
        print(f"Failed to populate games database: {exc}")
        return 1

    try:
        result = populate(store, sources)
    except MalformedFeedError as exc:
        print(f"Failed to parse feed {exc.source}: {exc.details}")
        return 1
    except StoreUnavailableError as exc:
        print(f"Failed to populate games database: {exc}")
        return 1
    finally:
        store.close()

    print(
        "Processed {total} candidates (inserted: {inserted}, skipped: {skipped}).".format(
            total=result.candidate_count,
            inserted=result.inserted_count,
            skipped=result.skipped_count,
        )
    )
    return 0


if __name__ == "__main__":  # pragma: no cover - manual execution path
    raise SystemExit(main())
