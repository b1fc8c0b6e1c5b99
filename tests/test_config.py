from pathlib import Path

import pytest

import config
from db.utils import _resolve_sqlite_path_from_dsn, build_engine_from_dsn


@pytest.mark.parametrize(
    ('raw', 'expected'),
    [(None, 5.0), ('', 5.0), ('2.5', 2.5), ('-1', 5.0), ('abc', 5.0)],
)
def test_coerce_positive_float(raw, expected):
    assert config._coerce_positive_float(raw, 5.0) == expected


@pytest.mark.parametrize(
    ('raw', 'expected'),
    [(None, 3000), (' 8080 ', 8080), ('0', 3000), ('12.9', 12), ('port', 3000)],
)
def test_coerce_positive_int(raw, expected):
    assert config._coerce_positive_int(raw, 3000) == expected


@pytest.mark.parametrize('raw', ['1', 'true', 'YES', ' on '])
def test_truthy_env_values(raw):
    assert config._coerce_truthy_env(raw) is True


@pytest.mark.parametrize('raw', [None, '', '0', 'off', 'nope'])
def test_falsy_env_values(raw):
    assert config._coerce_truthy_env(raw) is False


def test_path_from_anchors_relative_override_at_base(tmp_path):
    resolved = config._path_from('feeds/android.json', 'unused.json', base=tmp_path)

    assert resolved == (tmp_path / 'feeds' / 'android.json').resolve()


def test_path_from_uses_default_without_override(tmp_path):
    assert config._path_from('  ', 'android.json', base=tmp_path) == (
        tmp_path / 'android.json'
    ).resolve()


def test_default_feed_paths_point_at_bundled_data():
    assert config.ANDROID_FEED_PATH.name == 'android.top100.json'
    assert config.IOS_FEED_PATH.name == 'ios.top100.json'


def test_sqlite_dsn_resolver_handles_absolute_paths(tmp_path):
    db_path = (tmp_path / 'games.db').resolve()

    assert _resolve_sqlite_path_from_dsn(f'sqlite:///{db_path.as_posix()}') == str(db_path)


def test_sqlite_dsn_resolver_resolves_relative_paths():
    resolved = _resolve_sqlite_path_from_dsn('sqlite:///relative.db')

    assert Path(resolved) == Path('relative.db').resolve()


@pytest.mark.parametrize('dsn', ['sqlite://', 'sqlite:///:memory:'])
def test_sqlite_dsn_resolver_detects_memory(dsn):
    assert _resolve_sqlite_path_from_dsn(dsn) is None


def test_sqlite_dsn_resolver_rejects_other_schemes():
    with pytest.raises(ValueError):
        _resolve_sqlite_path_from_dsn('postgresql://localhost/games')


def test_build_engine_reports_dialect(tmp_path):
    database = build_engine_from_dsn(f"sqlite:///{(tmp_path / 'x.db').as_posix()}")
    try:
        assert database.dialect_name == 'sqlite'
    finally:
        database.dispose()
