import pytest

from games import store as store_module
from games.errors import DuplicateStoreIdError, StoreUnavailableError
from init import initialize_store

from tests.app_helpers import game_fields


def test_create_assigns_id_and_timestamps(store):
    record = store.create(game_fields('Test Game', 'ios', '1234'))

    assert record.id > 0
    assert record.name == 'Test Game'
    assert record.is_published is True
    assert record.created_at
    assert record.created_at == record.updated_at
    assert store.find_by_key(record.id) == record


def test_find_all_orders_by_id(store):
    first = store.create(game_fields('B', 'ios', 'b'))
    second = store.create(game_fields('A', 'android', 'a'))

    assert [game.id for game in store.find_all()] == [first.id, second.id]


def test_find_by_key_returns_none_for_missing_id(store):
    assert store.find_by_key(999) is None


def test_duplicate_store_id_is_rejected(store):
    store.create(game_fields('Original', 'ios', 'same'))

    with pytest.raises(DuplicateStoreIdError):
        store.create(game_fields('Copy', 'android', 'same'))

    assert store.count() == 1


def test_update_replaces_fields(store):
    record = store.create(game_fields('Old Name', 'ios', 'upd'))

    updated = store.update(
        record.id,
        game_fields('New Name', 'android', 'upd', app_version='2.0.0', is_published=False),
    )

    assert updated.id == record.id
    assert updated.name == 'New Name'
    assert updated.platform == 'android'
    assert updated.app_version == '2.0.0'
    assert updated.is_published is False
    assert updated.created_at == record.created_at


def test_update_missing_id_returns_none(store):
    assert store.update(42, game_fields('Ghost', 'ios', 'ghost')) is None


def test_update_to_taken_store_id_is_rejected(store):
    store.create(game_fields('One', 'ios', 'one'))
    two = store.create(game_fields('Two', 'ios', 'two'))

    with pytest.raises(DuplicateStoreIdError):
        store.update(two.id, game_fields('Two', 'ios', 'one'))

    assert store.find_by_key(two.id).store_id == 'two'


def test_destroy_reports_whether_a_row_was_removed(store):
    record = store.create(game_fields('Doomed', 'ios', 'doomed'))

    assert store.destroy(record.id) is True
    assert store.destroy(record.id) is False
    assert store.find_by_key(record.id) is None


def test_existing_store_ids_batches_large_inputs(store, monkeypatch):
    monkeypatch.setattr(store_module, 'STORE_ID_BATCH_SIZE', 3)
    created = store.bulk_create(
        [game_fields(f'Game {i}', 'android', f'id-{i}') for i in range(7)]
    )
    assert len(created) == 7

    wanted = [f'id-{i}' for i in range(10)] + ['id-0']
    assert store.existing_store_ids(wanted) == {f'id-{i}' for i in range(7)}


def test_existing_store_ids_handles_more_than_one_default_batch(store):
    count = store_module.STORE_ID_BATCH_SIZE + 20
    store.bulk_create([game_fields(f'G{i}', 'ios', f'bulk-{i}') for i in range(count)])

    found = store.existing_store_ids(f'bulk-{i}' for i in range(count + 5))

    assert len(found) == count


def test_bulk_create_is_all_or_nothing(store):
    store.create(game_fields('Taken', 'ios', 'taken'))

    with pytest.raises(DuplicateStoreIdError):
        store.bulk_create(
            [
                game_fields('New', 'ios', 'new'),
                game_fields('Clash', 'ios', 'taken'),
            ]
        )

    assert [game.store_id for game in store.find_all()] == ['taken']


def test_bulk_create_with_nothing_to_insert(store):
    assert store.bulk_create([]) == []


def test_clear_removes_every_row(store):
    store.bulk_create([game_fields('A', 'ios', 'a'), game_fields('B', 'ios', 'b')])

    assert store.clear() == 2
    assert store.count() == 0


def test_unreachable_database_raises_store_unavailable(tmp_path):
    dsn = f"sqlite:///{(tmp_path / 'missing' / 'dir' / 'games.db').as_posix()}"

    with pytest.raises(StoreUnavailableError):
        initialize_store(dsn)


def test_in_memory_store_keeps_data_between_calls():
    memory_store = initialize_store('sqlite://')
    memory_store.create(game_fields('Memory', 'ios', 'mem'))

    assert memory_store.count() == 1


def test_close_releases_connections_without_losing_data(store):
    store.create(game_fields('Kept', 'ios', 'kept'))

    store.close()

    assert store.count() == 1
