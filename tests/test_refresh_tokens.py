from datetime import timedelta

import pytest

from models.base_model import utcnow
from models.refresh_token import RefreshToken
from utils.exceptions import NotFound


def test_create_persists_thirty_day_token(alice, refresh_store, storage):
    now = utcnow()
    record = refresh_store.create(alice.user.id, now=now)

    assert record.user_id == alice.user.id
    assert record.expires_at - now == timedelta(days=30)
    assert len(record.id) == 32
    assert storage.get(RefreshToken, record.id) is record


def test_create_gives_every_session_its_own_id(alice, refresh_store):
    first = refresh_store.create(alice.user.id)
    second = refresh_store.create(alice.user.id)

    assert first.id != second.id


def test_find_unknown_token_raises(refresh_store):
    with pytest.raises(NotFound):
        refresh_store.find("does-not-exist")


def test_invalidate_if_expired_keeps_live_token(alice, refresh_store):
    record = alice.refresh_token

    assert refresh_store.invalidate_if_expired(record) is False
    assert refresh_store.find(record.id) is record


def test_invalidate_if_expired_deletes_stale_token(alice, refresh_store):
    record = refresh_store.create(alice.user.id, now=utcnow() - timedelta(days=31))
    token_id = record.id

    assert refresh_store.invalidate_if_expired(record) is True
    with pytest.raises(NotFound):
        refresh_store.find(token_id)


def test_delete_is_idempotent(alice, refresh_store):
    token_id = alice.refresh_token.id

    refresh_store.delete(token_id)
    refresh_store.delete(token_id)
    refresh_store.delete("never-existed")

    with pytest.raises(NotFound):
        refresh_store.find(token_id)
