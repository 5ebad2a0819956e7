import pytest

from session_lib.session.models import Session
from session_lib.session.store import MemorySessionStore


def test_session_behaves_as_mapping():
    s = Session('abc', {'user': 'alice'})
    assert s.id == 'abc'
    assert s['user'] == 'alice'
    assert s.get('missing') is None
    assert dict(s) == {'user': 'alice'}
    assert s == {'user': 'alice'}
    assert len(s) == 1
    assert s.modified is False


def test_set_and_delete_mark_modified():
    s = Session('abc')
    s.set('k', 1)
    assert s.modified is True
    assert s['k'] == 1
    s.modified = False
    del s['k']
    assert s.modified is True
    assert 'k' not in s


def test_save_only_writes_when_modified():
    store = MemorySessionStore()
    s = store.resolve_or_create(None)
    assert s.save() is False
    s['user'] = 'bob'
    assert s.save() is True
    assert s.modified is False
    assert store.resolve_or_create(s.id) == {'user': 'bob'}


def test_save_without_store_is_noop():
    s = Session('abc', {'a': 1})
    s['b'] = 2
    assert s.save() is False


def test_delete_removes_from_store_and_blocks_save():
    store = MemorySessionStore()
    s = store.resolve_or_create(None)
    s.delete()
    assert s.deleted is True
    assert store.exists(s.id) is False
    with pytest.raises(RuntimeError):
        s.save(force=True)
    # second delete is a no-op
    s.delete()


def test_loaded_sessions_are_independent_copies():
    store = MemorySessionStore()
    s = store.resolve_or_create(None)
    s['items'] = [1]
    s.save()
    again = store.resolve_or_create(s.id)
    again['items'].append(2)
    assert store.resolve_or_create(s.id)['items'] == [1]
