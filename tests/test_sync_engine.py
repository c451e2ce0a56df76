"""
Sync engine tests: initial load, staleness gate, debounced pushes.
"""

from family_dashboard.app_state import AppState
from family_dashboard.sync_engine import SyncEngine

from conftest import FakeStoreClient


def _doc_with(store, **collections):
    doc = store.fetch_document()
    doc.update(collections)
    return doc


# ============================================================
# Initial load
# ============================================================

def test_initial_load_populates_state_and_sets_ready(loop):
    store = FakeStoreClient()
    store.document['groceries'] = [{'id': 1, 'text': 'Milk', 'checked': False}]
    store.document['settings']['familyName'] = 'Smith'
    state = AppState()
    SyncEngine(state, store, loop).load_initial()

    assert state.ready
    assert state.groceries == [{'id': 1, 'text': 'Milk', 'checked': False}]
    assert state.settings['familyName'] == 'Smith'


def test_writes_before_ready_are_suppressed(loop, store, state):
    engine = SyncEngine(state, store, loop)
    state.add_grocery('Eggs')
    loop.advance(1.0)
    assert store.pushes == []

    engine.load_initial()
    assert state.ready


def test_failed_initial_load_still_becomes_ready(loop, store, state):
    store.fail_fetch = True
    SyncEngine(state, store, loop).load_initial()
    assert state.ready
    assert state.events == []


def test_on_ready_callback_runs(loop, store, state):
    calls = []
    SyncEngine(state, store, loop).load_initial(on_ready=lambda: calls.append('ready'))
    assert calls == ['ready']


# ============================================================
# Polling and the staleness window
# ============================================================

def test_poll_replaces_changed_collection(sync, store, state, loop):
    store.document['events'] = [{'id': 5, 'title': 'Dentist', 'date': '2025-06-15'}]
    loop.advance(3.0)
    assert state.events == [{'id': 5, 'title': 'Dentist', 'date': '2025-06-15'}]


def test_poll_every_three_seconds(sync, store, loop):
    before = store.fetches
    loop.advance(9.0)
    assert store.fetches - before == 3


def test_recent_local_grocery_edit_blocks_poll(sync, store, state, loop):
    loop.advance(10.0)
    state.add_grocery('Bread')
    local = list(state.groceries)
    remote = _doc_with(store, groceries=[{'id': 99, 'text': 'Other', 'checked': False}])

    loop.now += 1.0
    sync.apply_remote(remote)
    assert state.groceries == local

    loop.now += 1.5
    sync.apply_remote(remote)
    assert state.groceries == [{'id': 99, 'text': 'Other', 'checked': False}]


def test_collections_are_gated_independently(sync, store, state, loop):
    loop.advance(10.0)
    state.add_grocery('Bread')
    remote = _doc_with(
        store,
        groceries=[],
        events=[{'id': 1, 'title': 'Swim', 'date': '2025-01-01'}],
    )
    sync.apply_remote(remote)

    assert [g['text'] for g in state.groceries] == ['Bread']
    assert state.events == [{'id': 1, 'title': 'Swim', 'date': '2025-01-01'}]


def test_identical_remote_keeps_local_objects(sync, store, state, loop):
    loop.advance(10.0)
    current = state.groceries
    sync.apply_remote(_doc_with(store, groceries=[]))
    assert state.groceries is current


def test_failed_poll_keeps_state(sync, store, state, loop):
    state.groceries = [{'id': 1, 'text': 'Tea', 'checked': False}]
    store.fail_fetch = True
    loop.advance(3.0)
    assert state.groceries == [{'id': 1, 'text': 'Tea', 'checked': False}]


def test_settings_are_not_merged_from_poll(sync, store, state, loop):
    store.document['settings']['theme'] = 'ocean'
    loop.advance(3.0)
    assert state.settings['theme'] == 'purple'


# ============================================================
# Debounced pushes
# ============================================================

def test_rapid_grocery_edits_coalesce_into_one_push(sync, store, state, loop):
    state.add_grocery('Apples')
    loop.advance(0.125)
    state.add_grocery('Pears')
    loop.advance(0.125)
    item = state.add_grocery('Plums')
    loop.advance(0.125)
    state.toggle_grocery(item['id'])

    loop.advance(0.375)
    assert store.pushes_of('groceries') == []

    loop.advance(0.125)
    pushes = store.pushes_of('groceries')
    assert len(pushes) == 1
    assert [g['text'] for g in pushes[0]] == ['Apples', 'Pears', 'Plums']
    assert pushes[0][-1]['checked'] is True


def test_separate_edits_push_separately(sync, store, state, loop):
    state.add_grocery('Apples')
    loop.advance(1.0)
    state.add_grocery('Pears')
    loop.advance(1.0)
    assert len(store.pushes_of('groceries')) == 2


def test_event_push_sends_whole_collection(sync, store, state, loop):
    state.add_event('Soccer', '2025-06-15', '09:00')
    state.add_event('Piano', '2025-06-16')
    loop.advance(0.5)
    pushed = store.pushes_of('events')
    assert len(pushed) == 1
    assert [e['title'] for e in pushed[0]] == ['Soccer', 'Piano']


def test_event_push_suppressed_in_nextcloud_mode(sync, store, state, loop):
    state.settings['nextcloudEnabled'] = True
    sync.on_local_change('events')
    loop.advance(1.0)
    assert store.pushes_of('events') == []


def test_settings_change_is_pushed(sync, store, state, loop):
    state.update_settings(theme='forest')
    loop.advance(0.5)
    assert store.pushes_of('settings')[-1]['theme'] == 'forest'


def test_stop_cancels_poll_and_pending_push(sync, store, state, loop):
    state.add_grocery('Apples')
    sync.stop()
    fetches = store.fetches
    loop.advance(10.0)
    assert store.pushes == []
    assert store.fetches == fetches
    assert loop.pending() == []


def test_failed_push_is_logged(sync, store, state, loop, caplog):
    store.push_groceries = lambda groceries: False
    state.add_grocery('Apples')
    loop.advance(0.5)
    assert 'Push of groceries failed' in caplog.text
