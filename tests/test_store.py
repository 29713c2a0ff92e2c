import pydantic
import pytest

from conftest import SCRIPT_RESULT
from vos.models import AudioPayload, Project, ProjectStatus, VoiceName
from vos.pipeline import ProjectStore, StoreEventKind


def _topic(name="How to tie a knot"):
    return Project.for_topic(name, VoiceName.PUCK)


def test_projects_listed_newest_first(store):
    first = store.add(_topic("first"))
    second = store.add(_topic("second"))

    assert [p.id for p in store.projects] == [second.id, first.id]


def test_add_activates_by_default(store):
    project = store.add(_topic())
    assert store.active_id == project.id

    other = store.add(_topic("other"), activate=False)
    assert store.active_id == project.id
    assert other.id in store


def test_add_rejects_duplicate_id(store):
    project = store.add(_topic())
    with pytest.raises(ValueError):
        store.add(project)


def test_update_replaces_record_by_id(store):
    project = store.add(_topic())
    updated = store.update(project.id, script="edited")

    assert updated.script == "edited"
    assert updated.status == ProjectStatus.GENERATING_SCRIPT
    assert store.get(project.id) == updated
    assert project.script == ""


def test_update_keeps_position(store):
    a = store.add(_topic("a"))
    b = store.add(_topic("b"))
    store.update(a.id, script="changed")

    assert [p.id for p in store.projects] == [b.id, a.id]


def test_update_unknown_project_returns_none(store):
    assert store.update("missing", script="x") is None


def test_update_enforces_seo_only_on_topic_projects(store):
    project = store.add(Project.for_transcript("Some transcript", VoiceName.KORE))
    with pytest.raises(pydantic.ValidationError):
        store.update(project.id, seo_metadata=SCRIPT_RESULT.seo)


def test_remove_releases_audio_and_clears_active(store):
    project = store.add(_topic())
    ref = store.blobs.register(b"RIFF")
    store.update(project.id, audio=AudioPayload(ref=ref, data=b"RIFF", sample_rate=24000))

    removed = store.remove(project.id)

    assert removed.id == project.id
    assert project.id not in store
    assert ref not in store.blobs
    assert store.active_id is None


def test_remove_inactive_keeps_selection(store):
    a = store.add(_topic("a"))
    b = store.add(_topic("b"))
    store.set_active(a.id)

    store.remove(b.id)
    assert store.active_id == a.id


def test_remove_unknown_returns_none(store):
    assert store.remove("missing") is None


def test_set_active_unknown_raises(store):
    with pytest.raises(KeyError):
        store.set_active("missing")


def test_subscribe_receives_events_until_unsubscribed(store):
    events = []
    unsubscribe = store.subscribe(events.append)

    project = store.add(_topic())
    store.update(project.id, script="x")
    unsubscribe()
    store.remove(project.id)

    assert [e.kind for e in events] == [
        StoreEventKind.ADDED,
        StoreEventKind.ACTIVE_CHANGED,
        StoreEventKind.UPDATED,
    ]
    assert events[2].project.script == "x"


def test_failing_listener_does_not_block_others(store):
    seen = []

    def broken(event):
        raise RuntimeError("listener bug")

    store.subscribe(broken)
    store.subscribe(seen.append)
    store.add(_topic())

    assert seen


def test_shared_blob_registry():
    store = ProjectStore()
    assert len(store.blobs) == 0
