import pytest

from vos.audio import AudioBlobRegistry


def test_register_and_resolve():
    registry = AudioBlobRegistry()
    ref = registry.register(b"abc")

    assert ref.startswith("blob:")
    assert ref in registry
    assert registry.resolve(ref) == b"abc"
    assert len(registry) == 1


def test_references_are_unique():
    registry = AudioBlobRegistry()
    assert registry.register(b"x") != registry.register(b"x")


def test_release_drops_buffer():
    registry = AudioBlobRegistry()
    ref = registry.register(b"abc")

    assert registry.release(ref) is True
    assert ref not in registry
    assert registry.release(ref) is False
    with pytest.raises(KeyError):
        registry.resolve(ref)
