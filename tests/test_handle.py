import pytest

from configurautomaton.errors import HandleClosed, LoadFailed
from configurautomaton.formats import JsonFormat, TomlFormat, YamlFormat
from configurautomaton.handle import FileHandle, ReadOnlyHandle


@pytest.fixture
def toml_file(tmp_path):
    path = tmp_path / "app.toml"
    path.write_text('retries = 3\n\n[server]\nhost = "localhost"\nport = 80\n')
    return path


def test_get_dotted(toml_file):
    handle = FileHandle(toml_file, TomlFormat()).load()
    assert handle.get("retries") == 3
    assert handle.get("server.port") == 80
    assert handle.get("server.missing", "x") == "x"
    assert "server.host" in handle
    assert "nope" not in handle


def test_set_autosaves(toml_file):
    handle = FileHandle(toml_file, TomlFormat()).load()
    handle.set("server.port", 8080)
    handle.set("new.table.key", "v")
    reread = FileHandle(toml_file, TomlFormat()).load()
    assert reread.get("server.port") == 8080
    assert reread.get("new.table.key") == "v"


def test_set_without_autosave(toml_file):
    handle = FileHandle(toml_file, TomlFormat(), autosave=False).load()
    handle.set("retries", 9)
    assert FileHandle(toml_file, TomlFormat()).load().get("retries") == 3
    handle.save()
    assert FileHandle(toml_file, TomlFormat()).load().get("retries") == 9


def test_remove(toml_file):
    handle = FileHandle(toml_file, TomlFormat()).load()
    assert handle.remove("server.host") == "localhost"
    assert handle.remove("server.host") is None
    assert "server.host" not in FileHandle(toml_file, TomlFormat()).load()


def test_merge_keeps_unknown_keys(tmp_path):
    path = tmp_path / "app.json"
    path.write_text('{"a": 1, "extra": true}')
    handle = FileHandle(path, JsonFormat(), autosave=False).load()
    handle.merge({"a": 2})
    assert handle.document == {"a": 2, "extra": True}


def test_document_is_a_copy(toml_file):
    handle = FileHandle(toml_file, TomlFormat()).load()
    doc = handle.document
    doc["server"]["port"] = 1
    assert handle.get("server.port") == 80


def test_closed_handle_rejects_operations(toml_file):
    handle = FileHandle(toml_file, TomlFormat()).load()
    handle.close()
    assert handle.closed
    with pytest.raises(HandleClosed):
        handle.save()
    with pytest.raises(HandleClosed):
        handle.set("retries", 1)


def test_missing_file(tmp_path):
    with pytest.raises(LoadFailed) as exc:
        FileHandle(tmp_path / "missing.yaml", YamlFormat()).load()
    assert isinstance(exc.value.__cause__, FileNotFoundError)


def test_malformed_file(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with pytest.raises(LoadFailed) as exc:
        ReadOnlyHandle(path, JsonFormat()).load()
    assert "malformed json" in str(exc.value)


def test_read_only_document(toml_file):
    handle = ReadOnlyHandle(toml_file, TomlFormat()).load()
    with pytest.raises(TypeError):
        handle.document["retries"] = 1
    assert not hasattr(handle, "save")


def test_undecodable_file(tmp_path):
    path = tmp_path / "latin.toml"
    path.write_bytes(b'name = "\xff\xfe"\n')
    with pytest.raises(LoadFailed) as exc:
        FileHandle(path, TomlFormat()).load()
    assert "cannot decode" in str(exc.value)
    assert isinstance(exc.value.__cause__, UnicodeDecodeError)
