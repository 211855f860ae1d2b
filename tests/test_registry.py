import threading
from dataclasses import dataclass
from functools import partial

import pytest

from configurautomaton.errors import ConfigurationDescriptorMissing
from configurautomaton.registry import (
    ConfigurationRegistry,
    PathRegistry,
    configuration,
    declared_file,
)


@configuration(file="settings.toml")
@dataclass
class Settings:
    retries: int = 0


@dataclass
class Undeclared:
    retries: int = 0


def test_path_overwrite_is_silent():
    paths = PathRegistry()
    paths.register("cfg", "/etc/app")
    paths.register("cfg", "/opt/app")
    assert paths.get("cfg") == "/opt/app"
    assert len(paths) == 1


def test_path_not_checked_at_registration(tmp_path):
    paths = PathRegistry()
    paths.register("later", tmp_path / "does" / "not" / "exist")
    assert paths.get("later") == str(tmp_path / "does" / "not" / "exist")


def test_unknown_names_return_none():
    assert PathRegistry().get("x") is None
    assert ConfigurationRegistry().get("x.toml") is None


def test_declared_registration():
    registry = ConfigurationRegistry()
    assert declared_file(Settings) == "settings.toml"
    assert registry.register_declared(Settings) == "settings.toml"
    assert registry.get("settings.toml") is Settings


def test_missing_declaration_raises():
    registry = ConfigurationRegistry()
    with pytest.raises(ConfigurationDescriptorMissing) as exc:
        registry.register_declared(Undeclared)
    assert "Undeclared" in str(exc.value)
    assert isinstance(exc.value, TypeError)


def test_factories_accepted():
    registry = ConfigurationRegistry()
    registry.register("a.yaml", dict)
    registry.register("b.yaml", lambda: Undeclared(retries=2))
    registry.register("c.yaml", partial(Undeclared, retries=3))
    assert registry.names() == ["a.yaml", "b.yaml", "c.yaml"]
    assert registry.get("c.yaml")().retries == 3


@pytest.mark.parametrize("descriptor", [None, 42, lambda required: required])
def test_invalid_descriptor(descriptor):
    with pytest.raises(ConfigurationDescriptorMissing):
        ConfigurationRegistry().register("x.toml", descriptor)


def test_empty_file_name():
    with pytest.raises(ConfigurationDescriptorMissing):
        ConfigurationRegistry().register("", dict)


def test_decorator_needs_file():
    with pytest.raises(ValueError):
        configuration(file="")


def test_concurrent_registration():
    paths = PathRegistry()

    def worker(i):
        for j in range(100):
            paths.register(f"p{i}-{j}", f"/d/{i}/{j}")

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(paths) == 800
