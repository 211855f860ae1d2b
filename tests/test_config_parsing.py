import pytest
from pydantic import ValidationError

from configurautomaton.config import AutomatonCfg, load
from configurautomaton.config.overrides import apply_overrides, parse_override
from configurautomaton.errors import LoadFailed, UnsupportedFormat


@pytest.fixture
def sample_yaml(tmp_path):
    yaml_content = """
autosave: false
formats:
  json_indent: 2
logging:
  level: DEBUG
paths:
  cfg: /etc/app
"""
    yaml_path = tmp_path / "settings.yaml"
    yaml_path.write_text(yaml_content)
    return yaml_path


def test_load_settings(sample_yaml):
    cfg = load(sample_yaml)
    assert isinstance(cfg, AutomatonCfg)
    assert cfg.autosave is False
    assert cfg.formats.json_indent == 2
    assert cfg.logging.level == "debug"
    assert cfg.paths == {"cfg": "/etc/app"}


def test_load_toml_settings(tmp_path):
    path = tmp_path / "settings.toml"
    path.write_text('encoding = "latin-1"\n\n[paths]\ndata = "/srv/data"\n')
    cfg = load(path)
    assert cfg.encoding == "latin-1"
    assert cfg.paths["data"] == "/srv/data"


def test_load_with_overrides(sample_yaml):
    overrides = ["formats.json_indent=8", "autosave=true", "paths.extra=/tmp/x"]
    cfg = load(sample_yaml, overrides)
    assert cfg.formats.json_indent == 8
    assert cfg.autosave is True
    assert cfg.paths["extra"] == "/tmp/x"


def test_unknown_override_kept_in_raw(sample_yaml):
    cfg = load(sample_yaml, ["invalid.key=val"])
    assert "invalid" in cfg.raw
    assert not hasattr(cfg, "invalid")


def test_logging_as_string_and_legacy_key():
    assert AutomatonCfg.from_dict({"logging": "warning"}).logging.level == "warning"
    assert AutomatonCfg.from_dict({"log_level": "error"}).logging.level == "error"


def test_bad_logging_level():
    with pytest.raises(ValidationError):
        AutomatonCfg.from_dict({"logging": {"level": "loud"}})


def test_missing_settings_file(tmp_path):
    with pytest.raises(LoadFailed):
        load(tmp_path / "nope.yaml")


def test_unsupported_settings_file(tmp_path):
    path = tmp_path / "settings.ini"
    path.write_text("[x]\n")
    with pytest.raises(UnsupportedFormat):
        load(path)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("a=1", ("a", 1)),
        ("a.b=2.5", ("a.b", 2.5)),
        ("flag=TRUE", ("flag", True)),
        ("name=hello=world", ("name", "hello=world")),
    ],
)
def test_parse_override(raw, expected):
    assert parse_override(raw) == expected


@pytest.mark.parametrize("raw", ["novalue", "=1", "a..b=1"])
def test_invalid_override(raw):
    with pytest.raises(ValueError):
        parse_override(raw)


def test_apply_overrides_replaces_scalars_with_tables():
    doc = {"server": "localhost"}
    apply_overrides(doc, ["server.port=80"])
    assert doc == {"server": {"port": 80}}
