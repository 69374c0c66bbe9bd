import json

import pytest

from streambf.core.settings import (InterpreterConfig, config_from_env, config_from_mapping,
                                    load_config, load_config_file)


def test_defaults():
    cfg = InterpreterConfig()
    assert cfg.initial_tape_size == 1000
    assert cfg.tape_limit is None
    assert cfg.stack_limit is None
    assert cfg.debug is False


def test_from_env():
    cfg = config_from_env({
        "BF_TAPE_SIZE": "16",
        "BF_TAPE_LIMIT": "64",
        "BF_STACK_LIMIT": "none",
        "BF_DEBUG": "yes",
        "BF_DUMP_WIDTH": "4",
        "UNRELATED": "x",
    })
    assert cfg == InterpreterConfig(initial_tape_size=16, tape_limit=64, stack_limit=None,
                                    debug=True, dump_width=4)


def test_empty_env_gives_defaults():
    assert config_from_env({}) == InterpreterConfig()


@pytest.mark.parametrize("data", [
    {"debug": "maybe"},
    {"initial_tape_size": "lots"},
    {"initial_tape_size": 0},
    {"initial_tape_size": 100, "tape_limit": 10},
    {"stack_limit": -1},
    {"dump_width": True},
    {"colour": "red"},
])
def test_invalid_values_rejected(data):
    with pytest.raises(ValueError):
        config_from_mapping(data)


def test_yaml_file(tmp_path):
    path = tmp_path / "bf.yaml"
    path.write_text("initial_tape_size: 32\ndebug: true\n")
    assert load_config_file(str(path)) == {"initial_tape_size": 32, "debug": True}
    cfg = load_config(str(path), environ={})
    assert cfg.initial_tape_size == 32
    assert cfg.debug is True


def test_json_file(tmp_path):
    path = tmp_path / "bf.json"
    path.write_text(json.dumps({"stack_limit": 5}))
    assert load_config(str(path), environ={}).stack_limit == 5


def test_empty_yaml_file(tmp_path):
    path = tmp_path / "empty.yml"
    path.write_text("")
    assert load_config_file(str(path)) == {}


def test_non_mapping_file_rejected(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n")
    with pytest.raises(ValueError):
        load_config_file(str(path))


def test_precedence(tmp_path):
    path = tmp_path / "bf.yaml"
    path.write_text("initial_tape_size: 32\nstack_limit: 3\n")
    cfg = load_config(str(path), {"stack_limit": 7, "debug": None},
                      environ={"BF_TAPE_SIZE": "8", "BF_DEBUG": "1"})
    assert cfg.initial_tape_size == 32
    assert cfg.stack_limit == 7
    assert cfg.debug is True


def test_dotenv_read_from_working_directory(tmp_path, monkeypatch):
    # Register BF_DEBUG so teardown removes whatever load_dotenv puts there.
    monkeypatch.setenv("BF_DEBUG", "")
    monkeypatch.delenv("BF_DEBUG")
    (tmp_path / ".env").write_text("BF_DEBUG=1\n")
    monkeypatch.chdir(tmp_path)
    assert load_config().debug is True
