import pytest

from csim import Config, ConfigError, load_config


def test_validate_accepts_complete_config():
    cfg = Config(s=4, E=1, b=4, trace="t.trace")
    assert cfg.validate() is cfg


@pytest.mark.parametrize(
    "kwargs,missing",
    [
        (dict(E=1, b=4, trace="t"), "s"),
        (dict(s=4, b=4, trace="t"), "E"),
        (dict(s=4, E=1, trace="t"), "b"),
        (dict(s=4, E=1, b=4), "trace"),
        (dict(s=0, E=1, b=4, trace="t"), "s"),
    ],
)
def test_validate_reports_missing(kwargs, missing):
    with pytest.raises(ConfigError, match="Missing required command line argument") as info:
        Config(**kwargs).validate()
    assert missing in str(info.value)


def test_validate_without_trace():
    Config(s=1, E=1, b=1).validate(require_trace=False)


def test_validate_rejects_negative_and_oversized():
    with pytest.raises(ConfigError):
        Config(s=-1, E=1, b=1, trace="t").validate()
    with pytest.raises(ConfigError, match="address width"):
        Config(s=33, E=1, b=32, trace="t").validate()


def test_derived_geometry():
    cfg = Config(s=5, E=2, b=4)
    assert cfg.num_sets == 32
    assert cfg.block_size == 16
    assert cfg.size_bytes == 1024


def test_from_sizes():
    cfg = Config.from_sizes("1KB", line="16B", ways=2, trace="t.trace")
    assert (cfg.s, cfg.E, cfg.b) == (5, 2, 4)
    assert cfg.trace == "t.trace"
    assert cfg.size_bytes == 1024


@pytest.mark.parametrize(
    "size,line,ways",
    [("1KB", "24B", 1), ("1KB", "16B", 3), ("96B", "16B", 2), ("1KB", "16B", 0)],
)
def test_from_sizes_rejects_non_power_of_two(size, line, ways):
    with pytest.raises(ValueError):
        Config.from_sizes(size, line=line, ways=ways)


def test_to_dict_round_trip():
    cfg = Config(s=2, E=4, b=3, trace="x.trace", verbose=True)
    again = Config(**cfg.to_dict())
    assert again.to_dict() == cfg.to_dict()
    assert "s=2" in repr(cfg)


def test_load_config_variable(tmp_path):
    path = tmp_path / "geometry.py"
    path.write_text("config = {'s': 4, 'E': 2, 'b': 5}\n")
    cfg = load_config(str(path))
    assert (cfg.s, cfg.E, cfg.b) == (4, 2, 5)


def test_load_config_function_named_after_file(tmp_path, capsys):
    path = tmp_path / "small.py"
    path.write_text(
        "from csim import Config\n"
        "def small():\n"
        "    return Config(s=1, E=1, b=1)\n"
    )
    cfg = load_config(str(path))
    assert (cfg.s, cfg.E, cfg.b) == (1, 1, 1)
    assert "small()" in capsys.readouterr().err


def test_load_config_get_config(tmp_path):
    path = tmp_path / "cfg.py"
    path.write_text(
        "from csim import Config\n"
        "def get_config():\n"
        "    return Config.from_sizes('4KB', line='64B', ways=4)\n"
    )
    cfg = load_config(str(path))
    assert (cfg.s, cfg.E, cfg.b) == (4, 4, 6)


def test_load_config_errors(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(str(tmp_path / "missing.py"))
    path = tmp_path / "empty.py"
    path.write_text("x = 1\n")
    with pytest.raises(ConfigError, match="entry point"):
        load_config(str(path))
