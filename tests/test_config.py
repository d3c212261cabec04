import yaml
import argparse
from pathlib import Path
from graphjson.config import LoaderConfig


def test_config_defaults():
    config = LoaderConfig()
    assert config.extensions == ["json"]
    assert config.formats == ["cdsmodel", "customjson"]
    assert config.default_dtype == "float32"
    assert config.weights_visible is False


def test_config_yaml_loading(tmp_path: Path):
    """Tests that config is loaded correctly from a YAML file."""
    yaml_content = {
        'formats': ['customjson'],
        'default_dtype': 'float16',
        'weights_visible': True,
        'unknown_key': 1,
    }
    yaml_file = tmp_path / "test.yaml"
    with open(yaml_file, 'w') as f:
        yaml.dump(yaml_content, f)

    args = argparse.Namespace(config=str(yaml_file), model="net.json", formats=None, log_level=None)

    config = LoaderConfig.from_args(args)

    assert config.formats == ['customjson']
    assert config.default_dtype == 'float16'
    assert config.weights_visible is True
    assert not hasattr(config, 'unknown_key')


def test_config_cli_override(tmp_path: Path):
    """Tests that CLI arguments override YAML settings."""
    yaml_content = {
        'formats': ['customjson'],
        'log_level': 'DEBUG',
        'extensions': ['json', 'cjson'],
    }
    yaml_file = tmp_path / "test.yaml"
    with open(yaml_file, 'w') as f:
        yaml.dump(yaml_content, f)

    args = argparse.Namespace(
        config=str(yaml_file),
        model="net.json",
        formats="cdsmodel, customjson",  # Override
        log_level="WARNING",             # Override
    )

    config = LoaderConfig.from_args(args)

    assert config.formats == ['cdsmodel', 'customjson']  # Overridden value
    assert config.log_level == 'WARNING'                  # Overridden value
    assert config.extensions == ['json', 'cjson']         # Value from YAML
    assert config.config_file == str(yaml_file)


def test_config_missing_yaml_keeps_defaults(tmp_path: Path):
    args = argparse.Namespace(config=str(tmp_path / "absent.yaml"), formats=None)
    config = LoaderConfig.from_args(args)
    assert config.formats == ["cdsmodel", "customjson"]


def test_accepts_extension():
    config = LoaderConfig(extensions=[".JSON"])
    assert config.accepts("model.json")
    assert config.accepts("dir.v2/Model.Json")
    assert not config.accepts("model.json.gz")
    assert not config.accepts(".json")
    assert not config.accepts("json")
