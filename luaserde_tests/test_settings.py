from pathlib import Path

import pytest
from pydantic import ValidationError

from luaserde.conf import DEFAULT_SETTINGS, ConverterSettings, get_global_settings, reset_global_settings
from luaserde.conf.get_settings import CONFIG_YAML_ENV_VAR
from luaserde.utils.yaml import dict_from_yaml

FIXTURES = Path(__file__).parent / 'fixtures'


@pytest.fixture(autouse=True)
def _reset_settings():
    reset_global_settings()
    yield
    reset_global_settings()


def test_default_settings():
    settings = ConverterSettings()

    assert settings.max_depth == 128
    assert settings.deny_unknown_fields is False
    assert settings.empty_table_as_map is False
    assert settings == DEFAULT_SETTINGS


def test_settings_are_frozen():
    with pytest.raises(ValidationError):
        DEFAULT_SETTINGS.max_depth = 1  # type: ignore[misc]


@pytest.mark.parametrize('max_depth', [0, -1, '8'])
def test_invalid_max_depth(max_depth):
    with pytest.raises(ValidationError):
        ConverterSettings(max_depth=max_depth)


def test_valid_settings_from_yaml():
    settings = ConverterSettings.from_yaml(filepath=FIXTURES / 'valid_settings.yml')

    assert settings == ConverterSettings(max_depth=16, deny_unknown_fields=True)


def test_extra_keys_are_forbidden():
    with pytest.raises(ValidationError) as e:
        ConverterSettings.from_yaml(filepath=FIXTURES / 'invalid_settings.yml')

    errors = e.value.errors()
    assert errors[0]['loc'] == ('max_width',)


def test_global_settings_default(monkeypatch):
    monkeypatch.delenv(CONFIG_YAML_ENV_VAR, raising=False)

    assert get_global_settings() is DEFAULT_SETTINGS


def test_global_settings_from_env(monkeypatch):
    monkeypatch.setenv(CONFIG_YAML_ENV_VAR, str(FIXTURES / 'valid_settings.yml'))

    settings = get_global_settings()

    assert settings.max_depth == 16
    assert get_global_settings() is settings


def test_global_settings_from_another_file(monkeypatch):
    monkeypatch.setenv(CONFIG_YAML_ENV_VAR, str(FIXTURES / 'valid_settings.yml'))
    get_global_settings()
    monkeypatch.setenv(CONFIG_YAML_ENV_VAR, str(FIXTURES / 'other_settings.yml'))

    with pytest.raises(Exception) as e:
        get_global_settings()

    assert str(e.value) == 'loading config twice with a different file'


def test_global_settings_from_tmp_file(monkeypatch, tmp_path):
    filepath = tmp_path / 'luaserde.yml'
    filepath.write_text('empty_table_as_map: true\n')
    monkeypatch.setenv(CONFIG_YAML_ENV_VAR, str(filepath))

    assert get_global_settings().empty_table_as_map is True


def test_dict_from_yaml_invalid_filepath():
    with pytest.raises(ValueError) as e:
        dict_from_yaml(filepath='fake_file.yml')

    assert str(e.value) == "'fake_file.yml' is not a file"


def test_dict_from_yaml_empty():
    assert dict_from_yaml(filepath=FIXTURES / 'empty.yml') == {}


def test_dict_from_yaml_invalid_contents():
    filepath = FIXTURES / 'number.yml'

    with pytest.raises(ValueError) as e:
        dict_from_yaml(filepath=filepath)

    assert str(e.value) == f"'{filepath}' cannot be parsed as a dictionary"
