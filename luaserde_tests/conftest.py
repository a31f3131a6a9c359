import os

from luaserde.conf.get_settings import CONFIG_YAML_ENV_VAR

# tests must not pick up a config file from the environment they run in
os.environ.pop(CONFIG_YAML_ENV_VAR, None)
