#  Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import os
from typing import NamedTuple, Optional

from structlog import get_logger

from luaserde.conf.settings import DEFAULT_SETTINGS, ConverterSettings

logger = get_logger()

CONFIG_YAML_ENV_VAR = 'LUASERDE_CONFIG_YAML'


class _SettingsMetadata(NamedTuple):
    source: Optional[str]
    settings: ConverterSettings


_settings_singleton: Optional[_SettingsMetadata] = None


def get_global_settings() -> ConverterSettings:
    """Returns the configured settings.

    Tries to get them from a yaml filepath in the 'LUASERDE_CONFIG_YAML' env var, otherwise the defaults are used.
    """
    settings_yaml_filepath = os.environ.get(CONFIG_YAML_ENV_VAR) or None
    return _load_settings_singleton(settings_yaml_filepath)


def reset_global_settings() -> None:
    """Forget the loaded settings, the next call to `get_global_settings()` loads them again."""
    global _settings_singleton
    _settings_singleton = None


def _load_settings_singleton(source: Optional[str]) -> ConverterSettings:
    global _settings_singleton

    if _settings_singleton is not None:
        if _settings_singleton.source != source:
            raise Exception('loading config twice with a different file')
        return _settings_singleton.settings

    if source is None:
        settings = DEFAULT_SETTINGS
    else:
        settings = ConverterSettings.from_yaml(filepath=source)
        logger.info('settings loaded', source=source)

    _settings_singleton = _SettingsMetadata(source=source, settings=settings)
    return settings
