"""
peekmq.config
~~~~~~~~~~~~~

User configuration of the peekmq command line.
"""

import json
import os
import warnings
from typing import Any, Callable, Dict, Optional, Union

from platformdirs import PlatformDirs

# When the user doesn't specify any values, these are used
BASE_VALUES: Dict[str, Union[str, int, bool]] = {
    "INFO_MODE": False,
    "JSON_INDENT": 2,
    "MAX_TABLE_DEPTH": 64,
    "DEFAULT_CONTENT_TYPE": "",
}


def verify_bool(_obj: Any) -> bool:
    if isinstance(_obj, bool):
        return _obj
    if isinstance(_obj, str) and _obj.lower() in ("true", "yes", "on", "1"):
        return True
    if isinstance(_obj, str) and _obj.lower() in ("false", "no", "off", "0"):
        return False
    raise ValueError


def verify_pos_int(_obj: Any) -> int:
    new_int = int(_obj)
    if new_int < 0:
        raise ValueError
    return new_int


def verify_nonzero_int(_obj: Any) -> int:
    new_int = verify_pos_int(_obj)
    if new_int == 0:
        raise ValueError
    return new_int


# Used to verify the values of configuration variables
# Callable should raise ValueError if value is incorrect
VERIFY_VALUE: Dict[str, Callable] = {
    "INFO_MODE": verify_bool,
    "JSON_INDENT": verify_pos_int,
    "MAX_TABLE_DEPTH": verify_nonzero_int,
    "DEFAULT_CONTENT_TYPE": str,
}

_UNSET = object()


class Configuration:
    def __init__(self, path: Optional[str] = None) -> None:
        self._values: Dict[str, Any] = dict(BASE_VALUES)
        self.path = path

    @classmethod
    def load_from_file(cls, cfg_file_path: str) -> "Configuration":
        new_config = cls(cfg_file_path)
        try:
            with open(cfg_file_path, "r", encoding="utf-8") as cfg_file:
                new_cfg_file = json.load(cfg_file)
        except json.decoder.JSONDecodeError:
            warnings.warn(
                f"file '{cfg_file_path}' has incorrectly formatted JSON, using default values instead"
            )
            return new_config
        except IOError as e:
            warnings.warn(
                f"Error loading config '{cfg_file_path}': [{e.errno}] {e.strerror}"
            )
            return new_config

        if not isinstance(new_cfg_file, dict):
            warnings.warn(
                f"file '{cfg_file_path}' doesn't hold a JSON object, using default values instead"
            )
            return new_config

        for config_var in new_cfg_file:
            new_config.set(config_var, new_cfg_file[config_var])
        return new_config

    def __iter__(self):
        return iter(self._values)

    def get(self, config_var: str) -> Any:
        return self._values[config_var.upper()]

    def set(self, config_var: str, value: Any) -> None:
        config_var = config_var.upper()
        try:
            new_value = (
                BASE_VALUES[config_var] if value is None else VERIFY_VALUE[config_var](value)
            )
        except KeyError:
            warnings.warn(f"configuration variable '{config_var}' doesn't exist!")
            return
        except (TypeError, ValueError):
            warnings.warn(
                f"Cannot set {config_var} to '{value}', using default value instead."
            )
            new_value = BASE_VALUES[config_var]
        self._values[config_var] = new_value

    def reset(self) -> None:
        self._values = dict(BASE_VALUES)

    def to_json(self) -> str:
        return json.dumps(self._values, indent=4)

    def write(self) -> None:
        if self.path is None:
            raise ValueError("Configuration has no file to write to")
        cfg_dir = os.path.dirname(self.path)
        if cfg_dir:
            os.makedirs(cfg_dir, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as cfg_file:
            cfg_file.write(self.to_json())


def get_default_config() -> str:
    return json.dumps(BASE_VALUES, indent=4)


def default_config_path() -> str:
    usr_cfg_dir = PlatformDirs("peekmq").user_config_dir
    return os.environ.get("PEEKMQ_CONFIG", os.path.join(usr_cfg_dir, "variables.json"))


def load_user_config() -> Configuration:
    cfg_path = default_config_path()
    if not os.path.isfile(cfg_path):
        return Configuration(cfg_path)
    return Configuration.load_from_file(cfg_path)


CURRENT_CONFIG = load_user_config()


def configure(config_var: str, value: Any = _UNSET, durable=False) -> Any:
    """Get a configuration variable, or set it when ``value`` is given.

    Setting ``None`` resets the variable to its default. With ``durable`` the
    whole configuration is saved to the user configuration file.
    """
    if value is _UNSET:
        try:
            return CURRENT_CONFIG.get(config_var)
        except KeyError:
            warnings.warn(f"configuration variable '{config_var.upper()}' doesn't exist!")
            return None
    CURRENT_CONFIG.set(config_var, value)
    if durable:
        CURRENT_CONFIG.write()
    return CURRENT_CONFIG.get(config_var) if config_var.upper() in BASE_VALUES else None
