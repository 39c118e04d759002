import logging
import os
from dataclasses import dataclass

TRUE_VALUES = ("1", "true", "yes", "on")

class ConfigError(ValueError):
    pass

def _env_bool(environ, name, default):
    value = environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in TRUE_VALUES

def _env_number(environ, name, default, convert, kind):
    value = environ.get(name)
    if value is None:
        return default
    try:
        return convert(value)
    except ValueError:
        raise ConfigError(f"{name} must be {kind}, got '{value}'") from None

def _env_log_level(environ, name, default):
    value = environ.get(name, default).strip().upper()
    if not isinstance(logging.getLevelName(value), int):
        raise ConfigError(f"{name} must be a logging level name, got '{value}'")
    return value

@dataclass
class Settings:
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False
    max_steps: int = 100000
    input_timeout: float = 120.0
    step_delay: float = 0.01
    strict_labels: bool = False
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ=None):
        """
        Build settings from MINIBASIC_* environment variables.

        Raises ConfigError when a numeric value or the log level is malformed.
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            host=env.get("MINIBASIC_HOST", defaults.host),
            port=_env_number(env, "MINIBASIC_PORT", defaults.port, int, "an integer"),
            reload=_env_bool(env, "MINIBASIC_RELOAD", defaults.reload),
            max_steps=_env_number(env, "MINIBASIC_MAX_STEPS", defaults.max_steps, int, "an integer"),
            input_timeout=_env_number(env, "MINIBASIC_INPUT_TIMEOUT", defaults.input_timeout, float, "a number"),
            step_delay=_env_number(env, "MINIBASIC_STEP_DELAY", defaults.step_delay, float, "a number"),
            strict_labels=_env_bool(env, "MINIBASIC_STRICT_LABELS", defaults.strict_labels),
            log_level=_env_log_level(env, "MINIBASIC_LOG_LEVEL", defaults.log_level),
        )
