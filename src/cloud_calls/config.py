"""
Configuration loading and validation for the example flows.

Values are resolved in this order, later sources winning: built-in
defaults, a JSON config file, environment variables, explicit overrides
(typically command-line flags).
"""
import json
import logging
import os
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .aws_client_factory import DEFAULT_REGION
from .error_handler import ConfigurationError, ErrorPolicy

logger = logging.getLogger(__name__)

DEFAULT_ALARM_NAMES = ("Web_Server_CPU_Utilization",)
DEFAULT_BUCKET = "my_bucket"
DEFAULT_KEY = "my_item"

REGION_PATTERN = re.compile(r'^[a-z]{2}(-[a-z]+)?-[a-z]+-\d+$')

# JSON file field -> CallConfig attribute
_FILE_FIELDS = {
    "region": "region",
    "alarmNames": "alarm_names",
    "bucket": "bucket",
    "key": "key",
    "onError": "on_error",
    "logLevel": "log_level",
    "jsonLogs": "json_logs",
}

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Fields each flow reads; region, policy and logging are shared
COMMON_FIELDS = ("region", "on_error", "log_level", "json_logs")
ALARM_FIELDS = COMMON_FIELDS + ("alarm_names",)
OBJECT_FIELDS = COMMON_FIELDS + ("bucket", "key")


class ConfigValidationError(ConfigurationError):
    """Exception raised for configuration validation errors."""

    def __init__(self, errors: List[str], path: Optional[str] = None):
        self.errors = list(errors)
        self.path = path
        where = f" in {path}" if path else ""
        super().__init__(f"Invalid configuration{where}: " + "; ".join(self.errors),
                         context={"errors": self.errors, "path": path})


@dataclass(frozen=True)
class CallConfig:
    """Settings for one run of an example flow."""
    region: str = DEFAULT_REGION
    alarm_names: Tuple[str, ...] = DEFAULT_ALARM_NAMES
    bucket: str = DEFAULT_BUCKET
    key: str = DEFAULT_KEY
    on_error: Optional[ErrorPolicy] = None
    log_level: str = "INFO"
    json_logs: Optional[bool] = None


class ConfigValidator:
    """Collects every problem in a CallConfig instead of stopping at the first."""

    def __init__(self, config: CallConfig, fields: Optional[Iterable[str]] = None):
        self.config = config
        self.fields = set(fields) if fields is not None else set(ALARM_FIELDS + OBJECT_FIELDS)
        self.errors = []
        self.warnings = []

    def validate_all(self) -> Tuple[bool, List[str], List[str]]:
        """
        Validate the configuration fields the calling flow uses.

        Returns:
            Tuple of (is_valid, errors, warnings)
        """
        if "region" in self.fields:
            self._validate_region()
        if "alarm_names" in self.fields:
            self._validate_alarm_names()
        for name in ("bucket", "key"):
            if name in self.fields:
                self._validate_required_string(name)
        if "log_level" in self.fields:
            self._validate_log_level()

        return len(self.errors) == 0, self.errors, self.warnings

    def _validate_region(self):
        region = self.config.region
        if not region:
            self.errors.append("region is required")
        elif not isinstance(region, str):
            self.errors.append(f"region must be a string, got {type(region).__name__}")
        elif not REGION_PATTERN.match(region):
            self.errors.append(f"Invalid region format: {region}")

    def _validate_alarm_names(self):
        names = self.config.alarm_names
        if not names:
            self.errors.append("alarmNames must contain at least one name")
            return
        if any(not isinstance(n, str) or not n.strip() for n in names):
            self.errors.append("alarmNames must be non-empty strings")
        elif len(set(names)) != len(names):
            self.warnings.append("alarmNames contains duplicates")

    def _validate_required_string(self, name: str):
        value = getattr(self.config, name)
        if not value:
            self.errors.append(f"{name} is required")
        elif not isinstance(value, str):
            self.errors.append(f"{name} must be a string, got {type(value).__name__}")

    def _validate_log_level(self):
        if str(self.config.log_level).upper() not in _LOG_LEVELS:
            self.errors.append(f"logLevel must be one of: {', '.join(_LOG_LEVELS)}")


def _split_names(value) -> Tuple[str, ...]:
    if isinstance(value, str):
        return tuple(n.strip() for n in value.split(",") if n.strip())
    if isinstance(value, (list, tuple)):
        return tuple(value)
    raise TypeError(f"alarmNames must be a list or comma-separated string, got {type(value).__name__}")


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _coerce(name: str, value: Any) -> Any:
    if name == "alarm_names":
        return _split_names(value)
    if name == "on_error":
        return ErrorPolicy.parse(value)
    if name == "json_logs":
        return _parse_bool(value)
    return value


def read_config_file(path: str) -> Dict[str, Any]:
    """Read a JSON config file and map its fields to CallConfig names."""
    config_file = Path(path)
    if not config_file.exists():
        raise ConfigurationError(f"Configuration file {path} not found")

    try:
        with open(config_file, 'r') as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {path}: {e}", original_error=e)

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a JSON object")

    values = {}
    for file_key, attr in _FILE_FIELDS.items():
        if file_key in raw:
            values[attr] = raw[file_key]

    unknown = set(raw) - set(_FILE_FIELDS)
    if unknown:
        logger.warning(f"Ignoring unknown config fields: {', '.join(sorted(unknown))}")
    return values


def read_environment(environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Collect configuration values from environment variables."""
    environ = os.environ if environ is None else environ
    values = {}

    region = (
        environ.get("AWS_REGION")
        or environ.get("REGION")
        or environ.get("AWS_DEFAULT_REGION")
    )
    if region:
        values["region"] = region

    for env_name, attr in (
        ("ALARM_NAMES", "alarm_names"),
        ("OBJECT_BUCKET", "bucket"),
        ("OBJECT_KEY", "key"),
        ("ON_ERROR", "on_error"),
        ("LOG_LEVEL", "log_level"),
        ("JSON_LOGS", "json_logs"),
    ):
        if environ.get(env_name):
            values[attr] = environ[env_name]
    return values


def load_config(
    path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
    base: Optional[CallConfig] = None,
    environ: Optional[Dict[str, str]] = None,
    fields: Optional[Iterable[str]] = None
) -> CallConfig:
    """
    Build and validate a CallConfig.

    Args:
        path: Optional JSON config file
        overrides: Explicit values; None entries are ignored
        base: Defaults to start from (per-flow placeholders)
        environ: Environment mapping (defaults to os.environ)
        fields: Fields the calling flow uses; only these are validated
            (ALARM_FIELDS, OBJECT_FIELDS; all fields when omitted)

    Returns:
        Validated CallConfig

    Raises:
        ConfigurationError: if the file cannot be read
        ConfigValidationError: if any value the flow uses is invalid
    """
    config = base or CallConfig()
    checked = set(fields) if fields is not None else set(ALARM_FIELDS + OBJECT_FIELDS)

    layers = []
    if path:
        layers.append(read_config_file(path))
    layers.append(read_environment(environ))
    layers.append({k: v for k, v in (overrides or {}).items() if v is not None})

    merged = {}
    for layer in layers:
        merged.update(layer)

    changes = {}
    coerce_errors = []
    for name, value in merged.items():
        try:
            changes[name] = _coerce(name, value)
        except (TypeError, ValueError) as e:
            if name in checked:
                coerce_errors.append(str(e))

    config = replace(config, **changes)

    _, errors, warnings = ConfigValidator(config, checked).validate_all()
    for warning in warnings:
        logger.warning(warning)
    errors = coerce_errors + errors
    if errors:
        raise ConfigValidationError(errors, path)
    return config
