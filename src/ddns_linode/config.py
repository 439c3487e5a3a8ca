"""
Configuration management for DDNS Linode.

This module handles loading and validating configuration from TOML files
and command-line arguments. Configuration priority (high to low):
1. Command-line arguments
2. Configuration file
3. Default values
"""

from __future__ import annotations

import argparse
import copy
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, ValidationError, field_validator

if TYPE_CHECKING:
    from typing import Any, Final


# Config files looked up when "--config" is not given, in order
DEFAULT_CONFIG_PATHS: Final[tuple[Path, ...]] = (Path("/etc/ddns_linode.toml"),)


class ConfigValidationError(Exception):
    """
    Exception raised when configuration loading or validation fails.

    Attributes
    ----------
    message : str
        Human-readable error message describing the failures.
    config_path : Path | None
        Path to the configuration file that failed validation.
    """

    def __init__(self, message: str, config_path: Path | None = None) -> None:
        """
        Initialize ConfigValidationError.

        Parameters
        ----------
        message : str
            Human-readable error message.
        config_path : Path | None, optional
            Path to the configuration file.
        """
        self.config_path = config_path
        super().__init__(message)


# Configuration models (Pydantic with type validation and coercion)


class StateConfig(BaseModel):
    """
    Local state configuration.

    Attributes
    ----------
    directory : str
        Writable directory holding the last IP file and the result journal.
    file_prefix : str
        File name prefix for "<prefix>.lastip" and "<prefix>.log".
    """

    directory: str = "/var/services/tmp"
    file_prefix: str = Field(default="ddns_linode", min_length=1)

    @property
    def directory_as_path(self) -> Path:
        """Get the state directory as a Path object."""
        return Path(self.directory)

    @property
    def last_ip_path(self) -> Path:
        """Get the path of the last known IP file."""
        return self.directory_as_path / f"{self.file_prefix}.lastip"

    @property
    def journal_path(self) -> Path:
        """Get the path of the result journal."""
        return self.directory_as_path / f"{self.file_prefix}.log"


class IPConfig(BaseModel):
    """
    IP detection configuration.

    The NAS passes the IP address it detected. Set `alternative_url` to a
    service that echoes the caller's IP (e.g., "http://ip.dnsexit.com/") to
    use that instead.

    Attributes
    ----------
    alternative_url : str | None
        URL of an IP echo service, or None to use the NAS-reported IP.
    """

    alternative_url: str | None = None

    @field_validator("alternative_url")
    @classmethod
    def empty_url_is_none(cls, value: str | None) -> str | None:
        """Treat an empty or blank URL as "not configured"."""
        if value is None or not value.strip():
            return None
        return value.strip()


class LinodeConfig(BaseModel):
    """
    Linode API configuration.

    Attributes
    ----------
    api_url : str
        Base endpoint of the Linode DNS API.
    ttl : int
        TTL of the DNS record in seconds. 300 = 5 mins, 3600 = 1 hr,
        7200 = 2 hrs, 14400 = 4 hrs, 28800 = 8 hrs, 86400 = 24 hrs.
    connect_timeout : float
        Connect timeout for every HTTP request, in seconds.
    timeout : float
        Overall timeout for every HTTP request, in seconds.
    """

    api_url: str = "https://api.linode.com/"
    ttl: int = Field(default=3600, ge=1, le=2592000)
    connect_timeout: float = Field(default=8.0, gt=0)
    timeout: float = Field(default=10.0, gt=0)


class LoggingConfig(BaseModel):
    """
    Diagnostic logging configuration.

    This is independent of the result journal kept in the state directory.

    Attributes
    ----------
    level : str
        Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    file_enabled : bool
        Whether to log to file.
    file_path : str
        Path to the log file.
    """

    level: str = "WARNING"
    file_enabled: bool = False
    file_path: str = "/var/log/ddns-linode.log"

    @property
    def file_path_as_path(self) -> Path:
        """
        Get the log file path as a Path object.

        Returns
        -------
        Path
            The resolved log file path.
        """
        return Path(self.file_path)


class Config(BaseModel):
    """
    Application configuration.

    Attributes
    ----------
    state : StateConfig
        Local state configuration.
    ip : IPConfig
        IP detection configuration.
    linode : LinodeConfig
        Linode API configuration.
    logging : LoggingConfig
        Logging configuration.
    """

    state: StateConfig = StateConfig()
    ip: IPConfig = IPConfig()
    linode: LinodeConfig = LinodeConfig()
    logging: LoggingConfig = LoggingConfig()


def _format_validation_errors(
    error: ValidationError,
    config_path: Path | None,
) -> str:
    """
    Format Pydantic validation errors into human-readable messages.

    Parameters
    ----------
    error : ValidationError
        Pydantic validation error.
    config_path : Path | None
        Path to the configuration file.

    Returns
    -------
    str
        Human-readable error message.
    """
    lines: list[str] = []

    if config_path:
        lines.append(f'Configuration error in "{config_path}":')
    else:
        lines.append("Configuration error:")

    for err in error.errors():
        # Build field path (e.g., "linode.ttl")
        field_path = ".".join(str(loc) for loc in err["loc"])

        error_input = err["input"]
        input_type = type(error_input).__name__
        value_repr = (
            f'"{error_input}"' if isinstance(error_input, str) else repr(error_input)
        )

        expected_type = _get_expected_type(err["type"])
        lines.append(
            f"  [{field_path}]: Expected {expected_type}, got {input_type} (value: {value_repr}). {err['msg']}.",
        )

    return "\n".join(lines)


def _get_expected_type(error_type: str) -> str:
    """
    Get human-readable expected type from Pydantic error type.

    Parameters
    ----------
    error_type : str
        Pydantic error type string.

    Returns
    -------
    str
        Human-readable type name.
    """
    type_mapping = {
        "int_type": "int",
        "int_parsing": "int",
        "float_type": "float",
        "float_parsing": "float",
        "bool_type": "bool",
        "bool_parsing": "bool",
        "string_type": "str",
        "greater_than": "positive number",
        "greater_than_equal": "larger number",
        "less_than_equal": "smaller number",
    }
    return type_mapping.get(error_type, error_type)


def load_config_from_file(config_path: Path) -> dict[str, Any]:
    """
    Load configuration from a TOML file.

    Parameters
    ----------
    config_path : Path
        Path to the configuration file.

    Returns
    -------
    dict[str, Any]
        Parsed configuration dictionary.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist.
    tomllib.TOMLDecodeError
        If the configuration file is not valid TOML.
    """
    with config_path.open("rb") as f:
        return tomllib.load(f)


def merge_config(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Recursively merge two configuration dictionaries.

    Parameters
    ----------
    base : dict[str, Any]
        Base configuration.
    override : dict[str, Any]
        Override configuration (takes precedence).

    Returns
    -------
    dict[str, Any]
        Merged configuration.
    """
    # Use deep copy to avoid modifying the original base configuration
    result = copy.deepcopy(base)

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_config(result[key], value)
        else:
            result[key] = value
    return result


def dict_to_config(
    data: dict[str, Any],
    config_path: Path | None = None,
) -> Config:
    """
    Validate a dictionary and convert it to a Config object.

    Parameters
    ----------
    data : dict[str, Any]
        Configuration dictionary.
    config_path : Path | None, optional
        Path to the configuration file (for error messages).

    Returns
    -------
    Config
        Configuration object.

    Raises
    ------
    ConfigValidationError
        If validation fails.
    """
    data = copy.deepcopy(data)

    # Handle path expansion before Pydantic validation
    for section, key in (("state", "directory"), ("logging", "file_path")):
        section_data = data.get(section)
        if isinstance(section_data, dict) and isinstance(section_data.get(key), str):
            section_data[key] = str(Path(section_data[key]).expanduser())

    try:
        return Config.model_validate(data)
    except ValidationError as e:
        msg = _format_validation_errors(e, config_path)
        raise ConfigValidationError(msg, config_path) from e


def build_parser() -> argparse.ArgumentParser:
    """
    Build the command-line argument parser.

    Returns
    -------
    argparse.ArgumentParser
        The parser.
    """
    parser = argparse.ArgumentParser(
        prog="ddns-linode",
        description="Synology DDNS provider script updating a Linode DNS record",
    )

    parser.add_argument(
        "invocation",
        nargs="?",
        default="",
        help='Arguments from the NAS as one string: "<domain> <api-key> <subdomain> <ip>"',
    )

    # Config arguments
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: /etc/ddns_linode.toml)",
    )

    # State arguments
    parser.add_argument(
        "--temp-dir",
        type=Path,
        dest="temp_dir",
        default=None,
        help="Writable directory for the last IP file and the result log",
    )

    # IP arguments
    parser.add_argument(
        "--ip-url",
        type=str,
        dest="ip_url",
        default=None,
        help="URL of an IP echo service to use instead of the NAS-reported IP",
    )

    # Linode arguments
    parser.add_argument(
        "--ttl",
        type=int,
        default=None,
        help="TTL of the DNS record in seconds",
    )

    # Logging arguments
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Log level",
    )
    parser.add_argument(
        "--log-file-path",
        type=Path,
        dest="log_file_path",
        default=None,
        help="Enable diagnostic logging to this file",
    )

    return parser


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Parameters
    ----------
    args : list[str] | None, optional
        Command-line arguments. If None, uses sys.argv.

    Returns
    -------
    argparse.Namespace
        Parsed arguments.
    """
    return build_parser().parse_args(args)


def _find_config_path(explicit: Path | None) -> Path | None:
    """
    Determine which configuration file to load.

    Parameters
    ----------
    explicit : Path | None
        Path given with "--config".

    Returns
    -------
    Path | None
        The file to load, or None to use defaults only.

    Raises
    ------
    ConfigValidationError
        If an explicitly given file does not exist.
    """
    if explicit is not None:
        config_path = explicit.expanduser()
        if not config_path.exists():
            msg = f'Configuration file not found: "{config_path}".'
            raise ConfigValidationError(msg, config_path)
        return config_path

    for candidate in DEFAULT_CONFIG_PATHS:
        if candidate.exists():
            return candidate
    return None


def load_config(args: argparse.Namespace | None = None) -> Config:
    """
    Load configuration from file and command-line arguments.

    Priority (high to low):
    1. Command-line arguments
    2. Configuration file
    3. Default values

    Parameters
    ----------
    args : argparse.Namespace | None, optional
        Parsed command-line arguments.

    Returns
    -------
    Config
        Loaded configuration.

    Raises
    ------
    ConfigValidationError
        If the configuration file is missing, unparsable or invalid.
    """
    if args is None:
        args = parse_args()

    config_dict: dict[str, Any] = {}

    config_path = _find_config_path(args.config)
    if config_path is not None:
        try:
            config_dict = load_config_from_file(config_path)
        except (OSError, tomllib.TOMLDecodeError) as e:
            msg = f'Failed to read configuration file "{config_path}": {e}'
            raise ConfigValidationError(msg, config_path) from e

    # Apply command-line overrides
    cli_overrides: dict[str, Any] = {}

    if args.temp_dir is not None:
        cli_overrides.setdefault("state", {})["directory"] = str(args.temp_dir)
    if args.ip_url is not None:
        cli_overrides.setdefault("ip", {})["alternative_url"] = args.ip_url
    if args.ttl is not None:
        cli_overrides.setdefault("linode", {})["ttl"] = args.ttl
    if args.log_level is not None:
        cli_overrides.setdefault("logging", {})["level"] = args.log_level
    if args.log_file_path is not None:
        cli_overrides.setdefault("logging", {})["file_enabled"] = True
        cli_overrides.setdefault("logging", {})["file_path"] = str(args.log_file_path)

    if cli_overrides:
        config_dict = merge_config(config_dict, cli_overrides)

    return dict_to_config(config_dict, config_path)
