import configparser
import os
from typing import Dict, Any
import logging

from ..errors import ConfigError
from ..parsers.bracket_parser import ERROR_POLICIES

DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def load_config(path: str) -> Dict[str, Any]:
    """
    Load logsift configuration from INI file.

    Args:
        path: Path to configuration file

    Returns:
        Configuration dictionary
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")

    config = configparser.ConfigParser()
    try:
        config.read(path, encoding='utf-8')
        cfg_dict = {section: dict(config[section]) for section in config.sections()}
    except configparser.Error as e:
        raise ConfigError(f"Malformed config file {path}: {e}") from e

    # Process and validate configuration
    cfg_dict = _process_config(cfg_dict)

    return cfg_dict


def default_config() -> Dict[str, Any]:
    """Configuration used when no file is given."""
    return _process_config({})


def _get_bool(section: Dict[str, str], key: str, default: str) -> bool:
    return section.get(key, default).strip().lower() in ('true', '1', 'yes', 'on')


def _get_int(section: Dict[str, str], key: str, default: str, name: str) -> int:
    raw = section.get(key, default)
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{name}.{key} must be an integer, got {raw!r}")
    if value <= 0:
        raise ConfigError(f"{name}.{key} must be positive, got {value}")
    return value


def _optional(section: Dict[str, str], key: str):
    value = section.get(key)
    return value.strip() if value and value.strip() else None


def _process_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Process and validate configuration values.

    Args:
        config: Raw configuration dictionary

    Returns:
        Processed configuration
    """
    processed = {}

    analyzer = config.get('analyzer', {})
    on_error = analyzer.get('on_error', 'strict').strip().lower()
    if on_error not in ERROR_POLICIES:
        raise ConfigError(f"analyzer.on_error must be one of {', '.join(ERROR_POLICIES)}, got {on_error!r}")
    processed['analyzer'] = {
        'recent_window_minutes': _get_int(analyzer, 'recent_window_minutes', '60', 'analyzer'),
        'on_error': on_error
    }

    if 'input.file' in config:
        processed['input'] = {
            'path': _optional(config['input.file'], 'path')
        }
    else:
        processed['input'] = {'path': None}

    export = config.get('export', {})
    processed['export'] = {
        'rules': _optional(export, 'rules'),
        'level': _optional(export, 'level') or 'ERROR'
    }

    output_file = config.get('output.file', {})
    processed['output_file'] = {
        'enabled': _get_bool(output_file, 'enabled', 'false'),
        'path': _optional(output_file, 'path') or 'errors-only.log'
    }

    output_http = config.get('output.http', {})
    processed['output_http'] = {
        'enabled': _get_bool(output_http, 'enabled', 'false'),
        'url': _optional(output_http, 'url'),
        'batch_size': _get_int(output_http, 'batch_size', '500', 'output.http'),
        'timeout': _get_int(output_http, 'timeout', '30', 'output.http'),
        'verify_ssl': _get_bool(output_http, 'verify_ssl', 'true'),
        'username': _optional(output_http, 'username'),
        'password': _optional(output_http, 'password'),
        'token': _optional(output_http, 'token')
    }
    if processed['output_http']['enabled'] and not processed['output_http']['url']:
        raise ConfigError("output.http is enabled but no url is set")

    # Add logging configuration
    if 'logging' in config:
        processed['logging'] = {
            'level': config['logging'].get('level', 'INFO'),
            'format': config['logging'].get('format', DEFAULT_LOG_FORMAT),
            'file': _optional(config['logging'], 'file')
        }
    else:
        processed['logging'] = {
            'level': 'INFO',
            'format': DEFAULT_LOG_FORMAT
        }

    return processed


def setup_logging(config: Dict[str, Any]):
    """
    Setup logging based on configuration.

    Args:
        config: Configuration dictionary
    """
    logging_config = config.get('logging', {})

    level = getattr(logging, logging_config.get('level', 'INFO').upper(), None)
    if not isinstance(level, int):
        raise ConfigError(f"Unknown logging level: {logging_config.get('level')}")
    format_str = logging_config.get('format', DEFAULT_LOG_FORMAT)

    logging.basicConfig(
        level=level,
        format=format_str,
        filename=logging_config.get('file')
    )

    # Set specific logger levels
    logging.getLogger('requests').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
