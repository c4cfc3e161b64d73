from .loader import default_config, load_config, setup_logging

__all__ = ['default_config', 'load_config', 'setup_logging']
