import os
import re
import copy
import yaml
import logging
from typing import Dict, Any, Optional

from apigen.errors import ConfigError, SelectorSyntaxError
from apigen.htmlutil import compile_selector

logger = logging.getLogger('apigen')

DEFAULT_CONFIG: Dict[str, Any] = {
    'source': {
        'url': 'https://core.telegram.org/bots/api',
        'timeout': None,
        'retry_attempts': 0,
        'user_agent': 'apigen/0.1',
    },
    'parser': {
        'body_selector': 'body',
        'heading_selector': 'h4',
        'anchor_selector': None,
    },
    'output': {
        'dir': 'generated',
        'models_json': 'models.json',
        'methods_json': 'methods.json',
        'models_module': 'models.py',
        'methods_module': 'methods.py',
        'client_class': 'Bot',
    },
}

OUTPUT_FILES = ('models_json', 'methods_json', 'models_module', 'methods_module')


class ConfigManager:
    """Configuration management with environment variable substitution and validation."""

    def __init__(self, config_path: Optional[str] = "config.yaml"):
        """
        Initialize the configuration manager.

        Args:
            config_path (str): Path to the YAML configuration file, None for defaults
        """
        self.config_path = config_path
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """
        Load and process the configuration file.

        Returns:
            dict: Defaults merged with the processed file contents

        Raises:
            ConfigError: If the file cannot be parsed or fails validation
        """
        config = copy.deepcopy(DEFAULT_CONFIG)

        if not self.config_path:
            return config

        if not os.path.exists(self.config_path):
            logger.warning(f"Configuration file not found: {self.config_path}, using defaults")
            return config

        try:
            with open(self.config_path, 'r') as file:
                loaded = yaml.safe_load(file) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to load configuration {self.config_path}: {e}") from e

        if not isinstance(loaded, dict):
            raise ConfigError("Configuration must be a dictionary")

        # Process environment variables
        loaded = self._substitute_env_vars(loaded)
        config = self._merge(config, loaded)

        # Validate the configuration
        self._validate_config(config)
        return config

    def _merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge `override` into `base`."""
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict):
                base[key] = self._merge(base[key], value)
            else:
                base[key] = value
        return base

    def _substitute_env_vars(self, config: Any) -> Any:
        """
        Recursively substitute environment variables in the configuration.

        Args:
            config: Configuration object (dict, list, or scalar)

        Returns:
            Configuration with environment variables substituted
        """
        if isinstance(config, dict):
            return {k: self._substitute_env_vars(v) for k, v in config.items()}
        elif isinstance(config, list):
            return [self._substitute_env_vars(item) for item in config]
        elif isinstance(config, str):
            # Replace ${VAR} or $VAR with environment variable
            pattern = r'\${([^}]+)}|\$([a-zA-Z0-9_]+)'

            def replace_env_var(match):
                var_name = match.group(1) or match.group(2)
                return os.environ.get(var_name, f"${var_name}")

            return re.sub(pattern, replace_env_var, config)
        else:
            return config

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """
        Validate the configuration structure.

        Args:
            config (dict): Configuration to validate

        Raises:
            ConfigError: If configuration is invalid
        """
        for section in DEFAULT_CONFIG:
            if not isinstance(config.get(section), dict):
                raise ConfigError(f"'{section}' must be a dictionary")

        source = config['source']
        if not isinstance(source.get('url'), str) or not source['url']:
            raise ConfigError("'source.url' must be a non-empty string")

        timeout = source.get('timeout')
        if timeout is not None and (not isinstance(timeout, (int, float)) or timeout <= 0):
            raise ConfigError("'source.timeout' must be a positive number or null")

        retries = source.get('retry_attempts')
        if not isinstance(retries, int) or retries < 0:
            raise ConfigError("'source.retry_attempts' must be a non-negative integer")

        parser = config['parser']
        for key in ('body_selector', 'heading_selector', 'anchor_selector'):
            selector = parser.get(key)
            if selector is None and key == 'anchor_selector':
                continue
            if not isinstance(selector, str) or not selector:
                raise ConfigError(f"'parser.{key}' must be a non-empty string")
            try:
                compile_selector(selector)
            except SelectorSyntaxError as e:
                raise ConfigError(f"'parser.{key}': {e}") from e

        output = config['output']
        for key in OUTPUT_FILES + ('dir', 'client_class'):
            if not isinstance(output.get(key), str) or not output[key]:
                raise ConfigError(f"'output.{key}' must be a non-empty string")

        if not output['models_module'].endswith('.py') or not output['methods_module'].endswith('.py'):
            raise ConfigError("'output.models_module' and 'output.methods_module' must be .py files")

        if not output['client_class'].isidentifier():
            raise ConfigError(f"'output.client_class' is not a valid class name: {output['client_class']}")

    def get_config(self) -> Dict[str, Any]:
        """
        Get the processed configuration.

        Returns:
            dict: The configuration
        """
        return self.config

    def get_section(self, name: str) -> Dict[str, Any]:
        """
        Get one configuration section.

        Args:
            name (str): Section name (source, parser or output)

        Returns:
            dict: The section, empty if unknown
        """
        return self.config.get(name, {})

    def output_filenames(self) -> Dict[str, str]:
        """Artifact key to file name."""
        output = self.get_section('output')
        return {key: output[key] for key in OUTPUT_FILES}
