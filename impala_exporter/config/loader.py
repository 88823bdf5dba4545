"""Configuration loader with YAML parsing and environment variable overrides."""

import yaml
import os
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
from .models import ExporterConfig


# Environment variable -> ExporterConfig field
ENV_OVERRIDES = {
    "NODE_IP": "nodes",
    "IMPALA_PORT": "impala_port",
    "PORT": "exporter_port",
    "NUM_WORKERS": "num_workers",
    "SCRAPE_TIMEOUT": "request_timeout_s",
    "LOG_LEVEL": "log_level",
}


class ConfigLoader:
    """Load and validate exporter configuration."""

    @staticmethod
    def load_from_file(config_path: str) -> ExporterConfig:
        """
        Load configuration from YAML file with environment variable substitution.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            ExporterConfig: Validated configuration object

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If YAML parsing fails
            pydantic.ValidationError: If configuration validation fails
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_file, 'r') as f:
            raw_config = yaml.safe_load(f) or {}

        raw_config = ConfigLoader._substitute_env_vars(raw_config)

        # Accept both a bare mapping and one nested under "exporter"
        if isinstance(raw_config, dict) and "exporter" in raw_config:
            raw_config = raw_config["exporter"] or {}

        return ExporterConfig(**raw_config)

    @staticmethod
    def load_from_env(
        base: Optional[ExporterConfig] = None,
        environ: Optional[Mapping[str, str]] = None
    ) -> ExporterConfig:
        """
        Overlay environment variables onto a base configuration.

        Args:
            base: Configuration to start from (default: built-in defaults)
            environ: Environment mapping (default: os.environ)

        Returns:
            ExporterConfig: Validated configuration object

        Raises:
            pydantic.ValidationError: If an override has an invalid value
        """
        environ = os.environ if environ is None else environ
        values: Dict[str, Any] = base.model_dump() if base is not None else {}

        for env_name, field_name in ENV_OVERRIDES.items():
            value = environ.get(env_name)
            if value:
                values[field_name] = value

        return ExporterConfig(**values)

    @staticmethod
    def _substitute_env_vars(obj: Any) -> Any:
        """
        Recursively substitute ${ENV_VAR} placeholders with environment values.

        Args:
            obj: Object to process (str, dict, list, or primitive)

        Returns:
            Object with environment variables substituted
        """
        if isinstance(obj, str):
            pattern = r'\$\{(\w+)\}'
            return re.sub(pattern, lambda m: os.getenv(m.group(1), ''), obj)

        elif isinstance(obj, dict):
            return {k: ConfigLoader._substitute_env_vars(v) for k, v in obj.items()}

        elif isinstance(obj, list):
            return [ConfigLoader._substitute_env_vars(item) for item in obj]

        return obj
