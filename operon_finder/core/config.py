#!/usr/bin/env python3

"""
Configuration management for the operon finder pipeline.

Centralized configuration with support for file-based configuration
and environment variable overrides.
"""

import os
import json
from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any

import yaml

from .exceptions import ConfigurationError


@dataclass
class PipelineConfig:
    """Centralized configuration for the operon finder pipeline."""

    # Biological parameters
    threshold: float = 1.0  # coverage multiplier

    # Performance settings
    memory_limit_mb: int = 4096
    enable_memory_monitoring: bool = True

    # Output settings
    write_annotation_files: bool = True
    generate_reports: bool = True

    # Advanced settings
    debug_mode: bool = False

    @classmethod
    def from_file(cls, config_path: str) -> 'PipelineConfig':
        """Load configuration from file (JSON or YAML)."""
        return cls.from_dict(read_config_file(config_path))

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'PipelineConfig':
        """Create configuration from dictionary."""
        try:
            return cls(**known_settings(config_dict))
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration parameters: {e}")

    @classmethod
    def from_env(cls) -> 'PipelineConfig':
        """Load configuration from environment variables."""
        config = cls()

        def as_bool(value: str) -> bool:
            return value.lower() in ('true', '1', 'yes')

        env_mappings = {
            'OPERON_THRESHOLD': ('threshold', float),
            'OPERON_MEMORY_LIMIT_MB': ('memory_limit_mb', int),
            'OPERON_MEMORY_MONITORING': ('enable_memory_monitoring', as_bool),
            'OPERON_WRITE_ANNOTATION_FILES': ('write_annotation_files', as_bool),
            'OPERON_GENERATE_REPORTS': ('generate_reports', as_bool),
            'OPERON_DEBUG_MODE': ('debug_mode', as_bool),
        }

        for env_var, (field_name, converter) in env_mappings.items():
            env_value = os.getenv(env_var)
            if env_value:
                try:
                    setattr(config, field_name, converter(env_value))
                except (ValueError, TypeError) as e:
                    raise ConfigurationError(f"Invalid environment variable {env_var}: {e}")

        config.validate()
        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    def save_to_file(self, config_path: str) -> None:
        """Save configuration to file."""
        config_dict = self.to_dict()

        try:
            with open(config_path, 'w') as f:
                if config_path.lower().endswith(('.yaml', '.yml')):
                    yaml.safe_dump(config_dict, f, default_flow_style=False)
                else:
                    json.dump(config_dict, f, indent=2)
        except OSError as e:
            raise ConfigurationError(f"Error saving configuration: {e}")

    def validate(self) -> None:
        """Validate configuration parameters."""
        if isinstance(self.threshold, bool) or not isinstance(self.threshold, (int, float)):
            raise ConfigurationError("threshold must be a number")

        if self.threshold <= 0:
            raise ConfigurationError("threshold must be > 0")

        if self.memory_limit_mb < 100:
            raise ConfigurationError("memory_limit_mb must be >= 100")

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.validate()


def read_config_file(config_path: str) -> Dict[str, Any]:
    """Read the raw settings mapping from a JSON or YAML file."""
    if not os.path.exists(config_path):
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, 'r') as f:
            if config_path.lower().endswith(('.yaml', '.yml')):
                config_data = yaml.safe_load(f)
            else:
                config_data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON configuration file format: {e}")
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML configuration file format: {e}")
    except OSError as e:
        raise ConfigurationError(f"Error loading configuration: {e}")

    if not isinstance(config_data, dict):
        raise ConfigurationError(f"Configuration file must contain a mapping: {config_path}")

    return config_data


def known_settings(config_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys that are not configuration fields."""
    known_keys = set(PipelineConfig.__dataclass_fields__.keys())
    return {k: v for k, v in config_dict.items() if k in known_keys}


def load_config(config_path: Optional[str] = None,
                use_env: bool = True) -> PipelineConfig:
    """
    Load configuration with priority: file > environment > defaults.

    Only the keys a configuration file actually sets override the
    environment; everything else keeps its environment or default value.

    Args:
        config_path: Path to configuration file (optional)
        use_env: Whether to load environment variables

    Returns:
        PipelineConfig: Loaded configuration
    """
    config = PipelineConfig.from_env() if use_env else PipelineConfig()

    if config_path:
        file_settings = known_settings(read_config_file(config_path))
        # Reject malformed values before merging
        PipelineConfig.from_dict(file_settings)
        for field_name, value in file_settings.items():
            setattr(config, field_name, value)

    config.validate()
    return config
