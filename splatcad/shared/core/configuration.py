"""
Configuration Management System for splatcad

Centralized configuration with a 4-tier precedence hierarchy:
environment → project → user → system defaults.
"""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class ValidationLevel(Enum):
    """Configuration validation strictness levels"""
    STRICT = "strict"      # Fail fast on validation errors
    LENIENT = "lenient"    # Log warnings, use defaults


class LocalProviderConfig(BaseModel):
    """Local data provider settings"""
    model_config = ConfigDict(extra='forbid')

    inventory_path: Optional[str] = Field(default=None, description="JSON inventory written by the local subsystem")
    command: Optional[List[str]] = Field(default=None, description="Helper command printing the inventory as JSON")
    refresh_on_start: bool = Field(default=True, description="Refresh local files when the store starts")


class CloudConfig(BaseModel):
    """Cloud metadata settings"""
    model_config = ConfigDict(extra='forbid')

    snapshot_path: Optional[str] = Field(default=None, description="Exported cloud metadata snapshot")


class LoggingConfig(BaseModel):
    """Logging settings"""
    model_config = ConfigDict(extra='forbid')

    level: str = Field(default="DEBUG", description="File log level")
    console_level: str = Field(default="WARNING", description="Console log level")
    log_file: Optional[str] = Field(default="data/logs/splatcad.log", description="Rotating log file, None disables")
    max_bytes: int = Field(default=10 * 1024 * 1024, ge=1024)
    backup_count: int = Field(default=5, ge=0, le=50)


class SystemConfig(BaseModel):
    """Complete system configuration"""
    model_config = ConfigDict(extra='forbid')

    local_provider: LocalProviderConfig = Field(default_factory=LocalProviderConfig)
    cloud: CloudConfig = Field(default_factory=CloudConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    # Metadata
    schema_version: int = Field(default=1, description="Configuration schema version")


# env var -> (section, key)
ENV_OVERRIDES: Dict[str, tuple] = {
    'SPLATCAD_INVENTORY_PATH': ('local_provider', 'inventory_path'),
    'SPLATCAD_PROVIDER_COMMAND': ('local_provider', 'command'),
    'SPLATCAD_REFRESH_ON_START': ('local_provider', 'refresh_on_start'),
    'SPLATCAD_CLOUD_SNAPSHOT': ('cloud', 'snapshot_path'),
    'LOG_LEVEL': ('logging', 'level'),
    'SPLATCAD_LOG_FILE': ('logging', 'log_file'),
}


class ConfigManager:
    """Centralized configuration manager with 4-tier precedence hierarchy"""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = config_dir or Path.cwd() / "config"
        self._system_config: Optional[SystemConfig] = None
        self._user_config: Optional[Dict[str, Any]] = None
        self._project_config: Optional[Dict[str, Any]] = None

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """Load YAML configuration file"""
        if not file_path.exists():
            return {}

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.warning(f"Failed to load {file_path}: {e}")
            return {}

    def _save_yaml_file(self, file_path: Path, data: Dict[str, Any]) -> bool:
        """Save configuration to YAML file"""
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, 'w', encoding='utf-8') as f:
                yaml.dump(data, f, default_flow_style=False, sort_keys=False, indent=2)
            return True
        except OSError as e:
            logger.error(f"Failed to save {file_path}: {e}")
            return False

    def _load_system_defaults(self) -> SystemConfig:
        """Load system default configuration"""
        if self._system_config is None:
            defaults_dict = self._load_yaml_file(self.config_dir / "defaults.yaml")
            try:
                self._system_config = SystemConfig(**defaults_dict)
            except ValidationError as e:
                logger.warning(f"System defaults validation failed: {e}")
                self._system_config = SystemConfig()

        return self._system_config

    def _load_user_config(self) -> Dict[str, Any]:
        """Load user-level configuration"""
        if self._user_config is None:
            self._user_config = self._load_yaml_file(self.config_dir / "user.yaml")
        return self._user_config

    def _load_project_config(self) -> Dict[str, Any]:
        """Load project-specific configuration"""
        if self._project_config is None:
            self._project_config = self._load_yaml_file(self.config_dir / "project.yaml")
        return self._project_config

    def _merge_configs(self) -> Dict[str, Any]:
        """Merge configurations with precedence: env → project → user → system"""
        merged = self._load_system_defaults().model_dump()
        self._deep_merge(merged, self._load_user_config())
        self._deep_merge(merged, self._load_project_config())
        self._deep_merge(merged, self._get_env_overrides())
        return merged

    def _deep_merge(self, base: Dict[str, Any], updates: Dict[str, Any]) -> None:
        """Deep merge configuration dictionaries"""
        for key, value in updates.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def _get_env_overrides(self) -> Dict[str, Any]:
        """Extract configuration overrides from environment variables"""
        overrides: Dict[str, Any] = {}
        for env_key, (section, config_key) in ENV_OVERRIDES.items():
            value = os.getenv(env_key)
            if value is None:
                continue

            if config_key == 'refresh_on_start':
                converted: Any = value.lower() in ('true', '1', 'yes', 'on')
            elif config_key == 'command':
                converted = value.split()
            elif config_key == 'level':
                converted = value.upper()
            else:
                converted = value
            overrides.setdefault(section, {})[config_key] = converted

        return overrides

    def get_config(self, validation_level: ValidationLevel = ValidationLevel.STRICT) -> SystemConfig:
        """Get merged configuration with validation"""
        merged_config = self._merge_configs()

        try:
            return SystemConfig(**merged_config)
        except ValidationError as e:
            if validation_level == ValidationLevel.STRICT:
                raise ValueError(f"Configuration validation failed: {e}") from e
            logger.warning(f"Configuration validation failed, using defaults: {e}")
            return SystemConfig()

    def save_project_config(self, config_updates: Dict[str, Any]) -> bool:
        """Save project-specific configuration updates"""
        project_path = self.config_dir / "project.yaml"

        existing_config = self._load_yaml_file(project_path)
        self._deep_merge(existing_config, config_updates)

        success = self._save_yaml_file(project_path, existing_config)
        if success:
            # Clear cached project config to force reload
            self._project_config = None

        return success

    def reload_config(self) -> None:
        """Clear cached configurations and reload from files"""
        self._system_config = None
        self._user_config = None
        self._project_config = None
