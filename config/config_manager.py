import os
import sys
from dataclasses import asdict, fields
from pathlib import Path

import yaml

from core.exceptions import ConfigurationError
from logs.run_log import log_console
from models.models import Settings
from pods.launcher import LAUNCH_MODES
from pods.ports import is_valid_port


class ConfigManager:
    ENV_VAR = "KUBEFORWARD_CONFIG"

    @staticmethod
    def get_config_path() -> Path:
        if ConfigManager.ENV_VAR in os.environ:
            return Path(os.environ[ConfigManager.ENV_VAR]) / "config.yml"

        if getattr(sys, 'frozen', False) and hasattr(sys, '_MEIPASS'):
            if sys.platform == "win32":
                config_dir = Path.home() / "AppData" / "Local" / "kubeforward"
            elif sys.platform == "darwin":
                config_dir = Path.home() / "Library" / "Application Support" / "kubeforward"
            else:
                config_dir = Path.home() / ".config" / "kubeforward"
            return config_dir / "config.yml"
        else:
            return Path(__file__).parent / "config.yml"

    @staticmethod
    def validate(settings: Settings) -> Settings:
        if not settings.kubectl:
            raise ConfigurationError("kubectl must not be empty")
        if not is_valid_port(settings.base_local_port):
            raise ConfigurationError(f"Invalid base_local_port: {settings.base_local_port}")
        settings.base_local_port = int(float(settings.base_local_port))
        settings.default_service_port = str(settings.default_service_port)
        if not is_valid_port(settings.default_service_port):
            raise ConfigurationError(f"Invalid default_service_port: {settings.default_service_port}")
        try:
            settings.command_timeout = float(settings.command_timeout)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Invalid command_timeout: {settings.command_timeout}")
        if settings.command_timeout <= 0:
            raise ConfigurationError("command_timeout must be positive")
        if settings.launch_mode not in LAUNCH_MODES:
            raise ConfigurationError(
                f"Invalid launch_mode '{settings.launch_mode}' (expected one of {', '.join(LAUNCH_MODES)})"
            )
        return settings

    @staticmethod
    def from_dict(config_data: dict) -> Settings:
        known = {f.name for f in fields(Settings)}
        unknown = sorted(set(config_data) - known)
        if unknown:
            log_console(f"⚠️  Ignoring unknown config keys: {', '.join(unknown)}")
        values = {k: v for k, v in config_data.items() if k in known and v is not None}
        return ConfigManager.validate(Settings(**values))

    @staticmethod
    def read_config(config_file: Path = None) -> Settings:
        config_file = config_file or ConfigManager.get_config_path()

        if not config_file.exists():
            return Settings()

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                content = f.read().strip()
        except OSError as e:
            raise ConfigurationError(f"Error reading config file {config_file}: {e}") from e

        if not content:
            log_console(f"⚠️  Config file {config_file} is empty, using defaults.")
            return Settings()

        try:
            config_data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Config file {config_file} is not valid YAML: {e}") from e

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Config file {config_file} has invalid format.")

        settings = ConfigManager.from_dict(config_data)
        log_console(f"✅ Loaded configuration from {config_file}")
        return settings

    @staticmethod
    def save_config(settings: Settings, config_file: Path = None) -> Path:
        config_file = config_file or ConfigManager.get_config_path()
        try:
            config_file.parent.mkdir(parents=True, exist_ok=True)
            with open(config_file, 'w', encoding='utf-8') as f:
                yaml.dump(asdict(settings), f, default_flow_style=False, sort_keys=False, allow_unicode=True)
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration: {e}") from e
        log_console(f"💾 Configuration saved to {config_file}")
        return config_file

    @staticmethod
    def get_config_info():
        config_path = ConfigManager.get_config_path()
        is_frozen = getattr(sys, 'frozen', False)

        info = {
            'is_frozen': is_frozen,
            'config_path': str(config_path),
            'config_exists': config_path.exists(),
            'platform': sys.platform
        }

        if is_frozen:
            info['meipass'] = getattr(sys, '_MEIPASS', 'Not available')

        return info
