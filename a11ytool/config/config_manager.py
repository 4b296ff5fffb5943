import os
import json
import click
from typing import Dict, Any

class ConfigManager:
    """
    Persistent CLI defaults for a11ytool, stored as JSON in the user's config directory.
    """
    DEFAULT_CONFIG = {
        'domain': None,              # Domain the license is registered against
        'storage_backend': 'file',   # Where decisions are cached: 'file' or 'memory'
        'log_path': None,            # Log file path (None logs to stderr)
        'color': True,               # Enable colored output
    }

    @classmethod
    def _get_config_path(cls) -> str:
        """
        Get the path to the configuration file.
        Supports cross-platform config storage.
        """
        config_dir = os.path.expanduser('~/.config/a11ytool')
        os.makedirs(config_dir, exist_ok=True)
        return os.path.join(config_dir, 'config.json')

    @classmethod
    def load_config(cls) -> Dict[str, Any]:
        """
        Load configuration from file, merging with defaults.
        """
        config_path = cls._get_config_path()
        try:
            with open(config_path, 'r') as f:
                saved_config = json.load(f)
                return {**cls.DEFAULT_CONFIG, **saved_config}
        except (FileNotFoundError, json.JSONDecodeError):
            return cls.DEFAULT_CONFIG.copy()

    @classmethod
    def save_config(cls, config: Dict[str, Any]):
        config_path = cls._get_config_path()
        # Only keys that differ from the defaults are written
        clean_config = {
            k: v for k, v in config.items()
            if v is not None and v != cls.DEFAULT_CONFIG.get(k)
        }

        with open(config_path, 'w') as f:
            json.dump(clean_config, f, indent=4)

    @classmethod
    def reset_config(cls):
        config_path = cls._get_config_path()
        try:
            os.remove(config_path)
        except FileNotFoundError:
            pass

    @classmethod
    def update_config(cls, updates: Dict[str, Any]):
        current_config = cls.load_config()
        current_config.update({k: v for k, v in updates.items() if v is not None})
        cls.save_config(current_config)

def config_command(action, key=None, value=None):
    """
    Handle configuration management CLI actions.
    """
    if action == 'view':
        config = ConfigManager.load_config()
        for k, v in config.items():
            click.echo(f"{k}: {v}")

    elif action == 'reset':
        ConfigManager.reset_config()
        click.echo("Configuration reset to default.")

    elif action == 'set':
        if not key or value is None:
            click.echo("Error: Both key and value are required.")
            return

        if key not in ConfigManager.DEFAULT_CONFIG:
            click.echo(f"Unknown configuration key: {key}")
            return

        if key == 'color':
            value = value.lower() in ['true', '1', 'yes']
        elif key == 'storage_backend' and value not in ['file', 'memory']:
            click.echo(f"Invalid value for {key}.")
            return

        ConfigManager.update_config({key: value})
        click.echo(f"Set {key} to {value}")
