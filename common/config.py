"""Configuration management for the FlareDrive transfer client."""

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional


class Config:
    """Manages client configuration stored in a JSON file."""

    DEFAULT_CONFIG = {
        "server_url": os.environ.get("FLAREDRIVE_URL", "http://localhost:8787"),
        "timeout": None,
        "remote_directory": "",
    }

    def __init__(self, config_path: Path):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (typically ~/.flaredrive/config.json)
        """
        self.config_path = config_path
        self.data = self._load()

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        A file that cannot be parsed is copied to config.json.bak and defaults are used.
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            self.config_path = Path(tempfile.gettempdir()) / '.flaredrive' / 'config.json'
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = json.load(f)
                config = self.DEFAULT_CONFIG.copy()
                config.update(data)
                return config
            except (json.JSONDecodeError, IOError):
                backup_path = self.config_path.with_suffix('.json.bak')
                try:
                    shutil.copy(self.config_path, backup_path)
                except OSError:
                    pass
                return self.DEFAULT_CONFIG.copy()

        config = self.DEFAULT_CONFIG.copy()
        try:
            with open(self.config_path, 'w') as f:
                json.dump(config, f, indent=2)
        except IOError:
            pass
        return config

    def save(self) -> None:
        """Save current configuration to file."""
        try:
            with open(self.config_path, 'w') as f:
                json.dump(self.data, f, indent=2)
        except IOError:
            pass

    def get_base_url(self) -> str:
        """
        Get the write API server base URL.

        Returns:
            Base URL without trailing slash (e.g., "http://localhost:8787")
        """
        return str(self.data.get('server_url') or self.DEFAULT_CONFIG['server_url']).rstrip('/')

    def get_timeout(self) -> Optional[float]:
        """
        Get network timeout in seconds.

        Returns:
            Timeout value, or None for no timeout (the default)
        """
        return self.data.get('timeout')

    def get_remote_directory(self) -> str:
        """
        Get the remote directory uploads go to.

        Returns:
            Directory key ending with '/', or '' for the bucket root
        """
        directory = self.data.get('remote_directory') or ''
        if directory and not directory.endswith('/'):
            directory += '/'
        return directory

    def set_remote_directory(self, directory: str) -> None:
        """Set remote directory and save to file."""
        directory = directory.strip().lstrip('/')
        if directory and not directory.endswith('/'):
            directory += '/'
        self.data['remote_directory'] = directory
        self.save()
