# Copyright (c) 2026 Yusoku Advisor Godo Kaisha (ゆうそくアドバイザー合同会社)
# Released under the MIT license
# https://opensource.org/licenses/MIT

import json
import os

from initledger.core.history.manager import DEFAULT_HISTORY_FILENAME
from initledger.utils.path_helper import get_default_history_path


class HistoryConfig:
    """
    Configuration for the history ledger.
    Reads an optional JSON file; anything it leaves out falls back to defaults.
    """

    def __init__(self, config_path="initledger_config.json"):
        """
        Initialize HistoryConfig.

        Args:
            config_path (str): Path to the configuration file
        """
        self.config_path = config_path
        self.config = self.load_config()

    @staticmethod
    def default_config():
        return {
            "history_path": str(get_default_history_path()),
            "history_filename": DEFAULT_HISTORY_FILENAME,
            "log_path": None,
            "log_level": "INFO",
        }

    def load_config(self):
        """Load configuration from file, merged over the defaults."""
        config = self.default_config()
        if self.config_path and os.path.exists(self.config_path):
            with open(self.config_path, "r", encoding="utf-8") as f:
                loaded = json.load(f)
            if not isinstance(loaded, dict):
                raise ValueError(f"{self.config_path} must contain a JSON object")
            config.update(loaded)
        return config

    def save_config(self):
        """Save current configuration to file."""
        with open(self.config_path, "w", encoding="utf-8") as f:
            json.dump(self.config, f, indent=4, ensure_ascii=False)

    def get_history_path(self):
        """
        Get the root directory of instance history.

        Returns:
            str: Directory containing one sub-directory per instance
        """
        return self.config.get("history_path") or str(get_default_history_path())

    def set_history_path(self, history_path):
        self.config["history_path"] = str(history_path)

    def get_history_filename(self):
        """
        Get the name of the history file inside each instance directory.

        Returns:
            str: File name (e.g., "history.json")
        """
        return self.config.get("history_filename") or DEFAULT_HISTORY_FILENAME

    def set_history_filename(self, filename):
        self.config["history_filename"] = filename

    def get_log_path(self):
        """
        Get the debug log file path.

        Returns:
            str or None: None disables the debug log file
        """
        return self.config.get("log_path")

    def get_log_level(self):
        return str(self.config.get("log_level") or "INFO").upper()
