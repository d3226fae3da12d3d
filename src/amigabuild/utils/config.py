import copy
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict

DEFAULT_CONFIG: Dict[str, Any] = {
    "vasm": {
        "enabled": True,
        "file": "vasmm68k_mot",
        "options": ["-m68000", "-Fhunk"],
    },
    "vlink": {
        "enabled": True,
        "file": "vlink",
        "includes": "**/*.s",
        "excludes": "",
        "exefilename": "a.out",
        "options": ["-bamigahunk", "-Bstatic"],
    },
    "build_dir": "build",
    "log_file": os.path.join(tempfile.gettempdir(), "amigabuild.log"),
}


class ConfigManager:
    """
    Reads ~/.amigabuild/config.json on top of DEFAULT_CONFIG.
    Tool sections (vasm, vlink) are merged key by key so a user file
    can override a single option.
    """
    def __init__(self):
        self.config_dir = Path.home() / ".amigabuild"
        self.config_file = self.config_dir / "config.json"
        self.config = self.load_config()

    def load_config(self) -> Dict[str, Any]:
        self.config_dir.mkdir(parents=True, exist_ok=True)
        config = copy.deepcopy(DEFAULT_CONFIG)
        if not self.config_file.exists():
            return config

        try:
            with open(self.config_file, "r") as f:
                user_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            print(f"Warning: Ignoring unreadable config {self.config_file}: {e}")
            return config

        if not isinstance(user_config, dict):
            return config

        for key, value in user_config.items():
            if isinstance(config.get(key), dict) and isinstance(value, dict):
                config[key].update(value)
            else:
                config[key] = value
        return config

    def save_config(self):
        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w") as f:
            json.dump(self.config, f, indent=4)

    def get(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)

    def set(self, key: str, value: Any):
        self.config[key] = value
        self.save_config()
