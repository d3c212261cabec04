from __future__ import annotations
from dataclasses import dataclass, field
from typing import List
import yaml
from pathlib import Path

from .utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class LoaderConfig:
    """Graph JSON loader configuration."""
    # Identifier extensions that are worth parsing as JSON (case-insensitive)
    extensions: List[str] = field(default_factory=lambda: ["json"])

    # Ranked format order; the first format that claims a document wins
    formats: List[str] = field(default_factory=lambda: ["cdsmodel", "customjson"])

    # Element type assumed for embedded weights without a dtype
    default_dtype: str = "float32"

    # Weight arguments are hidden unless asked for
    weights_visible: bool = False

    log_level: str = "INFO"

    # Config file
    config_file: str = ""

    # Reporting
    report: str = ""

    def __post_init__(self):
        # --formats on the CLI arrives as "a,b"
        if isinstance(self.formats, str):
            self.formats = [f.strip() for f in self.formats.split(",") if f.strip()]
        if isinstance(self.extensions, str):
            self.extensions = [self.extensions]
        self.extensions = [e.lower().lstrip(".") for e in self.extensions]

    def accepts(self, identifier: str) -> bool:
        """True when the identifier's extension is one we parse."""
        dot = identifier.rfind(".")
        extension = identifier[dot + 1:].lower() if dot > 0 else ""
        return extension in self.extensions

    def update_from_yaml(self, yaml_path: str):
        """Updates config fields from a YAML file."""
        with open(yaml_path, 'r') as f:
            yaml_config = yaml.safe_load(f) or {}
        for key, value in yaml_config.items():
            if hasattr(self, key):
                setattr(self, key, value)
            else:
                logger.warning("Ignoring unknown config key '%s' in %s", key, yaml_path)

    @classmethod
    def from_args(cls, args) -> LoaderConfig:
        """Factory method to create a LoaderConfig from parsed argparse arguments."""
        config = cls()

        # 1. Load from YAML config file if provided
        if hasattr(args, 'config') and args.config:
            config.config_file = args.config
            if Path(config.config_file).exists():
                config.update_from_yaml(config.config_file)
            else:
                logger.warning("Config file %s not found.", config.config_file)

        # 2. Override with command-line arguments
        arg_dict = vars(args)
        for key, value in arg_dict.items():
            if value is not None and hasattr(config, key) and key != "config_file":
                setattr(config, key, value)

        config.__post_init__()
        return config
