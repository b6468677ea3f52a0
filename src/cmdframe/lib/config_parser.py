"""Configuration for the command shell.

Capacities are fixed when a ``CommandShell`` is created; session defaults
(prompt, headers, ruler) are used whenever a session or setter is given
``None``.
"""

from __future__ import annotations

import sys
import yaml
from pathlib import Path
from typing import Any, Dict, Optional, Union
from pydantic import BaseModel, Field, field_validator

DEFAULT_PPRINT_RIGHT_OFFSET = 2 if sys.platform == "win32" else 1


class ShellSettings(BaseModel):
    """Capacities and session defaults."""
    max_commands: int = 24
    max_depth: int = 8
    max_input_length: int = 256
    tab_to_spaces: int = 8
    pprint_right_offset: int = DEFAULT_PPRINT_RIGHT_OFFSET

    prompt: str = "(cmdframe) "
    intro: str = ""
    doc_header: str = "Documented Commands:"
    undoc_header: str = "Undocumented Commands:"
    ruler: str = "="

    history_file: Optional[Path] = None
    history_length: int = Field(default=1000, ge=-1)

    @field_validator('max_commands', 'max_depth', 'tab_to_spaces')
    @classmethod
    def positive(cls, v: int) -> int:
        """Capacities must be at least one."""
        if v < 1:
            raise ValueError(f"must be a positive integer, got {v}")
        return v

    @field_validator('max_input_length')
    @classmethod
    def room_for_a_character(cls, v: int) -> int:
        """One slot of the buffer is reserved, like a C string terminator."""
        if v < 2:
            raise ValueError(f"must be at least 2, got {v}")
        return v

    @field_validator('pprint_right_offset')
    @classmethod
    def non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"must not be negative, got {v}")
        return v

    @field_validator('ruler')
    @classmethod
    def single_glyph(cls, v: str) -> str:
        """The ruler is drawn by repeating one character."""
        if len(v) != 1:
            raise ValueError(f"ruler must be exactly one character, got {v!r}")
        return v

    @field_validator('history_file', mode='before')
    @classmethod
    def expand_home(cls, v: Any) -> Any:
        """Expand ``~`` in history file paths."""
        if isinstance(v, str):
            return Path(v).expanduser()
        return v


class ShellConfigParser:
    """Parse and validate a shell configuration file."""

    def __init__(self, config_path: Union[str, Path]):
        """Initialize parser with config file path.

        Args:
            config_path: Path to a YAML file

        Raises:
            FileNotFoundError: If the file does not exist
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        self.settings: Optional[ShellSettings] = None
        self._raw_config: Optional[Dict[str, Any]] = None

    def parse(self) -> ShellSettings:
        """Parse and validate configuration.

        The settings may sit at the top level of the file or under a
        ``shell:`` key. An empty file yields the defaults.

        Returns:
            Validated settings

        Raises:
            yaml.YAMLError: If YAML parsing fails
            pydantic.ValidationError: If validation fails
        """
        with open(self.config_path) as f:
            self._raw_config = yaml.safe_load(f) or {}

        if not isinstance(self._raw_config, dict):
            raise ValueError(
                f"Configuration must be a mapping, got {type(self._raw_config).__name__}"
            )

        section = self._raw_config.get('shell', self._raw_config)
        self.settings = ShellSettings(**(section or {}))
        return self.settings


def load_config(config_path: Union[str, Path]) -> ShellSettings:
    """Load and validate a shell configuration file.

    Args:
        config_path: Path to config.yaml

    Returns:
        Parsed settings

    Example:
        >>> settings = load_config("cmdframe.yaml")
        >>> settings.max_commands
        24
    """
    parser = ShellConfigParser(config_path)
    return parser.parse()
