"""Configuration management for the grocery list tools."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .grocery import DEFAULT_MINUTES_PER_ITEM


@dataclass
class Config:
    """Main application configuration."""
    data_dir: Path
    plans_path: Path
    lists_path: Path

    # Optional keyword override file
    vocabulary_path: Optional[Path] = None

    minutes_per_item: float = DEFAULT_MINUTES_PER_ITEM
    log_level: str = "WARNING"

    # User whose latest plan is shown when no plan id is given
    default_user: Optional[str] = None

    @classmethod
    def from_env(cls, dotenv_path: Optional[Path] = None) -> "Config":
        """Load configuration from environment variables."""
        # Load .env file if it exists - check multiple locations
        if dotenv_path is None:
            project_root = Path(__file__).parent.parent / ".env"
            package_dir = Path(__file__).parent / ".env"
            cwd = Path.cwd() / ".env"

            for path in [cwd, project_root, package_dir]:
                if path.exists():
                    dotenv_path = path
                    break

        if dotenv_path and dotenv_path.exists():
            with open(dotenv_path) as f:
                for line in f:
                    line = line.strip()
                    if line and not line.startswith("#") and "=" in line:
                        key, value = line.split("=", 1)
                        os.environ.setdefault(key.strip(), value.strip())

        data_dir = Path(os.environ.get("GROCERY_DATA_DIR", Path.home() / ".grocerylist")).expanduser()
        plans_path = Path(os.environ.get("GROCERY_PLANS_PATH", data_dir / "plans")).expanduser()
        lists_path = Path(os.environ.get("GROCERY_LISTS_PATH", data_dir / "lists")).expanduser()

        vocabulary_path = os.environ.get("GROCERY_VOCABULARY_PATH")

        minutes = os.environ.get("GROCERY_MINUTES_PER_ITEM")
        try:
            minutes_per_item = float(minutes) if minutes else DEFAULT_MINUTES_PER_ITEM
        except ValueError:
            raise ValueError(f"GROCERY_MINUTES_PER_ITEM must be a number, got {minutes!r}")

        return cls(
            data_dir=data_dir,
            plans_path=plans_path,
            lists_path=lists_path,
            vocabulary_path=Path(vocabulary_path).expanduser() if vocabulary_path else None,
            minutes_per_item=minutes_per_item,
            log_level=os.environ.get("GROCERY_LOG_LEVEL", "WARNING").upper(),
            default_user=os.environ.get("GROCERY_USER") or None,
        )

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.plans_path.exists():
            errors.append(f"Meal plans path does not exist: {self.plans_path}")

        if self.vocabulary_path and not self.vocabulary_path.exists():
            errors.append(f"Vocabulary file does not exist: {self.vocabulary_path}")

        if self.minutes_per_item <= 0:
            errors.append("GROCERY_MINUTES_PER_ITEM must be positive")

        if not isinstance(logging.getLevelName(self.log_level), int):
            errors.append(f"Unknown log level: {self.log_level}")

        # Lists path doesn't need to exist - the store creates it

        return errors
