"""
YAML configuration: time zone, search defaults, colleagues and the events file.
"""

from pathlib import Path
from typing import List, Optional, Sequence

import pendulum
import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .domain.parsing import is_valid_time_range, parse_duration, parse_time_range


class DefaultsConfig(BaseModel):
    """Search defaults used when the CLI options are omitted."""
    model_config = ConfigDict(coerce_numbers_to_str=True)  # allow "duration: 45"

    duration: str = "30m"
    time_range: str = "09:00-18:00"

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, value: str) -> str:
        """Ensure the duration expression parses to a positive length."""
        minutes = parse_duration(value)
        if minutes is None or minutes <= 0:
            raise ValueError(f"duration must be like '45', '30m' or '2h', got '{value}'")
        return value

    @field_validator("time_range")
    @classmethod
    def validate_time_range(cls, value: str) -> str:
        """Ensure the daily window parses and opens before it closes."""
        parsed = parse_time_range(value)
        if parsed is None:
            raise ValueError(f"time_range must be like '09:00-18:00', got '{value}'")
        if not is_valid_time_range(parsed):
            raise ValueError("time_range must end later than it starts")
        return value


class Colleague(BaseModel):
    """A colleague addressable by alias or email."""
    name: str
    email: str
    calendar_id: str = ""  # key in the events file; the email is used when empty


class AppConfig(BaseModel):
    """Top-level meetslot configuration."""
    timezone: str = "UTC"
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    events_file: Optional[Path] = None
    colleagues: List[Colleague] = Field(default_factory=list)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA name."""
        try:
            pendulum.timezone(value)
        except (ValueError, KeyError) as exc:
            raise ValueError(f"Unknown timezone: '{value}'") from exc
        return value

    @field_validator("colleagues")
    @classmethod
    def validate_colleagues(cls, value: List[Colleague]) -> List[Colleague]:
        """Ensure colleague aliases and emails are unique."""
        seen_names: set[str] = set()
        seen_emails: set[str] = set()
        for colleague in value:
            name_key = colleague.name.lower()
            email_key = colleague.email.lower()
            if name_key in seen_names:
                raise ValueError(f"Duplicate colleague name detected: {colleague.name}")
            if email_key in seen_emails:
                raise ValueError(f"Duplicate colleague email detected: {colleague.email}")
            seen_names.add(name_key)
            seen_emails.add(email_key)
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        A relative ``events_file`` is resolved against the config file's
        directory.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)
        if config.events_file is not None and not config.events_file.is_absolute():
            config.events_file = config_path.parent / config.events_file
        return config

    def find_colleague(self, identifier: str) -> Colleague | None:
        """Colleague whose alias or email matches ``identifier``, ignoring case."""
        key = identifier.lower()
        for colleague in self.colleagues:
            if key in (colleague.name.lower(), colleague.email.lower()):
                return colleague
        return None

    def resolve_participants(self, identifiers: Sequence[str]) -> List[str]:
        """
        Turn aliases and email addresses into unique, lower-case emails.

        Unconfigured addresses are accepted as-is; every unknown alias is
        reported in one error.

        Raises:
            ValueError: If nothing was given or some aliases are unknown
        """
        if not identifiers:
            raise ValueError("No participants provided.")

        emails: List[str] = []
        unknown: set[str] = set()

        for identifier in identifiers:
            colleague = self.find_colleague(identifier)
            if colleague is not None:
                email = colleague.email.lower()
            elif "@" in identifier:
                email = identifier.lower()
            else:
                unknown.add(identifier)
                continue

            if email not in emails:
                emails.append(email)

        if unknown:
            raise ValueError(
                f"Unknown participant(s): {', '.join(sorted(unknown))}. "
                "Use an email address or a name from the colleagues list."
            )

        return emails


def get_default_config_path() -> Path:
    """``./config.yaml`` if present, else ``~/.config/meetslot/config.yaml``."""
    local = Path.cwd() / "config.yaml"
    if local.exists():
        return local
    return Path.home() / ".config" / "meetslot" / "config.yaml"
