"""Configuration module for git-ai-commit.

Settings come from four tiers, highest priority first: command-line flags,
the project-local ``.git-ai-commit.json``, the user-global
``~/.git-ai-commit.json`` and the built-in defaults. Only one file is ever
used: a readable local file hides the global one completely.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

from rich.markup import escape

from .errors import ConfigError
from .utils import console

LOG = logging.getLogger(__name__)

CONFIG_FILENAME = ".git-ai-commit.json"


class Provider(str, Enum):
    """Text-generation backends, the first one is the default."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"

    @classmethod
    def names(cls) -> list:
        return [p.value for p in cls]

    @classmethod
    def parse(cls, name: str) -> "Provider":
        """Return the provider called ``name``.

        Raises:
            ConfigError: If ``name`` is not a known provider.
        """
        try:
            return cls(name)
        except ValueError:
            raise ConfigError(
                f"Invalid provider: {name}\nMust be one of: {', '.join(cls.names())}"
            ) from None


DEFAULT_PROVIDER = Provider.OPENAI


@dataclass
class Config:
    """Partial settings as stored in a config file.

    Every field is optional; ``None`` means "not set at this tier".
    The provider is kept as written and only checked when options are
    resolved.
    """
    provider: Optional[str] = None
    verbose: Optional[bool] = None
    dry_run: Optional[bool] = None

    @classmethod
    def defaults(cls) -> "Config":
        return cls(provider=DEFAULT_PROVIDER.value, verbose=False, dry_run=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        return cls(
            provider=data.get("provider"),
            verbose=data.get("verbose"),
            dry_run=data.get("dryRun"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.provider is not None:
            data["provider"] = getattr(self.provider, "value", self.provider)
        if self.verbose is not None:
            data["verbose"] = self.verbose
        if self.dry_run is not None:
            data["dryRun"] = self.dry_run
        return data


@dataclass(frozen=True)
class CLIOptions:
    """Fully resolved settings for one run."""
    provider: Provider
    dry_run: bool
    verbose: bool


def parse_bool(value: str) -> bool:
    """Interpret a ``--set-*`` argument, only ``true`` counts as true."""
    # Case and surrounding whitespace are ignored, so "True" is true too.
    return value.strip().lower() == "true"


class ConfigManager:
    """Reads, writes and displays the configuration files.

    Paths are injected so tests can point the manager at a temporary
    directory; by default they follow the current and home directories.
    """

    def __init__(self, local_path: Optional[Union[str, Path]] = None,
                 global_path: Optional[Union[str, Path]] = None) -> None:
        self.local_path = Path(local_path) if local_path else Path.cwd() / CONFIG_FILENAME
        self.global_path = Path(global_path) if global_path else Path.home() / CONFIG_FILENAME

    @staticmethod
    def read_config_file(path: Path) -> Optional[Config]:
        """Read one config file, returning None when it is missing or not a JSON object."""
        if not path.is_file():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError("top-level value is not an object")
            return Config.from_dict(data)
        except (OSError, ValueError) as exc:
            LOG.debug("Ignoring config file %s: %s", path, exc)
            return None

    def load(self) -> Config:
        """Load configuration with precedence: local > global > defaults."""
        for path in (self.local_path, self.global_path):
            config = self.read_config_file(path)
            if config is not None:
                LOG.debug("Loaded configuration from %s", path)
                return config
        return Config.defaults()

    def path_for(self, scope: str) -> Path:
        if scope == "local":
            return self.local_path
        if scope == "global":
            return self.global_path
        raise ConfigError(f"Unknown config scope: {scope}")

    def save(self, config: Config, scope: str = "global") -> Path:
        """Write ``config`` as pretty-printed JSON to the local or global file.

        Raises:
            ConfigError: If the file cannot be written.
        """
        path = self.path_for(scope)
        try:
            path.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Failed to save config: {exc}") from exc
        console.print(f"[green]✓[/green] Configuration saved to {escape(str(path))}", soft_wrap=True)
        return path

    def resolve_options(self, provider: Optional[str] = None,
                        dry_run: Optional[bool] = None,
                        verbose: Optional[bool] = None) -> CLIOptions:
        """Merge command-line overrides on top of the loaded configuration.

        Raises:
            ConfigError: If the merged provider name, from the flag or from
                the config file, is not a known provider.
        """
        config = self.load()
        if provider is None:
            provider = config.provider if config.provider is not None else DEFAULT_PROVIDER.value
        return CLIOptions(
            provider=Provider.parse(provider),
            dry_run=dry_run if dry_run is not None else bool(config.dry_run),
            verbose=verbose if verbose is not None else bool(config.verbose),
        )

    def show(self) -> None:
        """Print the resolved configuration and which files exist."""
        config = self.load()
        provider = config.provider if config.provider is not None else DEFAULT_PROVIDER.value
        provider = getattr(provider, "value", provider)

        def found(path: Path) -> str:
            return "[green]✓[/green]" if path.exists() else "[dim](not found)[/dim]"

        console.print("\n[bold]📋 Current Configuration:[/bold]\n")
        console.print(f"  Provider: {escape(str(provider))}")
        console.print(f"  Verbose:  {bool(config.verbose)}")
        console.print(f"  Dry Run:  {bool(config.dry_run)}")
        console.print("\n[bold]📁 Config Files:[/bold]\n")
        console.print(f"  Global: {escape(str(self.global_path))} {found(self.global_path)}", soft_wrap=True)
        console.print(f"  Local:  {escape(str(self.local_path))} {found(self.local_path)}", soft_wrap=True)
        console.print("\n💡 Note: CLI flags override config file settings\n")
