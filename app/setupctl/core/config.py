"""Configuration models and file I/O.

The configuration file (``~/.config/setupctl/setupctl.toml``) says where
the manifests live, which files to back up, which shell blocks and
preferences to apply, and which runtimes to report. Every section has
defaults, so a missing file means "use the defaults".
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Any, Literal

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from setupctl.core.paths import expand_path, get_config_path, get_manifest_dir
from setupctl.core.shellconfig import ShellBlock
from setupctl.models.manifest import ManifestKind

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when an explicitly requested config file is missing."""


class ConfigParseError(ConfigError):
    """Raised when the config file is not valid TOML."""


class ConfigValidationError(ConfigError):
    """Raised when the config content doesn't match the schema."""


class ManifestSource(BaseModel):
    """Where one manifest kind is read from.

    Attributes:
        file: File name, relative to the manifest directory unless absolute.
        full_only: Only process this manifest when ``--full`` is given.
        enabled: Set to False to never process this manifest.
    """

    model_config = ConfigDict(extra="forbid")

    file: Annotated[str, Field(min_length=1)]
    full_only: bool = False
    enabled: bool = True


class ManifestsConfig(BaseModel):
    """Manifest locations, processed in the order package, application, extension."""

    model_config = ConfigDict(extra="forbid")

    directory: str = ""
    package: ManifestSource = ManifestSource(file="brew_packages.txt")
    application: ManifestSource = ManifestSource(file="brew_cask_apps.txt", full_only=True)
    extension: ManifestSource = ManifestSource(file="code_extensions.txt")

    def resolve_directory(self) -> Path:
        """Return the manifest directory, defaulting to the config dir."""
        return expand_path(self.directory) if self.directory else get_manifest_dir()

    def enabled_sources(self, full: bool) -> list[tuple[ManifestKind, Path]]:
        """List the manifests to process.

        Args:
            full: Whether ``--full`` was requested.

        Returns:
            (kind, path) pairs in processing order.
        """
        directory = self.resolve_directory()
        sources: list[tuple[ManifestKind, Path]] = []
        for kind in ManifestKind:
            source: ManifestSource = getattr(self, kind.value)
            if not source.enabled or (source.full_only and not full):
                continue
            path = expand_path(source.file)
            sources.append((kind, path if path.is_absolute() else directory / path))
        return sources


DEFAULT_BACKUP_PATHS = [
    "~/.zshrc",
    "~/.zprofile",
    "~/.bashrc",
    "~/.bash_profile",
    "~/.gitconfig",
    "~/.gitignore_global",
    "~/.ssh/config",
    "~/.gnupg/gpg-agent.conf",
    "~/Library/Application Support/Code/User/settings.json",
]


class BackupConfig(BaseModel):
    """Pre-run backup settings."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    paths: list[str] = Field(default_factory=lambda: list(DEFAULT_BACKUP_PATHS))

    def resolve_paths(self) -> list[Path]:
        """Return candidate paths with ``~`` and variables expanded."""
        return [expand_path(p) for p in self.paths]


DEFAULT_SHELL_BLOCKS = [
    ShellBlock(
        tag="plugins",
        content=(
            'BREW_PREFIX="$(brew --prefix)"\n'
            'for plugin in zsh-syntax-highlighting zsh-autosuggestions; do\n'
            '  [ -f "$BREW_PREFIX/share/$plugin/$plugin.zsh" ] && '
            'source "$BREW_PREFIX/share/$plugin/$plugin.zsh"\n'
            "done"
        ),
    ),
    ShellBlock(
        tag="aliases",
        content=(
            'alias gs="git status"\n'
            'alias gc="git commit"\n'
            'alias gp="git push"\n'
            'alias p="pnpm"\n'
            'alias pb="pnpm build"\n'
            'alias c="clear"\n'
            'alias l="ls -la"\n'
            'alias ..="cd .."'
        ),
    ),
    ShellBlock(
        tag="environment",
        content=(
            'export PNPM_HOME="$HOME/Library/pnpm"\n'
            'export PATH="$PNPM_HOME:$PATH"\n'
            'export PATH="$HOME/.cargo/bin:$PATH"'
        ),
    ),
]


class ShellConfig(BaseModel):
    """Shell configuration blocks and their target file."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    target: str = "~/.zshrc"
    blocks: list[ShellBlock] = Field(default_factory=lambda: list(DEFAULT_SHELL_BLOCKS))


DefaultsType = Literal["bool", "int", "float", "string"]


class MacDefault(BaseModel):
    """One ``defaults write`` preference."""

    model_config = ConfigDict(extra="forbid")

    domain: str
    key: str
    type: DefaultsType
    value: bool | int | float | str


DEFAULT_MAC_DEFAULTS = [
    MacDefault(domain="com.apple.dock", key="autohide", type="bool", value=True),
    MacDefault(domain="com.apple.dock", key="tilesize", type="int", value=36),
    MacDefault(domain="com.apple.dock", key="magnification", type="bool", value=True),
    MacDefault(
        domain="com.apple.screencapture", key="location", type="string", value="~/Screenshots"
    ),
    MacDefault(domain="com.apple.screensaver", key="askForPassword", type="int", value=1),
    MacDefault(domain="com.apple.screensaver", key="askForPasswordDelay", type="int", value=0),
    MacDefault(domain="NSGlobalDomain", key="com.apple.trackpad.scaling", type="float", value=2.5),
    MacDefault(domain="NSGlobalDomain", key="KeyRepeat", type="int", value=1),
    MacDefault(domain="NSGlobalDomain", key="InitialKeyRepeat", type="int", value=15),
    MacDefault(domain="NSGlobalDomain", key="ApplePressAndHoldEnabled", type="bool", value=False),
    MacDefault(domain="NSGlobalDomain", key="AppleShowAllExtensions", type="bool", value=True),
    MacDefault(domain="com.apple.finder", key="AppleShowAllFiles", type="bool", value=True),
    MacDefault(domain="com.apple.finder", key="ShowPathbar", type="bool", value=True),
    MacDefault(domain="com.apple.finder", key="ShowStatusBar", type="bool", value=True),
    MacDefault(domain="com.apple.finder", key="FXPreferredViewStyle", type="string", value="Nlsv"),
    MacDefault(domain="com.apple.finder", key="_FXShowPosixPathInTitle", type="bool", value=True),
]


class PreferencesConfig(BaseModel):
    """macOS preferences written with ``defaults``.

    Attributes:
        enabled: Set to False to skip preferences.
        directories: Directories created before writing (e.g. the screenshot location).
        defaults: Preferences to write. String values starting with ``~`` are expanded.
        restart: Apps restarted with ``killall`` afterwards.
    """

    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    directories: list[str] = Field(default_factory=lambda: ["~/Screenshots"])
    defaults: list[MacDefault] = Field(default_factory=lambda: list(DEFAULT_MAC_DEFAULTS))
    restart: list[str] = Field(default_factory=lambda: ["Dock", "Finder", "SystemUIServer"])


DEFAULT_GIT_IGNORE = [
    ".DS_Store",
    ".vscode/",
    ".idea/",
    "*.log",
    "node_modules/",
    ".env",
    ".env.local",
    ".env.development.local",
    ".env.test.local",
    ".env.production.local",
]


class GitConfig(BaseModel):
    """Global git settings written with ``git config --global``.

    Attributes:
        enabled: Set to False to leave git alone.
        settings: ``git config --global`` key/value pairs.
        ignore_file: Global ignore file (what ``core.excludesfile`` points at).
        ignore: Patterns ensured in ``ignore_file``.
    """

    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    settings: dict[str, str] = Field(
        default_factory=lambda: {
            "init.defaultBranch": "main",
            "pull.rebase": "true",
            "core.excludesfile": "~/.gitignore_global",
        }
    )
    ignore_file: str = "~/.gitignore_global"
    ignore: list[str] = Field(default_factory=lambda: list(DEFAULT_GIT_IGNORE))


class EnvironmentConfig(BaseModel):
    """Runtimes whose versions are recorded in the run summary."""

    model_config = ConfigDict(extra="forbid")

    runtimes: list[str] = Field(
        default_factory=lambda: ["git", "node", "python3", "deno", "bun", "rustc", "docker"]
    )


class BrewConfig(BaseModel):
    """Homebrew behavior."""

    model_config = ConfigDict(extra="forbid")

    update: bool = True


class SetupConfig(BaseModel):
    """Complete setupctl configuration."""

    model_config = ConfigDict(extra="forbid")

    manifests: ManifestsConfig = Field(default_factory=ManifestsConfig)
    backup: BackupConfig = Field(default_factory=BackupConfig)
    shell: ShellConfig = Field(default_factory=ShellConfig)
    preferences: PreferencesConfig = Field(default_factory=PreferencesConfig)
    git: GitConfig = Field(default_factory=GitConfig)
    environment: EnvironmentConfig = Field(default_factory=EnvironmentConfig)
    brew: BrewConfig = Field(default_factory=BrewConfig)


def load_config(path: Path | None = None) -> SetupConfig:
    """Load and validate the configuration.

    Args:
        path: Explicit config file. If None, the default path is used and
              a missing file yields the built-in defaults.

    Returns:
        Validated SetupConfig.

    Raises:
        ConfigNotFoundError: If an explicit path doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigValidationError: If the content doesn't match the schema.
        ConfigError: If the file cannot be read.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        if path is not None:
            raise ConfigNotFoundError(f"Config not found: {config_path}")
        logger.debug("No config at %s, using defaults", config_path)
        return SetupConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return SetupConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid config content: {e}") from e


def config_to_dict(config: SetupConfig) -> dict[str, Any]:
    """Convert a config to a dictionary suitable for TOML serialization."""
    return config.model_dump(mode="json", exclude_none=True)


def save_config(config: SetupConfig, path: Path | None = None) -> Path:
    """Save the configuration to a TOML file.

    The file is written atomically through a temporary file in the same
    directory and os.replace().

    Args:
        config: Configuration to save.
        path: Target path. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(config_to_dict(config), f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path
