"""Runtime configuration for synthtype."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from synthtype.logging import LogFormat, configure_logging, parse_level


@dataclass
class SynthConfig:
    """Settings shared by all synthesizers.

    Attributes:
        generated_module: Value of ``__module__`` on every generated class
        seed_defaults: Start stub/mock properties at the empty value of their
            type (0, "", [] ...) instead of None
        log_level: Level applied by ``apply_logging``
        log_format: Output format applied by ``apply_logging``
        source: File the settings were loaded from, if any
    """

    generated_module: str = "synthtype.generated"
    seed_defaults: bool = True
    log_level: str = "WARNING"
    log_format: LogFormat = LogFormat.TEXT
    source: Path | None = field(default=None, compare=False)

    def validate(self) -> list[str]:
        """Return a list of problems; empty when the config is usable."""
        errors = []
        if not self.generated_module or not all(
            part.isidentifier() for part in self.generated_module.split(".")
        ):
            errors.append(f"generated_module is not a dotted name: {self.generated_module!r}")
        try:
            parse_level(self.log_level)
        except ValueError as e:
            errors.append(str(e))
        return errors

    def apply_logging(self) -> None:
        configure_logging(self.log_level, self.log_format)


_config: SynthConfig | None = None


def get_config() -> SynthConfig:
    """Get the process-wide configuration."""
    global _config
    if _config is None:
        _config = SynthConfig()
    return _config


def set_config(config: SynthConfig) -> None:
    """Replace the process-wide configuration.

    Raises:
        ValueError: If the config does not validate
    """
    global _config
    errors = config.validate()
    if errors:
        raise ValueError("Invalid synthtype config: " + "; ".join(errors))
    _config = config


def reset_config() -> None:
    """Restore the default configuration."""
    global _config
    _config = None
