"""
Engine Configuration - Process-lifetime settings for a module instance.

The ignore list mirrors what a boss-module host hands out once at start-up:
modules that must never count toward stage progress and that the
"solve next" rule must never name. It is passed to every engine explicitly
instead of living in a mutable global.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import os


MODULE_NAME = "Simon Sonundrum"

CONDITIONAL_PREFIX = "Simon Says: "

# Modules known to break "solve X next" (they solve themselves, hold the
# bomb hostage, or cannot be solved on demand).
INCOMPATIBLE_MODULES = frozenset({
    "Organization",
    "Mytery Module",
    "Encrypted Hangman",
    "Turn The Keys",
    "Custom Keys",
    "42",
    "501",
    "The Heart",
    "Simon",
})

# Frames between two polls of the host's solved-module list
DEFAULT_POLL_INTERVAL = 5


@dataclass(frozen=True)
class EngineConfig:
    """
    Fixed configuration for one module.

    Attributes:
        module_name: Name this module is listed under on the bomb
        ignored_modules: Names excluded from progress and from "solve next"
        incompatible_modules: Names that disable "solve next" when present
        conditional_prefix: Marker that may precede any command
        poll_interval: Ticks between two external-progress polls
    """
    module_name: str = MODULE_NAME
    ignored_modules: frozenset[str] = field(default_factory=lambda: frozenset({MODULE_NAME}))
    incompatible_modules: frozenset[str] = INCOMPATIBLE_MODULES
    conditional_prefix: str = CONDITIONAL_PREFIX
    poll_interval: int = DEFAULT_POLL_INTERVAL

    def __post_init__(self):
        if self.poll_interval < 1:
            raise ValueError("poll_interval must be >= 1")

    @property
    def denylist(self) -> frozenset[str]:
        """Names whose presence on the bomb makes "solve next" illegal."""
        return (self.incompatible_modules | self.ignored_modules) - {self.module_name}

    def with_ignored(self, names) -> EngineConfig:
        """Return a config whose ignore list also contains `names`."""
        return EngineConfig(
            module_name=self.module_name,
            ignored_modules=self.ignored_modules | frozenset(names),
            incompatible_modules=self.incompatible_modules,
            conditional_prefix=self.conditional_prefix,
            poll_interval=self.poll_interval,
        )

    @classmethod
    def from_env(cls) -> EngineConfig:
        """
        Build a config from environment variables.

        SONUNDRUM_IGNORED_MODULES: comma separated names added to the ignore list
        SONUNDRUM_POLL_INTERVAL: ticks between polls
        """
        config = cls(
            poll_interval=int(os.getenv("SONUNDRUM_POLL_INTERVAL", DEFAULT_POLL_INTERVAL)),
        )
        extra = os.getenv("SONUNDRUM_IGNORED_MODULES", "")
        names = [n.strip() for n in extra.split(",") if n.strip()]
        return config.with_ignored(names) if names else config
