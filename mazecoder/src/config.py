"""
MazeCoder Configuration Module

Handles all configuration settings for the game.
Supports environment variables, .env files, and programmatic configuration.

Configuration can be set via:
1. Environment variables (MAZECODER_STEP_LIMIT, OPENAI_API_KEY, etc.)
2. .env file in the project root
3. Programmatic configuration via create_config()
"""

import os
import logging
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


DEFAULT_LEVELS_PATH = Path(__file__).parent.parent / "data" / "levels.json"


@dataclass
class SimulationConfig:
    """Configuration for the trajectory simulator."""

    # Runs stop with "step-limit-exceeded" once this many moves were made
    step_limit: int = field(
        default_factory=lambda: int(os.getenv("MAZECODER_STEP_LIMIT", "100"))
    )

    # Overrides the level's start heading when set
    start_heading: Optional[str] = field(
        default_factory=lambda: os.getenv("MAZECODER_START_HEADING") or None
    )

    # Seconds between frames in animated playback
    playback_delay: float = field(
        default_factory=lambda: float(os.getenv("MAZECODER_PLAYBACK_DELAY", "0.15"))
    )

    def validate(self) -> None:
        """
        Validate configuration, raise if invalid.

        Raises:
            ValueError: If a value is out of range
        """
        if self.step_limit < 0:
            raise ValueError(f"step_limit must be non-negative, got {self.step_limit}")
        if self.playback_delay < 0:
            raise ValueError(f"playback_delay must be non-negative, got {self.playback_delay}")
        if self.start_heading and self.start_heading.upper() not in ("NORTH", "EAST", "SOUTH", "WEST"):
            raise ValueError(f"Unknown start heading: {self.start_heading}")


@dataclass
class LevelConfig:
    """Configuration for the level catalog."""

    # Path to the level definitions
    levels_path: str = field(
        default_factory=lambda: os.getenv("MAZECODER_LEVELS_PATH", str(DEFAULT_LEVELS_PATH))
    )


@dataclass
class OpenAIConfig:
    """Endpoint settings for the LLM code reviewer (off unless a key is set)."""

    api_key: str = field(default_factory=lambda: os.getenv("OPENAI_API_KEY", ""))
    base_url: str = field(default_factory=lambda: os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1"))
    model: str = field(default_factory=lambda: os.getenv("OPENAI_MODEL", "gpt-4o-mini"))

    # Reviews should not vary between identical runs
    temperature: float = field(default_factory=lambda: float(os.getenv("OPENAI_TEMPERATURE", "0.0")))

    # A review is a few short lists, so a small budget is enough
    max_tokens: int = field(default_factory=lambda: int(os.getenv("OPENAI_MAX_TOKENS", "800")))
    timeout: int = field(default_factory=lambda: int(os.getenv("OPENAI_TIMEOUT", "30")))

    def is_configured(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    def validate(self) -> None:
        """
        Raises:
            ValueError: If no API key is set (the heuristic reviewer needs none)
        """
        if not self.is_configured():
            raise ValueError("LLM code review needs OPENAI_API_KEY; leave it unset to use the heuristic reviewer")

    def to_dict(self) -> Dict[str, Any]:
        """Export settings with the API key masked."""
        data = {name: getattr(self, name) for name in ("base_url", "model", "temperature", "max_tokens", "timeout")}
        data["api_key"] = "***" if self.api_key else ""
        return data


@dataclass
class GameConfig:
    """
    Main configuration for MazeCoder.

    Example usage:
        # From environment variables
        config = GameConfig()

        # Programmatic configuration
        config = create_config(step_limit=50, start_heading="NORTH")
    """

    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    levels: LevelConfig = field(default_factory=LevelConfig)
    openai: OpenAIConfig = field(default_factory=OpenAIConfig)

    # Logging settings
    log_level: str = field(
        default_factory=lambda: os.getenv("MAZECODER_LOG_LEVEL", "INFO")
    )
    log_file: Optional[str] = field(
        default_factory=lambda: os.getenv("MAZECODER_LOG_FILE")
    )

    def validate(self) -> None:
        """Validate all configuration sections."""
        self.simulation.validate()

    @classmethod
    def from_env(cls) -> "GameConfig":
        """Create configuration from environment variables."""
        return cls()

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "GameConfig":
        """
        Create configuration from a dictionary.

        Args:
            config_dict: Dictionary with configuration values

        Returns:
            GameConfig instance
        """
        simulation_cfg = config_dict.get("simulation", {})
        levels_cfg = config_dict.get("levels", {})
        openai_cfg = config_dict.get("openai", {})

        return cls(
            simulation=SimulationConfig(
                step_limit=simulation_cfg.get("step_limit", 100),
                start_heading=simulation_cfg.get("start_heading"),
                playback_delay=simulation_cfg.get("playback_delay", 0.15),
            ),
            levels=LevelConfig(
                levels_path=levels_cfg.get("levels_path", str(DEFAULT_LEVELS_PATH)),
            ),
            openai=OpenAIConfig(
                api_key=openai_cfg.get("api_key", os.getenv("OPENAI_API_KEY", "")),
                base_url=openai_cfg.get("base_url", os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")),
                model=openai_cfg.get("model", os.getenv("OPENAI_MODEL", "gpt-4o-mini")),
                temperature=openai_cfg.get("temperature", 0.0),
                max_tokens=openai_cfg.get("max_tokens", 800),
                timeout=openai_cfg.get("timeout", 30),
            ),
            log_level=config_dict.get("log_level", "INFO"),
            log_file=config_dict.get("log_file"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration to dictionary."""
        return {
            "simulation": {
                "step_limit": self.simulation.step_limit,
                "start_heading": self.simulation.start_heading,
                "playback_delay": self.simulation.playback_delay,
            },
            "levels": {
                "levels_path": self.levels.levels_path,
            },
            "openai": self.openai.to_dict(),
            "log_level": self.log_level,
            "log_file": self.log_file,
        }


def get_default_config() -> GameConfig:
    """Get the default game configuration from environment."""
    return GameConfig.from_env()


def create_config(
    step_limit: Optional[int] = None,
    start_heading: Optional[str] = None,
    playback_delay: Optional[float] = None,
    levels_path: Optional[str] = None,
    api_key: Optional[str] = None,
    **kwargs
) -> GameConfig:
    """
    Convenience function to create a configuration.

    Args:
        step_limit: Maximum number of moves per run
        start_heading: Overrides every level's start heading (NORTH, EAST, SOUTH, WEST)
        playback_delay: Seconds between animation frames
        levels_path: Path to a level definitions JSON file
        api_key: OpenAI API key for the LLM reviewer
        **kwargs: Additional configuration options

    Returns:
        Configured GameConfig
    """
    config = GameConfig()

    if step_limit is not None:
        config.simulation.step_limit = step_limit
    if start_heading:
        config.simulation.start_heading = start_heading
    if playback_delay is not None:
        config.simulation.playback_delay = playback_delay
    if levels_path:
        config.levels.levels_path = levels_path
    if api_key:
        config.openai.api_key = api_key

    # Handle additional kwargs
    if "base_url" in kwargs:
        config.openai.base_url = kwargs["base_url"]
    if "model" in kwargs:
        config.openai.model = kwargs["model"]
    if "log_level" in kwargs:
        config.log_level = kwargs["log_level"]
    if "log_file" in kwargs:
        config.log_file = kwargs["log_file"]

    config.validate()
    return config


def configure_logging(config: Optional[GameConfig] = None) -> None:
    """Apply the configured log level and optional log file to the root logger."""
    config = config or get_default_config()

    handlers = [logging.StreamHandler()]
    if config.log_file:
        handlers.append(logging.FileHandler(config.log_file))

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,
    )
