"""
Configuration Manager for the Band Romance Engine
=================================================

Centralized configuration management with environment variable loading,
validation, and type safety for the caller-level defaults of the engine.
The scoring formulas themselves are fixed and are not configurable.
"""

import os
import logging
from dataclasses import dataclass
from typing import Dict, Any, Optional
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


@dataclass
class EngineConfig:
    """Runtime and logging configuration"""
    debug_mode: bool = False
    log_level: str = "INFO"
    log_file: Optional[str] = None


@dataclass
class InteractionConfig:
    """Defaults used when an interaction handler rolls for affair detection"""
    default_interaction_intensity: int = 3
    default_social_media_activity: int = 30

    # Suspicion added after an undetected clandestine interaction (inclusive range)
    suspicion_gain_min: int = 2
    suspicion_gain_max: int = 6


@dataclass
class SimulationConfig:
    """Courtship simulation harness configuration"""
    default_ticks: int = 30
    default_seed: int = 7


class ConfigManager:
    """
    Central configuration manager.

    Loads configuration from environment variables (optionally seeded from a
    .env file), applies defaults and validates the result.
    """

    def __init__(self, env_file_path: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            env_file_path: Optional path to .env file for loading environment variables
        """
        self._load_env_file(env_file_path)

        self.engine = self._load_engine_config()
        self.interaction = self._load_interaction_config()
        self.simulation = self._load_simulation_config()

        self._validate_configuration()

        logger.info("Configuration loaded and validated successfully")

    def _load_env_file(self, env_file_path: Optional[str]) -> None:
        """Load environment variables from .env file if it exists"""
        env_path = Path(env_file_path) if env_file_path else Path(".env")

        if env_path.exists():
            load_dotenv(env_path, override=True)
            logger.info(f"Loaded environment variables from {env_path}")

    def _get_env_bool(self, key: str, default: bool) -> bool:
        """Get boolean environment variable with proper conversion"""
        value = os.getenv(key, str(default)).lower()
        return value in ('true', '1', 'yes', 'on')

    def _get_env_int(self, key: str, default: int) -> int:
        """Get integer environment variable with validation"""
        try:
            return int(os.getenv(key, str(default)))
        except ValueError:
            logger.warning(f"Invalid integer value for {key}, using default: {default}")
            return default

    def _load_engine_config(self) -> EngineConfig:
        """Load engine configuration from environment variables"""
        return EngineConfig(
            debug_mode=self._get_env_bool("ROMANCE_DEBUG_MODE", False),
            log_level=os.getenv("ROMANCE_LOG_LEVEL", "INFO"),
            log_file=os.getenv("ROMANCE_LOG_FILE") or None
        )

    def _load_interaction_config(self) -> InteractionConfig:
        """Load interaction defaults from environment variables"""
        return InteractionConfig(
            default_interaction_intensity=self._get_env_int("ROMANCE_DEFAULT_INTERACTION_INTENSITY", 3),
            default_social_media_activity=self._get_env_int("ROMANCE_DEFAULT_SOCIAL_MEDIA_ACTIVITY", 30),
            suspicion_gain_min=self._get_env_int("ROMANCE_SUSPICION_GAIN_MIN", 2),
            suspicion_gain_max=self._get_env_int("ROMANCE_SUSPICION_GAIN_MAX", 6)
        )

    def _load_simulation_config(self) -> SimulationConfig:
        """Load simulation configuration from environment variables"""
        return SimulationConfig(
            default_ticks=self._get_env_int("ROMANCE_SIM_TICKS", 30),
            default_seed=self._get_env_int("ROMANCE_SIM_SEED", 7)
        )

    def _validate_configuration(self) -> None:
        """Validate configuration values for consistency and ranges"""
        errors = []

        if self.engine.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"Log level '{self.engine.log_level}' is not a valid logging level")

        if not (1 <= self.interaction.default_interaction_intensity <= 5):
            errors.append("Interaction default_interaction_intensity must be between 1 and 5")

        if not (0 <= self.interaction.default_social_media_activity <= 100):
            errors.append("Interaction default_social_media_activity must be between 0 and 100")

        if self.interaction.suspicion_gain_min < 0:
            errors.append("Interaction suspicion_gain_min must not be negative")

        if self.interaction.suspicion_gain_min > self.interaction.suspicion_gain_max:
            errors.append("Interaction suspicion_gain_min must not exceed suspicion_gain_max")

        if self.simulation.default_ticks < 1:
            errors.append("Simulation default_ticks must be at least 1")

        if errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {error}" for error in errors)
            logger.error(error_msg)
            raise ValueError(error_msg)

    def get_summary(self) -> Dict[str, Any]:
        """Get configuration summary for logging and debugging"""
        return {
            "engine": {
                "debug_mode": self.engine.debug_mode,
                "log_level": self.engine.log_level,
                "log_file": self.engine.log_file
            },
            "interaction": {
                "default_interaction_intensity": self.interaction.default_interaction_intensity,
                "default_social_media_activity": self.interaction.default_social_media_activity,
                "suspicion_gain": f"{self.interaction.suspicion_gain_min}-{self.interaction.suspicion_gain_max}"
            },
            "simulation": {
                "default_ticks": self.simulation.default_ticks,
                "default_seed": self.simulation.default_seed
            }
        }


# Global configuration instance (initialized on first use)
_config_instance: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """
    Get the global configuration instance.

    Returns:
        ConfigManager: The global configuration instance
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = ConfigManager()
    return _config_instance


def init_config(env_file_path: Optional[str] = None) -> ConfigManager:
    """
    Initialize the global configuration instance with custom env file.

    Args:
        env_file_path: Optional path to .env file

    Returns:
        ConfigManager: The initialized configuration instance
    """
    global _config_instance
    _config_instance = ConfigManager(env_file_path)
    return _config_instance


def reset_config() -> None:
    """Drop the global configuration so the next get_config() reloads it"""
    global _config_instance
    _config_instance = None
