"""
Configuration management package for the Band Romance Engine

Provides centralized configuration management with:
- Environment variable loading from .env files
- Runtime configuration validation
- Type-safe configuration classes
- Global configuration access patterns

Usage:
    from romance_engine.config import get_config

    config = get_config()
    print(f"Default intensity: {config.interaction.default_interaction_intensity}")
"""

from .manager import (
    ConfigManager,
    EngineConfig,
    InteractionConfig,
    SimulationConfig,
    get_config,
    init_config,
    reset_config
)

__all__ = [
    "ConfigManager",
    "EngineConfig",
    "InteractionConfig",
    "SimulationConfig",
    "get_config",
    "init_config",
    "reset_config"
]
