from .loader import ConfigError, get_config, load_config, merge_config, reload_config
from .schema import (
    AlertThresholdsConfig,
    EngineConfig,
    IndicatorPeriodsConfig,
    LevelsConfig,
    OrchestratorConfig,
    ProviderConfig,
    SignalConfig,
    TrendConfig,
    VolumeConfig,
)

__all__ = [
    "ConfigError",
    "load_config",
    "get_config",
    "reload_config",
    "merge_config",
    "EngineConfig",
    "IndicatorPeriodsConfig",
    "LevelsConfig",
    "TrendConfig",
    "SignalConfig",
    "AlertThresholdsConfig",
    "OrchestratorConfig",
    "ProviderConfig",
    "VolumeConfig",
]
