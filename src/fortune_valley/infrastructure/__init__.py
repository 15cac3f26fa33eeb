"""Infrastructure layer for the Fortune Valley economy engine.

Re-exports the public API surface for convenience::

    from fortune_valley.infrastructure import (
        EventBus, EventStore,
        GameConfig, RestaurantConfig, RivalConfig, AggressionCurve,
        load_config, to_json, to_yaml,
    )
"""

from fortune_valley.infrastructure.config import (
    AggressionCurve,
    GameConfig,
    RestaurantConfig,
    RivalConfig,
    default_investments,
    default_lots,
    load_config,
    load_config_from_json,
    load_config_from_yaml,
)
from fortune_valley.infrastructure.event_bus import EventBus, EventStore
from fortune_valley.infrastructure.serialization import (
    deserialize,
    from_json,
    from_yaml,
    serialize,
    summary_from_dict,
    summary_to_dict,
    to_json,
    to_yaml,
)

__all__ = [
    # Event bus
    "EventBus",
    "EventStore",
    # Config
    "AggressionCurve",
    "GameConfig",
    "RestaurantConfig",
    "RivalConfig",
    "default_investments",
    "default_lots",
    "load_config",
    "load_config_from_json",
    "load_config_from_yaml",
    # Serialization
    "deserialize",
    "from_json",
    "from_yaml",
    "serialize",
    "summary_from_dict",
    "summary_to_dict",
    "to_json",
    "to_yaml",
]
