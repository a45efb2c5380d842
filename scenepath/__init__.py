"""ScenePath - Themed route generation and collectible points of interest."""

from .config import CONFIG
from .errors import (
    ScenePathError,
    ProviderUnavailable,
    StoreWriteFailed,
    StoreReadFailed,
    AlreadyCollected,
)
from .models import (
    Coordinate,
    TransportType,
    RouteType,
    RouteDifficulty,
    SpecialRouteType,
    CollectibleCategory,
    NavigationInstruction,
    ProviderStep,
    ProviderRoute,
    POIResult,
    RouteInfo,
    CollectiblePoint,
    CollectibleItem,
    CollectionStats,
)
from .logger import Logger
from .geo import (
    haversine_distance,
    distance_between,
    bearing_between,
    bearing_to_compass,
    offset_coordinate,
    interpolate,
    path_length,
)
from . import policy
from .providers import OSRMDirections, OverpassPOISearch
from .synthesizer import RouteSynthesizer
from .collectibles import CollectibleGenerator, Refinement
from .store import CollectionDB
from .manager import CollectionManager
from .player import RouteSimulationPlayer, resample_path
from .app import ScenePath

__all__ = [
    "CONFIG",
    "ScenePathError",
    "ProviderUnavailable",
    "StoreWriteFailed",
    "StoreReadFailed",
    "AlreadyCollected",
    "Coordinate",
    "TransportType",
    "RouteType",
    "RouteDifficulty",
    "SpecialRouteType",
    "CollectibleCategory",
    "NavigationInstruction",
    "ProviderStep",
    "ProviderRoute",
    "POIResult",
    "RouteInfo",
    "CollectiblePoint",
    "CollectibleItem",
    "CollectionStats",
    "Logger",
    "haversine_distance",
    "distance_between",
    "bearing_between",
    "bearing_to_compass",
    "offset_coordinate",
    "interpolate",
    "path_length",
    "policy",
    "OSRMDirections",
    "OverpassPOISearch",
    "RouteSynthesizer",
    "CollectibleGenerator",
    "Refinement",
    "CollectionDB",
    "CollectionManager",
    "RouteSimulationPlayer",
    "resample_path",
    "ScenePath",
]
