"""Data classes for ScenePath."""

import uuid
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Optional

from .config import CONFIG


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Coordinate:
    """Geographic coordinate in degrees. Equality is exact."""
    lat: float
    lon: float

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> "Coordinate":
        return cls(lat=d["lat"], lon=d["lon"])


class TransportType(Enum):
    WALKING = "步行"
    DRIVING = "驾车"
    PUBLIC_TRANSPORT = "公交"

    @property
    def key(self) -> str:
        return self.name.lower()


class RouteType(Enum):
    FASTEST = "最快路线"
    SHORTEST = "最短路线"
    CHEAPEST = "最省钱"
    SCENIC = "风景路线"
    RECOMMENDED = "推荐路线"
    ALTERNATIVE = "备选路线"


class RouteDifficulty(Enum):
    EASY = "简单"
    MEDIUM = "中等"
    HARD = "困难"

    @classmethod
    def from_distance(cls, distance_meters: float) -> "RouteDifficulty":
        """Difficulty depends on route length only"""
        if distance_meters < CONFIG["easy_max_distance"]:
            return cls.EASY
        if distance_meters < CONFIG["medium_max_distance"]:
            return cls.MEDIUM
        return cls.HARD


class SpecialRouteType(Enum):
    NONE = "常规路线"
    SCENIC = "风景路线"
    FOOD = "美食路线"
    ATTRACTIONS = "景点路线"
    SHOPPING = "购物路线"
    CULTURAL = "文化路线"
    NATURE = "自然路线"
    NIGHTLIFE = "夜生活路线"

    @property
    def description(self) -> str:
        return _SPECIAL_ROUTE_DESCRIPTIONS[self]

    @property
    def tags(self) -> list[str]:
        return list(_SPECIAL_ROUTE_TAGS[self])


_SPECIAL_ROUTE_DESCRIPTIONS = {
    SpecialRouteType.NONE: "选择最优路线，综合考虑时间和距离",
    SpecialRouteType.SCENIC: "沿途欣赏美丽风景，经过公园、河流等景观区域",
    SpecialRouteType.FOOD: "途径热门餐厅和小吃店，体验当地美食文化",
    SpecialRouteType.ATTRACTIONS: "经过知名景点和地标建筑，适合观光游览",
    SpecialRouteType.SHOPPING: "途经商业街和购物中心，边走边逛",
    SpecialRouteType.CULTURAL: "探访博物馆、古迹和历史街区，感受城市文化",
    SpecialRouteType.NATURE: "穿过绿地、山林和水岸，亲近自然",
    SpecialRouteType.NIGHTLIFE: "经过酒吧街、夜市和灯光秀，体验城市夜晚",
}

_SPECIAL_ROUTE_TAGS = {
    SpecialRouteType.NONE: ("高效", "常规"),
    SpecialRouteType.SCENIC: ("风景", "拍照", "休闲"),
    SpecialRouteType.FOOD: ("美食", "餐厅", "小吃"),
    SpecialRouteType.ATTRACTIONS: ("景点", "观光", "拍照"),
    SpecialRouteType.SHOPPING: ("购物", "商场", "步行街"),
    SpecialRouteType.CULTURAL: ("文化", "历史", "博物馆"),
    SpecialRouteType.NATURE: ("自然", "绿地", "徒步"),
    SpecialRouteType.NIGHTLIFE: ("夜景", "酒吧", "夜市"),
}


class CollectibleCategory(Enum):
    FOOD = "美食"
    SCENIC = "风景"
    ATTRACTION = "景点"
    LANDMARK = "地标"
    CULTURE = "文化"

    @property
    def default_description(self) -> str:
        return _CATEGORY_DESCRIPTIONS[self]

    @property
    def icon_key(self) -> str:
        return _CATEGORY_ICONS[self]


_CATEGORY_DESCRIPTIONS = {
    CollectibleCategory.FOOD: "发现了一家特色美食店",
    CollectibleCategory.SCENIC: "欣赏到了美丽的风景",
    CollectibleCategory.ATTRACTION: "探索了有趣的景点",
    CollectibleCategory.LANDMARK: "发现了重要的地标建筑",
    CollectibleCategory.CULTURE: "体验了当地文化",
}

_CATEGORY_ICONS = {
    CollectibleCategory.FOOD: "fork.knife.circle.fill",
    CollectibleCategory.SCENIC: "mountain.2.circle.fill",
    CollectibleCategory.ATTRACTION: "camera.circle.fill",
    CollectibleCategory.LANDMARK: "building.2.circle.fill",
    CollectibleCategory.CULTURE: "book.circle.fill",
}


@dataclass(frozen=True)
class NavigationInstruction:
    """One step of a route. Index in the route list is the progress cursor."""
    instruction_text: str
    distance_text: str
    icon_key: str
    coordinate: Coordinate
    id: str = field(default_factory=_new_id)


@dataclass(frozen=True)
class ProviderStep:
    """A raw step as returned by a directions provider"""
    instruction_text: str
    distance_meters: float
    polyline_points: tuple[Coordinate, ...] = ()
    road_name: str = ""


@dataclass(frozen=True)
class ProviderRoute:
    """A raw route as returned by a directions provider"""
    distance_meters: float
    travel_time_seconds: float
    steps: tuple[ProviderStep, ...] = ()
    polyline: tuple[Coordinate, ...] = ()


@dataclass(frozen=True)
class POIResult:
    name: str
    phone_number: Optional[str] = None


@dataclass(frozen=True)
class RouteInfo:
    route_type: RouteType
    transport_type: TransportType
    distance_text: str
    duration_text: str
    price_text: str
    route: Optional[ProviderRoute]
    description: str
    instructions: tuple[NavigationInstruction, ...]
    special_route_type: SpecialRouteType
    highlights: tuple[str, ...]
    difficulty: RouteDifficulty
    id: str = field(default_factory=_new_id)

    @property
    def polyline(self) -> list[Coordinate]:
        """Provider polyline when one is attached, instruction coordinates otherwise"""
        if self.route is not None and self.route.polyline:
            return list(self.route.polyline)
        return [instruction.coordinate for instruction in self.instructions]


@dataclass(frozen=True)
class CollectiblePoint:
    """Session-scoped collectible candidate. is_collected is derived from collected items."""
    name: str
    category: CollectibleCategory
    coordinate: Coordinate
    description: str = ""
    is_collected: bool = False
    id: str = field(default_factory=_new_id)

    def __post_init__(self):
        if not self.description:
            object.__setattr__(self, "description", self.category.default_description)


@dataclass(frozen=True)
class CollectibleItem:
    """A persisted record of a successful collection"""
    id: str
    name: str
    category: CollectibleCategory
    latitude: float
    longitude: float
    collected_at: datetime
    route_type_tag: str
    description: str
    icon_key: str

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)

    @classmethod
    def create(cls, point: CollectiblePoint, theme: SpecialRouteType) -> "CollectibleItem":
        """Build a new item from a collectible point, stamped now"""
        return cls(
            id=_new_id(),
            name=point.name,
            category=point.category,
            latitude=point.coordinate.lat,
            longitude=point.coordinate.lon,
            collected_at=datetime.now(),
            route_type_tag=theme.value,
            description=point.description or point.category.default_description,
            icon_key=point.category.icon_key,
        )


@dataclass
class CollectionStats:
    total: int
    by_category: dict[CollectibleCategory, int]
