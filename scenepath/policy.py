"""Special route policy: what each route theme allows, searches for and spawns."""

from dataclasses import dataclass

from .models import (
    CollectibleCategory,
    RouteDifficulty,
    RouteType,
    SpecialRouteType,
    TransportType,
)


@dataclass(frozen=True)
class RouteNarrative:
    description: str
    highlights: tuple[str, ...]
    difficulty: RouteDifficulty


DETOUR_PERCENTAGES = {
    SpecialRouteType.NONE: 0,
    SpecialRouteType.SCENIC: 50,
    SpecialRouteType.NATURE: 50,
    SpecialRouteType.FOOD: 30,
    SpecialRouteType.ATTRACTIONS: 30,
    SpecialRouteType.SHOPPING: 30,
    SpecialRouteType.CULTURAL: 25,
    SpecialRouteType.NIGHTLIFE: 25,
}

PRIORITY_KEYWORDS = {
    SpecialRouteType.NONE: (),
    SpecialRouteType.SCENIC: ("park", "lake", "river", "mountain", "garden", "viewpoint"),
    SpecialRouteType.FOOD: ("restaurant", "cafe", "street food", "bakery", "food court"),
    SpecialRouteType.ATTRACTIONS: ("attraction", "museum", "monument", "landmark", "gallery"),
    SpecialRouteType.SHOPPING: ("mall", "market", "boutique", "department store", "shopping street"),
    SpecialRouteType.CULTURAL: ("museum", "temple", "theatre", "library", "historic site"),
    SpecialRouteType.NATURE: ("park", "forest", "trail", "lake", "botanical garden"),
    SpecialRouteType.NIGHTLIFE: ("bar", "night market", "pub", "club", "live music"),
}

# TODO: shopping, cultural, nature and nightlife spawn no collectibles; needs a
# product decision on which categories they should map to.
COLLECTIBLE_CATEGORIES = {
    SpecialRouteType.FOOD: (CollectibleCategory.FOOD, CollectibleCategory.CULTURE),
    SpecialRouteType.SCENIC: (CollectibleCategory.SCENIC, CollectibleCategory.LANDMARK),
    SpecialRouteType.ATTRACTIONS: (
        CollectibleCategory.ATTRACTION,
        CollectibleCategory.CULTURE,
        CollectibleCategory.LANDMARK,
    ),
}

# theme -> (primary description, alternative description, primary highlights, alternative highlights)
NARRATIVES = {
    SpecialRouteType.NONE: (
        "综合考虑时间和距离的最优路线",
        "备选路线，可避开拥堵路段",
        ("用时最短", "路况较好"),
        ("备选方案",),
    ),
    SpecialRouteType.SCENIC: (
        "精选风景路线，经过公园、湖泊和河岸",
        "风景备选路线，沿途绿化较好",
        ("湖光山色", "城市公园", "最佳拍照点"),
        ("河岸步道", "绿树成荫"),
    ),
    SpecialRouteType.FOOD: (
        "美食路线，途经热门餐厅和老字号小吃",
        "美食备选路线，经过特色街边小吃",
        ("老字号餐厅", "特色小吃", "网红咖啡"),
        ("街边美食", "甜品店"),
    ),
    SpecialRouteType.ATTRACTIONS: (
        "景点路线，串联知名景点和地标建筑",
        "景点备选路线，经过小众景点",
        ("知名景点", "地标建筑", "博物馆"),
        ("小众景点", "历史街区"),
    ),
    SpecialRouteType.SHOPPING: (
        "购物路线，途经主要商圈和购物中心",
        "购物备选路线，经过特色小店",
        ("购物中心", "步行街", "品牌旗舰店"),
        ("特色小店", "创意市集"),
    ),
    SpecialRouteType.CULTURAL: (
        "文化路线，探访博物馆、古迹和历史街区",
        "文化备选路线，经过传统街巷",
        ("博物馆", "历史古迹", "传统建筑"),
        ("传统街巷", "手工艺坊"),
    ),
    SpecialRouteType.NATURE: (
        "自然路线，穿过绿地、林荫和水岸",
        "自然备选路线，经过社区绿地",
        ("城市绿肺", "林荫小道", "水岸风光"),
        ("社区公园", "花园小径"),
    ),
    SpecialRouteType.NIGHTLIFE: (
        "夜生活路线，途经酒吧街和夜市",
        "夜生活备选路线，经过灯光夜景",
        ("酒吧街", "夜市小吃", "城市夜景"),
        ("灯光秀", "深夜食堂"),
    ),
}

TRANSPORT_NOTES = {
    TransportType.WALKING: "适合步行游览",
    TransportType.DRIVING: "沿途可停车游览",
    TransportType.PUBLIC_TRANSPORT: "可乘坐公共交通到达",
}

ROUTE_TYPE_DESCRIPTIONS = {
    RouteType.FASTEST: "推荐路线，路况较好，用时最短",
    RouteType.SHORTEST: "距离最短，可能有拥堵",
    RouteType.CHEAPEST: "费用最低，适合节省开支",
    RouteType.SCENIC: "风景路线，沿途景色优美",
    RouteType.RECOMMENDED: "推荐路线",
    RouteType.ALTERNATIVE: "备选路线",
}

CATEGORY_KEYWORDS = {
    CollectibleCategory.FOOD: ("餐厅", "咖啡厅", "美食", "小吃", "甜品", "面包店"),
    CollectibleCategory.SCENIC: ("公园", "花园", "风景区", "湖泊", "海滩", "自然景观"),
    CollectibleCategory.ATTRACTION: ("景点", "旅游景点", "名胜", "博物馆", "展览馆"),
    CollectibleCategory.LANDMARK: ("地标", "建筑", "塔", "桥", "历史建筑", "纪念碑"),
    CollectibleCategory.CULTURE: ("艺术", "文化", "表演", "剧院", "画廊", "展览中心"),
}

FALLBACK_NAMES = {
    CollectibleCategory.FOOD: (
        "特色小吃店", "传统茶楼", "网红咖啡厅", "老字号餐厅", "街边美食",
        "特色面馆", "手工糕点店", "地方特色菜", "小笼包店", "烧饼铺",
    ),
    CollectibleCategory.SCENIC: (
        "观景台", "樱花小径", "湖心亭", "古桥风光", "山顶美景",
        "河岸风光", "花园小径", "竹林幽径", "石桥美景", "湖边栈道",
    ),
    CollectibleCategory.ATTRACTION: (
        "历史古迹", "文化展馆", "艺术画廊", "纪念碑", "传统建筑",
        "文化街区", "古建筑群", "历史博物馆", "文物保护区", "古典园林",
    ),
    CollectibleCategory.LANDMARK: (
        "地标建筑", "城市雕塑", "历史纪念碑", "标志性建筑", "著名广场",
        "特色建筑", "城市地标", "标志性塔楼", "纪念性建筑", "城市象征",
    ),
    CollectibleCategory.CULTURE: (
        "文化中心", "传统工艺", "民俗体验", "艺术展示", "文化遗产",
        "传统表演", "手工艺坊", "文化体验馆", "民俗博物馆", "艺术工作室",
    ),
}


def detour_budget(theme: SpecialRouteType) -> int:
    """Maximum route length inflation allowed for a theme, in percent"""
    return DETOUR_PERCENTAGES[theme]


def keywords(theme: SpecialRouteType) -> list[str]:
    return list(PRIORITY_KEYWORDS[theme])


def collectible_categories(theme: SpecialRouteType) -> list[CollectibleCategory]:
    """Categories a theme spawns. Empty for the plain route and unmapped themes."""
    return list(COLLECTIBLE_CATEGORIES.get(theme, ()))


def category_keywords(category: CollectibleCategory) -> list[str]:
    return list(CATEGORY_KEYWORDS[category])


def category_fallback_names(category: CollectibleCategory) -> list[str]:
    return list(FALLBACK_NAMES[category])


def route_type_description(route_type: RouteType) -> str:
    return ROUTE_TYPE_DESCRIPTIONS[route_type]


def route_narrative(theme: SpecialRouteType, distance_meters: float,
                    transport_type: TransportType, is_primary: bool) -> RouteNarrative:
    """Description, highlights and difficulty for a route candidate.

    Difficulty comes from distance alone, whatever the theme.
    """
    primary_desc, alt_desc, primary_highlights, alt_highlights = NARRATIVES[theme]
    description = primary_desc if is_primary else alt_desc
    if theme != SpecialRouteType.NONE:
        description = f"{description}，{TRANSPORT_NOTES[transport_type]}"
    return RouteNarrative(
        description=description,
        highlights=primary_highlights if is_primary else alt_highlights,
        difficulty=RouteDifficulty.from_distance(distance_meters),
    )
