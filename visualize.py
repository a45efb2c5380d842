#!/usr/bin/env python3
"""
Visualize a route, its collectibles and the collected items on an interactive map.

Usage:
    python visualize.py [--db PATH] [--output PATH]

Examples:
    python visualize.py
    python visualize.py --db scenepath_collection.db --output my_collection.html
"""

import argparse
from pathlib import Path
from typing import Optional

import folium
from folium import plugins

from scenepath import CONFIG, CollectionDB, StoreReadFailed
from scenepath.models import CollectibleCategory, CollectibleItem, CollectiblePoint, RouteInfo

CATEGORY_COLORS = {
    CollectibleCategory.FOOD: "orange",
    CollectibleCategory.SCENIC: "green",
    CollectibleCategory.ATTRACTION: "blue",
    CollectibleCategory.LANDMARK: "purple",
    CollectibleCategory.CULTURE: "red",
}

DEFAULT_CENTER = (39.9042, 116.4074)


def _map_center(route: Optional[RouteInfo], items: list[CollectibleItem]) -> tuple[float, float]:
    if route is not None and route.polyline:
        first = route.polyline[0]
        return first.lat, first.lon
    if items:
        return items[0].latitude, items[0].longitude
    return DEFAULT_CENTER


def create_map(
    route: Optional[RouteInfo] = None,
    collectibles: Optional[list[CollectiblePoint]] = None,
    collected_items: Optional[list[CollectibleItem]] = None,
) -> folium.Map:
    """Create an interactive map with route, collectible and collection overlays."""
    collectibles = collectibles or []
    collected_items = collected_items or []

    m = folium.Map(
        location=list(_map_center(route, collected_items)),
        zoom_start=15,
        tiles="CartoDB positron"
    )
    folium.TileLayer("OpenStreetMap", name="OpenStreetMap").add_to(m)

    route_layer = folium.FeatureGroup(name="Route", show=True)
    available_layer = folium.FeatureGroup(name="Collectibles", show=True)
    collected_layer = folium.FeatureGroup(name="Collected items", show=True)

    if route is not None:
        coords = [[point.lat, point.lon] for point in route.polyline]
        if len(coords) >= 2:
            folium.PolyLine(
                coords,
                weight=5,
                color="#3b82f6",
                opacity=0.8,
                popup=folium.Popup(
                    f"<b>{route.route_type.value}</b><br>"
                    f"{route.distance_text} · {route.duration_text}<br>"
                    f"{route.description}",
                    max_width=250
                )
            ).add_to(route_layer)

        for index, instruction in enumerate(route.instructions):
            folium.CircleMarker(
                [instruction.coordinate.lat, instruction.coordinate.lon],
                radius=4,
                color="#1e293b",
                fill=True,
                popup=f"{index + 1}. {instruction.instruction_text} ({instruction.distance_text})"
            ).add_to(route_layer)

    for point in collectibles:
        folium.Marker(
            [point.coordinate.lat, point.coordinate.lon],
            popup=folium.Popup(
                f"<b>{point.name}</b><br>{point.category.value}<br>{point.description}"
                + ("<br><i>已收集</i>" if point.is_collected else ""),
                max_width=200
            ),
            icon=folium.Icon(
                color="gray" if point.is_collected else CATEGORY_COLORS[point.category],
                icon="star"
            )
        ).add_to(available_layer)

    for item in collected_items:
        folium.CircleMarker(
            [item.latitude, item.longitude],
            radius=6,
            color=CATEGORY_COLORS[item.category],
            fill=True,
            fill_opacity=0.7,
            popup=folium.Popup(
                f"<b>{item.name}</b><br>{item.category.value}<br>"
                f"{item.collected_at:%Y-%m-%d %H:%M}<br>{item.route_type_tag}",
                max_width=200
            )
        ).add_to(collected_layer)

    route_layer.add_to(m)
    available_layer.add_to(m)
    collected_layer.add_to(m)

    folium.LayerControl().add_to(m)
    plugins.Fullscreen().add_to(m)

    print(f"Map created: {len(collectibles)} collectibles, {len(collected_items)} collected items")

    return m


def main():
    parser = argparse.ArgumentParser(
        description="Visualize collected items on a map"
    )
    parser.add_argument("--db", default=CONFIG["db_path"],
                        help=f"Database path (default: {CONFIG['db_path']})")
    parser.add_argument("--output", "-o", default="scenepath_map.html",
                        help="Output HTML file (default: scenepath_map.html)")

    args = parser.parse_args()

    if not Path(args.db).exists():
        print(f"Database not found: {args.db}")
        print("Run python -m scenepath first to collect some items.")
        return 1

    store = CollectionDB(args.db)
    try:
        items = store.fetch_all()
    except StoreReadFailed as e:
        print(f"Error: {e}")
        return 1
    finally:
        store.close()

    m = create_map(collected_items=items)
    m.save(args.output)
    print(f"\nMap saved to: {args.output}")
    print(f"Open in browser: file://{Path(args.output).absolute()}")
    return 0


if __name__ == "__main__":
    exit(main())
