#!/usr/bin/env python3
"""
ScenePath - Themed routes with collectible points of interest

Usage:
    python -m scenepath START_LAT START_LON END_LAT END_LON [options]

Options:
    --theme THEME       Route theme: none, scenic, food, attractions, shopping,
                        cultural, nature, nightlife (default: none)
    --transport MODE    walking, driving or public_transport (default: walking)
    --simulate          Walk the chosen route virtually and collect nearby points
    --speed FACTOR      Simulation steps per second, 0 = as fast as possible
    --radius METERS     Collection radius (default: 100)
    --offline           Skip the directions and POI services, simulate everything
    --db FILE           Collection database path
    --html FILE         Save the route and collectibles to an HTML map
    --stats             Print collection statistics and exit
    --log FILE          Log file path
    --seed N            Random seed for collectible placement
"""

import argparse
from datetime import datetime

from .app import ScenePath
from .config import CONFIG
from .geo import bearing_to_compass
from .models import Coordinate, SpecialRouteType, TransportType


def _print_routes(routes: dict):
    for transport_type, candidates in routes.items():
        print(f"\n{transport_type.value}:")
        for index, route in enumerate(candidates):
            price = f" {route.price_text}" if route.price_text else ""
            print(f"  [{index}] {route.route_type.value} {route.distance_text} "
                  f"{route.duration_text}{price} ({route.difficulty.value})")
            print(f"      {route.description}")
            if route.highlights:
                print(f"      亮点: {'、'.join(route.highlights)}")


def _print_stats(app: ScenePath):
    stats = app.manager.stats()
    print(f"\nCollected items: {stats.total}")
    for category, count in sorted(stats.by_category.items(), key=lambda pair: pair[0].name):
        print(f"  {category.value}: {count}")


def main():
    parser = argparse.ArgumentParser(
        description="ScenePath - Themed routes with collectible points of interest"
    )
    parser.add_argument("coords", type=float, nargs="*", metavar="COORD",
                        help="START_LAT START_LON END_LAT END_LON")
    parser.add_argument("--theme", default="none",
                        choices=[theme.name.lower() for theme in SpecialRouteType],
                        help="Route theme (default: none)")
    parser.add_argument("--transport", default="walking",
                        choices=[transport.key for transport in TransportType],
                        help="Transport type (default: walking)")
    parser.add_argument("--route-index", type=int, default=0,
                        help="Which candidate to navigate (default: 0)")
    parser.add_argument("--simulate", action="store_true",
                        help="Walk the route virtually and collect nearby points")
    parser.add_argument("--speed", type=float, default=0.0,
                        help="Simulation steps per second (default: 0, no pause)")
    parser.add_argument("--radius", type=float, default=None,
                        help=f"Collection radius in meters (default: {CONFIG['collection_radius']})")
    parser.add_argument("--offline", action="store_true",
                        help="Do not call the directions or POI services")
    parser.add_argument("--db", metavar="FILE", default=CONFIG["db_path"],
                        help=f"Collection database (default: {CONFIG['db_path']})")
    parser.add_argument("--html", metavar="FILE",
                        help="Save route and collectibles to an HTML map")
    parser.add_argument("--stats", action="store_true",
                        help="Print collection statistics and exit")
    parser.add_argument("--log", metavar="FILE",
                        help="Log file path (default: scenepath_TIMESTAMP.log)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for collectible placement")

    args = parser.parse_args()

    if not args.stats and len(args.coords) != 4:
        parser.error("expected START_LAT START_LON END_LAT END_LON")

    log_path = args.log
    if not log_path:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_path = f"scenepath_{timestamp}.log"

    app = ScenePath(
        db_path=args.db,
        log_path=log_path,
        offline=args.offline,
        collection_radius=args.radius,
        seed=args.seed,
    )
    try:
        if args.stats:
            _print_stats(app)
            return

        start = Coordinate(args.coords[0], args.coords[1])
        end = Coordinate(args.coords[2], args.coords[3])
        theme = SpecialRouteType[args.theme.upper()]
        transport_type = TransportType[args.transport.upper()]

        routes = app.search(start, end, theme)
        _print_routes(routes)

        candidates = routes[transport_type]
        if not 0 <= args.route_index < len(candidates):
            parser.error(f"--route-index must be between 0 and {len(candidates) - 1}")
        route = candidates[args.route_index]

        collectibles = app.begin_navigation(route)
        print(f"\nNavigating: {route.route_type.value} ({transport_type.value}), "
              f"{len(collectibles)} collectibles, heading {bearing_to_compass(app.player.current_heading)}")

        if args.simulate:
            collected = app.simulate_walk(speed=args.speed)
            print(f"\nCollected {len(collected)} new items:")
            for item in collected:
                print(f"  {item.name} ({item.category.value})")

        app.generator.wait_for_refinements(timeout=CONFIG["provider_timeout"])
        app.manager.apply_refinements()

        if args.html:
            from visualize import create_map
            m = create_map(route, app.manager.available_collectibles, app.manager.collected_items)
            m.save(args.html)
            print(f"\nMap saved to: {args.html}")

        _print_stats(app)
        app.end_navigation()
    finally:
        app.close()


if __name__ == "__main__":
    main()
