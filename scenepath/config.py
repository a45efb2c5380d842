"""Configuration settings for ScenePath."""

CONFIG = {
    # Collection
    "collection_radius": 100,  # meters - points within this distance can be collected
    "duplicate_radius": 50,  # meters - same-category items closer than this are the same place
    # Collectible placement
    "collectible_min_offset": 50,  # meters from the instruction coordinate
    "collectible_max_offset": 200,
    "min_extra_collectibles": 2,
    "poi_search_radius": 200,  # meters
    "poi_max_workers": 4,  # concurrent POI lookups
    # Simulation player
    "step_spacing": 20,  # meters between resampled path points
    "playback_speed": 1.0,
    "average_speed": 5.0,  # m/s used for remaining time estimates
    # Simulated routes
    "simulated_instruction_count": 8,
    "minutes_per_km": {
        "walking": 12,
        "driving": 2,
        "public_transport": 4,
    },
    "min_simulated_minutes": 10,
    # Pricing
    "driving_price_rates": (0.8, 0.7, 0.9),  # yuan per km by candidate slot
    "public_transport_price": "¥3-8",
    # Difficulty thresholds (meters)
    "easy_max_distance": 5000,
    "medium_max_distance": 15000,
    # External services
    "osrm_url": "https://router.project-osrm.org",
    "overpass_url": "https://overpass-api.de/api/interpreter",
    "provider_timeout": 15,  # seconds
    "db_path": "scenepath_collection.db",
}
