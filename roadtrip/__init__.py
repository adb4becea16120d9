"""Road trip cost planner: geocoding, routing, tolls and fuel cost."""

__version__ = "0.1.0"
