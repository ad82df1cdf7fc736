"""Route and departure planning for cars on a road network, with a step simulator."""

__version__ = "0.1.0"

__all__ = ["car", "cli", "cross", "parsing", "planner", "road", "scheduler"]