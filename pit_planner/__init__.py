"""Pit-stop and fuel strategy planner for endurance racing."""

__version__ = "0.1.0"
