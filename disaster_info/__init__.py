"""Disaster risk lookup around a point: hazard classification plus synthetic shelters and history."""

__version__ = "0.1.0"
