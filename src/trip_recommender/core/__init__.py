"""Itinerary generation, coordinate resolution and pipeline orchestration."""
