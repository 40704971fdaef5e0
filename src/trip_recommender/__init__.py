"""Free-text travel requests turned into geocoded day-by-day itineraries."""

__version__ = "0.1.0"
