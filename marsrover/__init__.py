"""Mars rover mission control simulation and Rover AI chat proxy."""

__version__ = "0.1.0"
