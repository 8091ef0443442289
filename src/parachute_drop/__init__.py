"""Parachute Drop: a parachutist jumps from a plane over a windy meadow."""

__version__ = "0.1.0"
