"""Reservation and availability engine for the Staybook rental platform."""

__version__ = "0.1.0"
