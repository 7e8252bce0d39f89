"""Cardfolio: digital business cards and personal portfolio sites."""

__version__ = "0.1.0"
