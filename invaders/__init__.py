"""Tick-synchronized space invaders battle over a grid of message-passing processes."""

__version__ = "0.1.0"
