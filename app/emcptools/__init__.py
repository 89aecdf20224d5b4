"""emcp-tools - maintenance utilities for the Essen medical computing platform."""

__version__ = "0.1.0"
