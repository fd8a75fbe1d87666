"""Configuration and diagnostic client for WiFi data loggers."""

__version__ = "0.1.0"
