"""Guitar String Detector - stable real-time guitar string identification."""

__version__ = "0.1.0"
