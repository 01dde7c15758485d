"""Session control for live string detection."""

from .string_detection_service import ServiceCommand, StringDetectionService

__all__ = ["ServiceCommand", "StringDetectionService"]
