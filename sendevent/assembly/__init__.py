"""Event assembly from command-line values."""

from .builder import EventBuilder, ManualEventOptions

__all__ = ["EventBuilder", "ManualEventOptions"]
