"""Activity logging for RupeeWise."""

from rupeewise.activity.logger import ActivityLogger, configure_logging

__all__ = ["ActivityLogger", "configure_logging"]
