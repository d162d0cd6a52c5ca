"""Widget extension: read-only consumer of the shared store."""

from .timeline import Timeline, WidgetEntry, WidgetTimelineProvider

__all__ = ["Timeline", "WidgetEntry", "WidgetTimelineProvider"]
