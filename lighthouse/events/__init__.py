"""
Events module - powiadomienia silnika.

Zawiera:
- GameEvent: Dataclass reprezentująca zdarzenie
- EventType: Enum typów zdarzeń
- EventBus: Publikacja, subskrypcje i historia zdarzeń
"""

from .event_bus import GameEvent, EventType, EventBus

__all__ = ["GameEvent", "EventType", "EventBus"]
