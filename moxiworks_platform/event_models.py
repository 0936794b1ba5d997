"""
Event data models for the MoxiWorks Platform.
Defines Event (a calendar entry owned by an agent) and EventGroup (one day of search results).
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional

from moxiworks_platform.logging_helper import Log

# Attributes the platform may send as strings but which are integers locally
INT_ATTRS = ("remind_minutes_before", "event_start", "event_end")


def _int_value(value) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError):
        pass
    try:
        return int(float(value))
    except (TypeError, ValueError):
        Log.warn(f"Ignoring non-numeric value: {value!r}")
        return None


@dataclass
class Event:
    """
    A calendar entry associated with an agent.
    Identified by the agent ID plus your system's partner_event_id.
    """
    moxi_works_agent_id: Optional[str] = None
    partner_event_id: Optional[str] = None
    event_subject: Optional[str] = None
    event_location: Optional[str] = None
    note: Optional[str] = None
    send_reminder: Optional[bool] = None
    remind_minutes_before: Optional[int] = None  # Only used when send_reminder is true
    is_meeting: Optional[bool] = None
    event_start: Optional[int] = None  # Unix timestamp
    event_end: Optional[int] = None    # Unix timestamp
    recurring: Optional[bool] = None
    all_day: Optional[bool] = None

    # Client that fetched this event, used by save() and delete()
    _client: Any = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        for name in INT_ATTRS:
            setattr(self, name, _int_value(getattr(self, name)))

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls) if not f.name.startswith('_')]

    @classmethod
    def from_response(cls, data: Dict[str, Any], client=None) -> "Event":
        """
        Build an Event from a parsed platform response.

        Args:
            data: JSON object returned by the platform
            client: EventClient to bind for save() and delete()

        Returns:
            Event with known attributes set; unknown keys are ignored
        """
        known = set(cls.field_names())
        values = {k: v for k, v in data.items() if k in known}
        return cls(_client=client, **values)

    def to_hash(self) -> Dict[str, Any]:
        """Flat field map with unset attributes left out."""
        result = {}
        for name in self.field_names():
            value = getattr(self, name)
            if value is not None:
                result[name] = value
        return result

    def _bound_client(self):
        if self._client is None:
            from moxiworks_platform.event_client import EventClient
            self._client = EventClient()
        return self._client

    def save(self) -> Optional["Event"]:
        """
        Save this event to the platform.

        Equivalent to EventClient.update() with the current field values.
        """
        return self._bound_client().update(**self.to_hash())

    def delete(self) -> bool:
        """Delete this event from the platform. Returns success of the delete action."""
        return self._bound_client().delete(
            moxi_works_agent_id=self.moxi_works_agent_id,
            partner_event_id=self.partner_event_id,
        )


@dataclass
class EventGroup:
    """Events recorded on one calendar date, as returned by search."""
    date: str  # "MM/DD/YY"
    events: List[Event] = field(default_factory=list)
