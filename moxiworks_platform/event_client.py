"""
Event client for the MoxiWorks Platform.
Creates, finds, searches, updates and deletes agent calendar events.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from dateutil import parser as dateutil_parser
from dateutil import tz as dateutil_tz

from moxiworks_platform import platform_client
from moxiworks_platform.errors import RemoteRequestFailure, ValidationError
from moxiworks_platform.event_models import Event, EventGroup
from moxiworks_platform.logging_helper import Log
from moxiworks_platform.settings_manager import PlatformConfig, get_config

KEY_FIELDS = ("moxi_works_agent_id", "partner_event_id")
SEARCH_FIELDS = ("moxi_works_agent_id", "date_start", "date_end")


def _is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


def require(values: Dict[str, Any], required) -> None:
    """Raise ValidationError for the first required field that is missing or empty."""
    for name in required:
        if _is_blank(values.get(name)):
            raise ValidationError(name)


def to_timestamp(value, field: str = "date") -> int:
    """
    Convert a search bound to a unix timestamp.

    Accepts ints, numeric strings, datetimes/dates (naive values are local time)
    and date strings dateutil can parse.
    """
    if isinstance(value, bool):
        raise ValidationError(field, f"invalid {field} value: {value!r}")
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if text.lstrip('-').isdigit():
            return int(text)
        try:
            dt = dateutil_parser.parse(text)
        except (ValueError, OverflowError) as e:
            raise ValidationError(field, f"invalid {field} value: {value!r}") from e
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=dateutil_tz.tzlocal())
    return int(dt.timestamp())


class EventClient:
    """
    Client for the platform's Event resource.

    Args:
        config: PlatformConfig to use; defaults to the process-wide configuration
    """

    def __init__(self, config: Optional[PlatformConfig] = None):
        self._config = config

    @property
    def config(self) -> PlatformConfig:
        return self._config or get_config()

    def _collection_url(self) -> str:
        return f"{self.config.url}/api/events"

    def _member_url(self, partner_event_id: str) -> str:
        return f"{self.config.url}/api/events/{quote(str(partner_event_id), safe='')}"

    def _event_payload(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        unknown = set(fields) - set(Event.field_names())
        if unknown:
            name = sorted(unknown)[0]
            raise ValidationError(name, f"unknown field {name}")
        require(fields, KEY_FIELDS)
        payload = dict(fields)
        payload["event_id"] = payload["partner_event_id"]
        return payload

    def _send(self, method: str, url: str, payload: Dict[str, Any]) -> Optional[Event]:
        body = platform_client.send_request(method, url, payload, self.config)
        if body is None:
            return None
        if not isinstance(body, dict):
            raise RemoteRequestFailure(f"unexpected response from platform: {body!r}")
        return Event.from_response(body, client=self)

    def create(self, **fields) -> Optional[Event]:
        """
        Create a new Event on the platform.

        Args:
            **fields: Event attributes; moxi_works_agent_id and partner_event_id are required

        Returns:
            Event as stored by the platform

        Raises:
            ValidationError: if a required field is missing or empty
            RemoteRequestFailure: if the platform reports a failure
        """
        payload = self._event_payload(fields)
        Log.info(f"Creating event {payload['partner_event_id']} for agent {payload['moxi_works_agent_id']}")
        return self._send("POST", self._collection_url(), payload)

    def find(self, moxi_works_agent_id: str, partner_event_id: str) -> Optional[Event]:
        """Find an Event your system previously created on the platform."""
        payload = self._event_payload({
            "moxi_works_agent_id": moxi_works_agent_id,
            "partner_event_id": partner_event_id,
        })
        return self._send("GET", self._member_url(partner_event_id), payload)

    def search(self, moxi_works_agent_id: str, date_start, date_end) -> List[EventGroup]:
        """
        Search an agent's events between two dates.

        Args:
            moxi_works_agent_id: agent whose calendar to search
            date_start: date after which to search (unix timestamp, datetime or date string)
            date_end: date before which to search

        Returns:
            EventGroup per calendar date, in the order the platform returned them
        """
        require({
            "moxi_works_agent_id": moxi_works_agent_id,
            "date_start": date_start,
            "date_end": date_end,
        }, SEARCH_FIELDS)
        payload = {
            "moxi_works_agent_id": moxi_works_agent_id,
            "date_start": to_timestamp(date_start, "date_start"),
            "date_end": to_timestamp(date_end, "date_end"),
        }

        body = platform_client.send_request("GET", self._collection_url(), payload, self.config)
        if body is None:
            return []
        if not isinstance(body, list):
            raise RemoteRequestFailure(f"unexpected search response from platform: {body!r}")

        results = []
        skipped = 0
        for events_for_date in body:
            if not events_for_date:
                skipped += 1
                continue
            for event_date, event_array in events_for_date.items():
                events = []
                for entry in event_array or []:
                    if not entry:
                        skipped += 1
                        continue
                    events.append(Event.from_response(entry, client=self))
                results.append(EventGroup(date=event_date, events=events))

        if skipped:
            Log.warn(f"Skipped {skipped} empty event entries in search results")
        Log.kv({
            "stage": "search",
            "agent": moxi_works_agent_id,
            "dates": len(results),
            "events": sum(len(group.events) for group in results),
        })
        return results

    def update(self, **fields) -> Optional[Event]:
        """
        Update an Event your system previously created on the platform.

        Same fields as create(); moxi_works_agent_id and partner_event_id are required.
        """
        payload = self._event_payload(fields)
        return self._send("PUT", self._member_url(payload["partner_event_id"]), payload)

    def delete(self, moxi_works_agent_id: str, partner_event_id: str) -> bool:
        """
        Delete an Event your system previously created on the platform.

        Returns:
            True if the platform reported success, False otherwise

        Raises:
            RemoteRequestFailure: if the platform reports an 'error' status
        """
        payload = self._event_payload({
            "moxi_works_agent_id": moxi_works_agent_id,
            "partner_event_id": partner_event_id,
        })
        response = platform_client.execute("DELETE", self._member_url(partner_event_id), payload, self.config)
        body = response.json()
        status = body.get('status') if isinstance(body, dict) else None
        if status == 'error':
            Log.error(f"Platform failed to delete event {partner_event_id}")
            raise RemoteRequestFailure("unable to delete", body.get('messages'))
        Log.kv({"stage": "delete", "event": partner_event_id, "status": status})
        return status == 'success'
