"""
Shared request dispatch for MoxiWorks Platform resources.
Builds headers, encodes payloads, issues the HTTP call and checks the response.
"""

import base64
from typing import Any, Dict, Optional

import requests

from moxiworks_platform.errors import AuthorizationError, RemoteRequestFailure
from moxiworks_platform.logging_helper import Log
from moxiworks_platform.settings_manager import PlatformConfig

ACCEPT_HEADER = "application/vnd.moxi-platform+json;version=1"
CONTENT_TYPE_HEADER = "application/x-www-form-urlencoded"

# Methods whose payload travels in the query string
QUERY_METHODS = ("GET", "DELETE")


def headers(config: PlatformConfig) -> Dict[str, str]:
    """
    Standard headers for every platform request.

    Raises:
        AuthorizationError: if the platform identifier or secret is not set
    """
    if not config.has_credentials():
        raise AuthorizationError()
    token = f"{config.platform_identifier}:{config.platform_secret}"
    encoded = base64.b64encode(token.encode('utf-8')).decode('utf-8')
    return {
        "Authorization": f"Basic {encoded}",
        "Accept": ACCEPT_HEADER,
        "Content-Type": CONTENT_TYPE_HEADER,
    }


def encode_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Drop unset values and spell booleans the way the platform expects."""
    encoded = {}
    for key, value in payload.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        encoded[key] = value
    return encoded


def check_for_error_in_response(body) -> None:
    """
    Raise RemoteRequestFailure when the platform reports a failed status.

    Arrays (search results) are never error reports.
    """
    if not isinstance(body, dict):
        return
    status = body.get('status')
    if status not in ('fail', 'error'):
        return
    messages = body.get('messages') or []
    if isinstance(messages, str):
        messages = [messages]
    message = "unable to perform remote action on Moxi Works platform"
    if messages:
        message += "\n" + ",".join(str(m) for m in messages)
    Log.error(f"Platform reported status '{status}': {messages}")
    raise RemoteRequestFailure(message, messages)


def execute(method: str, url: str, payload: Dict[str, Any], config: PlatformConfig) -> requests.Response:
    """
    Issue a single HTTP request to the platform and return the raw response.

    No retries; transport errors propagate as requests.RequestException.
    """
    method = method.upper()
    request_headers = headers(config)
    data = encode_payload(payload)

    kwargs = {"headers": request_headers, "timeout": config.timeout}
    if method in QUERY_METHODS:
        kwargs["params"] = data
    else:
        kwargs["data"] = data

    response = requests.request(method, url, **kwargs)

    Log.kv({
        "stage": "request",
        "method": method,
        "url": url,
        "status": response.status_code,
    })
    if config.debug:
        Log.info(f"Platform response: {response.text}")
    return response


def parse_response(response: requests.Response):
    """
    Decode the JSON body and surface platform or HTTP failures.

    Raises:
        RemoteRequestFailure: body reports 'fail' or 'error' status
        requests.HTTPError: non-2xx status without an error report
        ValueError: body is not JSON
    """
    try:
        body = response.json()
    except ValueError:
        response.raise_for_status()
        raise
    check_for_error_in_response(body)
    response.raise_for_status()
    return body


def send_request(method: str, url: str, payload: Dict[str, Any], config: PlatformConfig) -> Optional[Any]:
    """
    Send a request and return the parsed JSON body.

    A null or empty-object body returns None; an empty array is a normal result.
    """
    response = execute(method, url, payload, config)
    body = parse_response(response)
    if body is None or body == {}:
        Log.warn(f"Empty response from platform: {method.upper()} {url}")
        return None
    return body
