"""Pytest configuration and fixtures for ajam-client tests."""

from typing import Dict, List, Optional

import pytest
from multidict import CIMultiDict, CIMultiDictProxy

from ajam import HTTPClient
from ajam.client.transport import RawResponse


def make_response(body: str, set_cookie: Optional[List[str]] = None, status: int = 200) -> RawResponse:
    """Build a transport reply as HTTPTransport.request returns it."""
    headers = CIMultiDict()
    headers['Content-Type'] = 'text/xml'
    for value in set_cookie or []:
        headers.add('Set-Cookie', value)
    return RawResponse(status, 'OK', body.encode('utf-8'), CIMultiDictProxy(headers))


def ajax_response(*records: Dict[str, str]) -> str:
    """Render records the way Asterisk's /mxml does."""
    elements = []
    for record in records:
        attrs = ' '.join(f"{key}='{value}'" for key, value in record.items())
        elements.append(f"<response type='object' id='unknown'><generic {attrs} /></response>")
    return "<ajax-response>\n" + "\n".join(elements) + "\n</ajax-response>\n"


@pytest.fixture
def client() -> HTTPClient:
    return HTTPClient('pbx.example.com', username='manager', secret='secret')


@pytest.fixture
def success_body() -> str:
    return ajax_response({'response': 'Success', 'ping': 'Pong', 'timestamp': '1700000000.123'})


@pytest.fixture
def event_batch_body() -> str:
    return ajax_response(
        {'event': 'Newchannel', 'channel': 'SIP/1000-00000001', 'uniqueid': '1700000000.1'},
        {'event': 'WaitEventComplete'},
    )


@pytest.fixture
def recorder():
    """Callback that stores (payload, client) pairs."""
    calls = []

    def callback(payload, client):
        calls.append(payload)

    callback.calls = calls
    return callback
