"""
The ajam-client package talks to the Asterisk manager interface over HTTP (AJAM)
using asyncio and aiohttp.

Commands are sent as query parameters to the ``/mxml`` location of the Asterisk
HTTP server, and replies are XML documents made of ``generic`` elements.

Enable the manager and its HTTP access in /etc/asterisk/manager.conf:

```
[general]
enabled = yes
webenabled = yes
bindaddr = 127.0.0.1

[hello]
secret = world
read = all
write = all
```

and the built-in HTTP server in /etc/asterisk/http.conf:

```
[general]
enabled = yes
bindaddr = 127.0.0.1
```

Usage:

```
client = HTTPClient('127.0.0.1', username='hello', secret='world')
client.register_callback('event', on_event)
await client.connect()
```

# License: Apache License 2.0
"""
__author__ = 'XpycTee'

from ajam.base import AJAMClientBase, CONNECTED, DISCONNECTED, ERROR, EVENT, WAIT_EVENT_COMPLETE
from ajam.client.http_client import HTTPClient
from ajam.exceptions import AJAMError, TransportError, DecodeError, RemoteCommandError
from ajam.session import SessionManager
