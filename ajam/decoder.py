import re
import xml.etree.ElementTree as ET
from typing import Dict, List

from ajam.exceptions import DecodeError, RemoteCommandError

XML_DECLARATION = "<?xml version='1.0' encoding='UTF-8'?>"
RECORD_TAG = 'generic'
FALLBACK_ERROR_MESSAGE = 'Unable to process command'

_DECLARATION_RE = re.compile(r'^\s*<\?xml[^>]*\?>')


def _normalize(raw: bytes, encoding: str) -> bytes:
    """
    Repairs the body Asterisk sends so it parses as a standalone document.

    :param raw: The response body
    :param encoding: The encoding of the body
    :return: UTF-8 document with an XML declaration and no newlines
    """
    text = raw.decode(encoding, errors='replace')
    text = _DECLARATION_RE.sub('', text, count=1).replace('\n', '')
    return (XML_DECLARATION + text).encode('utf-8')


def decode(raw: bytes, encoding: str = 'utf-8') -> List[Dict[str, str]]:
    """
    Decodes an AJAM XML response into a list of records.

    Every ``generic`` element at any depth becomes one record holding its attributes
    as plain strings, in document order. A document without such elements decodes
    to an empty list.

    :param raw: The response body
    :param encoding: The encoding of the body
    :return: The decoded records
    :raises DecodeError: If the body is not well-formed XML
    """
    try:
        root = ET.fromstring(_normalize(raw, encoding))
    except ET.ParseError as e:
        raise DecodeError(f"Unable to process response retrieved from the remote asterisk: {e}",
                          body=raw) from e
    return [dict(element.attrib) for element in root.iter(RECORD_TAG)]


def classify(records: List[Dict[str, str]], action: str = None) -> List[Dict[str, str]]:
    """
    Checks whether the first record reports an error.

    :param records: The decoded records
    :param action: The action the records answer, for error reporting
    :return: The records unchanged when the command succeeded
    :raises RemoteCommandError: If the first record has ``response="Error"``
    """
    if records and records[0].get('response') == 'Error':
        message = records[0].get('message') or FALLBACK_ERROR_MESSAGE
        raise RemoteCommandError(message, action=action, response=records)
    return records
