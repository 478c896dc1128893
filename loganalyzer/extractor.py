"""Log Analyzer - Field extraction

Known layouts are tried in order and the first recognizer that matches
builds the record. When none match, scrape_fields() pulls out whatever it
can find, so every line yields a record.
"""

import ipaddress
import json
import logging
import re
from dataclasses import replace
from typing import Callable, Dict, Optional

from .models import ParsedRecord
from .patterns import (
    IDENTITY_PATTERNS,
    IPV4_PATTERN,
    JSON_FIELDS,
    LEVEL_PATTERN,
    LOG_PATTERNS,
)

logger = logging.getLogger(__name__)

REFERENCE_LAYOUT = 'standard'

_IPV4_RE = re.compile(IPV4_PATTERN)
_LEVEL_RE = re.compile(LEVEL_PATTERN)
_IDENTITY_RES = tuple(re.compile(p, re.IGNORECASE) for p in IDENTITY_PATTERNS)


def extract_ip(text: str) -> Optional[str]:
    """First valid dotted-quad IPv4 address in text"""
    for match in _IPV4_RE.finditer(text):
        candidate = match.group(0)
        try:
            ipaddress.IPv4Address(candidate)
        except ValueError:
            continue
        return candidate
    return None


def valid_address(value: Optional[str]) -> Optional[str]:
    """value if it is an IPv4 or IPv6 address, else None"""
    if not value:
        return None
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return None
    return value


def normalize_level(level: str) -> str:
    level = level.strip().upper()
    return 'WARN' if level == 'WARNING' else level


def extract_level(text: str) -> Optional[str]:
    match = _LEVEL_RE.search(text)
    return normalize_level(match.group(1)) if match else None


def extract_identity(text: str) -> Optional[str]:
    for pattern in _IDENTITY_RES:
        match = pattern.search(text)
        if match:
            identity = match.group('identity').rstrip('.')
            if identity:
                return identity
    return None


def _none_if_dash(value: Optional[str]) -> Optional[str]:
    return None if value in (None, '', '-') else value


def _build_access_record(name: str, groups: Dict, line: str) -> ParsedRecord:
    request = f"{groups['method']} {groups['path']}"
    if groups.get('protocol'):
        request = f"{request} {groups['protocol']}"
    size = groups.get('size')
    return ParsedRecord(
        message=f'"{request}" {groups["status"]}',
        timestamp=groups['timestamp'],
        source_ip=valid_address(groups['ip']),
        identity=_none_if_dash(groups.get('user')),
        method=groups['method'],
        path=groups['path'],
        status=int(groups['status']),
        size=int(size) if size and size.isdigit() else None,
        referrer=_none_if_dash(groups.get('referrer')),
        user_agent=_none_if_dash(groups.get('user_agent')),
        layout=name,
    )


def _build_text_record(name: str, groups: Dict, line: str) -> ParsedRecord:
    message = groups['message'].strip() or line
    level = groups.get('level')
    return ParsedRecord(
        message=message,
        timestamp=groups['timestamp'],
        source_ip=extract_ip(message),
        identity=extract_identity(message),
        level=normalize_level(level) if level else extract_level(message),
        host=groups.get('host'),
        program=groups.get('program'),
        layout=name,
    )


class Recognizer:
    """One known layout; recognize() returns a record or None"""

    def __init__(self, name: str, pattern: str,
                 build: Callable[[str, Dict, str], ParsedRecord]):
        self.name = name
        self.regex = re.compile(pattern)
        self.build = build

    def recognize(self, line: str) -> Optional[ParsedRecord]:
        match = self.regex.match(line)
        if not match:
            return None
        return self.build(self.name, match.groupdict(), line)


class JsonRecognizer:
    """One JSON object per line, mapped through JSON_FIELDS"""

    def __init__(self):
        self.name = 'json'

    def recognize(self, line: str) -> Optional[ParsedRecord]:
        if not line.startswith('{'):
            return None
        try:
            data = json.loads(line)
        except (ValueError, RecursionError):
            return None
        if not isinstance(data, dict):
            return None

        fields = {}
        for field_name, keys in JSON_FIELDS.items():
            for key in keys:
                if data.get(key) not in (None, ''):
                    fields[field_name] = data[key]
                    break
        if not fields:
            return None

        message = str(fields.get('message', line))
        status = fields.get('status')
        try:
            status = int(status) if status is not None else None
        except (TypeError, ValueError, OverflowError):
            status = None
        level = fields.get('level')

        return ParsedRecord(
            message=message,
            timestamp=str(fields['timestamp']) if 'timestamp' in fields else None,
            source_ip=valid_address(str(fields.get('source_ip', ''))) or extract_ip(message),
            identity=str(fields['identity']) if 'identity' in fields else extract_identity(message),
            level=normalize_level(str(level)) if level is not None else extract_level(message),
            method=str(fields['method']) if 'method' in fields else None,
            path=str(fields['path']) if 'path' in fields else None,
            status=status,
            user_agent=str(fields['user_agent']) if 'user_agent' in fields else None,
            layout=self.name,
        )


def _builder_for(name: str) -> Callable[[str, Dict, str], ParsedRecord]:
    return _build_access_record if name == 'access_log' else _build_text_record


RECOGNIZERS = tuple(
    Recognizer(name, pattern, _builder_for(name))
    for name, pattern in LOG_PATTERNS.items()
) + (JsonRecognizer(),)


def recognize(line: str) -> Optional[ParsedRecord]:
    """Record from the first matching layout, or None"""
    for recognizer in RECOGNIZERS:
        record = recognizer.recognize(line)
        if record is not None:
            return record
    return None


def scrape_fields(line: str) -> ParsedRecord:
    """Best-effort extraction for a line no layout matched"""
    return ParsedRecord(
        message=line,
        source_ip=extract_ip(line),
        identity=extract_identity(line),
        level=extract_level(line),
    )


def extract_fields(line: str, line_number: int = 0) -> ParsedRecord:
    """Layouts see the trimmed line; a fallback record keeps it verbatim"""
    record = recognize(line.strip())
    if record is None:
        logger.debug("Line %d: no layout matched, scraping fields", line_number)
        record = scrape_fields(line)
    else:
        logger.debug("Line %d: matched %s layout", line_number, record.layout)
    return replace(record, line_number=line_number)
