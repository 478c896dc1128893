"""Log Analyzer - Threat detection"""

import logging
import re
from collections import Counter
from typing import Dict, Iterable, Optional
from urllib.parse import unquote_plus

from .models import ParsedRecord, ThreatType
from .patterns import PORT_LIST_PATTERN, THREAT_PATTERNS

logger = logging.getLogger(__name__)


class ThreatDetector:
    """Classifies records against the ordered threat catalogue.

    Signatures are checked in priority order and detection stops at the first
    match, so a record counts toward at most one threat type even when its
    text fits several. A request carrying both SQL and XSS payloads is
    reported as SQL injection only.
    """

    def __init__(self):
        self.threat_patterns = self._compile_patterns()
        self.port_list = re.compile(PORT_LIST_PATTERN, re.IGNORECASE)

    def _compile_patterns(self) -> Dict[ThreatType, Dict]:
        compiled = {}
        for threat_type, data in THREAT_PATTERNS.items():
            compiled[threat_type] = {
                'patterns': [re.compile(p, re.IGNORECASE) for p in data['patterns']],
                'identities': frozenset(i.lower() for i in data.get('identities', ())),
                'levels': frozenset(data.get('levels', ())),
                'statuses': frozenset(data.get('statuses', ())),
                'min_distinct_ports': data.get('min_distinct_ports'),
            }
        return compiled

    @staticmethod
    def inspected_text(record: ParsedRecord) -> str:
        parts = [record.message]
        if record.method:
            parts.append(record.method)
        if record.path:
            parts.append(record.path)
            decoded = unquote_plus(record.path)
            if decoded != record.path:
                parts.append(decoded)
        if record.user_agent:
            parts.append(record.user_agent)
        return ' '.join(parts)

    def _distinct_ports(self, text: str) -> int:
        best = 0
        for match in self.port_list.finditer(text):
            ports = set(re.findall(r'\d{1,5}', match.group(0)))
            best = max(best, len(ports))
        return best

    def _matches(self, signature: Dict, record: ParsedRecord, text: str) -> bool:
        if record.identity and record.identity.lower() in signature['identities']:
            return True
        if record.level and record.level.upper() in signature['levels']:
            return True
        if record.status is not None and record.status in signature['statuses']:
            return True
        for pattern in signature['patterns']:
            if pattern.search(text):
                return True
        min_ports = signature['min_distinct_ports']
        return bool(min_ports) and self._distinct_ports(text) >= min_ports

    def detect(self, record: ParsedRecord) -> Optional[ThreatType]:
        """The highest-priority threat type this record matches, if any"""
        text = self.inspected_text(record)
        for threat_type, signature in self.threat_patterns.items():
            if self._matches(signature, record, text):
                logger.debug("Line %d classified as %s",
                             record.line_number, threat_type.value)
                return threat_type
        return None

    def tally(self, records: Iterable[ParsedRecord]) -> Counter:
        counts: Counter = Counter()
        for record in records:
            threat_type = self.detect(record)
            if threat_type is not None:
                counts[threat_type] += 1
        return counts
