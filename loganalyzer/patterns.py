"""Log Analyzer - Constants and patterns"""

from .models import ThreatType

VERSION = "2.0.0"

# Log layout patterns, tried in this order. 'standard' is the reference layout.
LOG_PATTERNS = {
    'access_log': (
        r'^(?P<ip>\S+) (?P<ident>\S+) (?P<user>\S+) \[(?P<timestamp>[^\]]+)\] '
        r'"(?P<method>[A-Z]+) (?P<path>[^"]*?)(?: (?P<protocol>HTTP/\d(?:\.\d)?))?" '
        r'(?P<status>\d{3}) (?P<size>\d+|-)'
        r'(?: "(?P<referrer>[^"]*)" "(?P<user_agent>[^"]*)")?'
    ),
    'standard': r'^(?P<timestamp>\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}) \[(?P<level>\w+)\] (?P<message>.+)$',
    'bracketed_timestamp': r'^\[(?P<timestamp>\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2})\] (?P<level>\w+): (?P<message>.+)$',
    'slash_date': r'^(?P<timestamp>\d{4}/\d{2}/\d{2} \d{2}:\d{2}:\d{2}) \[(?P<level>\w+)\] (?P<message>.+)$',
    'us_date': r'^(?P<timestamp>\d{2}/\d{2}/\d{4} \d{2}:\d{2}:\d{2}) \[(?P<level>\w+)\] (?P<message>.+)$',
    'bare_level': (
        r'^(?P<timestamp>\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}) '
        r'(?P<level>ERROR|WARNING|WARN|INFO|CRITICAL|DEBUG|FATAL)\s+(?P<message>.+)$'
    ),
    'syslog': (
        r'^(?P<timestamp>[A-Z][a-z]{2}\s+\d{1,2}\s+\d{2}:\d{2}:\d{2})\s+(?P<host>\S+)\s+'
        r'(?P<program>[^\s:\[]+)(?:\[(?P<pid>\d+)\])?:\s*(?P<message>.+)$'
    ),
    'iso8601': (
        r'^\[?(?P<timestamp>\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}:\d{2}(?:[.,]\d+)?(?:Z|[+-]\d{2}:?\d{2})?)\]?\s+'
        r'(?:\[?(?P<level>ERROR|WARNING|WARN|INFO|CRITICAL|DEBUG|FATAL|TRACE)\]?:?\s+)?(?P<message>.+)$'
    ),
}

# JSON lines: record field -> accepted keys, first present wins
JSON_FIELDS = {
    'timestamp': ('timestamp', '@timestamp', 'time', 'ts'),
    'level': ('level', 'severity', 'lvl'),
    'message': ('message', 'msg'),
    'source_ip': ('ip', 'client_ip', 'remote_addr', 'source_ip', 'src_ip'),
    'identity': ('user', 'username', 'account'),
    'method': ('method',),
    'path': ('path', 'url', 'uri'),
    'status': ('status', 'status_code'),
    'user_agent': ('user_agent', 'http_user_agent'),
}

# Fallback scraping
IPV4_PATTERN = r'\b(?:\d{1,3}\.){3}\d{1,3}\b'
LEVEL_PATTERN = r'\b(ERROR|WARNING|WARN|INFO|CRITICAL|DEBUG|FATAL)\b'
IDENTITY_PATTERNS = [
    r'\b(?:username|user|login|account)\s*[:=]\s*["\']?(?P<identity>[\w.@-]+)',
    r'\bfor (?:invalid user\s+)?(?P<identity>[\w.@-]+) from\b',
]

# Diagnostic hints for lines that fell back to scraping
TIMESTAMP_HINT = r'(\d{4}[-/.]\d{2}[-/.]\d{2}|\d{2}[-/.]\d{2}[-/.]\d{4})[ T]\d{2}:\d{2}:\d{2}'
UNSUPPORTED_DATE_HINT = r'\b(\d{2}-\d{2}-\d{4}|\d{4}\.\d{2}\.\d{2}|\d{2}\.\d{2}\.\d{4})\b'
DATE_HINT = r'\b(\d{4}[-/]\d{2}[-/]\d{2}|\d{2}/\d{2}/\d{4})\b'
TIME_HINT = r'\b\d{2}:\d{2}:\d{2}\b'
LEVEL_HINT = r'\b(error|warning|warn|info|critical|debug|fatal)\b'

# Command names must end at whitespace or a shell metacharacter, so "; id=42" is data
_SHELL_COMMANDS = r"(?:ls|cat|id|whoami|uname|wget|curl|bash|sh|nc|netcat|rm|chmod|python|perl|ping)(?=\s|$|[;|&`)])"

# Threat signatures, evaluated in declaration order; the first match wins.
# 'patterns' are searched case-insensitively in the message, method, path
# (raw and decoded) and user agent. 'identities', 'levels' and 'statuses'
# compare record fields directly.
THREAT_PATTERNS = {
    ThreatType.SQL_INJECTION: {
        'patterns': [
            r"union(\s|%20|\+)+(all(\s|%20|\+)+)?select",
            r"\bor(\s|%20|\+)+1(\s|%20)*=(\s|%20)*1\b",
            r"('|%27)(\s|%20|\+)*or(\s|%20|\+)*('|%27)1('|%27)(\s|%20)*=(\s|%20)*('|%27)1",
            r"drop(\s|%20|\+)+table",
            r"('|%27|;)(\s|%20)*--",
            r"\bsleep\s*\(\s*\d",
            r"\bbenchmark\s*\(",
            r"waitfor\s+delay",
            r"sql\s+injection",
        ],
    },
    ThreatType.COMMAND_INJECTION: {
        'patterns': [
            r";\s*" + _SHELL_COMMANDS,
            r"\|\s*" + _SHELL_COMMANDS,
            r"&&\s*" + _SHELL_COMMANDS,
            r"`\s*" + _SHELL_COMMANDS,
            r"\$\(\s*" + _SHELL_COMMANDS,
        ],
    },
    ThreatType.MALWARE: {
        'patterns': [
            r"\b(malware|trojan|virus|ransomware|backdoor|rootkit|webshell|cryptominer|botnet)\b",
        ],
    },
    ThreatType.ROOT_ACCESS: {
        'patterns': [
            r"\buser:\s*root\b",
            r"\broot\s+access\b",
            r"/root/",
            r"privilege\s+escalation",
        ],
        'identities': ['root'],
    },
    ThreatType.CRITICAL_ALERT: {
        'patterns': [],
        'levels': ['CRITICAL', 'FATAL'],
    },
    ThreatType.PATH_TRAVERSAL: {
        'patterns': [
            r"\.\./",
            r"\.\.\\",
            r"%2e%2e(%2f|/|%5c)",
            r"\.\.%2f",
            r"/etc/passwd",
            r"/etc/shadow",
        ],
    },
    ThreatType.SUSPICIOUS_FILE_ACCESS: {
        'patterns': [
            r"suspicious\s+file",
            r"(^|[/\s])\.env\b",
            r"\.htpasswd",
            r"\.htaccess",
            r"wp-config\.php",
            r"\.git/",
            r"\.aws/credentials",
            r"\bid_rsa\b",
            r"\.ssh/",
        ],
    },
    ThreatType.XSS: {
        'patterns': [
            r"<script",
            r"javascript\s*:",
            r"\bonerror\s*=",
            r"\bonload\s*=",
            r"<svg[^>]+onload",
            r"<iframe",
            r"document\.cookie",
        ],
    },
    ThreatType.FAILED_LOGIN: {
        'patterns': [
            r"failed\s+login",
            r"login\s+failed",
            r"failed\s+password",
            r"authentication\s+(failure|failed)",
            r"invalid\s+password",
            r"invalid\s+user",
            r"access\s+denied",
        ],
        'statuses': [401, 403],
    },
    ThreatType.PORT_SCANNING: {
        'patterns': [
            r"port\s*scan",
            r"\b(nmap|masscan|zmap|nikto|sqlmap|nessus|acunetix|burp|gobuster|dirb)\b",
        ],
        'min_distinct_ports': 5,
    },
}

# A run of port numbers in one message, e.g. "ports 21,22,23,25,80"
PORT_LIST_PATTERN = r"\bports?\s*[:=]?\s*\d{1,5}(?:\s*[,;/ ]\s*\d{1,5}){4,}"
