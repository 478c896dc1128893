"""
Tests for field extraction.

- Each known layout is recognized and mapped onto ParsedRecord fields.
- Lines no layout matches still yield a record via fallback scraping.
"""

import pytest

from loganalyzer.extractor import (
    extract_fields,
    extract_identity,
    extract_ip,
    extract_level,
    recognize,
    scrape_fields,
)


def test_standard_layout_example():
    line = "2024-01-15 10:30:45 [ERROR] Failed login attempt from 192.168.1.100 user: admin"
    record = extract_fields(line, 1)

    assert record.timestamp == "2024-01-15 10:30:45"
    assert record.level == "ERROR"
    assert record.source_ip == "192.168.1.100"
    assert record.identity == "admin"
    assert record.message == "Failed login attempt from 192.168.1.100 user: admin"
    assert record.method is None
    assert record.path is None
    assert record.status is None
    assert record.layout == "standard"
    assert record.line_number == 1


def test_combined_access_log():
    line = ('192.168.1.1 - - [15/Dec/2025:17:19:00 +0000] "GET /index.html HTTP/1.1" '
            '200 1234 "https://example.com" "Mozilla/5.0"')
    record = extract_fields(line)

    assert record.layout == "access_log"
    assert record.source_ip == "192.168.1.1"
    assert record.timestamp == "15/Dec/2025:17:19:00 +0000"
    assert record.method == "GET"
    assert record.path == "/index.html"
    assert record.status == 200
    assert record.size == 1234
    assert record.referrer == "https://example.com"
    assert record.user_agent == "Mozilla/5.0"
    assert record.identity is None
    assert record.message == '"GET /index.html HTTP/1.1" 200'


def test_access_log_with_spaces_in_path_and_auth_user():
    line = ('10.0.0.1 - bob [15/Dec/2025:17:19:00 +0000] '
            '"GET /api/users?id=1\' UNION SELECT * FROM passwords-- HTTP/1.1" 200 - "-" "curl/7.68.0"')
    record = extract_fields(line)

    assert record.layout == "access_log"
    assert record.path == "/api/users?id=1' UNION SELECT * FROM passwords--"
    assert record.identity == "bob"
    assert record.size is None
    assert record.referrer is None


def test_common_log_without_referrer_and_agent():
    line = '127.0.0.1 - frank [10/Oct/2000:13:55:36 -0700] "GET /apache_pb.gif HTTP/1.0" 200 2326'
    record = extract_fields(line)

    assert record.layout == "access_log"
    assert record.identity == "frank"
    assert record.user_agent is None


@pytest.mark.parametrize("line, layout, timestamp, level", [
    ("[2024-01-15 10:30:45] WARNING: Disk usage at 91%",
     "bracketed_timestamp", "2024-01-15 10:30:45", "WARN"),
    ("2024/01/15 10:30:45 [INFO] Service started",
     "slash_date", "2024/01/15 10:30:45", "INFO"),
    ("01/15/2024 10:30:45 [ERROR] Disk failure on sda",
     "us_date", "01/15/2024 10:30:45", "ERROR"),
    ("2024-01-15 10:30:45 CRITICAL Kernel panic on host",
     "bare_level", "2024-01-15 10:30:45", "CRITICAL"),
    ("2025-02-20T10:30:45Z ERROR Connection refused from 10.0.0.9",
     "iso8601", "2025-02-20T10:30:45Z", "ERROR"),
    ("2024-01-15 10:30:45 [warn] lower case level",
     "standard", "2024-01-15 10:30:45", "WARN"),
])
def test_alternative_layouts(line, layout, timestamp, level):
    record = recognize(line)

    assert record is not None
    assert record.layout == layout
    assert record.timestamp == timestamp
    assert record.level == level


def test_iso8601_without_level_keeps_message():
    record = extract_fields("2025-02-20 10:30:45 Connection from 10.0.0.1 denied")

    assert record.layout == "iso8601"
    assert record.message == "Connection from 10.0.0.1 denied"
    assert record.source_ip == "10.0.0.1"
    assert record.level is None


def test_syslog_layout():
    line = ("Feb 20 10:30:45 server sshd[1234]: Failed password for invalid user bob "
            "from 192.168.1.1 port 22 ssh2")
    record = extract_fields(line)

    assert record.layout == "syslog"
    assert record.timestamp == "Feb 20 10:30:45"
    assert record.host == "server"
    assert record.program == "sshd"
    assert record.source_ip == "192.168.1.1"
    assert record.identity == "bob"
    assert record.message.startswith("Failed password")


def test_json_layout():
    line = ('{"timestamp":"2025-02-20T10:30:45Z","level":"error",'
            '"message":"Authentication failed","ip":"10.0.0.1","status":"401"}')
    record = extract_fields(line)

    assert record.layout == "json"
    assert record.level == "ERROR"
    assert record.source_ip == "10.0.0.1"
    assert record.message == "Authentication failed"
    assert record.status == 401


def test_json_without_known_keys_falls_back():
    record = extract_fields('{"foo": 1}')

    assert record.layout == "fallback"
    assert record.message == '{"foo": 1}'


def test_unstructured_line_yields_bare_record():
    record = extract_fields("just free text, no structure")

    assert record.message == "just free text, no structure"
    assert record.timestamp is None
    assert record.source_ip is None
    assert record.identity is None
    assert record.level is None
    assert record.method is None
    assert record.path is None
    assert record.status is None
    assert not record.is_structured


def test_fallback_scrapes_ip_level_and_identity():
    record = scrape_fields("Suspicious activity from IP 172.16.0.50 account=svc_backup WARN")

    assert record.source_ip == "172.16.0.50"
    assert record.identity == "svc_backup"
    assert record.level == "WARN"
    assert record.layout == "fallback"


def test_extract_ip_skips_invalid_octets():
    assert extract_ip("build 1.2.3.400 pushed by 10.0.0.1") == "10.0.0.1"
    assert extract_ip("No IP here") is None


@pytest.mark.parametrize("text, expected", [
    ("user: admin", "admin"),
    ("username: bob", "bob"),
    ("login=carol", "carol"),
    ("Account: dave.", "dave"),
    ("Accepted password for root from 10.0.0.2", "root"),
    ("nothing to see", None),
])
def test_extract_identity(text, expected):
    assert extract_identity(text) == expected


def test_extract_level_requires_whole_word():
    assert extract_level("ERRORS everywhere") is None
    assert extract_level("got FATAL signal") == "FATAL"
    assert extract_level("WARNING: low disk") == "WARN"


@pytest.mark.parametrize("status", ["1e999", "Infinity", "-Infinity"])
def test_json_status_out_of_integer_range_is_dropped(status):
    record = extract_fields('{"message": "hi", "status": %s}' % status)

    assert record.layout == "json"
    assert record.message == "hi"
    assert record.status is None


def test_deeply_nested_json_falls_back():
    line = '{"a": ' + '[' * 100000 + ']' * 100000 + '}'
    record = extract_fields(line)

    assert record.layout == "fallback"
    assert record.message == line


def test_json_address_must_be_valid():
    record = extract_fields('{"ip": "999.1.1.1", "message": "retry from 10.0.0.4"}')

    assert record.source_ip == "10.0.0.4"


def test_access_log_client_must_be_an_address():
    hostname = extract_fields('crawler.example.net - - [15/Dec/2025:17:19:00 +0000] "GET / HTTP/1.1" 200 12')
    ipv6 = extract_fields('2001:db8::1 - - [15/Dec/2025:17:19:00 +0000] "GET / HTTP/1.1" 200 12')

    assert hostname.layout == "access_log"
    assert hostname.source_ip is None
    assert ipv6.source_ip == "2001:db8::1"


def test_surrounding_whitespace():
    structured = extract_fields("  2024-01-15 10:30:45 [INFO] Service started  ")
    unstructured = extract_fields("   just free text  ")

    assert structured.layout == "standard"
    assert structured.message == "Service started"
    assert unstructured.message == "   just free text  "
