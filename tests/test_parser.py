"""
Tests for batch parsing.

- One record per non-blank line, blank lines ignored entirely.
- Fallback lines are counted as failed_to_parse with capped diagnostics.
"""

import pytest

from loganalyzer import parser as parser_module
from loganalyzer.errors import ParserInvariantError
from loganalyzer.parser import LogParser, diagnose, excerpt

MIXED_LOG = """\
2024-01-15 10:30:45 [ERROR] Failed login attempt from 192.168.1.100 user: admin
[2024-01-15 10:31:00] INFO: Health check ok

192.168.1.1 - - [15/Dec/2025:17:19:00 +0000] "GET /index.html HTTP/1.1" 200 1234 "-" "Mozilla/5.0"
just free text, no structure

%%%% ----
Feb 20 10:30:45 server sshd[1234]: Accepted publickey for deploy from 10.0.0.2 port 50022 ssh2
"""


def test_every_non_blank_line_yields_one_record():
    outcome = LogParser().parse_text(MIXED_LOG)

    non_blank = [line for line in MIXED_LOG.splitlines() if line.strip()]
    assert len(outcome.records) == len(non_blank)
    assert outcome.total_lines == len(non_blank)
    assert outcome.successfully_parsed + outcome.failed_to_parse == outcome.total_lines
    assert [r.message for r in outcome.records if not r.is_structured] == [
        "just free text, no structure",
        "%%%% ----",
    ]


def test_blank_lines_keep_physical_line_numbers():
    outcome = LogParser().parse_lines(["first", "", "   ", "fourth"])

    assert [r.line_number for r in outcome.records] == [1, 4]
    assert outcome.total_lines == 2
    assert [d.line_number for d in outcome.diagnostics] == [1, 4]


def test_format_quality_counts():
    outcome = LogParser().parse_text(MIXED_LOG)
    quality = outcome.format_quality

    assert quality.perfect_format == 1
    assert quality.alternative_format == 3
    assert quality.fallback_format == 2
    assert outcome.successfully_parsed == 4
    assert outcome.failed_to_parse == 2


def test_unstructured_line_diagnostic_suggests_timestamp():
    outcome = LogParser().parse_lines(["just free text, no structure"])

    assert len(outcome.diagnostics) == 1
    diagnostic = outcome.diagnostics[0]
    assert diagnostic.line_number == 1
    assert diagnostic.raw_excerpt == "just free text, no structure"
    assert diagnostic.reason == "Missing timestamp"
    assert "timestamp" in diagnostic.suggested_fix


def test_structured_lines_get_no_diagnostics():
    outcome = LogParser().parse_lines([
        "2024-01-15 10:30:45 [INFO] fine",
        "2024-01-15 10:30:46 [WARN] also fine",
    ])

    assert outcome.diagnostics == []
    assert outcome.failed_to_parse == 0


def test_diagnostics_are_capped():
    lines = [f"free text number {i}" for i in range(25)]
    outcome = LogParser().parse_lines(lines)

    assert outcome.failed_to_parse == 25
    assert len(outcome.diagnostics) == 10
    assert outcome.diagnostics[-1].line_number == 10


def test_custom_diagnostic_cap():
    outcome = LogParser(max_diagnostics=2).parse_lines(["a", "b", "c"])

    assert len(outcome.diagnostics) == 2


def test_long_lines_are_truncated_in_diagnostics():
    line = "x" * 150
    outcome = LogParser().parse_lines([line])

    assert outcome.diagnostics[0].raw_excerpt == "x" * 100 + "..."
    assert outcome.records[0].message == line
    assert excerpt("short") == "short"


@pytest.mark.parametrize("line, reason", [
    ("%%%% ----", "Invalid content"),
    ("15-01-2024 10:30:45 [ERROR] Disk full", "Unsupported date format"),
    ("2024.01.15 10:30:45 [ERROR] Disk full", "Unsupported date format"),
    ("2024/01/15 10:30:45 ERROR Disk full", "Level not bracketed"),
    ("2024/01/15 10:30:45 - Disk full", "Unrecognized layout"),
    ("2024-01-15 login ok", "Missing time"),
    ("10:30:45 service restarted", "Missing date"),
    ("just free text, no structure", "Missing timestamp"),
])
def test_diagnose_reasons(line, reason):
    assert diagnose(line)[0] == reason


def test_parsing_is_deterministic():
    first = LogParser().parse_text(MIXED_LOG)
    second = LogParser().parse_text(MIXED_LOG)

    assert first == second


def test_line_without_record_is_a_defect(monkeypatch):
    monkeypatch.setattr(parser_module, "extract_fields", lambda line, number: None)

    with pytest.raises(ParserInvariantError) as excinfo:
        LogParser().parse_lines(["anything"])
    assert excinfo.value.line_number == 1


@pytest.mark.parametrize("line", [
    '{"message": "hi", "status": 1e999}',
    '{"status": Infinity, "message": "x"}',
    '{"status": [1, 2], "level": 7, "message": {"nested": true}, "user": null}',
    '{"a": ' + '[' * 100000 + ']' * 100000 + '}',
    '{not json at all',
    '[1, 2, 3]',
    '"' * 500,
    'A' * 100000,
    '\x00\x01\x02\xff� binary noise',
    '999.999.999.999 - - [bad] "GET / HTTP/1.1" 200 -',
])
def test_hostile_lines_still_yield_one_record(line):
    outcome = LogParser().parse_lines([line])

    assert outcome.total_lines == 1
    assert len(outcome.records) == 1
    assert outcome.records[0].line_number == 1


def test_fallback_message_keeps_surrounding_whitespace():
    outcome = LogParser().parse_lines(["   just free text  \n"])

    assert outcome.records[0].message == "   just free text  "
    assert outcome.diagnostics[0].raw_excerpt == "just free text"
