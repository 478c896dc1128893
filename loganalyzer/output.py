"""Log Analyzer - Report output"""

from typing import Dict

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

SEVERITY_COLORS = {
    'Critical': 'red bold',
    'High': 'red',
    'Medium': 'yellow',
    'Low': 'blue',
    'None': 'green',
}


def print_report(report: Dict, console=None):
    console = console or Console()

    console.print("\n" + "═" * 70, style="cyan")
    console.print("              LOG ANALYZER REPORT", style="bold cyan")
    console.print("═" * 70, style="cyan")

    # Summary
    parsing = report['parsing_info']
    risk = report['risk_assessment']
    ips = report['ip_analysis']
    cvss_color = SEVERITY_COLORS.get(risk['cvss_severity'], 'white')
    console.print(Panel.fit(
        f"Total Lines: [cyan]{parsing['total_lines']:,}[/]\n"
        f"Structured: [cyan]{parsing['successfully_parsed']:,}[/]  "
        f"Fallback: [yellow]{parsing['failed_to_parse']:,}[/]\n"
        f"Total Threats: [{'red' if risk['total_threats'] > 0 else 'green'}]{risk['total_threats']:,}[/]\n"
        f"Unique IPs: [cyan]{len(ips['all_ips']):,}[/]\n"
        f"Risk Level: [{cvss_color}]{risk['level']}[/] - {risk['description']}\n"
        f"CVSS Aggregate: [{cvss_color}]{risk['cvss_aggregate_score']:.1f} ({risk['cvss_severity']})[/]",
        title="Summary",
        border_style="cyan"
    ))

    # Threats with CVSS scores
    cvss_scores = report['threat_statistics']['cvss_scores']
    if cvss_scores:
        console.print("\n" + "─" * 70, style="cyan")
        console.print("THREATS (CVSS 3.1)", style="bold")
        table = Table(box=box.ROUNDED)
        table.add_column("Type", style="cyan")
        table.add_column("Count", style="red")
        table.add_column("Score")
        table.add_column("Severity")
        table.add_column("Vector", style="dim")
        for entry in cvss_scores:
            color = SEVERITY_COLORS.get(entry['severity'], 'white')
            table.add_row(
                entry['threat_type'],
                str(entry['count']),
                f"{entry['cvss_score']:.1f}",
                f"[{color}]{entry['severity']}[/]",
                entry['vector_string'],
            )
        console.print(table)
        console.print(f"  {risk['cvss_explanation']}", style="dim")

    # High risk addresses
    if ips['high_risk_ips']:
        console.print("\n" + "─" * 70, style="cyan")
        console.print("HIGH RISK IPs", style="bold red")
        table = Table(box=box.ROUNDED)
        table.add_column("IP Address", style="red")
        table.add_column("Occurrences", style="yellow")
        for info in ips['high_risk_ips'][:10]:
            table.add_row(info['address'], str(info['occurrence_count']))
        console.print(table)

    # Top IPs
    if ips['all_ips']:
        console.print("\n" + "─" * 70, style="cyan")
        console.print("TOP IPs (by occurrences)", style="bold")
        table = Table(box=box.ROUNDED)
        table.add_column("IP Address", style="cyan")
        table.add_column("Occurrences", style="white")
        table.add_column("Risk")
        for info in ips['all_ips'][:10]:
            color = 'red' if info['risk_level'] == 'high' else 'green'
            table.add_row(info['address'], str(info['occurrence_count']),
                          f"[{color}]{info['risk_level']}[/]")
        console.print(table)

    # Parse diagnostics
    if parsing['errors']:
        console.print("\n" + "─" * 70, style="cyan")
        console.print("PARSE DIAGNOSTICS", style="bold")
        table = Table(box=box.ROUNDED)
        table.add_column("Line", style="cyan")
        table.add_column("Reason", style="yellow")
        table.add_column("Suggested Fix")
        for diagnostic in parsing['errors']:
            table.add_row(str(diagnostic['line_number']), escape(diagnostic['reason']),
                          escape(diagnostic['suggested_fix']))
        console.print(table)

    console.print("\n" + "═" * 70, style="cyan")
