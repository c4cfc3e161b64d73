#!/usr/bin/env python3
"""
logsift - log file analysis for '<timestamp> [<level>] <message>' logs.
Main application entry point.
"""

import argparse
import json
import sys
from datetime import datetime, timedelta
from typing import Dict, Any, List, Optional
import logging

from . import __version__
from .analyzer import LogAnalyzer
from .config.loader import default_config, load_config, setup_logging
from .errors import LogsiftError
from .filters.yaml_rules import create_sample_rules, level_predicate, load_rules
from .inputs.file_input import FileLineSource
from .outputs.file_sink import FileLineSink
from .outputs.http_sink import HttpLineSink
from .parsers.bracket_parser import ERROR_POLICIES, format_entry, parse_timestamp
from .schemas.log_entry import LogEntry
from .workspace import Workspace

SEPARATOR = "=" * 60


class LogsiftApp:
    """Main logsift application."""

    def __init__(self, config: Dict[str, Any]):
        """Initialize logsift with processed configuration."""
        self.config = config
        self.analyzer = LogAnalyzer(config['analyzer'])
        self.logger = logging.getLogger(__name__)

    def _predicate(self):
        """Export predicate from the configured rule file, or the configured level."""
        export_config = self.config['export']
        if export_config.get('rules'):
            return load_rules(export_config['rules'])
        return level_predicate(export_config['level'])

    def _setup_sinks(self) -> list:
        sinks = []

        if self.config['output_file']['enabled']:
            sinks.append(FileLineSink(self.config['output_file']['path']))

        if self.config['output_http']['enabled']:
            sinks.append(HttpLineSink(self.config['output_http']))

        if not sinks:
            self.logger.debug("No output sinks configured")
        return sinks

    def run(self, log_file: str, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Analyze one log file and export the filtered lines.

        Args:
            log_file: Path to the log file
            now: Reference time for recent errors

        Returns:
            Summary dictionary
        """
        with FileLineSource(log_file) as source:
            result = self.analyzer.parse_lines(source)

        summary = self.analyzer.summarize(result.entries, now=now)
        summary['source'] = log_file
        summary['failures'] = [
            {'line_number': failure.line_number, 'line': failure.line, 'reason': failure.reason}
            for failure in result.failures
        ]

        exported = self.analyzer.export_filtered(result.entries, self._predicate())
        for sink in self._setup_sinks():
            sink.write_lines(exported)
        summary['exported'] = len(exported)

        return summary


def demo_entries(now: datetime) -> List[LogEntry]:
    """Sample entries spread over the two hours before now."""
    return [
        LogEntry(now - timedelta(hours=2), 'INFO', 'Application started'),
        LogEntry(now - timedelta(hours=2) + timedelta(minutes=5), 'DEBUG', 'Loading configuration'),
        LogEntry(now - timedelta(hours=1), 'WARN', 'Connection timeout, retrying'),
        LogEntry(now - timedelta(hours=1) + timedelta(minutes=30), 'ERROR', 'Database connection failed'),
        LogEntry(now - timedelta(minutes=45), 'INFO', 'Processing user request'),
        LogEntry(now - timedelta(minutes=30), 'ERROR', 'Null pointer exception in module X'),
        LogEntry(now - timedelta(minutes=15), 'INFO', 'Request completed successfully'),
        LogEntry(now - timedelta(minutes=5), 'DEBUG', 'Cleaning up resources'),
    ]


def run_demo(analyzer: LogAnalyzer, workspace: Workspace, now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Write a sample log, analyze it and export its errors inside a workspace.

    Args:
        analyzer: Analyzer to run
        workspace: Active workspace that owns the generated files
        now: Reference time, defaults to the current local time

    Returns:
        Summary dictionary
    """
    now = (now or datetime.now()).replace(microsecond=0)
    log_path = workspace.path('application.log')
    export_path = workspace.path('errors-only.log')

    entries = demo_entries(now)
    FileLineSink(log_path).write_lines(format_entry(entry) for entry in entries)
    print(f"Created log file with {len(entries)} entries")

    with FileLineSource(log_path) as source:
        parsed = analyzer.parse_lines(source, errors='strict').entries

    print("\nEntries by level:")
    for level, count in analyzer.count_by_level(parsed).items():
        print(f"  {level}: {count}")

    print("\nRecent errors (last hour):")
    for entry in analyzer.recent_errors(parsed, now=now, window=timedelta(hours=1)):
        print(f"  {format_entry(entry)}")

    exported = analyzer.export_filtered(parsed, level_predicate('ERROR'), sink=FileLineSink(export_path))
    print(f"\nExported {len(exported)} error entries to errors-only.log")

    summary = analyzer.summarize(parsed, now=now, window=timedelta(hours=1))
    summary['exported'] = len(exported)
    return summary


def print_report(summary: Dict[str, Any]):
    print(SEPARATOR)
    print(f"Log analysis: {summary.get('source', 'demo')}")
    print(SEPARATOR)
    print(f"Total entries : {summary['total']}")
    if summary['first_timestamp']:
        print(f"Time range    : {summary['first_timestamp']} - {summary['last_timestamp']}")

    print("\nEntries by level:")
    for level, count in summary['by_level'].items():
        print(f"  {level}: {count}")

    print("\nRecent errors:")
    if not summary['recent_errors']:
        print("  none")
    for line in summary['recent_errors']:
        print(f"  {line}")

    if summary.get('failures'):
        print(f"\nMalformed lines: {len(summary['failures'])}")
        for failure in summary['failures']:
            print(f"  line {failure['line_number']}: {failure['reason']}")

    print(f"\nExported {summary['exported']} entries")


def build_config(args) -> Dict[str, Any]:
    """Load configuration and apply command-line overrides."""
    config = load_config(args.config) if args.config else default_config()

    if args.window_minutes is not None:
        config['analyzer']['recent_window_minutes'] = args.window_minutes
    if args.on_error:
        config['analyzer']['on_error'] = args.on_error
    if args.log_file:
        config['input']['path'] = args.log_file
    if args.rules:
        config['export']['rules'] = args.rules
    if args.level:
        config['export']['level'] = args.level
        config['export']['rules'] = None
    if args.export:
        config['output_file'] = {'enabled': True, 'path': args.export}

    return config


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="logsift - analyze '<timestamp> [<level>] <message>' log files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Summarize a log file and export its errors
  logsift --log-file application.log --export errors-only.log

  # Use a configuration file and a reference time
  logsift --config logsift.ini --now "2024-01-01 09:11:00" --window-minutes 10

  # Run the built-in demonstration in a scratch directory
  logsift --demo
        """
    )

    parser.add_argument("--config", help="Path to logsift.ini configuration file")
    parser.add_argument("--log-file", help="Log file to analyze")
    parser.add_argument("--now", help="Reference time 'YYYY-MM-DD HH:MM:SS' for recent errors")
    parser.add_argument("--window-minutes", type=int, help="Recent error window in minutes")
    parser.add_argument("--level", help="Export entries of this level")
    parser.add_argument("--rules", help="YAML export rules file")
    parser.add_argument("--export", metavar="PATH", help="Write exported lines to this file")
    parser.add_argument("--on-error", choices=ERROR_POLICIES, help="How to treat malformed lines")
    parser.add_argument("--json", action="store_true", help="Print the summary as JSON")
    parser.add_argument("--demo", action="store_true", help="Run the demonstration in a scratch directory")
    parser.add_argument("--validate-config", action="store_true", help="Validate configuration and exit")
    parser.add_argument("--create-sample-rules", metavar="PATH", help="Create sample YAML rules file at specified path")
    parser.add_argument("--version", action="version", version=f"logsift {__version__}")

    args = parser.parse_args()

    # Handle special commands
    if args.create_sample_rules:
        create_sample_rules(args.create_sample_rules)
        return

    if args.window_minutes is not None and args.window_minutes <= 0:
        parser.error("--window-minutes must be positive")

    try:
        config = build_config(args)
        setup_logging(config)

        if args.validate_config:
            print("[INFO] Configuration is valid")
            return

        now = parse_timestamp(args.now) if args.now else None
        app = LogsiftApp(config)

        if args.demo:
            with Workspace() as workspace:
                summary = run_demo(app.analyzer, workspace, now=now)
        else:
            log_file = config['input']['path']
            if not log_file:
                parser.error("--log-file is required unless [input.file] path is configured or --demo is used")
            summary = app.run(log_file, now=now)

        if args.json:
            print(json.dumps(summary, indent=2))
        elif not args.demo:
            print_report(summary)

    except (LogsiftError, OSError, ValueError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
