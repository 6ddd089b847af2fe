"""
LogSentinel - Entry point.

Subcommands:
1. analyze: parse one auth log, detect brute force bursts, store + email alerts
2. alerts:  list stored alerts, filtered by IP and/or date range
3. watch:   analyze every new log file dropped into a folder

Alerts are appended to output/alerts.jsonl. Without EMAIL_USER/EMAIL_PASS
notifications are only logged (dry-run).
"""

import argparse
import json
import sys
from pathlib import Path

from rich.console import Console

from logsentinel import __version__
from logsentinel import analysis
from logsentinel import config
from logsentinel import logger
from logsentinel import output
from logsentinel.detector import default_config
from logsentinel.notifier import build_notifier
from logsentinel.store import JsonlAlertStore
from logsentinel.watcher import DirectoryWatcher

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="logsentinel",
        description="LogSentinel - brute force burst detection for auth logs",
    )
    parser.add_argument("--version", action="version", version=f"LogSentinel v{__version__}")
    parser.add_argument("--alerts-file", type=Path, default=config.ALERTS_FILE,
                        help="JSON Lines alert store (default: output/alerts.jsonl)")
    sub = parser.add_subparsers(dest="command", required=True)

    detection = argparse.ArgumentParser(add_help=False)
    detection.add_argument("--threshold", type=int, default=None,
                           help=f"Failed attempts per burst (default: {config.FAILED_ATTEMPTS_THRESHOLD})")
    detection.add_argument("--window", type=float, default=None,
                           help=f"Max burst span in seconds (default: {config.DETECTION_WINDOW_SECONDS})")
    detection.add_argument("--year", type=int, default=None,
                           help="Year for syslog timestamps (default: current year)")
    detection.add_argument("--email", default=config.EMAIL_TO or None,
                           help="Recipient for alert emails (default: $EMAIL_TO)")

    analyze = sub.add_parser("analyze", parents=[detection], help="Analyze one log file")
    analyze.add_argument("logfile", nargs="?", default=str(config.SAMPLE_LOG_PATH),
                         help="Log file to analyze (default: logs/sample_auth.log)")
    analyze.add_argument("-j", "--json", action="store_true", help="JSON output only")
    analyze.add_argument("--no-store", action="store_true", help="Do not persist alerts")

    alerts = sub.add_parser("alerts", help="List stored alerts")
    alerts.add_argument("--ip", help="Only alerts for this IP")
    alerts.add_argument("--from", dest="start", help="From date (YYYY-MM-DD, inclusive)")
    alerts.add_argument("--to", dest="end", help="To date (YYYY-MM-DD, inclusive)")
    alerts.add_argument("-j", "--json", action="store_true", help="JSON output only")

    watch = sub.add_parser("watch", parents=[detection], help="Analyze new files dropped into a folder")
    watch.add_argument("directory", nargs="?", default=str(config.WATCH_DIR),
                       help="Folder to watch (default: watched-logs/)")
    watch.add_argument("--interval", type=float, default=config.POLL_INTERVAL_SECONDS,
                       help="Seconds between polls")
    return parser


def run_analyze(args) -> int:
    detection = default_config(args.threshold, args.window, args.year)
    store = None if args.no_store else JsonlAlertStore(args.alerts_file)
    try:
        result = analysis.analyze_file(
            args.logfile,
            detection=detection,
            store=store,
            notifier=build_notifier(),
            recipient=args.email,
        )
    except (FileNotFoundError, analysis.MissingInputError) as e:
        logger.log_error("Cannot analyze log", path=args.logfile, error=str(e))
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        output.print_result(result, console)
    return 0


def run_alerts(args) -> int:
    store = JsonlAlertStore(args.alerts_file)
    try:
        records = store.query(ip=args.ip, start=args.start, end=args.end)
    except ValueError as e:
        logger.log_error("Invalid date filter", error=str(e))
        return 1

    if args.json:
        print(json.dumps({"count": len(records), "alerts": records}, indent=2))
    else:
        output.print_alerts(records, console)
    return 0


def run_watch(args) -> int:
    detection = default_config(args.threshold, args.window, args.year)
    store = JsonlAlertStore(args.alerts_file)
    notifier = build_notifier()

    def handle(path: Path) -> None:
        result = analysis.analyze_file(
            path,
            detection=detection,
            store=store,
            notifier=notifier,
            recipient=args.email,
        )
        logger.log_info(
            "Log analyzed",
            path=str(path),
            lines=result.total_lines,
            suspicious_ips=[a.source_address for a in result.alerts],
        )

    DirectoryWatcher(Path(args.directory), handle, args.interval).run()
    return 0


COMMANDS = {
    "analyze": run_analyze,
    "alerts": run_alerts,
    "watch": run_watch,
}


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
