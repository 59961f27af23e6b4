"""
Instance History Inspector

Prints the stored module history of every instance (or a single one),
as read by the same code path the init engine uses at startup.

Usage:
    python run_history_inspect.py --history-path /var/lib/initledger/instances
    python run_history_inspect.py --config initledger_config.json --instance i-0abc
"""

import argparse
import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / 'src'))

from initledger.core.history.errors import HistoryError
from initledger.core.history.manager import HistoryManager
from initledger.utils.config import HistoryConfig
from initledger.utils.log_helper import configure_logging


def build_parser():
    parser = argparse.ArgumentParser(description="Show recorded module history per instance.")
    parser.add_argument("--config", default=None, help="JSON configuration file")
    parser.add_argument("--history-path", default=None, help="Override the history root directory")
    parser.add_argument("--history-filename", default=None, help="Override the history file name")
    parser.add_argument("--instance", default=None, help="Only show this instance ID")
    return parser


def format_history(history):
    """Render one History as a text block."""
    run_time = history.run_time.isoformat() if history.run_time else "unknown"
    lines = [
        f"Instance: {history.instance_id}",
        f"  Run Time: {run_time}",
        f"  Version:  {history.version}",
        f"  Modules:  {len(history.module_histories)}",
    ]
    for entry in history.module_histories:
        status = "SUCCESS" if entry.success else "FAILED"
        lines.append(f"    [{status}] {entry.key}")
    return "\n".join(lines)


def main(argv=None):
    """Main entry point."""
    args = build_parser().parse_args(argv)

    config = HistoryConfig(args.config)
    if args.history_path:
        config.set_history_path(args.history_path)
    if args.history_filename:
        config.set_history_filename(args.history_filename)
    configure_logging(config.get_log_level(), config.get_log_path())

    manager = HistoryManager.from_config(config)
    try:
        if args.instance:
            history = manager.get_instance_history(args.instance)
            histories = [history] if history else []
        else:
            histories = manager.load_history()
    except (HistoryError, ValueError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    if not histories:
        print(f"No history found under {manager.history_path}")
        return 0

    print("\n\n".join(format_history(h) for h in histories))
    return 0


if __name__ == '__main__':
    sys.exit(main())
