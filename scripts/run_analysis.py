#!/usr/bin/env python3
"""
Learner Analytics Script

Run readiness scoring, weakness detection and recommendation synthesis for
one learner snapshot and print the results as JSON.

Input file layout:
    {
      "progress": {"user_id": "...", "last_activity": "...", "analytics": {...}},
      "sessions": [{"id": "...", "component": "reading", "started_at": "...", ...}]
    }

Usage:
    # Full report
    python scripts/run_analysis.py learner.json

    # Only the readiness assessment, calibrated for B2
    python scripts/run_analysis.py learner.json --target-level b2 --section readiness

    # With scheduling preferences and verbose logging
    python scripts/run_analysis.py learner.json --preferences prefs.json --debug

Environment Variables (set in .env or environment):
    - ANALYTICS_LOG_LEVEL: Logging level (default: INFO)
    - ANALYTICS_ALGORITHM_VERSION: Version stamped on recommendations
    - ANALYTICS_CONFIG_PATH: Optional YAML tuning file
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

# Add backend to path for imports (must be before exam_analytics.* imports)
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from dotenv import load_dotenv

# Load environment variables from project root .env
project_root = Path(__file__).parent.parent
if (project_root / ".env").exists():
    load_dotenv(project_root / ".env")

from pydantic import ValidationError

from exam_analytics.config import get_settings
from exam_analytics.enums import Level
from exam_analytics.errors import AnalyticsError
from exam_analytics.models import ExamSession, UserPreferences, UserProgress
from exam_analytics.services import create_pipeline

SECTIONS = ("readiness", "weaknesses", "recommendations", "all")


def setup_logging(level_name: str, debug: bool = False) -> None:
    """Configure logging from settings, with --debug taking precedence."""
    level = logging.DEBUG if debug else getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def load_json(path: str) -> Any:
    with open(path) as f:
        return json.load(f)


def load_snapshot(path: str) -> tuple[UserProgress, list[ExamSession]]:
    """Validate the input file into a progress record and its sessions."""
    data = load_json(path)
    progress = UserProgress.model_validate(data["progress"])
    sessions = [ExamSession.model_validate(s) for s in data.get("sessions", [])]
    return progress, sessions


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run exam analytics for one learner snapshot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("input", help="JSON file with progress and sessions")
    parser.add_argument(
        "--target-level",
        choices=[level.value for level in Level],
        help="Target exam level for the study-hours estimate",
    )
    parser.add_argument(
        "--preferences",
        help="JSON file with user preferences",
    )
    parser.add_argument(
        "--section",
        choices=SECTIONS,
        default="all",
        help="Which part of the report to print (default: all)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = create_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, args.debug)

    try:
        progress, sessions = load_snapshot(args.input)
        preferences = (
            UserPreferences.model_validate(load_json(args.preferences))
            if args.preferences
            else None
        )
    except (OSError, json.JSONDecodeError, KeyError, ValidationError) as e:
        print(f"❌ Invalid input: {e}", file=sys.stderr)
        return 1

    try:
        pipeline = create_pipeline(settings)
        report = pipeline.run_sync(
            progress,
            sessions,
            Level(args.target_level) if args.target_level else None,
            preferences,
        )
    except AnalyticsError as e:
        print(f"❌ {e.error_code}: {e.message}", file=sys.stderr)
        return 1

    data = report.model_dump(mode="json")
    output = data if args.section == "all" else data[args.section]
    print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
