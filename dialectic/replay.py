"""
Transcript replay - Feed a recorded exchange through a fresh tracker.

A transcript is a YAML file of thought payloads exactly as a client would
send them:

    name: cache-eviction-review
    turns:
      - content: "LRU is enough for the session cache"
        role: performer
        continuationRequested: true
        turnIndex: 1
        totalTurnsPlanned: 3
      - content: "Hit-rate evidence is missing"
        role: evaluator
        ...

Usage:
    dialectic-replay transcript.yaml
    dialectic-replay transcript.yaml --output results.json
    dialectic-replay transcript.yaml --render
"""

import argparse
import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .logging_config import configure_from_environment
from .render import ThoughtRenderer
from .session import SessionTracker


@dataclass
class Transcript:
    """A named, ordered list of raw thought payloads."""
    name: str
    turns: List[Any] = field(default_factory=list)
    source_file: Optional[Path] = None

    @classmethod
    def from_yaml(cls, yaml_content: str, source_file: Optional[Path] = None) -> "Transcript":
        """Parse a transcript from YAML content.

        Raises:
            ValueError: If the document has no 'turns' list
        """
        data = yaml.safe_load(yaml_content) or {}
        if not isinstance(data, dict) or not isinstance(data.get("turns"), list):
            raise ValueError("Transcript must be a mapping with a 'turns' list")

        default_name = source_file.stem if source_file else "transcript"
        return cls(
            name=str(data.get("name", default_name)),
            turns=data["turns"],
            source_file=source_file,
        )

    @classmethod
    def from_file(cls, path: Path) -> "Transcript":
        return cls.from_yaml(path.read_text(encoding="utf-8"), source_file=path)


@dataclass
class ReplayResult:
    """Outcome of every turn in a replayed transcript."""
    name: str
    outcomes: List[Dict[str, Any]] = field(default_factory=list)
    rejected: int = 0

    @property
    def accepted(self) -> int:
        return len(self.outcomes) - self.rejected

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "accepted": self.accepted,
            "rejected": self.rejected,
            "outcomes": self.outcomes,
        }


def replay(transcript: Transcript, tracker: Optional[SessionTracker] = None) -> ReplayResult:
    """Submit each turn in order and collect the outcome payloads.

    Args:
        transcript: Turns to submit
        tracker: Session to submit into (a fresh one if None)
    """
    tracker = tracker if tracker is not None else SessionTracker()
    result = ReplayResult(name=transcript.name)

    for raw in transcript.turns:
        outcome = tracker.submit(raw)
        result.outcomes.append(outcome.to_payload())
        if not outcome.accepted:
            result.rejected += 1

    return result


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        description="Replay a YAML transcript through the dialectic session tracker",
    )

    parser.add_argument("transcript", type=Path, help="YAML transcript file")

    parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Save outcomes to JSON file"
    )

    parser.add_argument(
        "--render",
        action="store_true",
        help="Draw accepted thoughts on stderr"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 if every turn was accepted, 1 otherwise).
    """
    args = create_parser().parse_args(argv)
    configure_from_environment()

    try:
        transcript = Transcript.from_file(args.transcript)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error loading transcript: {e}", file=sys.stderr)
        return 1

    tracker = SessionTracker(renderer=ThoughtRenderer() if args.render else None)
    result = replay(transcript, tracker)

    print(f"Transcript: {result.name}")
    print("-" * 40)
    for index, payload in enumerate(result.outcomes, start=1):
        if "error" in payload:
            print(f"  [{index}] rejected: {payload['error']}")
        else:
            print(
                f"  [{index}] {payload['currentRole']} round {payload['currentRound']} "
                f"-> next {payload['nextRole']}"
            )
    print(f"\nAccepted: {result.accepted}  Rejected: {result.rejected}")

    if args.output:
        args.output.write_text(json.dumps(result.to_dict(), indent=2), encoding="utf-8")
        print(f"\nResults saved to: {args.output}")

    return 1 if result.rejected else 0


if __name__ == "__main__":
    sys.exit(main())
