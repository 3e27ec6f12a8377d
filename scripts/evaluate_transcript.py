#!/usr/bin/env python3
import argparse
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pitchscore.backend.client import DEFAULT_API_BASE, EvaluationClient  # noqa: E402
from pitchscore.backend.errors import TransportError  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(description="Send a pitch transcript to the evaluation endpoint.")
    parser.add_argument(
        "--transcript",
        help="Path to a text file with the transcript. Reads stdin when omitted.",
    )
    parser.add_argument("--api-base", default=DEFAULT_API_BASE, help="Backend base URL.")
    parser.add_argument("--timeout-seconds", type=float, default=None, help="Request timeout.")
    args = parser.parse_args()

    if args.transcript:
        transcript_path = Path(args.transcript).expanduser().resolve()
        if not transcript_path.exists():
            raise FileNotFoundError(f"Transcript file not found: {transcript_path}")
        transcript = transcript_path.read_text(encoding="utf-8")
    else:
        transcript = sys.stdin.read()

    client = EvaluationClient(args.api_base, timeout=args.timeout_seconds)
    try:
        payload = client.evaluate(transcript)
    except TransportError as exc:
        print(f"transport error: {exc}", file=sys.stderr)
        sys.exit(2)

    print(json.dumps(payload, indent=2))
    if not payload.get("ok"):
        sys.exit(1)


if __name__ == "__main__":
    main()
