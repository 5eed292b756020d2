#!/usr/bin/env python3
"""
Run the review workflow locally for one pull request, without Celery.

Usage:
    cd backend
    python -m scripts.run_pipeline https://github.com/<owner>/<repo>/pull/<n>
"""

import argparse
import asyncio
import json
import sys


def _print_result(result):
    """Pretty-print a PipelineResult."""
    print(f"\n{'─' * 50}")
    print(f"  Execution ID : {result.execution_id[:12]}...")
    print(f"  Status       : {result.status}")
    print(f"  Steps        : {result.steps_completed}/{result.total_steps}")
    print(f"  Duration     : {result.total_duration_ms}ms")
    if result.bailed_at:
        print(f"  Bailed at    : {result.bailed_at}")

    print("\n  Step Results:")
    for sr in result.step_results:
        icon = "✓" if sr["status"] == "COMPLETED" else "⊘" if sr["status"] == "BAILED" else "✗"
        print(f"    {icon} {sr['step_name']} ({sr['duration_ms']}ms)")

    print("\n  Output:")
    print("    " + json.dumps(result.output_payload(), indent=2).replace("\n", "\n    "))
    print(f"{'─' * 50}\n")


async def main(argv: list[str] | None = None) -> int:
    from release_validator.core.config import StartupError
    from release_validator.core.logging import setup_logging
    from release_validator.pipeline.runner import run_review_pipeline

    parser = argparse.ArgumentParser(description="Validate a pull request against its preview deployment")
    parser.add_argument("pull_request_url", help="https://github.com/<owner>/<repo>/pull/<number>")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    try:
        result = await run_review_pipeline(args.pull_request_url)
    except StartupError as exc:
        print(f"✗ {exc}", file=sys.stderr)
        return 2
    except Exception as exc:
        print(f"✗ Pipeline failed: {type(exc).__name__}: {exc}", file=sys.stderr)
        return 1

    _print_result(result)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
