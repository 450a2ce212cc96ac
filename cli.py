#!/usr/bin/env python3
"""Unified CLI for the recruitment funnel.

Usage:
    python cli.py review --help
    python cli.py portal --help
"""
import sys
import argparse


def main():
    parser = argparse.ArgumentParser(
        description='Recruitment funnel - application review',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Modules:
  review   Status transitions, evaluations, navigation, export
  portal   Run the HTTP API (uvicorn)

Examples:
  python cli.py review init-db
  python cli.py review list --status submitted,first_pass
  python cli.py review transition 42 final_pass --reviewer rev-1
  python cli.py review evaluate 42 70 80 90 --reviewer rev-1
  python cli.py portal --port 8000
"""
    )

    parser.add_argument(
        'module',
        choices=['review', 'portal'],
        help='Module to run'
    )

    # Parse just the module, pass rest to submodule
    args, remaining = parser.parse_known_args()

    # Dispatch to module CLI
    if args.module == 'review':
        from recruiting.review.cli import main as review_main
        sys.exit(review_main(remaining))

    elif args.module == 'portal':
        from portal.main import run
        run(remaining)


if __name__ == '__main__':
    main()
