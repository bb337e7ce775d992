#!/usr/bin/env python3
"""
scopeguard - button/action authorization server.
"""

import argparse


def main() -> None:
    parser = argparse.ArgumentParser(description="Serve button authorization decisions over HTTP")
    parser.add_argument("--host", default="0.0.0.0", help="Bind address (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=8080, help="Port (default: 8080)")
    args = parser.parse_args()

    # Keep server imports lazy so `--help` stays fast.
    from scopeguard.api.app import run

    run(host=args.host, port=args.port)


if __name__ == "__main__":
    main()
