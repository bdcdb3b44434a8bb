"""Interpolate an agent's options from the command line.

Usage:
    python -m interp render agent.yaml
    python -m interp render agent.yaml -s event.yaml -c api_key=s3cret --offline
"""

import argparse
import logging
import sys
from pathlib import Path

import yaml

from interp import Agent, InMemoryCredentialStore, InterpolationConfig, InterpolationError
from interp.environment import create_environment
from interp.extensions.http import get_probe


logger = logging.getLogger(__name__)


def parse_credentials(pairs: list[str]) -> dict[str, str]:
    """Parse name=value pairs given with -c."""
    credentials = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name.strip():
            raise ValueError(f"Expected name=value, got {pair!r}")
        credentials[name.strip()] = value
    return credentials


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Interpolate an agent's options")
    parser.add_argument("agent", type=Path, help="Agent definition (YAML)")
    parser.add_argument("-s", "--subject", type=Path, help="Subject to interpolate with (YAML)")
    parser.add_argument("-c", "--credential", action="append", default=[], metavar="NAME=VALUE")
    parser.add_argument("--config", type=Path, help="Interpolation config (YAML)")
    parser.add_argument("--offline", action="store_true", help="Do not follow redirects")
    parser.add_argument("-v", "--verbose", action="store_true")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    config = InterpolationConfig.from_yaml(args.config) if args.config else InterpolationConfig.from_env()
    probe = get_probe(config, mode="offline" if args.offline else "httpx")
    store = InMemoryCredentialStore()

    try:
        agent = Agent.from_yaml(
            args.agent,
            credentials=store,
            environment=create_environment(config, probe),
        )
        for name, value in parse_credentials(args.credential).items():
            store.add(agent.id, name, value)

        if not agent.is_valid():
            for message in agent.errors.full_messages():
                logger.error(message)
            return 1

        subject = None
        if args.subject:
            subject = yaml.safe_load(args.subject.read_text(encoding="utf-8")) or {}

        result = agent.interpolated(subject)
    except (InterpolationError, ValueError, FileNotFoundError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    finally:
        probe.close()

    print(yaml.safe_dump(result, sort_keys=False, allow_unicode=True), end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
