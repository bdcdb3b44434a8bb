"""Follow the redirects of a URL.

Usage:
    python -m interp expand https://bit.ly/xyz
    python -m interp expand https://bit.ly/xyz --limit 10 --timeout 2
"""

import argparse
import logging
import sys

from interp import InterpolationConfig
from interp.extensions.filters import uri_expand
from interp.extensions.http import get_probe


logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Resolve a URL by following redirects")
    parser.add_argument("url", type=str)
    parser.add_argument("--limit", type=int, help="Maximum redirect hops")
    parser.add_argument("--timeout", type=float, help="Per-request timeout in seconds")
    parser.add_argument("-v", "--verbose", action="store_true")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    config = InterpolationConfig.from_env()
    if args.timeout is not None:
        config = config.model_copy(update={"http_timeout": args.timeout})
    limit = args.limit if args.limit is not None else config.redirect_limit

    with get_probe(config) as probe:
        print(uri_expand(args.url, limit, probe=probe))
    return 0


if __name__ == "__main__":
    sys.exit(main())
