"""
CLI entry point for DDNS Linode.

This module provides the command-line interface invoked by the Synology DDNS
service. It prints exactly one line on stdout: the result code.
"""

from __future__ import annotations

import sys

from ddns_linode.config import ConfigValidationError, load_config, parse_args
from ddns_linode.logging_config import setup_logging
from ddns_linode.models import ResultCode
from ddns_linode.updater import DDNSUpdater


def main(argv: list[str] | None = None) -> None:
    """
    Run one DDNS update.

    Parse command-line arguments, load configuration, update the record and
    report the result code.

    Parameters
    ----------
    argv : list[str] | None, optional
        Command-line arguments. If None, uses sys.argv.
    """
    try:
        args = parse_args(argv)
    except SystemExit as e:
        # argparse has already reported the problem on stderr
        if e.code not in (0, None):
            print(ResultCode.GENERIC)  # noqa: T201
        raise

    try:
        config = load_config(args)
    except ConfigValidationError as e:
        print(e, file=sys.stderr)  # noqa: T201
        print(ResultCode.GENERIC)  # noqa: T201
        sys.exit(1)

    setup_logging(config.logging)

    result = DDNSUpdater(config).run(args.invocation)

    # The NAS reads the result code from stdout, whatever the outcome
    print(result.code)  # noqa: T201


if __name__ == "__main__":
    main()
