"""RJE station command

Command usage:
    rje [-h] [--version] [--debug] [--tape SPEC] [--code-page CP]
        [--station NAME] [--nak-policy {record,abort,retry}]
        host[:port] {submit,retrieve} ...

    rje host submit JOBNO < deck
        Send the job deck read from standard input.

    rje host retrieve [--punch FILE]
        Write print output to standard output and punch
        output (host card code) to FILE.

Environment variables used:
    RJE_CODE_PAGE (see rje.py)
    RJE_DEBUG (see rje.py)
    RJE_LOGGING (see rje.py)
    RJE_NAK_POLICY (see rje.py)
    RJE_STATION (see rje.py)
    RJE_TAPE (see rje.py)

Copyright 2021 IBM Inc. All Rights Reserved.

SPDX-License-Identifier: Apache-2.0
"""
import logging
import sys

from . import _util
from . import rje
from .errors import RjeError
from .rje import NAK_POLICIES
from . import __version__

__author__ = "Neil Johnson"


def parse_args(argv=None):
    """Parse rje command arguments.
    """
    from argparse import ArgumentParser

    parser = ArgumentParser(
        prog="rje",
        description="Remote job entry station",
        add_help=True)
    if __version__:
        parser.add_argument("--version",
                            action="version",
                            version=f"%(prog)s {__version__}")

    parser.add_argument("--debug",
                        action="store_true",
                        default=None,
                        help="Trace link bytes and carriage control")
    parser.add_argument("--tape",
                        metavar="SPEC",
                        help="Carriage-control tape (line:channel,...)")
    parser.add_argument("--code-page",
                        metavar="CP",
                        help="Host code page (default cp1047)")
    parser.add_argument("--station",
                        metavar="NAME",
                        help="Station name sent at sign on")
    parser.add_argument("--nak-policy",
                        choices=NAK_POLICIES,
                        help="Handling of NAK during submit")
    parser.add_argument("host",
                        help="hostname[:port] of the spooling host")

    subparsers = parser.add_subparsers(dest="command", required=True)
    submit = subparsers.add_parser("submit",
                                   help="Submit a job deck from stdin")
    submit.add_argument("jobno",
                        type=_util.job_number,
                        help="Six digit job number")
    retrieve = subparsers.add_parser("retrieve",
                                     help="Retrieve print and punch output")
    retrieve.add_argument("--punch",
                          metavar="FILE",
                          default="punch.out",
                          help="Punch output file (default punch.out)")

    return parser.parse_args(argv)


def main(argv=None):
    """Process rje command.
    """
    args = parse_args(argv)
    try:
        host, port = _util.host_port(args.host)
        with rje.connect(host, port,
                         code_page=args.code_page,
                         tape=args.tape,
                         station=args.station,
                         nak_policy=args.nak_policy,
                         debug=args.debug) as session:
            if args.command == "submit":
                session.submit(args.jobno, sys.stdin)

            else:
                with open(args.punch, "ab") as punch_file:
                    session.retrieve(sys.stdout, punch_file)

    except (RjeError, OSError, LookupError, ValueError) as exc:
        _logger.debug("rje failed", exc_info=True)
        print(f"rje: {exc}", file=sys.stderr)
        return 1

    return 0


# Private data

_logger = logging.getLogger("rje.cli")

if __name__ == "__main__":
    sys.exit(main())
