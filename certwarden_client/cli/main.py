#!/usr/bin/env python3
"""
Main CLI entry point for the CertWarden client
"""

import argparse
import logging
import os
import signal
import sys

from .. import __version__
from ..common import output
from ..common.config import ClientConfig, load_config_file
from ..common.errors import CertWardenClientError, ConfigurationError
from ..utils.updater import EXIT_ERROR, run_update

EPILOG = """\
Exit codes:
 0  Success  A new certificate was downloaded and replaced the existing one
 1  Error    General error
 2  Error    Certificate did not need to be updated

Every option can also be set through a CERTWARDEN_<OPTION> environment
variable (e.g. CERTWARDEN_CERT_API_KEY) or a YAML file given with --config.
"""


class ArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits 1 on bad usage; 2 means 'not updated'"""

    def error(self, message):
        self.print_usage(sys.stderr)
        output.print_error(message)
        sys.exit(EXIT_ERROR)


def create_parser():
    """Create the argument parser"""
    parser = ArgumentParser(
        prog='certwarden-client',
        description='Download a certificate and private key from CertWarden and install them if they changed.',
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'certwarden-client {__version__}'
    )

    parser.add_argument('--cert-api-key', help='The API key to use to download the certificate')
    parser.add_argument('--cert-file', help='The file path to install the certificate to')
    parser.add_argument('--cert-name', help='The name of the certificate to download')
    parser.add_argument('-g', '--gid', help='The group id to install the certificate and private key with. Default: id -g')
    parser.add_argument('--key-api-key', help='The API key to use to download the private key')
    parser.add_argument('--key-file', help='The file path to install the private key to')
    parser.add_argument('-m', '--mode', help='The file mode to install the certificate and private key with. Default: 0600')
    parser.add_argument(
        '--postprocess',
        help='The path to an executable to run after the certificate and private key are installed. '
             'The installed certificate and private key are passed as arguments. Default: postprocess.sh'
    )
    parser.add_argument(
        '-s', '--server',
        help='The server to download the certificate and private key from. Ex. https://certwarden.example.com'
    )
    parser.add_argument('-u', '--uid', help='The user id to install the certificate and private key with. Default: id -u')
    parser.add_argument('-c', '--config', help='YAML file with default values for any of the options above')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    parser.add_argument('--no-color', action='store_true', help='Disable colored output')

    return parser


def setup_logging(verbose=False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s',
    )
    # urllib3 debug output includes request headers
    logging.getLogger('urllib3').setLevel(logging.INFO if verbose else logging.WARNING)


def _terminate(signum, frame):
    # Unwind through the temporary workspace cleanup
    sys.exit(128 + signum)


def run(argv=None, environ=None, session=None):
    """Parse arguments, run one update and return the exit code"""
    environ = os.environ if environ is None else environ
    parser = create_parser()
    args = parser.parse_args(argv)

    output.set_color(False if args.no_color else None)
    try:
        return _run(args, parser, environ, session)
    finally:
        output.set_color(None)


def _run(args, parser, environ, session):
    setup_logging(args.verbose)

    try:
        file_values = {}
        config_path = args.config or environ.get('CERTWARDEN_CONFIG')
        if config_path:
            file_values = load_config_file(config_path)
        config = ClientConfig.from_sources(args, environ=environ, file_values=file_values)
    except ConfigurationError as e:
        output.print_error(str(e))
        parser.print_usage(sys.stderr)
        return EXIT_ERROR

    logging.getLogger(__name__).debug("Using %r", config)

    try:
        outcome = run_update(config, session=session)
    except CertWardenClientError as e:
        output.print_error(str(e))
        return EXIT_ERROR
    except Exception as e:
        output.print_error(f"Unexpected error: {e}")
        return EXIT_ERROR

    return outcome.exit_code


def main():
    """Main CLI entry point"""
    signal.signal(signal.SIGTERM, _terminate)
    try:
        sys.exit(run())
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        sys.exit(130)


if __name__ == '__main__':
    main()
