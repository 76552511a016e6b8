"""
Run configuration for the CertWarden client.

Values come from the command line, then the environment, then an optional
YAML file, then defaults. Everything is validated once here and frozen into a
ClientConfig that is handed to the rest of the client.
"""

import os
import sys
from dataclasses import dataclass
from typing import Optional

import yaml

from .errors import ConfigurationError
from ..utils.installer import parse_mode, resolve_gid, resolve_uid

DEFAULT_MODE = '0600'
DEFAULT_HOOK_NAME = 'postprocess.sh'
ENV_PREFIX = 'CERTWARDEN_'

# Option names in the order they are checked for presence
OPTIONS = (
    'cert_name',
    'cert_api_key',
    'key_api_key',
    'cert_file',
    'key_file',
    'server',
    'gid',
    'uid',
    'mode',
    'postprocess',
)


def flag_name(option):
    return option.replace('_', '-')


def env_name(option):
    return ENV_PREFIX + option.upper()


def default_hook_path(program=None):
    """Return postprocess.sh next to the running program"""
    program = program or sys.argv[0]
    return os.path.join(os.path.dirname(os.path.abspath(program)), DEFAULT_HOOK_NAME)


def normalize_server(server):
    """Force https when no scheme is given"""
    server = server.strip()
    if not server.startswith(('http://', 'https://')):
        server = f"https://{server}"
    return server.rstrip('/')


def load_config_file(path):
    """Load option values from a YAML file.

    Keys may use dashes or underscores (``cert-name`` or ``cert_name``).
    """
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Could not read config file {path}: {e.strerror}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Could not parse config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping of options")

    values = {}
    for key, value in data.items():
        option = str(key).replace('-', '_')
        if option not in OPTIONS:
            raise ConfigurationError(f"Unknown option in config file {path}: {key}")
        if option == 'mode' and isinstance(value, int):
            # YAML turns an unquoted 0600 into 384, which cannot be told apart from 600
            raise ConfigurationError(f"mode in config file {path} must be a quoted string, e.g. \"0600\"")
        values[option] = None if value is None else str(value)
    return values


@dataclass(frozen=True, repr=False)
class ClientConfig:
    server: str
    cert_name: str
    cert_api_key: str
    key_api_key: str
    cert_file: str
    key_file: str
    uid: int
    gid: int
    mode: int = 0o600
    hook: Optional[str] = None
    hook_explicit: bool = False

    @classmethod
    def from_sources(cls, args=None, environ=None, file_values=None, program=None):
        """Merge option sources and validate the result.

        ``args`` is an argparse namespace (or any object) whose attributes are
        None when an option was not given.
        """
        environ = os.environ if environ is None else environ
        file_values = file_values or {}

        raw = {}
        for option in OPTIONS:
            value = getattr(args, option, None) if args is not None else None
            if value is None:
                value = environ.get(env_name(option))
            if value is None:
                value = file_values.get(option)
            raw[option] = value

        hook_explicit = raw['postprocess'] is not None
        if raw['uid'] is None:
            raw['uid'] = str(os.getuid())
        if raw['gid'] is None:
            raw['gid'] = str(os.getgid())
        if raw['mode'] is None:
            raw['mode'] = DEFAULT_MODE
        if raw['postprocess'] is None:
            raw['postprocess'] = default_hook_path(program)

        for option in OPTIONS:
            if raw[option] is None or not str(raw[option]).strip():
                raise ConfigurationError(f"--{flag_name(option)} is not defined")

        hook = raw['postprocess']
        if hook_explicit and not os.path.isfile(hook):
            raise ConfigurationError(f"Postprocess script does not exist: {hook}")

        return cls(
            server=normalize_server(raw['server']),
            cert_name=raw['cert_name'].strip(),
            cert_api_key=raw['cert_api_key'],
            key_api_key=raw['key_api_key'],
            cert_file=raw['cert_file'],
            key_file=raw['key_file'],
            uid=resolve_uid(raw['uid']),
            gid=resolve_gid(raw['gid']),
            mode=parse_mode(raw['mode']),
            hook=os.path.abspath(hook),
            hook_explicit=hook_explicit,
        )

    def __repr__(self):
        # Keep API keys out of logs and tracebacks
        return (
            f"ClientConfig(server={self.server!r}, cert_name={self.cert_name!r}, "
            f"cert_file={self.cert_file!r}, key_file={self.key_file!r}, "
            f"uid={self.uid}, gid={self.gid}, mode={self.mode:04o}, hook={self.hook!r})"
        )
