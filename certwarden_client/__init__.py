"""
CertWarden client

Fetches a certificate and private key from a CertWarden server and installs
them locally when they change.
"""

__version__ = "0.1.0"
__author__ = "CertWarden Client Team"

from .common.errors import (
    CertWardenClientError,
    ConfigurationError,
    FetchError,
    HookError,
    InstallError,
)

__all__ = [
    'CertWardenClientError',
    'ConfigurationError',
    'FetchError',
    'HookError',
    'InstallError',
]
