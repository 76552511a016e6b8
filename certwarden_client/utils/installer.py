"""
Atomic installation of downloaded files with explicit owner, group and mode
"""

import grp
import logging
import os
import pwd
import tempfile

from ..common.errors import ConfigurationError, InstallError

logger = logging.getLogger(__name__)

COPY_CHUNK_SIZE = 64 * 1024

# uid_t/gid_t are 32-bit; all ones means "leave unchanged" to chown
MAX_ID = 2 ** 32 - 2


def _check_id(number, kind):
    if number > MAX_ID:
        raise ConfigurationError(f"Invalid {kind} id: {number}")
    return number


def resolve_uid(value):
    """Return a numeric uid for a user id or user name"""
    value = str(value).strip()
    if value.isdigit():
        return _check_id(int(value), 'user')
    try:
        return pwd.getpwnam(value).pw_uid
    except KeyError:
        raise ConfigurationError(f"Unknown user: {value}") from None


def resolve_gid(value):
    """Return a numeric gid for a group id or group name"""
    value = str(value).strip()
    if value.isdigit():
        return _check_id(int(value), 'group')
    try:
        return grp.getgrnam(value).gr_gid
    except KeyError:
        raise ConfigurationError(f"Unknown group: {value}") from None


def parse_mode(value):
    """Parse an octal permission spec such as 0600, 600 or 0o600"""
    text = str(value).strip().lower()
    if text.startswith('0o'):
        text = text[2:]
    try:
        mode = int(text, 8)
    except ValueError:
        raise ConfigurationError(f"Invalid file mode: {value}") from None
    if mode < 0 or mode > 0o7777:
        raise ConfigurationError(f"Invalid file mode: {value}")
    return mode


def install_file(source, destination, uid, gid, mode):
    """Replace destination with the content of source.

    The new content is written to a temporary file in the destination
    directory, given its owner, group and mode, then renamed over the
    destination so readers only ever see the old or the new file.
    """
    directory = os.path.dirname(os.path.abspath(destination))
    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(
            dir=directory,
            prefix=f".{os.path.basename(destination)}.",
            suffix='.tmp',
        )
        with os.fdopen(fd, 'wb') as dst, open(source, 'rb') as src:
            while True:
                chunk = src.read(COPY_CHUNK_SIZE)
                if not chunk:
                    break
                dst.write(chunk)
            dst.flush()
            # chown clears setuid/setgid bits, so the mode goes on last
            os.fchown(dst.fileno(), uid, gid)
            os.fchmod(dst.fileno(), mode)
            os.fsync(dst.fileno())
        os.replace(tmp_path, destination)
        tmp_path = None
    except OSError as e:
        raise InstallError(destination, e.strerror or str(e)) from e
    finally:
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except FileNotFoundError:
                pass

    logger.info("Installed %s (uid=%d gid=%d mode=%04o)", destination, uid, gid, mode)
