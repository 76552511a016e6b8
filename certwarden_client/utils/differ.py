"""
Byte-for-byte comparison of a downloaded file against the installed one
"""

import filecmp
import logging
import os

logger = logging.getLogger(__name__)


def has_changed(staged_path, destination):
    """Return True when destination is missing, unreadable or differs from staged_path"""
    if not os.path.exists(destination):
        logger.debug("%s does not exist", destination)
        return True

    try:
        same = filecmp.cmp(staged_path, destination, shallow=False)
    except OSError as e:
        # Reinstall; the installer reports real permission problems
        logger.debug("Could not compare %s with %s: %s", staged_path, destination, e)
        return True

    logger.debug("%s is %s", destination, 'unchanged' if same else 'different')
    return not same
