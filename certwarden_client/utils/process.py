"""
Synchronous execution of external programs
"""

import logging
import subprocess
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class ProcessLaunchError(Exception):
    """The program could not be started at all"""

    def __init__(self, argv, reason):
        self.argv = list(argv)
        self.reason = reason
        super().__init__(f"Could not run {argv[0]}: {reason}")


@dataclass(frozen=True)
class ProcessResult:
    argv: tuple
    returncode: int

    @property
    def ok(self):
        return self.returncode == 0


def run_process(argv):
    """Run argv to completion with inherited stdio and return its status"""
    argv = tuple(str(arg) for arg in argv)
    logger.debug("Running %s", ' '.join(argv))
    try:
        completed = subprocess.run(argv, check=False)
    except OSError as e:
        raise ProcessLaunchError(argv, e.strerror or str(e)) from e
    return ProcessResult(argv=argv, returncode=completed.returncode)
