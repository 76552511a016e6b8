"""
Postprocess hook run after the certificate or key was replaced
"""

import logging
import os

from ..common.errors import HookError
from ..common.output import print_info, print_success
from .process import ProcessLaunchError, run_process

logger = logging.getLogger(__name__)


def run_hook(hook_path, cert_path, key_path, runner=None):
    """Run the hook with the installed certificate and key paths.

    Returns False when there is no hook to run, True when it ran and
    exited 0. Raises HookError when it is not executable or fails.
    """
    if not hook_path or not os.path.isfile(hook_path):
        logger.debug("No postprocess hook at %s, skipping", hook_path)
        return False

    print_info("Running postprocess hook...")
    if not os.access(hook_path, os.X_OK):
        raise HookError(hook_path, "Postprocess hook is not executable.")

    runner = runner or run_process
    try:
        # A bare name would be looked up on PATH instead of the checked file
        result = runner([os.path.abspath(hook_path), cert_path, key_path])
    except ProcessLaunchError as e:
        raise HookError(hook_path, f"Postprocess hook could not be run: {e.reason}") from e

    if result.returncode != 0:
        raise HookError(
            hook_path,
            f"Postprocess hook exited with status {result.returncode}.",
            returncode=result.returncode,
        )

    print_success("Postprocess hook ran successfully.")
    return True
