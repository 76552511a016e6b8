"""
Fetch, compare and install the certificate and private key.

Both files are downloaded into a private temporary directory first; a failed
download aborts the run before anything is installed. Each file is then
compared with the installed copy and replaced only when the bytes differ.
The postprocess hook runs only when at least one file was replaced.
"""

import enum
import logging
import os
import tempfile
from dataclasses import dataclass

from ..common.output import print_success
from .differ import has_changed
from .fetcher import CERTIFICATES, PRIVATE_KEYS, build_download_url, fetch_to_file
from .hook import run_hook
from .installer import install_file

logger = logging.getLogger(__name__)

EXIT_UPDATED = 0
EXIT_ERROR = 1
EXIT_UNCHANGED = 2


class RunOutcome(enum.Enum):
    UPDATED = EXIT_UPDATED
    FAILED = EXIT_ERROR
    UNCHANGED = EXIT_UNCHANGED

    @property
    def exit_code(self):
        return self.value


@dataclass(frozen=True, repr=False)
class Artifact:
    label: str
    name: str
    api_key: str
    url: str
    destination: str
    uid: int
    gid: int
    mode: int
    staged_name: str

    def __repr__(self):
        return f"Artifact({self.label!r}, url={self.url!r}, destination={self.destination!r})"


def build_artifacts(config):
    """Return the (certificate, private key) pair for a config"""
    cert = Artifact(
        label='certificate',
        name=config.cert_name,
        api_key=config.cert_api_key,
        url=build_download_url(config.server, CERTIFICATES, config.cert_name),
        destination=config.cert_file,
        uid=config.uid,
        gid=config.gid,
        mode=config.mode,
        staged_name='cert.pem',
    )
    key = Artifact(
        label='private key',
        name=config.cert_name,
        api_key=config.key_api_key,
        url=build_download_url(config.server, PRIVATE_KEYS, config.cert_name),
        destination=config.key_file,
        uid=config.uid,
        gid=config.gid,
        mode=config.mode,
        staged_name='cert.key',
    )
    return cert, key


def process_artifact(artifact, staged_path):
    """Install a staged download if it differs; return whether it changed"""
    if not has_changed(staged_path, artifact.destination):
        logger.info("%s at %s is unchanged", artifact.label, artifact.destination)
        return False

    install_file(staged_path, artifact.destination, artifact.uid, artifact.gid, artifact.mode)
    logger.info("Updated %s at %s", artifact.label, artifact.destination)
    return True


def run_update(config, session=None, hook_runner=None, tmp_root=None):
    """Run one update pass and return its RunOutcome.

    Errors are raised, not returned: FetchError, InstallError and HookError
    all mean the run failed.
    """
    artifacts = build_artifacts(config)

    with tempfile.TemporaryDirectory(prefix='certwarden-', dir=tmp_root) as workspace:
        staged = []
        for artifact in artifacts:
            staged_path = os.path.join(workspace, artifact.staged_name)
            fetch_to_file(artifact.url, artifact.api_key, staged_path, session=session)
            staged.append(staged_path)

        updated = False
        for artifact, staged_path in zip(artifacts, staged):
            if process_artifact(artifact, staged_path):
                updated = True

    if not updated:
        print_success("Certificate/key did not need to be updated.")
        return RunOutcome.UNCHANGED

    print_success("Certificate/key updated successfully.")
    run_hook(config.hook, config.cert_file, config.key_file, runner=hook_runner)
    return RunOutcome.UPDATED
