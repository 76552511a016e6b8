"""
Error types raised while updating the certificate and private key
"""


class CertWardenClientError(Exception):
    """Base class for all errors that abort a run"""


class ConfigurationError(CertWardenClientError):
    """A required option is missing or invalid"""


class FetchError(CertWardenClientError):
    """Download did not return HTTP 200"""

    def __init__(self, url, status):
        self.url = url
        self.status = status
        super().__init__(f"Failed to download file from {url} with HTTP status: {status:03d}.")


class InstallError(CertWardenClientError):
    """Writing a file or setting its ownership/mode failed"""

    def __init__(self, path, reason):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to install {path}: {reason}")


class HookError(CertWardenClientError):
    """Postprocess hook could not be run or exited nonzero"""

    def __init__(self, hook, message, returncode=None):
        self.hook = hook
        self.returncode = returncode
        super().__init__(message)
