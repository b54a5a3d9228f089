"""
Provisioning errors.

Two kinds of failure exist. Fatal errors (``ManifestFetchError``,
``EnvironmentSetupError``) halt the pipeline and end the run with a
non-zero exit. ``ItemError`` concerns a single target file: the stage
that raised it records the failure and moves on to the next file.
"""

from __future__ import annotations


class ProvisionError(Exception):
    """Base class for all provisioning failures."""


class ManifestFetchError(ProvisionError):
    """The remote file list could not be retrieved or parsed."""


class EnvironmentSetupError(ProvisionError):
    """A required directory or the persistent environment store could not be changed."""


class ItemError(ProvisionError):
    """A single target file could not be downloaded, extracted or installed."""

    def __init__(self, item: str, message: str):
        super().__init__(f"{item}: {message}")
        self.item = item
        self.reason = message
