"""Post-install verification.

A manager reporting success does not guarantee the item is observable
afterwards (stale caches, a shell that has not been reloaded). The
verifier re-queries the installer's listing so the reconciler can tell
"manager said ok" apart from "actually present".
"""

import logging
from enum import Enum

from setupctl.adapters.base import Installer

logger = logging.getLogger(__name__)


class Verification(Enum):
    """Result of a post-install presence check."""

    VERIFIED = "verified"
    NOT_VERIFIED = "not_verified"


class Verifier:
    """Confirms an identifier is present after a successful install."""

    def verify(self, identifier: str, installer: Installer) -> Verification:
        """Check that an identifier is listed as installed.

        Any error while listing counts as not verified.

        Args:
            identifier: Identifier that was just installed.
            installer: Installer for the identifier's manifest kind.

        Returns:
            VERIFIED if the identifier is listed, NOT_VERIFIED otherwise.
        """
        try:
            present = installer.is_installed(identifier)
        except Exception as e:
            logger.warning("Could not verify %s: %s", identifier, e)
            return Verification.NOT_VERIFIED

        return Verification.VERIFIED if present else Verification.NOT_VERIFIED
