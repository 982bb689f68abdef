"""Certificate authority operations on a local CA directory.

Layout under ``<ssl_dir>/ca``::

    signed/<node>.pem     signed certificates
    requests/<node>.pem   pending signing requests
    revoked.txt           inventory of revoked certificate names
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from ..core.logging import get_logger

LOGGER = get_logger(__name__)


class CertificateAuthority(Protocol):
    def revoke(self, node: str) -> None:
        ...

    def destroy(self, node: str) -> None:
        ...


class LocalCertificateAuthority:
    def __init__(self, ssl_dir: Path) -> None:
        self.ca_dir = Path(ssl_dir) / "ca"

    @property
    def signed_dir(self) -> Path:
        return self.ca_dir / "signed"

    @property
    def requests_dir(self) -> Path:
        return self.ca_dir / "requests"

    @property
    def revocation_list(self) -> Path:
        return self.ca_dir / "revoked.txt"

    def revoked(self) -> set[str]:
        if not self.revocation_list.exists():
            return set()
        lines = self.revocation_list.read_text(encoding="utf-8").splitlines()
        return {line.strip() for line in lines if line.strip()}

    def revoke(self, node: str) -> None:
        """Record ``node`` as revoked; a no-op without a signed certificate."""
        if not (self.signed_dir / f"{node}.pem").exists():
            LOGGER.debug("No signed certificate for %s; nothing to revoke", node)
            return
        if node in self.revoked():
            LOGGER.debug("Certificate for %s already revoked", node)
            return
        self.ca_dir.mkdir(parents=True, exist_ok=True)
        with self.revocation_list.open("a", encoding="utf-8") as handle:
            handle.write(f"{node}\n")
        LOGGER.debug("Revoked certificate for %s", node)

    def destroy(self, node: str) -> None:
        """Remove the signed certificate and any pending request for ``node``."""
        for path in (self.signed_dir / f"{node}.pem", self.requests_dir / f"{node}.pem"):
            if path.exists():
                path.unlink()
                LOGGER.debug("Removed %s", path)
