"""Stores holding per-node state outside the stored-configuration database."""

from .ca import CertificateAuthority, LocalCertificateAuthority
from .caches import KeyValueCache, ReportStore, YamlCacheStore

__all__ = [
    "CertificateAuthority",
    "KeyValueCache",
    "LocalCertificateAuthority",
    "ReportStore",
    "YamlCacheStore",
]
