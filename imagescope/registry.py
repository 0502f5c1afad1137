"""Credentials and options for talking to OCI-distribution registries."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class BasicAuth:
    """Username and password authentication."""

    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class BearerAuth:
    """Bearer token authentication."""

    token: str = field(repr=False)


@dataclass
class RegistryCredentials:
    """Basic-auth or token credentials, optionally restricted to one registry authority."""

    authority: str = ""
    username: str = ""
    password: str = field(default="", repr=False)
    token: str = field(default="", repr=False)

    def authenticator(self) -> BasicAuth | BearerAuth | None:
        """Return basic auth if complete, else a bearer token if set, else None."""
        if self.username and self.password:
            log.debug("using basic auth for registry %r", self.authority)
            return BasicAuth(username=self.username, password=self.password)
        if self.token:
            log.debug("using token for registry %r", self.authority)
            return BearerAuth(token=self.token)
        return None

    def can_be_used_with_registry(self, registry: str) -> bool:
        """Tell whether these credentials apply to the given registry."""
        if not self.has_authority():
            return True
        return registry == self.authority

    def has_authority(self) -> bool:
        """Tell whether the credentials are restricted to a single authority."""
        return bool(self.authority)


@dataclass
class RegistryOptions:
    """Options for the OCI registry provider."""

    insecure_skip_tls_verify: bool = False
    insecure_use_http: bool = False
    credentials: list[RegistryCredentials] = field(default_factory=list)
    platform: str = ""

    def authenticator(self, registry: str) -> BasicAuth | BearerAuth | None:
        """Return the first usable authenticator for the registry, or None."""
        for index, credentials in enumerate(self.credentials):
            if not credentials.can_be_used_with_registry(registry):
                continue
            auth = credentials.authenticator()
            if auth is None:
                continue
            log.debug("using registry credentials from config index %d", index)
            return auth
        return None