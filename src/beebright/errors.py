# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy shared by adapters, services and routes."""

from __future__ import annotations


class BeeBrightError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(BeeBrightError):
    pass


class InvalidCredentials(BeeBrightError):
    pass


class Unauthorized(BeeBrightError):
    """No session cookie was sent."""


class InvalidToken(BeeBrightError):
    """Session token with a bad signature, bad payload, expired or revoked."""


class ValidationError(BeeBrightError):
    pass


class UpstreamError(BeeBrightError):
    """Failure reported by an external collaborator (database, email, image host)."""


class UploadError(UpstreamError):
    pass


class RelayError(UpstreamError):
    pass


class StoreError(UpstreamError):
    pass
