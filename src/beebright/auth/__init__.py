# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Admin authentication.

This package provides:
- Password hashing/verification (argon2)
- The single admin identity built from configuration
- Signed, time-limited session tokens (itsdangerous)
"""
