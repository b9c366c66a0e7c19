# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Credential and session management.

- Identity registration with argon2 password hashes
- Opaque two-part bearer session tokens (``<session_id>.<secret>``)
- Pluggable credential stores (memory, YAML file, SQL)
- FastAPI request context adapter
"""

__version__ = "0.1.0"
