# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Any, Dict

from beebright.errors import ValidationError
from beebright.infra.content_repo import ContentStore


class ContentService:
    def __init__(self, store: ContentStore) -> None:
        self.store = store

    def get_content(self) -> Dict[str, Any]:
        return self.store.get()

    def update_section(self, payload: Any) -> None:
        """Merge a JSON object into the site content document."""
        if not isinstance(payload, dict):
            raise ValidationError("El contenido debe ser un objeto JSON.")
        if not payload:
            return
        self.store.update(payload)
