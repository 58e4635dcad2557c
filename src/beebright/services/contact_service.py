# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from beebright.errors import RelayError, ValidationError
from beebright.infra.mailer import Mailer

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("gname", "gmail", "message")


def _is_filled(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def _one_line(value: str) -> str:
    """Collapse whitespace so a value is safe inside a mail header."""
    return " ".join(value.split())


def _text(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass(frozen=True)
class ContactMessage:
    subject: str
    body: str
    reply_to: str


class ContactService:
    def __init__(self, mailer: Mailer, recipient: Optional[str], *, site_name: str = "Bee Bright") -> None:
        self.mailer = mailer
        self.recipient = recipient
        self.site_name = site_name

    def compose(self, fields: Dict[str, Any]) -> ContactMessage:
        """Validate a form submission and build the plain-text email.

        ``gname``, ``gmail`` and ``message`` are required; ``cname`` and ``cage``
        are passed through as given.
        """
        if not isinstance(fields, dict):
            raise ValidationError("Por favor, completa todos los campos obligatorios.")
        missing = [k for k in REQUIRED_FIELDS if not _is_filled(fields.get(k))]
        if missing:
            raise ValidationError("Por favor, completa todos los campos obligatorios.")

        gname = fields["gname"]
        gmail = fields["gmail"]
        body = (
            f"Nombre: {gname}\n"
            f"Correo: {gmail}\n"
            f"Nombre del niño: {_text(fields.get('cname'))}\n"
            f"Edad: {_text(fields.get('cage'))}\n"
            f"\n"
            f"Mensaje:\n"
            f"{fields['message']}"
        )
        return ContactMessage(
            subject=f"Consulta de {_one_line(gname)} - {self.site_name}",
            body=body,
            reply_to=_one_line(gmail),
        )

    def submit(self, fields: Dict[str, Any]) -> None:
        msg = self.compose(fields)
        if not self.recipient:
            raise RelayError("Falta el destinatario del formulario de contacto (EMAIL_TO)")
        self.mailer.send(self.recipient, msg.subject, msg.body, reply_to=msg.reply_to)
        logger.info("Contact form relayed from=%s", msg.reply_to)
