# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import smtplib
from email.mime.text import MIMEText
from typing import Optional, Protocol

from beebright.errors import RelayError

logger = logging.getLogger(__name__)


class Mailer(Protocol):
    def send(self, to: str, subject: str, body: str, reply_to: Optional[str] = None) -> None: ...


class SmtpMailer:
    def __init__(
        self,
        host: str,
        port: int,
        username: Optional[str],
        password: Optional[str],
        sender: Optional[str],
        *,
        timeout: float = 10,
    ) -> None:
        self.host = host
        self.port = int(port)
        self.username = username
        self.password = password
        self.sender = sender or username
        self.timeout = timeout

    def send(self, to: str, subject: str, body: str, reply_to: Optional[str] = None) -> None:
        if not (self.host and self.username and self.password and self.sender):
            raise RelayError("Faltan credenciales de correo (EMAIL_USER, EMAIL_PASS)")
        if not to:
            raise RelayError("Falta el destinatario (EMAIL_TO)")

        msg = MIMEText(body, "plain", "utf-8")
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = to
        if reply_to:
            msg["Reply-To"] = reply_to

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                smtp.starttls()
                smtp.login(self.username, self.password)
                smtp.sendmail(self.sender, [to], msg.as_string())
        except (smtplib.SMTPException, OSError) as exc:
            raise RelayError(f"Error enviando correo: {exc}") from exc
        logger.info("Mail sent to=%s subject=%r", to, subject)
