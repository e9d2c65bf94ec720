'''
Outgoing e-mail over SMTP: account confirmation and password reset links.
smtplib is blocking, so every send runs in a worker thread.
'''
import asyncio
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from urllib.parse import urlencode

from ..common.config import settings
from ..common.logger import log


class MailService:
    """
    Sends the account e-mails of the parent portal.
    Sending never raises: a failed or unconfigured send is logged and reported as False.
    """

    def _link(self, path: str, token: str) -> str:
        return f"{settings.FRONTEND_URL.rstrip('/')}{path}?{urlencode({'token': token})}"

    def _send_sync(self, to_email: str, subject: str, body: str):
        msg = MIMEMultipart()
        msg["From"] = settings.SMTP_EMAIL
        msg["To"] = to_email
        msg["Subject"] = subject
        msg.attach(MIMEText(body, "html"))
        with smtplib.SMTP(settings.SMTP_SERVER, settings.SMTP_PORT, timeout=15) as server:
            server.starttls()
            server.login(settings.SMTP_EMAIL, settings.SMTP_PASSWORD)
            server.send_message(msg)

    async def send(self, to_email: str, subject: str, body: str) -> bool:
        if not settings.SMTP_SERVER or not settings.SMTP_EMAIL:
            log.warning(f"SMTP is not configured; e-mail '{subject}' to {to_email} was not sent.")
            return False
        try:
            await asyncio.to_thread(self._send_sync, to_email, subject, body)
        except (smtplib.SMTPException, OSError) as e:
            log.error(f"Failed to send e-mail '{subject}' to {to_email}: {e}", exc_info=True)
            return False
        log.info(f"E-mail '{subject}' sent to {to_email}.")
        return True

    async def send_confirmation(self, to_email: str, token: str) -> bool:
        link = self._link("/auth/confirm", token)
        body = (
            "<p>Bonjour,</p>"
            "<p>Merci de confirmer votre adresse e-mail pour activer votre compte parent :</p>"
            f'<p><a href="{link}">Confirmer mon adresse e-mail</a></p>'
        )
        return await self.send(to_email, "Confirmez votre compte parent", body)

    async def send_password_reset(self, to_email: str, token: str) -> bool:
        link = self._link("/auth/update-password", token)
        body = (
            "<p>Bonjour,</p>"
            "<p>Une réinitialisation du mot de passe de votre compte a été demandée :</p>"
            f'<p><a href="{link}">Choisir un nouveau mot de passe</a></p>'
            "<p>Si vous n'êtes pas à l'origine de cette demande, ignorez cet e-mail.</p>"
        )
        return await self.send(to_email, "Réinitialisation de votre mot de passe", body)


def get_mail_service() -> MailService:
    """FastAPI dependency returning the mail client."""
    return MailService()
