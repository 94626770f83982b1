import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from pazireshino_config.settings import Settings

logger = logging.getLogger(__name__)

PASSWORD_RESET_SUBJECT = "Your password reset token (valid for {minutes} min)"

PASSWORD_RESET_TEXT = """Forgot your password?

Submit a PATCH request with your new password and passwordConfirm to:
{reset_url}

The link is valid for {minutes} minutes.
If you didn't forget your password, please ignore this email.

-- Pazireshino
"""


class EmailService:
    """SMTP notifier for password reset references.

    Raises whatever smtplib raises (including socket timeouts) so the
    caller can roll back its pending reset state.
    """

    def __init__(self, settings: Settings):
        self._settings = settings

    def _create_message(
        self,
        to_email: str,
        subject: str,
        text_body: str,
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self._settings.smtp_from_name} <{self._settings.smtp_from_email}>"
        msg["To"] = to_email

        msg.attach(MIMEText(text_body, "plain"))

        return msg

    def _send_email(self, to_email: str, message: MIMEMultipart) -> None:
        if not self._settings.smtp_host:
            msg = "SMTP host not configured"
            raise RuntimeError(msg)

        smtp_password = (
            self._settings.smtp_password.get_secret_value()
            if self._settings.smtp_password
            else ""
        )
        timeout = self._settings.smtp_timeout_seconds

        try:
            if self._settings.smtp_use_tls and not self._settings.smtp_starttls:
                # Implicit TLS (port 465)
                context = ssl.create_default_context()
                with smtplib.SMTP_SSL(
                    self._settings.smtp_host,
                    self._settings.smtp_port,
                    context=context,
                    timeout=timeout,
                ) as server:
                    if self._settings.smtp_user:
                        server.login(self._settings.smtp_user, smtp_password)
                    server.send_message(message)
            else:
                # STARTTLS (port 587) or plain
                with smtplib.SMTP(
                    self._settings.smtp_host,
                    self._settings.smtp_port,
                    timeout=timeout,
                ) as server:
                    if self._settings.smtp_starttls:
                        context = ssl.create_default_context()
                        server.starttls(context=context)
                    if self._settings.smtp_user:
                        server.login(self._settings.smtp_user, smtp_password)
                    server.send_message(message)

            logger.info("Email sent to %s", to_email)

        except Exception as e:
            logger.error("Failed to send email to %s: %s", to_email, e)
            raise

    def send_password_reset_email(self, to_email: str, reset_url: str) -> None:
        if not self._settings.smtp_enabled:
            if not self._settings.is_development:
                msg = "SMTP disabled, cannot deliver password reset email"
                raise RuntimeError(msg)
            logger.warning("SMTP disabled, password reset email to %s not sent", to_email)
            return

        minutes = self._settings.password_reset_expire_minutes
        message = self._create_message(
            to_email=to_email,
            subject=PASSWORD_RESET_SUBJECT.format(minutes=minutes),
            text_body=PASSWORD_RESET_TEXT.format(reset_url=reset_url, minutes=minutes),
        )

        self._send_email(to_email, message)
