# app/email.py - Verification email sender
import smtplib
import asyncio
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from app.config import settings
import logging

logger = logging.getLogger(__name__)


class EmailService:
    """Simple email service for sending verification links"""

    def __init__(self):
        self.smtp_host = settings.smtp_host
        self.smtp_port = settings.smtp_port
        self.smtp_username = settings.smtp_username
        self.smtp_password = settings.smtp_password
        self.from_email = settings.from_email
        self.from_name = settings.from_name

    def is_configured(self) -> bool:
        return bool(self.smtp_username and self.smtp_password and self.from_email)

    def build_verification_link(self, token: str) -> str:
        return f"{settings.frontend_url.rstrip('/')}/verify-email?token={token}"

    async def send_verification_email(self, email: str, full_name: str, token: str) -> bool:
        """Send verification email - returns True if successful"""
        link = self.build_verification_link(token)

        if not self.is_configured():
            logger.warning(f"⚠️ SMTP not configured, verification link for {email}: {link}")
            return False

        try:
            msg = MIMEMultipart('alternative')
            msg['Subject'] = "Verify your CampusConnect account"
            msg['From'] = f"{self.from_name} <{self.from_email}>"
            msg['To'] = email

            hours = settings.verification_token_expire_hours
            text_content = (
                f"Hi {full_name},\n\n"
                f"Confirm your university email by opening this link:\n{link}\n\n"
                f"The link expires in {hours} hours."
            )

            msg.attach(MIMEText(text_content, 'plain', 'utf-8'))
            msg.attach(MIMEText(self._create_html_email(full_name, link, hours), 'html', 'utf-8'))

            success = await self._send_with_smtp(msg)

            if success:
                logger.info(f"✅ Verification email sent to {email}")
            else:
                logger.error(f"❌ Verification email failed to {email}")

            return success

        except Exception as e:
            logger.error(f"❌ Email error: {str(e)}")
            return False

    async def _send_with_smtp(self, msg):
        """Send via the configured port with STARTTLS, then fall back to SSL on 465"""
        configs = [
            {"port": self.smtp_port, "tls": True},
            {"port": 465, "ssl": True}
        ]

        for config in configs:
            try:
                await self._send_message(msg, config)
                return True
            except (smtplib.SMTPException, OSError) as e:
                logger.warning(f"Failed to send on port {config['port']}: {str(e)}")
                continue
        return False

    async def _send_message(self, msg, config):
        """Send message with specific SMTP configuration"""
        loop = asyncio.get_running_loop()

        def _sync_send():
            if config.get('ssl', False):
                server = smtplib.SMTP_SSL(self.smtp_host, config['port'], timeout=10)
            else:
                server = smtplib.SMTP(self.smtp_host, config['port'], timeout=10)
                if config.get('tls', False):
                    server.starttls()

            try:
                server.login(self.smtp_username, self.smtp_password)
                server.send_message(msg)
            finally:
                server.quit()

        await loop.run_in_executor(None, _sync_send)

    def _create_html_email(self, full_name: str, link: str, hours: int) -> str:
        return f"""
        <!DOCTYPE html>
        <html>
        <head>
            <meta charset="utf-8">
            <title>Verify Your Email</title>
        </head>
        <body style="font-family: Arial, sans-serif; margin: 0; padding: 20px; background-color: #f5f5f5;">
            <div style="max-width: 600px; margin: 0 auto; background: white; border-radius: 8px; padding: 30px;">
                <h1 style="color: #333; font-size: 24px; text-align: center;">🎓 CampusConnect</h1>
                <p style="color: #333; font-size: 16px; line-height: 1.6;">
                    Hi {full_name}, welcome aboard! Please confirm your university email.
                </p>
                <div style="text-align: center; margin: 30px 0;">
                    <a href="{link}" style="background: #007bff; color: white; padding: 12px 24px; border-radius: 6px; text-decoration: none;">
                        Verify email
                    </a>
                </div>
                <p style="color: #856404; font-size: 14px;">
                    ⏱️ This link expires in <strong>{hours} hours</strong>.
                </p>
                <p style="color: #999; font-size: 12px; text-align: center;">
                    If you didn't create an account, please ignore this email.
                </p>
            </div>
        </body>
        </html>
        """


# Global email service instance
email_service = EmailService()


async def send_verification_email(email: str, full_name: str, token: str) -> bool:
    """Send verification email - simple wrapper function"""
    return await email_service.send_verification_email(email, full_name, token)
