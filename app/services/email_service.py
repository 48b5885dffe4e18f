import asyncio
import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid

from app.config import config

logger = logging.getLogger(__name__)


class EmailClient:
    """Context manager around an authenticated SMTP connection."""

    def __init__(self, server: str, port: int, username: str, password: str, timeout: int):
        self.host = server
        self.port = port
        self.username = username
        self.password = password
        self.timeout = timeout
        self.server = None

    def __enter__(self):
        try:
            if self.port == 465:
                self.server = smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
            else:
                self.server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
                self.server.starttls()

            if self.username:
                self.server.login(self.username, self.password)
            return self.server
        except Exception as e:
            logger.error(f"Failed to connect to SMTP server: {e}")
            raise

    def __exit__(self, exc_type, exc_value, traceback):
        if self.server:
            try:
                self.server.quit()
            except smtplib.SMTPException as e:
                # keep the delivery error, if any, as the one that propagates
                logger.warning(f"SMTP connection did not close cleanly: {e}")
                self.server.close()


def build_message(
    sender: str,
    to_email: str,
    subject: str,
    html_body: str,
    text_body: str,
) -> MIMEMultipart:
    msg = MIMEMultipart("alternative")
    msg["From"] = sender
    msg["To"] = to_email
    msg["Subject"] = subject
    msg["Message-ID"] = make_msgid()
    msg.attach(MIMEText(text_body, "plain"))
    msg.attach(MIMEText(html_body, "html"))
    return msg


class SmtpNotifier:
    """Delivers one message per call over SMTP. Transport errors propagate."""

    def __init__(
        self,
        server: str,
        port: int,
        username: str = "",
        password: str = "",
        sender: str = "",
        timeout: int = 10,
    ):
        self.server = server
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender or username
        self.timeout = timeout

    def _deliver(self, msg: MIMEMultipart, to_email: str):
        with EmailClient(
            self.server,
            self.port,
            self.username,
            self.password,
            self.timeout,
        ) as server:
            server.sendmail(self.sender, to_email, msg.as_string())

    async def send(self, to_email: str, subject: str, html_body: str, text_body: str) -> dict:
        msg = build_message(self.sender, to_email, subject, html_body, text_body)

        # smtplib blocks, keep it off the event loop
        await asyncio.to_thread(self._deliver, msg, to_email)

        logger.info(f"Email sent successfully to {to_email}: {msg['Message-ID']}")
        return {"success": True, "message_id": msg["Message-ID"]}


class LoggingNotifier:
    """Stand-in used without an SMTP server: logs the message, never delivers."""

    async def send(self, to_email: str, subject: str, html_body: str, text_body: str) -> dict:
        logger.info(
            "\n=== EMAIL NOTIFICATION (Development Mode) ===\n"
            f"To: {to_email}\n"
            f"Subject: {subject}\n"
            f"Body:\n{text_body or html_body}\n"
            "==============================================",
        )
        return {"success": True, "message_id": None, "message": "Email logged (development mode)"}


def create_notifier():
    if config.is_development and not config.SMTP_SERVER:
        logger.info("📭 SMTP server is not configured, emails will only be logged")
        return LoggingNotifier()

    return SmtpNotifier(
        server=config.SMTP_SERVER,
        port=config.SMTP_PORT,
        username=config.SMTP_USERNAME,
        password=config.SMTP_PASSWORD,
        sender=config.email_sender,
        timeout=config.SMTP_TIMEOUT,
    )


async def send_wishlist_fulfillment_email(
    notifier,
    user_email: str,
    user_name: str,
    book_title: str,
    book_author: str,
) -> dict:
    """📩 Email sent when a book from the user's wishlist is available again"""
    subject = "Your Wishlist Book is Now Available"

    text = f"""
Hello {user_name},

Your wishlist book is now available:

Book: {book_title}
Author: {book_author}

You can now borrow this book from the library.

Thank you,
Library Management System
    """.strip()

    html_body = f"""
<p>Hello {html.escape(user_name)},</p>

<p>Your wishlist book is now available:</p>

<p><strong>Book:</strong> {html.escape(book_title)}<br>
<strong>Author:</strong> {html.escape(book_author)}</p>

<p>You can now borrow this book from the library.</p>

<p>Thank you,<br>
Library Management System</p>
    """.strip()

    return await notifier.send(user_email, subject, html_body, text)
