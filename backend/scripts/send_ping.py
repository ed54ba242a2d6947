#!/usr/bin/env python3
"""Ping Sender for MailProbe delivery checks.

Creates a ping record with a fresh GUID in the correlation table and sends
(or prints) a probe email whose subject ends with ``guid: <GUID>``. When the
email comes back through the SMTP server, the GUID filter stores the delivery
delay on the record.

Usage:
    # Print the probe email, record the ping
    python scripts/send_ping.py --from probe@example.com --to inbox@mailprobe.local

    # Send via SMTP
    python scripts/send_ping.py --from probe@example.com --to inbox@mailprobe.local \
        --send --smtp-host smtp.example.com --smtp-port 587 --smtp-tls

    # Create the correlation table first (development databases)
    python scripts/send_ping.py --from probe@example.com --to inbox@mailprobe.local \
        --create-table
"""

import argparse
import os
import smtplib
import sys
import uuid
from email.mime.text import MIMEText
from email.utils import formatdate, make_msgid
from typing import Optional

from sqlalchemy import insert

# Add backend/src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from config import get_settings
from database import create_db_engine
from models.correlation_record import build_correlation_table


def create_ping_email(
    from_email: str,
    to_email: str,
    guid: str,
    subject_prefix: str = "Delivery check",
    body: Optional[str] = None,
) -> MIMEText:
    """Create the probe email.

    Args:
        from_email: Sender email address
        to_email: Recipient email address
        guid: Correlation token put at the end of the subject
        subject_prefix: Text before the ``guid:`` marker
        body: Email body text (optional)

    Returns:
        MIMEText: Email message
    """
    if body is None:
        body = f"MailProbe delivery check.\n\nGUID: {guid}\n"

    msg = MIMEText(body, 'plain')
    msg['From'] = from_email
    msg['To'] = to_email
    msg['Subject'] = f"{subject_prefix} guid: {guid}"
    msg['Date'] = formatdate(localtime=False)
    msg['Message-ID'] = make_msgid(domain="mailprobe.local")
    return msg


def record_ping(guid: str, create_table: bool = False) -> None:
    """Insert an unseen ping record for the GUID."""
    settings = get_settings()
    engine = create_db_engine(settings)
    table = build_correlation_table(
        settings.GUID_FILTER_LOOKUP_TABLE,
        settings.GUID_FILTER_LOOKUP_FIELD,
    )

    try:
        if create_table:
            table.create(bind=engine, checkfirst=True)
        with engine.begin() as conn:
            conn.execute(insert(table).values(guid=guid, seen=0))
    finally:
        engine.dispose()

    print(f"Recorded ping {guid} in {table.name}", file=sys.stderr)


def send_email(
    msg: MIMEText,
    smtp_host: str = 'localhost',
    smtp_port: int = 25,
    smtp_user: Optional[str] = None,
    smtp_password: Optional[str] = None,
    use_tls: bool = False,
):
    """Send email via SMTP.

    Args:
        msg: Email message to send
        smtp_host: SMTP server hostname
        smtp_port: SMTP server port
        smtp_user: SMTP username (optional)
        smtp_password: SMTP password (optional)
        use_tls: Use STARTTLS (optional)
    """
    try:
        smtp = smtplib.SMTP(smtp_host, smtp_port)

        if use_tls:
            smtp.starttls()

        if smtp_user and smtp_password:
            smtp.login(smtp_user, smtp_password)

        smtp.send_message(msg)
        smtp.quit()

        print(
            f"Email sent successfully to {msg['To']} via {smtp_host}:{smtp_port}",
            file=sys.stderr
        )

    except (smtplib.SMTPException, OSError) as e:
        print(f"ERROR sending email: {e}", file=sys.stderr)
        sys.exit(1)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Record a ping and send a MailProbe delivery check email',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument('--from', dest='from_email', required=True, help='Sender email address')
    parser.add_argument('--to', dest='to_email', required=True, help='Recipient email address')
    parser.add_argument('--guid', help='GUID to use (default: random UUID)')
    parser.add_argument(
        '--subject-prefix',
        default='Delivery check',
        help='Subject text before the guid marker (default: "Delivery check")'
    )
    parser.add_argument('--body', help='Email body text (optional)')
    parser.add_argument(
        '--create-table',
        action='store_true',
        help='Create the correlation table if it does not exist'
    )
    parser.add_argument(
        '--no-record',
        action='store_true',
        help='Do not insert the ping record (email only)'
    )

    # SMTP sending
    parser.add_argument('--send', action='store_true', help='Send email via SMTP (otherwise output to stdout)')
    parser.add_argument('--smtp-host', default='localhost', help='SMTP server hostname (default: localhost)')
    parser.add_argument('--smtp-port', type=int, default=25, help='SMTP server port (default: 25)')
    parser.add_argument('--smtp-user', help='SMTP username (optional)')
    parser.add_argument('--smtp-password', help='SMTP password (optional)')
    parser.add_argument('--smtp-tls', action='store_true', help='Use STARTTLS')

    args = parser.parse_args()

    guid = args.guid or uuid.uuid4().hex
    msg = create_ping_email(
        from_email=args.from_email,
        to_email=args.to_email,
        guid=guid,
        subject_prefix=args.subject_prefix,
        body=args.body,
    )

    if not args.no_record:
        record_ping(guid, create_table=args.create_table)

    if args.send:
        send_email(
            msg,
            smtp_host=args.smtp_host,
            smtp_port=args.smtp_port,
            smtp_user=args.smtp_user,
            smtp_password=args.smtp_password,
            use_tls=args.smtp_tls,
        )
    else:
        print(msg.as_string())


if __name__ == '__main__':
    main()
