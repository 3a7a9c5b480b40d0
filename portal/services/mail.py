import base64

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Attachment, Disposition, FileContent, FileName, FileType, Mail
from flask import current_app


class MailNotConfigured(Exception):
    pass


def _client():
    key = current_app.config.get('SENDGRID_API_KEY')
    if not key:
        raise MailNotConfigured('SENDGRID_API_KEY is not set')
    return SendGridAPIClient(api_key=key)


def build_message(to_email, subject, body, ics=None):
    message = Mail(from_email=(current_app.config['MAIL_FROM'], current_app.config['MAIL_FROM_NAME']),
                   to_emails=to_email,
                   subject=subject,
                   plain_text_content=body)
    if ics:
        message.attachment = Attachment(
            FileContent(base64.b64encode(ics.encode('utf-8')).decode('ascii')),
            FileName('interview.ics'),
            FileType('text/calendar'),
            Disposition('attachment'),
        )
    return message


def send_mail(to_email, subject, body, ics=None):
    """Send one message; returns (status_code, provider message id)."""
    resp = _client().send(build_message(to_email, subject, body, ics=ics))
    headers = getattr(resp, 'headers', None) or {}
    return resp.status_code, headers.get('X-Message-Id')


def send_batch(messages):
    """Send ``[{"to", "subject", "body", "ics"?}, ...]`` one by one.

    Returns one ``(ok, result)`` pair per message: the provider id when sent,
    the error text when not. One failed message does not stop the rest.
    Raises ``MailNotConfigured`` up front, before anything is sent.
    """
    client = _client()
    results = []
    for m in messages:
        try:
            resp = client.send(build_message(m['to'], m['subject'], m['body'], ics=m.get('ics')))
            headers = getattr(resp, 'headers', None) or {}
            results.append((True, headers.get('X-Message-Id')))
        except Exception as e:
            current_app.logger.warning('Mail to %s failed: %s', m.get('to'), e)
            results.append((False, str(e)))
    return results
