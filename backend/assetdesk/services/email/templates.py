"""
HTML email templates.

Each template has:
- subject: subject line with {placeholders}
- body: HTML with {placeholders}

Every subject carries the "[Ticket #<id>]" tag so customer replies can be
matched back to the ticket by the inbound email webhook. Context values are
HTML-escaped in bodies, never in subjects.
"""

import html
from typing import Tuple, Dict, Any

from .constants import EmailType

_BASE_STYLE = "font-family: Arial, Helvetica, sans-serif; max-width: 600px; color: #374151;"
_QUOTE_STYLE = "background-color: #f9f9f9; padding: 15px; border-radius: 5px;"
_RULE = '<hr style="border:none; border-top: 1px solid #eee;">'
_FOOTER_STYLE = "font-size: 12px; color: #888;"

TEMPLATES = {
    EmailType.TICKET_RECEIVED: {
        'subject': '[Ticket #{id}] Your support request has been received: {title}',
        'body': f'''
        <div style="{_BASE_STYLE}">
            <p>Hello,</p>
            <p>Thank you for contacting us. We have created a support ticket for you.</p>
            <p>Your Ticket ID is: <b>#{{id}}</b></p>
            <p><b>Subject:</b> {{title}}</p>
            <p><b>Priority:</b> {{priority}}</p>
            {_RULE}
            <p style="white-space: pre-wrap;">{{description}}</p>
            {_RULE}
            <p>Our team will review your request and get back to you shortly.
               You can reply directly to this email to add updates to your ticket.</p>
        </div>
        '''
    },

    EmailType.STATUS_CHANGED: {
        'subject': 'Re: [Ticket #{id}] Status Updated: {title}',
        'body': f'''
        <div style="{_BASE_STYLE}">
            <p>Hello,</p>
            <p>The status of your support ticket has been updated from
               <b>{{old_value}}</b> to <b>{{new_value}}</b>.</p>
        </div>
        '''
    },

    EmailType.PRIORITY_CHANGED: {
        'subject': 'Re: [Ticket #{id}] Priority Updated: {title}',
        'body': f'''
        <div style="{_BASE_STYLE}">
            <p>Hello,</p>
            <p>The priority of your support ticket has been updated from
               <b>{{old_value}}</b> to <b>{{new_value}}</b>.</p>
        </div>
        '''
    },

    EmailType.TICKET_ASSIGNED: {
        'subject': 'Re: [Ticket #{id}] Your Ticket Has Been Assigned: {title}',
        'body': f'''
        <div style="{_BASE_STYLE}">
            <p>Hello,</p>
            <p>Your support ticket has been assigned to <b>{{assignee}}</b>.
               They will be in touch with you shortly.</p>
        </div>
        '''
    },

    EmailType.NEW_REPLY: {
        'subject': 'Re: [Ticket #{id}] {title}',
        'body': f'''
        <div style="{_BASE_STYLE}">
            <p>Hello,</p>
            <p>A new reply has been posted to your support ticket by our team.</p>
            {_RULE}
            <div style="{_QUOTE_STYLE}">
                <p><b>{{author}} wrote:</b></p>
                <p style="white-space: pre-wrap;">{{update_text}}</p>
            </div>
            {_RULE}
            <p>You can reply directly to this email to add another update to the ticket.</p>
            <p style="{_FOOTER_STYLE}">Please do not change the subject line to ensure
               your reply is tracked correctly.</p>
        </div>
        '''
    },
}


class _Defaults(dict):
    """format_map mapping that renders missing keys as empty strings."""

    def __missing__(self, key):
        return ''


def render_template(template_name: str, context: Dict[str, Any]) -> Tuple[str, str]:
    """
    Render a template.

    Args:
        template_name: Key of TEMPLATES (see EmailType)
        context: Placeholder values

    Returns:
        (subject, body_html)

    Raises:
        ValueError: unknown template
    """
    template = TEMPLATES.get(template_name)
    if template is None:
        raise ValueError(f"Unknown email template: {template_name}")

    raw = _Defaults({k: '' if v is None else str(v) for k, v in context.items()})
    escaped = _Defaults({k: html.escape(v) for k, v in raw.items()})

    subject = template['subject'].format_map(raw)
    body = template['body'].format_map(escaped)
    return subject, body.strip()
