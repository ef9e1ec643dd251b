"""
SmartBlasts - Personalization Tokens
Replaces {company}, {contact} and {website} in subject lines and message
bodies with the matching contact fields.

Substitution is a single pass over the template: values are inserted
verbatim (no escaping) and a value that itself contains a token is left
as-is. Token spelling is case-sensitive; {Company} is not a token.
"""

import re

TOKEN_FIELDS = {
    "company": "company_name",
    "contact": "contact_name",
    "website": "website",
}

_TOKEN_RE = re.compile(r"\{(company|contact|website)\}")

# Stand-in contact for template previews
SAMPLE_CONTACT = {
    "company_name": "Acme Corporation",
    "contact_name": "John Smith",
    "email": "john@acmecorp.com",
    "website": "acmecorp.com",
}


def personalize(template: str, contact: dict) -> str:
    if not template:
        return ""

    def _value(match):
        return contact.get(TOKEN_FIELDS[match.group(1)]) or ""

    return _TOKEN_RE.sub(_value, template)


def personalize_message(message: dict, contact: dict) -> dict:
    """Render a drip step (or template) for one contact.

    Subject and body are substituted independently.
    """
    return {
        "subject_line": personalize(message.get("subject_line", ""), contact),
        "message_template": personalize(message.get("message_template", ""), contact),
    }


def preview_campaign(messages: list, contacts: list) -> list:
    """Render every step against the first contact, as the builder preview does.

    With no contacts the rendered fields are empty strings.
    """
    sample = contacts[0] if contacts else None
    previews = []
    for msg in messages:
        if sample is None:
            rendered = {"subject_line": "", "message_template": ""}
        else:
            rendered = personalize_message(msg, sample)
        previews.append({"id": msg.get("id"), **rendered})
    return previews


def find_tokens(text: str) -> list:
    """List the tokens used in a template, in order of first appearance."""
    seen = []
    for token in _TOKEN_RE.findall(text or ""):
        if token not in seen:
            seen.append(token)
    return seen
