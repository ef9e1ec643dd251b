"""
SmartBlasts - Contact Deduplication
The e-mail address, lower-cased, is the only duplicate key. Nothing else is
normalized: surrounding whitespace, plus-addressing and domain aliases all
count as different addresses.
"""


def email_key(contact: dict) -> str:
    return (contact.get("email") or "").lower()


def is_duplicate(contact: dict, existing: list) -> bool:
    """True when the contact's e-mail matches any e-mail in ``existing``."""
    key = email_key(contact)
    if not key:
        return False
    return any(email_key(c) == key for c in existing)


def split_new_and_duplicates(candidates: list, existing: list) -> tuple:
    """Partition incoming contacts into (new, duplicates).

    A candidate is a duplicate when its key is already in ``existing`` or
    appeared earlier in ``candidates``; the first occurrence wins. Blank
    e-mails never match anything.

    Repeats inside one upload are dropped too, which is stricter than only
    filtering against contacts already on file.
    """
    seen = {email_key(c) for c in existing}
    seen.discard("")
    new, duplicates = [], []
    for contact in candidates:
        key = email_key(contact)
        if key and key in seen:
            duplicates.append(contact)
            continue
        if key:
            seen.add(key)
        new.append(contact)
    return new, duplicates
