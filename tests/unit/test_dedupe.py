"""
Unit tests for e-mail based contact deduplication.
"""

from smartblasts.core.dedupe import email_key, is_duplicate, split_new_and_duplicates


def test_email_key_lowercases_only():
    assert email_key({"email": " A@X.com"}) == " a@x.com"
    assert email_key({"email": None}) == ""
    assert email_key({}) == ""


def test_case_insensitive_match():
    assert is_duplicate({"email": "A@x.com"}, [{"email": "a@x.com"}])


def test_no_other_normalization():
    existing = [{"email": "a@x.com"}]
    assert not is_duplicate({"email": " a@x.com"}, existing)
    assert not is_duplicate({"email": "a+tag@x.com"}, existing)


def test_blank_email_never_duplicate():
    assert not is_duplicate({"email": ""}, [{"email": ""}])


def test_split_against_existing():
    new, dups = split_new_and_duplicates([{"email": "A@x.com"}], [{"email": "a@x.com"}])
    assert new == []
    assert dups == [{"email": "A@x.com"}]


def test_split_drops_in_batch_duplicates_first_wins():
    candidates = [
        {"email": "b@x.com", "contact_name": "first"},
        {"email": "B@X.COM", "contact_name": "second"},
        {"email": "c@x.com"},
    ]
    new, dups = split_new_and_duplicates(candidates, [])
    assert [c.get("contact_name") for c in new] == ["first", None]
    assert dups[0]["contact_name"] == "second"


def test_split_keeps_blank_emails():
    candidates = [{"email": "", "website": "a.com"}, {"email": "", "website": "b.com"}]
    new, dups = split_new_and_duplicates(candidates, [{"email": ""}])
    assert len(new) == 2
    assert dups == []
