"""
API tests for the contact book: CRUD, search, CSV import and export.
"""

CSV_TEXT = "Company,Contact,E-Mail,URL\nAcme,Ann,ann@acme.com,acme.com\nBeta,Bob,,beta.io\n"


def _add(client, auth, **fields):
    body = {"company_name": "Acme", "contact_name": "Ann", "email": "ann@acme.com", "website": "acme.com"}
    body.update(fields)
    return client.post("/api/contacts", headers=auth, json=body)


def test_add_and_list_contacts(client, auth):
    assert _add(client, auth).status_code == 201
    assert _add(client, auth, company_name="Beta", email="bob@beta.io").status_code == 201

    contacts = client.get("/api/contacts", headers=auth).json()
    assert [c["company_name"] for c in contacts] == ["Beta", "Acme"]


def test_duplicate_email_rejected_case_insensitively(client, auth):
    _add(client, auth)
    r = _add(client, auth, email="ANN@ACME.COM")
    assert r.status_code == 409
    assert len(client.get("/api/contacts", headers=auth).json()) == 1


def test_company_and_email_required(client, auth):
    assert _add(client, auth, company_name=" ").status_code == 400
    assert _add(client, auth, email="").status_code == 400


def test_search_is_case_insensitive_substring(client, auth):
    _add(client, auth)
    _add(client, auth, company_name="Beta", contact_name="Bob", email="bob@beta.io", website="beta.io")
    found = client.get("/api/contacts", headers=auth, params={"search": "BETA"}).json()
    assert [c["company_name"] for c in found] == ["Beta"]
    assert len(client.get("/api/contacts", headers=auth, params={"search": "ann"}).json()) == 1


def test_contacts_are_private_to_each_user(client, auth, signup):
    created = _add(client, auth).json()
    other = {"X-Session-Token": signup(email="other@example.com")["session_token"]}
    assert client.get("/api/contacts", headers=other).json() == []
    assert client.get(f"/api/contacts/{created['id']}", headers=other).status_code == 404
    assert client.delete(f"/api/contacts/{created['id']}", headers=other).status_code == 404


def test_delete_contact(client, auth):
    created = _add(client, auth).json()
    assert client.delete(f"/api/contacts/{created['id']}", headers=auth).status_code == 200
    assert client.get("/api/contacts", headers=auth).json() == []


def test_csv_preview(client, auth):
    r = client.post("/api/contacts/import/preview", headers=auth, json={"csv_text": CSV_TEXT})
    assert r.status_code == 200
    assert r.json()["mapping"] == {
        "company_name": "Company", "contact_name": "Contact", "email": "E-Mail", "website": "URL",
    }
    assert r.json()["row_count"] == 2


def test_csv_import_filters_and_dedupes(client, auth):
    _add(client, auth, email="ANN@acme.com")
    r = client.post("/api/contacts/import", headers=auth, json={"csv_text": CSV_TEXT})
    assert r.status_code == 200
    body = r.json()
    assert body["imported"] == 0
    assert body["duplicate_count"] == 1
    assert body["skipped_count"] == 1


def test_csv_import_website_only(client, auth):
    r = client.post("/api/contacts/import", headers=auth,
                    json={"csv_text": CSV_TEXT, "website_only": True})
    assert r.json()["imported"] == 2
    assert len(client.get("/api/contacts", headers=auth).json()) == 2


def test_csv_import_with_manual_mapping(client, auth):
    r = client.post("/api/contacts/import", headers=auth, json={
        "csv_text": CSV_TEXT,
        "mapping": {"company_name": "Contact", "contact_name": "none", "email": "E-Mail", "website": "none"},
    })
    assert r.json()["imported"] == 1
    contact = client.get("/api/contacts", headers=auth).json()[0]
    assert contact["company_name"] == "Ann"
    assert contact["website"] == ""


def test_csv_import_without_email_column(client, auth):
    r = client.post("/api/contacts/import", headers=auth, json={"csv_text": "Company\nAcme\n"})
    assert r.status_code == 400


def test_export(client, auth):
    _add(client, auth)
    r = client.get("/api/contacts/export", headers=auth)
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    assert r.text == 'company_name,contact_name,email,website\n"Acme","Ann","ann@acme.com","acme.com"\n'
