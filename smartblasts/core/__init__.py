# Campaign Core - pure functions behind the campaign builder and contact book.
# Nothing in here touches the database; routers and services feed it dicts.
#
# Key modules:
#   sequence.py     - Drip message steps and the cumulative send-day schedule
#   personalize.py  - {company} / {contact} / {website} token substitution
#   dedupe.py       - Case-insensitive e-mail duplicate detection
#   csv_import.py   - Naive CSV parsing, header auto-mapping, import + export
