"""
Preference ledger.

Responsibilities:
- Record venue and menu-item hearts in a daily buffer.
- Roll the daily buffer into the historical archive once per calendar day.
- Serve per-user views of today's likes and the detailed archive.
- Guard every read-modify-write of the persisted documents with one lock.
"""
