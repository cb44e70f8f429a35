"""
login_portal
------------
Small Flask server that authenticates users against a local SQLite table
and gates private pages behind a session cookie.
"""
