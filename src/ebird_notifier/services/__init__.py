"""
Outbound service integrations.

- http.py  - Shared ``requests`` session (single attempt, default timeout)
- mail.py  - SMTP notification sender (password or OAuth2 XOAUTH2 login)
"""
