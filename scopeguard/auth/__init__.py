"""
Identity resolution for the API.

Design goals:
- The authorization layer only sees an `Identity` (or None for anonymous callers).
- Cookie-based signed session (HttpOnly) for same-origin UI.
- Global admin flags come from configuration, never from the cookie.
"""
