"""Authorization / policy layer.

Decides whether the requesting identity may use a policy element (button) or
administer a scope:
- system admin > scope admin (project / repository) > unrestricted
- per-element restriction level (EVERYONE or ADMIN) plus optional scope
"""
