"""Records application for the hospital backend.

This package contains the account and profile models, clinical records,
serializers, views and route registrations implementing the API consumed
by the front-end single-page app.
"""
