"""leak_server — FastAPI REST API for the leak intake SDK.

Exposes wizard sessions, step interaction, photo upload, analysis, the
report unlock gate, consultation submission, the operator console and
reference data.
"""
