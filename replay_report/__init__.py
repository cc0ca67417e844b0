"""
Replay Report

Rolling audit trail for a multi-user session host and delivery of
player reports, with replay evidence attached, to a webhook.
"""

__version__ = "1.0.0"
