"""
IMS reporting client.

Pure report calculations live under ``ims_reporting.modules.reporting``; the
REST boundary lives under ``ims_reporting.repositories``.
"""

__version__ = "0.1.0"
