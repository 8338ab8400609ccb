"""
Audit HTML generator for QA.

Creates a single HTML page showing every rendered slide of a conversion.
"""

from slidevector.audit.html_generator import AuditHTMLGenerator

__all__ = ["AuditHTMLGenerator"]
