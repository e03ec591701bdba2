"""
Intake of new requests from the document extraction service.
"""

from foia_deadlines.intake.client import IntakeClient, IntakeResult

__all__ = [
    "IntakeClient",
    "IntakeResult",
]
