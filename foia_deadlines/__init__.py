"""
FOI request deadline tracking: business-day arithmetic, statutory deadline
derivation, compliance classification, and the request tracker around them.
"""

__version__ = "0.1.0"
