# =============================================================================
# Import API - Package Initialization
# =============================================================================
"""
Import API Service

A bulk import gateway that checks route capabilities, body size and
permissions, hands the payload to the data engine, and returns the result
in the format the client asked for.
"""

__version__ = "1.0.0"
