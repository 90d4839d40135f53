"""
Utility modules.
"""

from prdocumentator.utils.logging import configure_logging, mask_token

__all__ = ["configure_logging", "mask_token"]
