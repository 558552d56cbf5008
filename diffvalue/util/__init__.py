"""
diffvalue Utils
===============

Support classes for the diffvalue container.

Classes:
- CoWSubscriberSet: Copy-on-Write ordered subscriber collection for safe fan-out
"""

from .subscriber_set import CoWSubscriberSet

__all__ = ["CoWSubscriberSet"]
