"""Test factories for generating test data.

    from tests.factories import SiteFactory
"""

from tests.factories.site import SiteFactory

__all__ = [
    "SiteFactory",
]
