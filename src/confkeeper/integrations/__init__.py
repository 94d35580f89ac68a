"""
confkeeper.integrations - External System Integrations
========================================================

    - wait_for_endpoint_available():  poll an HTTP endpoint (httpx) until it
                                      answers with the expected status

Usage:
    from confkeeper.integrations import wait_for_endpoint_available
"""

from confkeeper.integrations.endpoint import wait_for_endpoint_available

__all__ = ["wait_for_endpoint_available"]
