"""
Gateways Package - Infrastructure Layer

Concrete implementations of the gateway interfaces defined in the domain
layer, handling the details of talking to the controller over HTTP.
"""

from .crestron_gateway import CrestronGateway, build_base_url

__all__ = ["CrestronGateway", "build_base_url"]
