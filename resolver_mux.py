#!/usr/bin/python3
"""Multiplexer over command family resolvers"""

from typing import List

from tappy_errors import UnsupportedFamilyError
from tcmp import FamilyResolver, TcmpMessage


class ResolverMux:
    """Routes resolution to the first resolver that claims a message's family"""

    def __init__(self, resolvers: List[FamilyResolver]):
        self.resolvers = resolvers

    def check_family(self, message) -> bool:
        """Check if any resolver supports the message's command family"""
        return any(resolver.check_family(message) for resolver in self.resolvers)

    def resolve_command(self, message) -> TcmpMessage:
        """Resolve a command into its concrete type.

        Raises UnsupportedFamilyError if no resolver claims the family.
        """
        for resolver in self.resolvers:
            if resolver.check_family(message):
                return resolver.resolve_command(message)
        raise UnsupportedFamilyError("Unsupported command type")

    def resolve_response(self, message) -> TcmpMessage:
        """Resolve a response into its concrete type.

        Raises UnsupportedFamilyError if no resolver claims the family.
        """
        for resolver in self.resolvers:
            if resolver.check_family(message):
                return resolver.resolve_response(message)
        raise UnsupportedFamilyError("Unsupported response type")
