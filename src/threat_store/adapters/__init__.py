"""Adapters layer - concrete implementations of port interfaces.

Adapters provide the actual implementations:
- Inbound adapters: Handle incoming requests (REST)
- Outbound adapters: Implement external dependencies (git, filesystem)
"""
