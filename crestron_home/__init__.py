"""
Crestron Home Bridge - Package Root

Stateful client for a Crestron Home controller REST API.

Layer Structure:
- Domain: Device model, value translation and aggregation rules
- Application: Use cases, state synchronization and capability adapters
- Infrastructure: HTTP gateway and session management
- Presentation: Controllers and routes for the REST API
- Shared: Cross-cutting concerns and shared utilities
- Main: Composition root, application entry point and configuration
"""
