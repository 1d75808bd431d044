"""Core client logic.

Module Structure:
    - keycloak/ : Keycloak Admin API client, credentials and resource APIs
"""
