# Services package init
"""
Contact Service — Services Layer
==================================

What:  Operations layer sitting between routes (HTTP) and the database.
How:   Services take a session plus validated payloads and return response
       models or raise exceptions from contact_service.exceptions.

Service Inventory:
    - ContactService: list / get / create / update / delete over the
      contacts table
"""
