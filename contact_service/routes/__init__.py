# Routes package init
"""
Contact Service — API Routes Package
======================================

Route Inventory:
    - root.py:      GET  /                  (liveness text)
                    GET  /name              (configured text)
    - contacts.py:  GET  /contacts          (list, capped at 100)
                    GET  /contacts/{name}
                    POST /contacts
                    PUT  /contacts/{name}
                    DELETE /contacts/{name}
    - health.py:    GET  /health            (service + database status)

Routes stay thin: extract path and body, call ContactService, pick the
status code. Everything else lives in the service.
"""
