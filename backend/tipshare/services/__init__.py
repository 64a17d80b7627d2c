# Services package init
"""
TipShare Backend: Services Layer
==================================

What:  Business logic between the routes (HTTP) and the persisted store.
How:   Services receive their collaborators (store, token signer) at
       construction. main.create_app() builds one instance of each per app.

Service Inventory:
    - IdentityService: registration (unique usernames) and login (tokens)
    - TipService: tip CRUD with ownership-scoped update and delete

Services raise exceptions from tipshare.exceptions and never build HTTP
responses themselves.
"""
