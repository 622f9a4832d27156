# Routes package init
"""
Image Tagger Backend — API Routes Package
===========================================

Route Inventory:
    - users.py:    POST /users, POST /login, GET /users
    - images.py:   POST/GET /images, DELETE /images/{id},
                   POST/GET /images/{id}/threads
    - threads.py:  PATCH/DELETE /threads/{id}
    - health.py:   GET /health

Routes stay thin: read the request, call a service, choose the status code.
Ownership and positioning rules live in the services.
"""
