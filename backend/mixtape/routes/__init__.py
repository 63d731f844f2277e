# Routes package init
"""
Mixtape Backend — API Routes Package
=====================================

Route Inventory:
    - users.py:      GET/POST     /api/user
                     GET/PUT/DEL  /api/user/{id}
                     GET          /api/user/{id}/detailed
    - playlists.py:  GET          /api/playlist/{id}
                     POST         /api/playlist
    - health.py:     GET          /health

Routes handle HTTP concerns only; business logic lives in services.
"""
