# Services package init
"""
Mixtape Backend — Services Layer
=================================

Service Inventory:
    - SongService:     Song loader options and row → SongView mapping
    - PlaylistService: Playlist loader options, row → PlaylistView mapping,
                       create, get_by_id
    - UserService:     User CRUD, query, and the detailed-user aggregation
    - util:            "Liked Songs" name and default descriptor

Each service is stateless and exposed as a module-level singleton; its
collaborators are constructor arguments so tests can replace them.
"""
