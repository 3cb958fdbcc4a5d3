"""
Repository package for data access layers.

`app.repositories.movies` defines the storage port used by the movie create
service and its PostgreSQL (stored routine) implementation. Tests and other
callers may pass any object implementing `insert_movie(movie, actor)`.
"""
