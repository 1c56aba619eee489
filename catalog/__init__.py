"""
Game catalog application package.

Layered architecture:

  catalog/models.py        - the ``Game`` entry and its allowed field values.
  catalog/repositories/    - storage: one ``GameRepository`` contract with an
                             in-memory backend and a SQLAlchemy backend.
  catalog/services/        - request handling: payload validation and the
                             mapping of repository results onto outcomes.

``catalog_api.py`` is the integration point: it picks a backend from the
configuration, wraps it in a ``GameService`` and exposes the service through
Flask routes under ``/api/games``.
"""
