"""
Feature modules of the recipe catalog.

- catalog: store protocol, MongoDB adapter, pagination, reference guard
  and the catalog service
- auth: token maker, password hashing and the login/renew service
- images: best-effort removal of image files

A module exposes Protocols in interfaces.py and keeps its adapters behind
them; other modules import the Protocols only.
"""
