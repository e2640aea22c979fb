"""Domain layer for ledgerkit application.

Services are imported from their modules directly
(e.g. ``from ledgerkit.domain.importer import ImportService``) so that the
database layer can depend on :mod:`ledgerkit.domain.entities` without a
cycle through this package.
"""
