"""Domain layer for ledgerlens application.

Services are imported from their modules (e.g. ``ledgerlens.domain.ingestion``)
so that the database layer can import entities without a cycle.
"""
