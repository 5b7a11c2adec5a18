"""
Docs Domain Layer

Domain objects for the product documentation downloader.
All domain objects are immutable (frozen dataclasses) with ZERO external dependencies,
except ResultLedger, the append-only aggregate of book outcomes.
"""
