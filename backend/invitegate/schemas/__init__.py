"""Pydantic Schemas — request/response validation for API and upstream payloads.

Invariants:
    - Schemas validate at system boundaries (user input, provider responses)
    - Core dataclasses are projected into schemas, never the other way round

Design Decisions:
    - Separate from core: schemas are wire contracts, core types are domain state
"""
