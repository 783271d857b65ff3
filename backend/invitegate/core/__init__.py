"""Core Layer — pure domain logic, no IO, no HTTP, no stores.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - Time is always passed in explicitly (functions never read the clock)

Design Decisions:
    - Functional core separated from imperative shell: services own the
      stores and locks, core owns the rules
"""
