"""Service Layer — orchestrates core rules over injected stores and locks.

Invariants:
    - Every read-modify-write on a bundle or claim runs under the owner's lock
    - Services raise InviteGateError subclasses; routes never translate errors
"""
