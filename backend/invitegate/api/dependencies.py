"""Request Dependencies — service container and session identity resolution.

Invariants:
    - Identity comes only from the signed session cookie (key SESSION_IDENTITY_KEY)
    - No identity → NotConnectedError (401); identity without a stored record
      → NotConnectedError("No stored user") where a record is required
"""

from typing import Annotated

from fastapi import Depends, Request

from invitegate.core.accounts import UserRecord
from invitegate.core.domain_types import Identity
from invitegate.core.errors import NotConnectedError
from invitegate.services.container import ServiceContainer, get_container

SESSION_IDENTITY_KEY = "uid"
SESSION_OAUTH_KEY = "oauth"

ContainerDep = Annotated[ServiceContainer, Depends(get_container)]


def get_current_identity(request: Request) -> Identity:
    uid = request.session.get(SESSION_IDENTITY_KEY)
    if not uid:
        raise NotConnectedError()
    return Identity(uid)


IdentityDep = Annotated[Identity, Depends(get_current_identity)]


async def get_current_user(identity: IdentityDep, services: ContainerDep) -> UserRecord:
    record = await services.directory.get(identity)
    if record is None:
        raise NotConnectedError("No stored user")
    return record


UserDep = Annotated[UserRecord, Depends(get_current_user)]
