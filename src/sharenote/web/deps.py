from typing import Annotated, cast

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader

from sharenote.app import App

MASTER_KEY_HEADER = "X-Master-Key"

# Security scheme; validation happens in the access service so that a missing
# and a wrong key produce the same response
master_key_scheme = APIKeyHeader(name=MASTER_KEY_HEADER, auto_error=False)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


AppDep = Annotated[App, Depends(get_app)]
MasterKeyDep = Annotated[str | None, Depends(master_key_scheme)]
