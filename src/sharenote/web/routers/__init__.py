from sharenote.web.routers.notes import router as notes_router
from sharenote.web.routers.share import router as share_router

__all__ = [
    "notes_router",
    "share_router",
]
