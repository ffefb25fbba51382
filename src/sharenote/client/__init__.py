from sharenote.client.api import AliasClient, AliasServiceError
from sharenote.client.config import ClientConfig
from sharenote.client.controller import EditorController, EditorState, Renderer
from sharenote.client.links import LinkBuilder
from sharenote.client.mirror import LocalMirror
from sharenote.client.notes import NoteStore
from sharenote.client.resolver import LinkResolver
from sharenote.client.storage import LocalStorage
from sharenote.client.workspace import Workspace

__all__ = [
    "AliasClient",
    "AliasServiceError",
    "ClientConfig",
    "EditorController",
    "EditorState",
    "LinkBuilder",
    "LinkResolver",
    "LocalMirror",
    "LocalStorage",
    "NoteStore",
    "Renderer",
    "Workspace",
]
