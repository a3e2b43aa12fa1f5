"""Shared FastAPI dependencies."""
from ..controller import ChatController
from ..generate import GenerationClient


def get_chat_controller():
    """One controller per request; its HTTP session is closed afterwards."""
    client = GenerationClient()
    try:
        yield ChatController(client=client)
    finally:
        client.close()
