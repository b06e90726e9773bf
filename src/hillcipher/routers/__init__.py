from .texts import router as texts_router
from .users import router as users_router

_routers = [users_router, texts_router]

__all__ = ["get_routers"]


def get_routers():
    return _routers
