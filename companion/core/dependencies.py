from typing import Annotated

from fastapi import Depends
from starlette.requests import HTTPConnection

from companion.services.overlays import OverlayContentService
from companion.services.profile_store import ProfileStore
from companion.services.upstream import UpstreamClient
from companion.utils.caching import ProxyCaches

# Everything here is built once in the lifespan and parked on app.state;
# tests swap them out through app.dependency_overrides.


def get_caches(conn: HTTPConnection) -> ProxyCaches:
    return conn.app.state.caches


def get_upstream(conn: HTTPConnection) -> UpstreamClient:
    return conn.app.state.upstream


def get_profile_store(conn: HTTPConnection) -> ProfileStore:
    return conn.app.state.profile_store


def get_overlay_service(conn: HTTPConnection) -> OverlayContentService:
    return conn.app.state.overlays


CachesDependency = Annotated[ProxyCaches, Depends(get_caches)]
UpstreamDependency = Annotated[UpstreamClient, Depends(get_upstream)]
ProfileStoreDependency = Annotated[ProfileStore, Depends(get_profile_store)]
OverlayServiceDependency = Annotated[OverlayContentService, Depends(get_overlay_service)]
