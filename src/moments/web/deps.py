from typing import Annotated, cast

from fastapi import Depends, Request, Response

from moments.app import App
from moments.web.error_handlers import NO_CACHE_HEADERS


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def set_no_cache_headers(response: Response) -> None:
    """Forbid any caching of the response."""
    response.headers.update(NO_CACHE_HEADERS)


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
