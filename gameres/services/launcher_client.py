"""Client for the launcher ``resource`` endpoint."""

from typing import Any

import structlog

from ..models.game import GameBiz
from ..models.resource import LauncherGameResource
from .errors import RemoteFetchError
from .http_client import HttpClientService
from .profiles import get_game_profile

log = structlog.stdlib.get_logger()


class LauncherClient:
    """Fetches resource descriptors from the launcher backend."""

    def __init__(self, http_client: HttpClientService) -> None:
        self._http_client = http_client

    async def get_launcher_game_resource(self, biz: GameBiz) -> LauncherGameResource:
        """Fetch and decode the resource descriptor of ``biz``.

        The response envelope is ``{"retcode": 0, "message": "OK", "data": {...}}``.

        Raises:
            UnknownGameIdentityError: If ``biz`` is not recognised
            RemoteFetchError: On network failure, a non-zero retcode or a malformed document
        """
        url = get_game_profile(biz).resource_url
        payload: Any = await self._http_client.get_json(url)

        if not isinstance(payload, dict):
            raise RemoteFetchError("Unexpected launcher response.", url=url)

        retcode = payload.get("retcode")
        if retcode != 0:
            log.warning(
                "Launcher API returned an error",
                biz=biz.value,
                retcode=retcode,
                message=payload.get("message"),
            )
            raise RemoteFetchError(
                f"Launcher API error: {payload.get('message') or 'unknown error'}",
                url=url,
                retcode=retcode if isinstance(retcode, int) else None,
            )

        try:
            resource = LauncherGameResource.from_dict(payload["data"])
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            log.warning("Malformed launcher resource", biz=biz.value, error=str(e))
            raise RemoteFetchError(
                "The launcher resource document is malformed.",
                original_error=e,
                url=url,
            ) from e

        log.info(
            "Launcher resource fetched",
            biz=biz.value,
            latest=str(resource.game.latest.version),
            diffs=len(resource.game.diffs),
            pre_download=resource.pre_download_game is not None,
        )
        return resource
