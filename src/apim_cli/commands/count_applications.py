"""Count the applications available to a given user"""

import logging
from typing import Callable

from ..protocols import ManagementApiClient

logger = logging.getLogger(__name__)

NO_DELAY_PERIOD = 0

RESULT_TEMPLATE = "There are {count} applications in the requested environment"


class CountApplications:
    """Log in, list applications without delay and print how many there are."""

    name = "count-applications"
    description = "Count number of available Applications for the given user"

    def __init__(self, api: ManagementApiClient, echo: Callable[[str], None]):
        self.api = api
        self.echo = echo

    async def count(self, username: str, password: str) -> int:
        await self.api.login(username, password)

        count = 0
        async for _ in self.api.list_applications(NO_DELAY_PERIOD):
            count += 1

        logger.debug(f"Counted {count} applications")
        return count

    async def run(self, username: str, password: str) -> int:
        count = await self.count(username, password)
        self.echo(RESULT_TEMPLATE.format(count=count))
        return count
