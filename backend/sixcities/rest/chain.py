"""
Six Cities Backend — Middleware Chain Executor
================================================

Runs a route's middlewares strictly in declared order. The next middleware
starts only after the previous one has finished; a raise stops the chain and
propagates to the error mapper.
"""

import logging
from typing import Sequence

from sixcities.rest.context import RequestContext
from sixcities.rest.middlewares import Middleware, Outcome

logger = logging.getLogger(__name__)


async def run_chain(middlewares: Sequence[Middleware], context: RequestContext) -> Outcome:
    for middleware in middlewares:
        outcome = await middleware.execute(context)
        if outcome is Outcome.TERMINATED:
            logger.debug("Chain terminated early by %s", type(middleware).__name__)
            return Outcome.TERMINATED
    return Outcome.CONTINUE
