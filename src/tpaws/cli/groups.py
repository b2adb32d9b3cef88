"""click group with error reporting for the whole command tree."""

from __future__ import annotations

import logging
from typing import Any

import click

from tpaws.cli import console
from tpaws.cli.runner import KNOWN_ERRORS

logger = logging.getLogger("tpaws.cli")


class ErrorHandlingGroup(click.Group):
    """Turns known failures into ``Error: ...`` (exit 1) and crashes into a report (exit 101).

    click's own exceptions (usage errors, ``Abort`` on Ctrl-C, ``Exit``) keep
    their usual behaviour.
    """

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except (click.exceptions.ClickException, click.exceptions.Abort, click.exceptions.Exit):
            raise
        except KNOWN_ERRORS as e:
            logger.error("%s: %s", type(e).__name__, e)
            console.error(str(e))
            ctx.exit(console.ERROR_EXIT_CODE)
        except Exception as e:
            logger.exception("Unhandled error")
            console.report_crash(e)
            ctx.exit(console.CRASH_EXIT_CODE)
