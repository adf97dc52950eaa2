#!/usr/bin/env python3
# habitlens - Habit analytics and coaching from your habit history
# Copyright (C) 2024 Zach McKinnon
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
'''
habitlens CLI
A command-line interface over the habit analytics engine: insights, predictions,
scheduling, coaching, forecasts, streaks and summaries from a habit snapshot file.
'''
import logging
import sys

import typer
from rich.console import Console

import habitlens.config.config_manager as cf
from habitlens.commands import insights
from habitlens.utils import log_utils

# The insight commands live at the top level: `habitlens analyze`, `habitlens coach`, ...
app = insights.app
app.info.help = "🧠 habitlens: analytics and coaching for your habit history."

console = Console()
logger = logging.getLogger(__name__)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Log at DEBUG level"),
):
    """
    Main callback before any command.
    - Sets up logging at the configured level.
    """
    log_utils.setup_logging("DEBUG" if verbose else cf.get_log_level())
    logger.debug("habitlens CLI started")


if __name__ == "__main__":

    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]🚪 Exiting...[/yellow]")
        sys.exit(0)
