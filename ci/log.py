# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

'''
logging-setup for running locally, or as GitHub-Action step.

Log-records are always emitted to stderr, as stdout carries the actual result (release notes).
When running as GitHub-Action, warnings and errors are additionally emitted as workflow-commands
(`::warning::` / `::error::`), so they are shown as annotations of the workflow-run.
'''

import copy
import logging
import os
import sys


class Bcolors:
    RESET_ALL = '\033[0m'
    BOLD = '\033[1m'
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    BLUE = '\033[34m'


_level_colours = {
    logging.DEBUG: Bcolors.BLUE,
    logging.INFO: Bcolors.GREEN,
    logging.WARNING: Bcolors.YELLOW,
    logging.ERROR: Bcolors.RED,
    logging.CRITICAL: Bcolors.RED,
}

# logging-level -> GitHub-Actions workflow-command
_workflow_commands = {
    logging.WARNING: 'warning',
    logging.ERROR: 'error',
    logging.CRITICAL: 'error',
}


def running_in_github_actions() -> bool:
    return os.environ.get('GITHUB_ACTIONS') == 'true'


def escape_workflow_command_data(data: str) -> str:
    return data.replace('%', '%25').replace('\r', '%0D').replace('\n', '%0A')


class LevelPrefixFormatter(logging.Formatter):
    '''
    exposes the level-name as `levelprefix` format-attribute, colourised if `colourise` is set
    '''
    def __init__(self, colourise: bool=False, **kwargs):
        super().__init__(**kwargs)
        self.colourise = colourise

    def levelprefix(self, record: logging.LogRecord) -> str:
        if not self.colourise or not (colour := _level_colours.get(record.levelno)):
            return record.levelname
        return f'{Bcolors.BOLD}{colour}{record.levelname}{Bcolors.RESET_ALL}'

    def formatMessage(self, record: logging.LogRecord) -> str:
        record = copy.copy(record)
        record.levelprefix = self.levelprefix(record)
        return super().formatMessage(record)


class GitHubActionsFormatter(LevelPrefixFormatter):
    '''
    formats warnings and errors as GitHub-Actions workflow-commands. Other records are formatted
    as by `LevelPrefixFormatter` (w/o colours, which are not rendered in workflow-logs).
    '''
    def format(self, record: logging.LogRecord) -> str:
        if not (command := _workflow_commands.get(record.levelno)):
            return super().format(record)

        message = escape_workflow_command_data(record.getMessage())
        return f'::{command} title={record.name}::{message}'


def default_fmt_string() -> str:
    return '%(asctime)s [%(levelprefix)s] %(name)s: %(message)s'


def configure_default_logging(
    level=None,
    force=True,
    stream=None,
):
    '''
    configures the root-logger to emit to `stream` (defaults to stderr; stdout is reserved for
    release notes).
    '''
    level = level or logging.INFO
    stream = stream or sys.stderr

    # make sure to have a clean root logger (in case setup is called multiple times)
    if force:
        for handler in list(logging.root.handlers):
            logging.root.removeHandler(handler)
            handler.close()

    if running_in_github_actions():
        formatter = GitHubActionsFormatter(fmt=default_fmt_string())
    else:
        formatter = LevelPrefixFormatter(
            colourise=stream.isatty(),
            fmt=default_fmt_string(),
        )

    handler = logging.StreamHandler(stream=stream)
    handler.setLevel(level)
    handler.setFormatter(formatter)

    logging.root.addHandler(hdlr=handler)
    logging.root.setLevel(level=level)

    # request-logs are too verbose
    logging.getLogger('github3').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
