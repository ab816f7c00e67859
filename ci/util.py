# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

'''
utils for exposing outputs from GitHub-Actions steps
'''

import os
import uuid


def output_delimiter(value: str) -> str:
    '''
    returns a random delimiter suitable for framing the given (multiline) value, i.e. a token that
    does not occur as a line in value
    '''
    lines = set(value.splitlines())
    while (delimiter := f'ghadelimiter_{uuid.uuid4()}') in lines:
        pass
    return delimiter


def format_output(
    name: str,
    value: str,
) -> str:
    if '\n' not in value and '\r' not in value:
        return f'{name}={value}\n'

    delimiter = output_delimiter(value)
    return f'{name}<<{delimiter}\n{value}\n{delimiter}\n'


def write_output(
    name: str,
    value: str,
    path: str=None,
) -> bool:
    '''
    appends the given output to the file GitHub-Actions reads step-outputs from (as passed via
    environment variable GITHUB_OUTPUT, unless `path` is given).

    returns False (and writes nothing) if neither path nor GITHUB_OUTPUT is set (e.g. when running
    locally).
    '''
    if not (path := path or os.environ.get('GITHUB_OUTPUT')):
        return False

    with open(path, 'a') as f:
        f.write(format_output(name=name, value=value))

    return True
