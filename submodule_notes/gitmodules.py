# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

'''
parsing of `.gitmodules` files (submodule manifests).

Only `path` and `url` attributes are honoured. Each `[submodule "<name>"]` section-header starts
a new declaration. Attributes found before any section-header are collected into an anonymous
declaration.
'''

import collections.abc
import logging
import re

import github3.exceptions
import github3.repos

import submodule_notes.errors as sne
import submodule_notes.model as snm

logger = logging.getLogger(__name__)

GITMODULES_PATH = '.gitmodules'

_section_header = re.compile(r'^\[submodule\s*(?:"(?P<name>[^"]*)")?\s*\]$')


def iter_declarations(
    content: str,
) -> collections.abc.Iterable[snm.SubmoduleDeclaration]:
    name = None
    attrs = {}
    ignore = False # set for sections other than submodule-sections

    def declaration():
        return snm.SubmoduleDeclaration(
            name=name,
            path=attrs.get('path'),
            url=attrs.get('url'),
        )

    for line in content.splitlines():
        line = line.strip()

        if not line or line.startswith(('#', ';')):
            continue

        if line.startswith('['):
            if not ignore and (name is not None or attrs):
                yield declaration()
            if (match := _section_header.match(line)):
                name = match.group('name') or ''
                ignore = False
            else:
                name = None
                ignore = True
            attrs = {}
            continue

        if ignore:
            continue

        key, sep, value = line.partition('=')
        if not sep:
            continue

        key = key.strip()
        if key in ('path', 'url'):
            attrs[key] = value.strip()

    if not ignore and (name is not None or attrs):
        yield declaration()


def parse_gitmodules(
    content: str,
) -> tuple[snm.SubmoduleDeclaration, ...]:
    return tuple(iter_declarations(content=content))


def select_declaration(
    declarations: collections.abc.Sequence[snm.SubmoduleDeclaration],
    path: str='',
) -> snm.SubmoduleDeclaration | None:
    '''
    returns the declaration of the submodule to track. If `path` is given, the (complete)
    declaration with matching path is returned. Otherwise, the first complete declaration (i.e.
    having both a path and a parseable url) is chosen.
    '''
    complete = [d for d in declarations if d.complete]

    for declaration in declarations:
        if declaration.complete:
            continue
        logger.warning(f'ignoring incomplete or unparseable submodule-declaration: {declaration}')

    if path:
        for declaration in complete:
            if declaration.path == path:
                return declaration
        logger.warning(f'no submodule declared at {path=}')
        return None

    if not complete:
        return None

    if len(complete) > 1:
        logger.warning(
            f'found {len(complete)} submodule-declarations - will only consider first one '
            f'({complete[0].path})'
        )

    return complete[0]


def read_gitmodules(
    repository: github3.repos.Repository,
    commit: str,
) -> str | None:
    '''
    returns the contents of `.gitmodules` at the given commit, or None if there is no such file.
    '''
    try:
        contents = repository.file_contents(
            path=GITMODULES_PATH,
            ref=commit,
        )
    except github3.exceptions.NotFoundError:
        contents = None
    except github3.exceptions.GitHubException as ghe:
        raise sne.ReleaseNotesError(
            f'failed to read {GITMODULES_PATH} at {commit=}',
            stage=sne.Stage.SUBMODULE_DECLARATION,
            kind=sne.ErrorKind.REMOTE,
        ) from ghe

    if not contents:
        logger.info(f'no {GITMODULES_PATH} found at {commit=}')
        return None

    try:
        return contents.decoded.decode('utf-8')
    except UnicodeDecodeError as ude:
        raise sne.ReleaseNotesError(
            f'{GITMODULES_PATH} at {commit=} is not valid utf-8',
            stage=sne.Stage.SUBMODULE_DECLARATION,
            kind=sne.ErrorKind.MALFORMED_INPUT,
        ) from ude


def submodule_declaration(
    repository: github3.repos.Repository,
    commit: str,
    path: str='',
) -> snm.SubmoduleDeclaration | None:
    '''
    returns the declaration of the submodule tracked by the given repository at the given commit,
    or None if no (parseable) submodule is declared.
    '''
    if not (content := read_gitmodules(repository=repository, commit=commit)):
        return None

    return select_declaration(
        declarations=parse_gitmodules(content=content),
        path=path,
    )
