# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import dataclasses
import typing

import submodule_notes.errors as sne


@dataclasses.dataclass(frozen=True)
class RepositoryIdentity:
    owner: str
    name: str

    @staticmethod
    def parse(
        repository: str,
        stage: sne.Stage=sne.Stage.CONFIG,
    ) -> typing.Self:
        '''
        parses the given repository of form `{owner}/{name}`. Raises `ReleaseNotesError` (kind
        `malformed-input`) if repository does not consist of exactly two non-empty parts.
        '''
        parts = repository.split('/') if repository else []
        if len(parts) != 2 or not all(parts):
            raise sne.ReleaseNotesError(
                f'invalid repository format: {repository!r} (expected owner/repo)',
                stage=stage,
                kind=sne.ErrorKind.MALFORMED_INPUT,
            )

        owner, name = parts
        return RepositoryIdentity(owner=owner, name=name)

    def __str__(self) -> str:
        return f'{self.owner}/{self.name}'


def repository_name_from_url(url: str) -> str | None:
    '''
    returns the repository-name (`{owner}/{name}`) from the given (git-remote-) url. Supported are
    http(s)-urls (`https://{host}/{owner}/{name}`), ssh-urls (`ssh://git@{host}/{owner}/{name}`),
    and scp-like ssh-urls (`git@{host}:{owner}/{name}`). A `.git` suffix is ignored.

    returns None if url is not of any of the supported forms. The returned value is not validated
    further (see `RepositoryIdentity.parse`).
    '''
    url = url.strip().removesuffix('.git')

    if url.startswith('http') or url.startswith('ssh://'):
        parts = url.split('/')
        if len(parts) < 2:
            return None
        return '/'.join(parts[-2:])

    if url.startswith('git@'):
        _, sep, path = url.partition(':')
        if not sep or not path:
            return None
        return path

    return None


@dataclasses.dataclass(frozen=True)
class SubmoduleDeclaration:
    '''
    a submodule as declared in `.gitmodules`. `name` is the section-name (absent for key/value
    lines preceding any section-header). `repository_name` is None if `url` is absent or
    not of a supported form.
    '''
    path: str | None = None
    url: str | None = None
    name: str | None = None

    @property
    def repository_name(self) -> str | None:
        if not self.url:
            return None
        return repository_name_from_url(self.url)

    @property
    def complete(self) -> bool:
        return bool(self.path and self.repository_name)


@dataclasses.dataclass(frozen=True)
class ReleaseWindow:
    tag: str
    previous_tag: str
    commit: str
    previous_commit: str


@dataclasses.dataclass(frozen=True)
class SubmoduleChanges:
    declaration: SubmoduleDeclaration
    commit: str
    previous_commit: str
    repository: RepositoryIdentity
    changes: tuple[str, ...]


@dataclasses.dataclass(frozen=True)
class ReleaseNotes:
    repository: RepositoryIdentity
    window: ReleaseWindow
    changes: tuple[str, ...]
    submodule: SubmoduleChanges | None = None


@dataclasses.dataclass(frozen=True)
class ReleaseNotesCfg:
    '''
    configuration for one run. Empty strings denote absent values.

    `submodule_link`: label to prefix issue-references from submodule commits with (defaults to
                      submodule's repository)
    `submodule_path`: path of submodule to consider, if `.gitmodules` declares more than one
    `github_host`: hostname of GitHub(-Enterprise) instance hosting the repositories (derived from
                   environment if absent, see `github.default_host`)
    '''
    repository: str = ''
    tag: str = ''
    previous_tag: str = ''
    submodule_link: str = ''
    submodule_path: str = ''
    github_host: str = ''
