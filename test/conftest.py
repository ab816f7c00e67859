# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

'''
test gear: in-memory stand-ins for the parts of github3's repository-API used for collecting
release notes
'''

import dataclasses
import types
import unittest.mock

import github3.exceptions
import pytest


def not_found_error() -> github3.exceptions.NotFoundError:
    response = unittest.mock.MagicMock(status_code=404)
    response.json.return_value = {'message': 'Not Found'}
    return github3.exceptions.NotFoundError(response)


def forbidden_error() -> github3.exceptions.ForbiddenError:
    response = unittest.mock.MagicMock(status_code=403)
    response.json.return_value = {'message': 'API rate limit exceeded'}
    return github3.exceptions.ForbiddenError(response)


@dataclasses.dataclass
class FakeRepository:
    '''
    `history`: linear history as sequence of (commit-digest, commit-message), oldest first
    `tags`: tag-name -> commit-digest
    `annotated_tags`: tag-name -> (tag-object-digest, commit-digest)
    `trees`: commit-digest -> tree-entries (path, type, digest)
    `files`: (path, commit-digest) -> file-contents
    '''
    history: list[tuple[str, str | None]] = dataclasses.field(default_factory=list)
    releases_tag_names: list[str] = dataclasses.field(default_factory=list)
    tags: dict[str, str] = dataclasses.field(default_factory=dict)
    annotated_tags: dict[str, tuple[str, str]] = dataclasses.field(default_factory=dict)
    trees: dict[str, list[tuple[str, str, str]]] = dataclasses.field(default_factory=dict)
    files: dict[tuple[str, str], str] = dataclasses.field(default_factory=dict)

    def releases(self, number=-1):
        for tag_name in self.releases_tag_names:
            yield types.SimpleNamespace(tag_name=tag_name)

    def ref(self, ref: str):
        tag_name = ref.removeprefix('tags/')

        if tag_name in self.annotated_tags:
            tag_object_digest, _ = self.annotated_tags[tag_name]
            return types.SimpleNamespace(
                object=types.SimpleNamespace(sha=tag_object_digest, type='tag'),
            )

        if tag_name in self.tags:
            return types.SimpleNamespace(
                object=types.SimpleNamespace(sha=self.tags[tag_name], type='commit'),
            )

        raise not_found_error()

    def tag(self, sha: str):
        for tag_object_digest, commit_digest in self.annotated_tags.values():
            if tag_object_digest == sha:
                return types.SimpleNamespace(
                    object=types.SimpleNamespace(sha=commit_digest, type='commit'),
                )
        raise not_found_error()

    def _history_idx(self, commit: str) -> int:
        for idx, (digest, _) in enumerate(self.history):
            if digest == commit:
                return idx
        raise not_found_error()

    def compare_commits(self, base: str, head: str):
        base_idx = self._history_idx(base)
        head_idx = self._history_idx(head)

        return types.SimpleNamespace(
            commits=[
                types.SimpleNamespace(
                    sha=digest,
                    commit=types.SimpleNamespace(message=message),
                )
                for digest, message in self.history[base_idx + 1:head_idx + 1]
            ],
        )

    def tree(self, sha: str, recursive: bool=False):
        if sha not in self.trees:
            raise not_found_error()

        return types.SimpleNamespace(
            tree=[
                types.SimpleNamespace(path=path, type=entry_type, sha=digest)
                for path, entry_type, digest in self.trees[sha]
            ],
        )

    def file_contents(self, path: str, ref: str):
        if (path, ref) not in self.files:
            raise not_found_error()

        return types.SimpleNamespace(
            decoded=self.files[(path, ref)].encode('utf-8'),
        )


class FakeGitHub:
    def __init__(self, repositories: dict[str, FakeRepository]):
        self.repositories = repositories

    def repository(self, owner: str, repository: str):
        if (repo := self.repositories.get(f'{owner}/{repository}')) is None:
            raise not_found_error()
        return repo


@pytest.fixture
def host_repository() -> FakeRepository:
    return FakeRepository(
        history=[
            ('h1' * 20, 'initial release'),
            ('h2' * 20, 'add feature\n\nsome more details'),
            ('h3' * 20, 'bump ebpf submodule'),
        ],
        releases_tag_names=['v1.0.0', 'v1.1.0', 'v1.2.0-rc1'],
        tags={
            'v1.0.0': 'h1' * 20,
            'v1.1.0': 'h3' * 20,
        },
        trees={
            'h1' * 20: [
                ('README.md', 'blob', 'b1' * 20),
                ('ebpf', 'commit', 's1' * 20),
            ],
            'h3' * 20: [
                ('README.md', 'blob', 'b1' * 20),
                ('ebpf', 'commit', 's2' * 20),
            ],
        },
        files={
            ('.gitmodules', 'h3' * 20): (
                '[submodule "ebpf"]\n'
                '\tpath = ebpf\n'
                '\turl = https://github.com/org/ebpf.git\n'
            ),
        },
    )


@pytest.fixture
def submodule_repository() -> FakeRepository:
    return FakeRepository(
        history=[
            ('s1' * 20, 'initial commit'),
            ('s2' * 20, 'fix crash on startup (#5)'),
        ],
    )


@pytest.fixture
def github_api(
    host_repository: FakeRepository,
    submodule_repository: FakeRepository,
) -> FakeGitHub:
    return FakeGitHub(
        repositories={
            'host-org/host': host_repository,
            'org/ebpf': submodule_repository,
        },
    )


@pytest.fixture
def not_found() -> github3.exceptions.NotFoundError:
    return not_found_error()


@pytest.fixture
def forbidden() -> github3.exceptions.ForbiddenError:
    return forbidden_error()
