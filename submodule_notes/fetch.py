# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import concurrent.futures
import logging

import github3
import github3.exceptions
import github3.repos

import submodule_notes.errors as sne
import submodule_notes.gitmodules as sng
import submodule_notes.markdown as snmd
import submodule_notes.model as snm
import submodule_notes.resolve as snr

logger = logging.getLogger(__name__)


def repository_for(
    github_api: github3.GitHub,
    repository: snm.RepositoryIdentity,
    stage: sne.Stage,
) -> github3.repos.Repository:
    try:
        gh_repo = github_api.repository(repository.owner, repository.name)
    except github3.exceptions.NotFoundError as nfe:
        raise sne.ReleaseNotesError(
            f'failed to retrieve repository {repository}',
            stage=stage,
            kind=sne.ErrorKind.NOT_FOUND,
        ) from nfe
    except github3.exceptions.GitHubException as ghe:
        raise sne.ReleaseNotesError(
            f'failed to retrieve repository {repository}',
            stage=stage,
            kind=sne.ErrorKind.REMOTE,
        ) from ghe

    if not gh_repo:
        raise sne.ReleaseNotesError(
            f'failed to retrieve repository {repository}',
            stage=stage,
            kind=sne.ErrorKind.NOT_FOUND,
        )

    return gh_repo


def changes(
    repository: github3.repos.Repository,
    previous_commit: str,
    commit: str,
) -> list[str]:
    '''
    returns release-notes entries (see `markdown.change_entry`) for all commits reachable from
    `commit`, but not from `previous_commit`, in the order returned by GitHub's compare-API.
    Commits w/o commit-message are omitted.
    '''
    if previous_commit == commit:
        return []

    try:
        comparison = repository.compare_commits(
            base=previous_commit,
            head=commit,
        )
        return [
            snmd.change_entry(message)
            for repo_commit in comparison.commits
            if repo_commit.commit and (message := repo_commit.commit.message)
        ]
    except github3.exceptions.GitHubException as ghe:
        raise sne.ReleaseNotesError(
            f'failed to compare commits {previous_commit[:8]}...{commit[:8]}',
            stage=sne.Stage.HISTORY,
            kind=sne.ErrorKind.REMOTE,
        ) from ghe


def _submodule_commit(
    repository: github3.repos.Repository,
    commit: str,
    path: str,
) -> str | None:
    tree = repository.tree(commit, recursive=True)

    for entry in tree.tree:
        # submodules are represented by tree-entries of type `commit` (aka gitlink)
        if entry.path == path and entry.type == 'commit':
            return entry.sha

    return None


def submodule_commits(
    repository: github3.repos.Repository,
    previous_commit: str,
    commit: str,
    path: str,
) -> tuple[str, str]:
    '''
    returns the commits the submodule at `path` pointed to at `previous_commit` and `commit`
    (in this order).

    raises `ReleaseNotesError` (kind `not-found`) if submodule is absent at either commit.
    '''
    try:
        previous_submodule_commit = _submodule_commit(
            repository=repository,
            commit=previous_commit,
            path=path,
        )
        submodule_commit = _submodule_commit(
            repository=repository,
            commit=commit,
            path=path,
        )
    except github3.exceptions.NotFoundError as nfe:
        raise sne.ReleaseNotesError(
            'failed to retrieve tree',
            stage=sne.Stage.SUBMODULE_COMMITS,
            kind=sne.ErrorKind.NOT_FOUND,
        ) from nfe
    except github3.exceptions.GitHubException as ghe:
        raise sne.ReleaseNotesError(
            'failed to retrieve tree',
            stage=sne.Stage.SUBMODULE_COMMITS,
            kind=sne.ErrorKind.REMOTE,
        ) from ghe

    if not previous_submodule_commit or not submodule_commit:
        raise sne.ReleaseNotesError(
            f'submodule {path=} not found at {previous_commit=} and/or {commit=}',
            stage=sne.Stage.SUBMODULE_COMMITS,
            kind=sne.ErrorKind.NOT_FOUND,
        )

    return previous_submodule_commit, submodule_commit


def submodule_changes(
    github_api: github3.GitHub,
    repository: github3.repos.Repository,
    window: snm.ReleaseWindow,
    cfg: snm.ReleaseNotesCfg,
) -> snm.SubmoduleChanges | None:
    '''
    returns changes of the submodule tracked by the given repository (as declared at the release's
    commit) between the two submodule-commits pinned at the release-window's boundaries. Issue-
    references in change-entries are qualified with `cfg.submodule_link` (defaulting to
    submodule's repository).

    returns None if no submodule is declared.
    '''
    if not (declaration := sng.submodule_declaration(
        repository=repository,
        commit=window.commit,
        path=cfg.submodule_path,
    )):
        logger.info('no submodule-repository found')
        return None

    logger.info(f'submodule-path: {declaration.path}')
    logger.info(f'submodule-repository: {declaration.repository_name}')

    submodule_repository = snm.RepositoryIdentity.parse(
        declaration.repository_name,
        stage=sne.Stage.SUBMODULE_DECLARATION,
    )

    previous_submodule_commit, submodule_commit = submodule_commits(
        repository=repository,
        previous_commit=window.previous_commit,
        commit=window.commit,
        path=declaration.path,
    )
    logger.info(f'previous submodule-commit: {previous_submodule_commit[:8]}')
    logger.info(f'submodule-commit: {submodule_commit[:8]}')

    submodule_gh_repo = repository_for(
        github_api=github_api,
        repository=submodule_repository,
        stage=sne.Stage.HISTORY,
    )

    entries = changes(
        repository=submodule_gh_repo,
        previous_commit=previous_submodule_commit,
        commit=submodule_commit,
    )
    snmd.qualify_references_in_entries(
        entries=entries,
        label=cfg.submodule_link or str(submodule_repository),
    )

    return snm.SubmoduleChanges(
        declaration=declaration,
        commit=submodule_commit,
        previous_commit=previous_submodule_commit,
        repository=submodule_repository,
        changes=tuple(entries),
    )


def release_window(
    repository: github3.repos.Repository,
    cfg: snm.ReleaseNotesCfg,
) -> snm.ReleaseWindow:
    previous_tag = snr.previous_tag(
        repository=repository,
        tag=cfg.tag,
        previous_tag=cfg.previous_tag,
    )
    logger.info(f'previous tag: {previous_tag}')

    commit = snr.commit_for_tag(repository=repository, tag=cfg.tag)
    previous_commit = snr.commit_for_tag(repository=repository, tag=previous_tag)
    logger.info(f'commit: {commit}')
    logger.info(f'previous commit: {previous_commit}')

    return snm.ReleaseWindow(
        tag=cfg.tag,
        previous_tag=previous_tag,
        commit=commit,
        previous_commit=previous_commit,
    )


def collect_release_notes(
    github_api: github3.GitHub,
    cfg: snm.ReleaseNotesCfg,
) -> snm.ReleaseNotes:
    '''
    collects release notes for the release denoted by `cfg.tag`. Changes of the repository itself
    and of its submodule are retrieved concurrently; the first error is raised (as
    `ReleaseNotesError`), in which case any pending retrieval is cancelled.
    '''
    repository_id = snm.RepositoryIdentity.parse(cfg.repository, stage=sne.Stage.CONFIG)
    repository = repository_for(
        github_api=github_api,
        repository=repository_id,
        stage=sne.Stage.CONFIG,
    )

    window = release_window(
        repository=repository,
        cfg=cfg,
    )

    executor = concurrent.futures.ThreadPoolExecutor(max_workers=2)
    try:
        changes_task = executor.submit(
            changes,
            repository=repository,
            previous_commit=window.previous_commit,
            commit=window.commit,
        )
        submodule_task = executor.submit(
            submodule_changes,
            github_api=github_api,
            repository=repository,
            window=window,
            cfg=cfg,
        )

        done, _ = concurrent.futures.wait(
            (changes_task, submodule_task),
            return_when=concurrent.futures.FIRST_EXCEPTION,
        )
        for task in done:
            if (exception := task.exception()):
                raise exception

        return snm.ReleaseNotes(
            repository=repository_id,
            window=window,
            changes=tuple(changes_task.result()),
            submodule=submodule_task.result(),
        )
    finally:
        executor.shutdown(wait=False, cancel_futures=True)
