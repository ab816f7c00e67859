# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import collections.abc
import logging

import github3.exceptions
import github3.repos

import submodule_notes.errors as sne
import version

logger = logging.getLogger(__name__)


def release_tags(
    repository: github3.repos.Repository,
) -> list[str]:
    '''
    returns tag-names of all final (i.e. non-prerelease) releases of the given repository, in
    ascending order (semver arithmetics). Tag-names containing a hyphen are considered to denote
    prereleases.
    '''
    tags = []
    for release in repository.releases():
        if not (tag_name := release.tag_name):
            continue
        logger.debug(f'found release {tag_name=}')
        if version.is_prerelease(tag_name):
            continue
        if not version.is_semver_parseable(tag_name):
            logger.warning(f'{tag_name=} is not a valid semver-version - will order it first')
        tags.append(tag_name)

    return version.sort_versions(tags)


def find_previous_tag(
    tag: str,
    tags: collections.abc.Sequence[str],
) -> str | None:
    '''
    returns the greatest tag from `tags` that is smaller than `tag`, using semver arithmetics.
    Prerelease-tags are ignored.

    If `tag` is empty, or if there is no smaller tag, the greatest tag is returned. If there are no
    (final) tags at all, None is returned.
    '''
    tags = [t for t in tags if not version.is_prerelease(t)]

    if not (greatest := version.greatest_version(tags)):
        return None

    if not tag:
        return greatest

    if (previous := version.greatest_version_before(
        reference_version=tag,
        versions=tags,
    )):
        return previous

    logger.info(f'no release-tag smaller than {tag=} - falling back to greatest tag {greatest}')
    return greatest


def previous_tag(
    repository: github3.repos.Repository,
    tag: str,
    previous_tag: str='',
) -> str | None:
    '''
    determines the tag of the release preceding `tag`. If `previous_tag` is passed, it is returned
    as is. Otherwise, the repository's releases are retrieved (see `find_previous_tag`).
    '''
    if previous_tag:
        return previous_tag

    try:
        tags = release_tags(repository=repository)
    except github3.exceptions.GitHubException as ghe:
        raise sne.ReleaseNotesError(
            'failed to list releases',
            stage=sne.Stage.PREVIOUS_TAG,
            kind=sne.ErrorKind.REMOTE,
        ) from ghe

    logger.info(f'release-tags: {tags}')

    if not tags:
        logger.warning('did not find any (final) releases')

    return find_previous_tag(tag=tag, tags=tags)


def commit_for_tag(
    repository: github3.repos.Repository,
    tag: str | None,
) -> str:
    '''
    returns the commit-digest the given tag points to. Annotated tags are dereferenced.

    raises `ReleaseNotesError` (kind `not-found`) if there is no such tag.
    '''
    def not_found():
        return sne.ReleaseNotesError(
            f'failed to get commit for tag {tag!r}: no such tag',
            stage=sne.Stage.COMMIT,
            kind=sne.ErrorKind.NOT_FOUND,
        )

    if not tag:
        raise not_found()

    try:
        ref = repository.ref(f'tags/{tag}')
        if not ref:
            raise not_found()

        obj = ref.object
        # annotated tags point to a tag-object, which in turn points to tagged object
        while obj.type == 'tag':
            if not (tag_obj := repository.tag(obj.sha)):
                raise not_found()
            obj = tag_obj.object

    except github3.exceptions.NotFoundError as nfe:
        raise not_found() from nfe
    except github3.exceptions.GitHubException as ghe:
        raise sne.ReleaseNotesError(
            f'failed to get commit for tag {tag!r}',
            stage=sne.Stage.COMMIT,
            kind=sne.ErrorKind.REMOTE,
        ) from ghe

    return obj.sha
