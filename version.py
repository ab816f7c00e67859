# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import collections.abc
import logging
import typing

import semver

logger = logging.getLogger(__name__)

Version = semver.VersionInfo | str


def parse_to_semver(
    version,
    invalid_semver_ok: bool=False,
) -> semver.VersionInfo | None:
    '''
    parses the given version into a semver.VersionInfo object.

    Different from strict semver, the given version is preprocessed, if required, to
    convert the version into a valid semver version, if possible.

    The following preprocessings are done:

    - strip away `v` prefix
    - append patch-level `.0` for two-digit versions
    - rm leading zeroes

    @param version: either a str, or a semver.VersionInfo (returned as is)
    '''
    if isinstance(version, semver.VersionInfo):
        return version
    if version is None:
        raise ValueError('version must not be None')

    try:
        semver_version_info, _ = _parse_to_semver_and_prefix(str(version))
    except ValueError:
        if invalid_semver_ok:
            return None

        raise

    return semver_version_info


def _parse_to_semver_and_prefix(version: str) -> tuple[semver.VersionInfo, str | None]:
    def raise_invalid():
        raise ValueError(f'not a valid (semver) version: `{version}`')

    if not version:
        raise_invalid()

    semver_version = version
    prefix = None

    # strip leading `v`
    if version[0] == 'v':
        semver_version = version[1:]
        prefix = 'v'

    # in most cases, we should be fine now
    try:
        return semver.VersionInfo.parse(semver_version), prefix
    except ValueError:
        pass # try extending `.0` as patch-level

    # blindly append patch-level
    if '-' in version:
        sep = '-'
    else:
        sep = '+'

    numeric, sep, suffix = semver_version.partition(sep)
    if len(tuple(c for c in numeric if c == '.')) == 1:
        numeric += '.0'

    try:
        return semver.VersionInfo.parse(numeric + sep + suffix), prefix
    except ValueError:
        pass # last try: strip leading zeroes

    try:
        major, minor, patch = numeric.split('.')
        numeric = '.'.join((
            str(int(major)),
            str(int(minor)),
            str(int(patch)),
        ))
    except ValueError:
        raise_invalid()

    try:
        return semver.VersionInfo.parse(numeric + sep + suffix), prefix
    except ValueError:
        # re-raise with original version str
        raise_invalid()


def is_semver_parseable(version_string: str) -> bool:
    try:
        parse_to_semver(version_string)
    except ValueError:
        logger.debug(f"Could not parse '{version_string}' as semver version")
        return False
    return True


def version_sort_key(version: Version) -> tuple:
    '''
    sort-key ordering versions according to semver arithmetics. Versions that cannot be parsed
    (see `parse_to_semver`) are ordered before all parseable versions, and alphabetically amongst
    themselves.
    '''
    if (parsed := parse_to_semver(version, invalid_semver_ok=True)) is None:
        return (0, str(version))
    return (1, parsed)


T = typing.TypeVar('T', semver.VersionInfo, str)


def sort_versions(
    versions: collections.abc.Iterable[T],
    reverse: bool=False,
) -> list[T]:
    '''
    returns the given versions, sorted in ascending order (unless `reverse` is set). Passed-in
    objects are returned as they were passed (i.e. str-versions retain their `v`-prefix).
    '''
    return sorted(
        versions,
        key=version_sort_key,
        reverse=reverse,
    )


def greatest_version(
    versions: collections.abc.Iterable[T],
    ignore_prerelease_versions: bool=False,
) -> T | None:
    '''
    returns the greatest version from the passed versions, or None if no versions were passed.
    if `ignore_prerelease_versions` is set to True, only final release versions will be
    considered.
    '''
    if ignore_prerelease_versions:
        versions = [v for v in versions if not is_prerelease(v)]

    if not (versions := sort_versions(versions)):
        return None

    return versions[-1]


def greatest_version_before(
    reference_version: Version,
    versions: collections.abc.Iterable[T],
    ignore_prerelease_versions: bool=False,
) -> T | None:
    '''
    returns the greatest version from `versions` that is strictly smaller than
    `reference_version`, or None if there is no such version.

    If `reference_version` is not parseable as semver, no version is considered smaller. Versions
    from `versions` that are not parseable as semver are never returned.
    '''
    if parse_to_semver(reference_version, invalid_semver_ok=True) is None:
        return None

    reference_key = version_sort_key(reference_version)

    for candidate in sort_versions(versions, reverse=True):
        if ignore_prerelease_versions and is_prerelease(candidate):
            continue
        if parse_to_semver(candidate, invalid_semver_ok=True) is None:
            continue
        if version_sort_key(candidate) < reference_key:
            return candidate

    return None


def is_prerelease(version: Version) -> bool:
    '''
    returns whether the given version is a prerelease version. For str-versions, any hyphen is
    considered to mark a prerelease (also for versions that are not parseable as semver).
    '''
    if isinstance(version, str):
        return '-' in version
    return bool(version.prerelease)
