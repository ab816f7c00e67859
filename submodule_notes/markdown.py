# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

'''
rendering of release notes as markdown.

Issue- and pull-request-references from submodule commits (`#42`) are qualified with the
submodule's repository (`org/ebpf#42`). Only bare references are rewritten: a `#` directly
preceded by a word-character or `/` (`org/repo#42`, `repo#42`, `foo#5`) is considered to be
qualified already, or not to be a reference at all, and is left as is.
'''

import collections.abc
import re

import submodule_notes.model as snm

# `#42`, unless already qualified (`org/repo#42`, `repo#42`), and not followed by word-chars
_issue_reference = re.compile(r'(?<![\w/])#\d+(?!\w)')


def change_entry(message: str) -> str:
    '''
    returns the release-notes entry for the given commit-message (first line, as list-item)
    '''
    summary = message.split('\n')[0]
    return f'* {summary}'


def qualify_references(
    text: str,
    label: str,
) -> str:
    '''
    prefixes issue- and pull-request-references (`#42`) with the given label (typically
    `{owner}/{repo}`), such that GitHub will link them to the labelled repository
    '''
    return _issue_reference.sub(
        lambda match: f'{label}{match.group()}',
        text,
    )


def qualify_references_in_entries(
    entries: list[str],
    label: str,
):
    '''
    in-place variant of `qualify_references` for a list of entries
    '''
    entries[:] = [
        qualify_references(text=entry, label=label)
        for entry in entries
    ]


def changes_section(
    repository: snm.RepositoryIdentity | str,
    changes: collections.abc.Iterable[str],
) -> str:
    changes = '\n'.join(changes)
    return f'## Changes from {repository}:\n{changes}\n'


def release_notes_markdown(
    release_notes: snm.ReleaseNotes,
) -> str:
    '''
    renders the given release notes. The section for submodule-changes is always rendered; if no
    submodule was found, it has neither a repository-label nor any entries.
    '''
    markdown = changes_section(
        repository=release_notes.repository,
        changes=release_notes.changes,
    )

    if (submodule := release_notes.submodule):
        submodule_markdown = changes_section(
            repository=submodule.repository,
            changes=submodule.changes,
        )
    else:
        submodule_markdown = changes_section(
            repository='',
            changes=(),
        )

    return f'{markdown}\n{submodule_markdown}'
