# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import submodule_notes.markdown as examinee
import submodule_notes.model as snm


def test_change_entry():
    assert examinee.change_entry('fix bug') == '* fix bug'
    assert examinee.change_entry('fix bug\n\nlonger description') == '* fix bug'


def test_qualify_references():
    assert examinee.qualify_references(
        text='* fix bug #42 and #7.',
        label='org/ebpf',
    ) == '* fix bug org/ebpf#42 and org/ebpf#7.'

    assert examinee.qualify_references(text='* merge (#13)', label='org/ebpf') == \
        '* merge (org/ebpf#13)'
    assert examinee.qualify_references(text='* #1,#2', label='o/r') == '* o/r#1,o/r#2'


def test_qualify_references_leaves_other_text_untouched():
    unchanged = (
        '* no references here',
        '* channel #general',
        '* see other/repo#5',
        '* issue#5',
        '* #12abc',
        '* ünïcödé, tabs\tand trailing space ',
    )

    for text in unchanged:
        assert examinee.qualify_references(text=text, label='org/ebpf') == text


def test_qualify_references_in_entries():
    entries = ['* fix #1', '* nothing', '* close #2 and #3']
    same_list = entries

    examinee.qualify_references_in_entries(entries=entries, label='my-label')

    assert same_list is entries
    assert entries == ['* fix my-label#1', '* nothing', '* close my-label#2 and my-label#3']


def _release_notes(submodule: snm.SubmoduleChanges | None=None) -> snm.ReleaseNotes:
    return snm.ReleaseNotes(
        repository=snm.RepositoryIdentity(owner='host-org', name='host'),
        window=snm.ReleaseWindow(
            tag='v1.1.0',
            previous_tag='v1.0.0',
            commit='h3' * 20,
            previous_commit='h1' * 20,
        ),
        changes=('* add feature', '* bump ebpf submodule'),
        submodule=submodule,
    )


def test_release_notes_markdown():
    release_notes = _release_notes(
        submodule=snm.SubmoduleChanges(
            declaration=snm.SubmoduleDeclaration(
                path='ebpf',
                url='https://github.com/org/ebpf.git',
            ),
            commit='s2' * 20,
            previous_commit='s1' * 20,
            repository=snm.RepositoryIdentity(owner='org', name='ebpf'),
            changes=('* fix org/ebpf#5',),
        ),
    )

    assert examinee.release_notes_markdown(release_notes) == (
        '## Changes from host-org/host:\n'
        '* add feature\n'
        '* bump ebpf submodule\n'
        '\n'
        '## Changes from org/ebpf:\n'
        '* fix org/ebpf#5\n'
    )


def test_release_notes_markdown_without_submodule():
    markdown = examinee.release_notes_markdown(_release_notes())

    # submodule-section is rendered w/o label and entries
    assert markdown == (
        '## Changes from host-org/host:\n'
        '* add feature\n'
        '* bump ebpf submodule\n'
        '\n'
        '## Changes from :\n'
        '\n'
    )
    assert markdown.count('## Changes from') == 2
