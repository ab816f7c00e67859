#!/usr/bin/env python3
# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import argparse
import dataclasses
import logging
import os
import sys

import dacite
import yaml

import ci.log
import ci.util
import github
import submodule_notes.errors as sne
import submodule_notes.fetch as snf
import submodule_notes.markdown as snmd
import submodule_notes.model as snm

logger = logging.getLogger('submodule-release-notes')

OUTPUT_NAME = 'release_notes'


def env(*names: str, default: str='') -> str:
    '''
    returns the value of the first of the given environment variables that is set to a non-empty
    value, or default
    '''
    for name in names:
        if (value := os.environ.get(name)):
            return value
    return default


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description='Generate release notes for a GitHub repository and its submodule',
    )
    parser.add_argument(
        '--github-auth-token',
        default=env('INPUT_GITHUB_TOKEN', 'GITHUB_TOKEN'),
        help='the github-auth-token to use (defaults to GitHub-Action\'s default)',
    )
    parser.add_argument(
        '--repository',
        default=env('INPUT_REPOSITORY', 'GITHUB_REPOSITORY'),
        help='repository to generate release notes for ({owner}/{repo})',
    )
    parser.add_argument(
        '--tag',
        default=env('INPUT_TAG'),
        help='the release-tag to generate release notes for',
    )
    parser.add_argument(
        '--previous-tag',
        default=env('INPUT_PREVIOUS_TAG'),
        help='the previous release-tag (determined from final releases by default)',
    )
    parser.add_argument(
        '--submodule-link',
        default=env('INPUT_GENERATED_SUBMODULE_LINK'),
        help='prefix for issue-references in submodule-changes (defaults to submodule-repository)',
    )
    parser.add_argument(
        '--submodule-path',
        default=env('INPUT_SUBMODULE_PATH'),
        help='path of submodule to consider (defaults to first submodule in .gitmodules)',
    )
    parser.add_argument(
        '--github-host',
        default=None,
        help='GitHub-hostname (derived from GITHUB_SERVER_URL by default, falling back to github.com)',
    )
    parser.add_argument(
        '--cfg-path',
        default=None,
        help='''\
            optional YAML-file to read configuration from. explicitly passed arguments (or
            environment variables) take precedence. expected format:
              repository: my-org/my-repo
              tag: v1.2.3
              previous_tag: v1.2.2
              submodule_link: my-org/my-submodule
              submodule_path: path/to/submodule
              github_host: github.com
        ''',
    )
    parser.add_argument(
        '--output',
        default='-',
        help='output file to write release notes to (`-` for stdout only, which is the default)',
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        default=False,
    )

    return parser.parse_args(argv)


def load_cfg(path: str) -> snm.ReleaseNotesCfg:
    try:
        with open(path) as f:
            raw = yaml.safe_load(f) or {}

        return dacite.from_dict(
            data_class=snm.ReleaseNotesCfg,
            data=raw,
            config=dacite.Config(
                strict=True,
            ),
        )
    except (OSError, yaml.YAMLError, dacite.DaciteError) as e:
        raise sne.ReleaseNotesError(
            f'failed to read configuration from {path=}',
            stage=sne.Stage.CONFIG,
            kind=sne.ErrorKind.MALFORMED_INPUT,
        ) from e


def release_notes_cfg(parsed: argparse.Namespace) -> snm.ReleaseNotesCfg:
    if parsed.cfg_path:
        cfg = load_cfg(parsed.cfg_path)
    else:
        cfg = snm.ReleaseNotesCfg()

    if not cfg.github_host:
        cfg = dataclasses.replace(
            cfg,
            github_host=github.default_host(),
        )

    overrides = {
        'repository': parsed.repository,
        'tag': parsed.tag,
        'previous_tag': parsed.previous_tag,
        'submodule_link': parsed.submodule_link,
        'submodule_path': parsed.submodule_path,
        'github_host': parsed.github_host,
    }

    return dataclasses.replace(
        cfg,
        **{k: v for k, v in overrides.items() if v},
    )


def write_release_notes(
    release_notes_md: str,
    outfile: str,
):
    try:
        if outfile != '-':
            with open(outfile, 'w') as f:
                f.write(release_notes_md)

        ci.util.write_output(
            name=OUTPUT_NAME,
            value=release_notes_md,
        )
    except OSError as oe:
        raise sne.ReleaseNotesError(
            'failed to write release notes',
            stage=sne.Stage.OUTPUT,
            kind=sne.ErrorKind.IO,
        ) from oe


def run(parsed: argparse.Namespace) -> str:
    cfg = release_notes_cfg(parsed)
    logger.info(f'{cfg=}')

    github_api = github.github_api(
        host=cfg.github_host,
        token=parsed.github_auth_token,
    )

    release_notes = snf.collect_release_notes(
        github_api=github_api,
        cfg=cfg,
    )
    release_notes_md = snmd.release_notes_markdown(release_notes)

    write_release_notes(
        release_notes_md=release_notes_md,
        outfile=parsed.output,
    )

    return release_notes_md


def main(argv=None):
    parsed = parse_args(argv)

    ci.log.configure_default_logging(
        level=logging.DEBUG if parsed.verbose else logging.INFO,
    )

    try:
        release_notes_md = run(parsed)
    except sne.ReleaseNotesError as rne:
        logger.error(f'Error: {rne}')
        sys.exit(1)

    logger.info('release notes generated successfully')
    sys.stdout.write(release_notes_md)


if __name__ == '__main__':
    main()
