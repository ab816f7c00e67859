# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import os

import github3


def default_host() -> str:
    '''
    returns the GitHub-hostname, honouring the environment variable GITHUB_SERVER_URL, as set for
    GitHub-Actions-runs. Falls back to `github.com`.
    '''
    if not (server_url := os.environ.get('GITHUB_SERVER_URL')):
        return 'github.com'

    if '://' in server_url:
        server_url = server_url.split('://')[-1]

    return server_url.strip('/')


def github_api(
    host: str=None,
    token: str=None,
) -> github3.GitHub | github3.GitHubEnterprise:
    '''
    returns an initialised github-api instance, honouring some environment variables typically
    present for GitHub-Actions-runs.

    If no token is passed, GITHUB_TOKEN is used (if present). Without any token, api-requests
    will be unauthenticated (and thus subject to very restrictive rate-limits).
    '''
    host = host or default_host()
    token = token or os.environ.get('GITHUB_TOKEN')

    if host == 'github.com':
        return github3.GitHub(token=token)

    server_url = os.environ.get('GITHUB_SERVER_URL', f'https://{host}')
    if host not in server_url:
        server_url = f'https://{host}'

    return github3.GitHubEnterprise(
        url=server_url,
        token=token,
    )
