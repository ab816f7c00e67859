# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

'''
Submodule-aware Release Notes

Collects release notes (commit summaries) for a release of a GitHub repository. The release
window is bounded by the given release tag and its predecessor (which is either passed explicitly,
or determined from the repository's final releases using semver arithmetics).

If the repository tracks a git submodule (declared in `.gitmodules`), the submodule's commits
between the two pinned submodule commits are added as a second section. Issue / pull request
references (`#42`) in submodule commit summaries are qualified with the submodule's repository
(`org/repo#42`), so they are linked correctly when rendered in the context of the host repository.

All information is retrieved using GitHub's REST API; no local clone is required.
'''
