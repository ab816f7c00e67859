# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import enum


class Stage(enum.StrEnum):
    CONFIG = 'config'
    PREVIOUS_TAG = 'previous-tag'
    COMMIT = 'commit'
    HISTORY = 'history'
    SUBMODULE_DECLARATION = 'submodule-declaration'
    SUBMODULE_COMMITS = 'submodule-commits'
    OUTPUT = 'output'


class ErrorKind(enum.StrEnum):
    MALFORMED_INPUT = 'malformed-input'
    NOT_FOUND = 'not-found'
    REMOTE = 'remote'
    IO = 'io'


class ReleaseNotesError(RuntimeError):
    '''
    raised if collecting release notes failed. `stage` names the processing step that failed,
    `kind` allows callers to distinguish between invalid input, missing remote objects, and other
    errors returned from GitHub. If caused by another exception, it is chained as `__cause__`.
    '''
    def __init__(
        self,
        message: str,
        stage: Stage,
        kind: ErrorKind,
    ):
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.kind = kind

    def __str__(self) -> str:
        if self.__cause__:
            return f'{self.stage}: {self.message}: {self.__cause__}'
        return f'{self.stage}: {self.message}'
