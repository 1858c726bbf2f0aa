"""
Stage resolution
Works out which branch is being deployed and turns it into a short stage name
used in the stack id, the resource tags and the backend function environment.

Branch sources, first non-blank wins:
1. GITHUB_HEAD_REF
2. GITHUB_REF_NAME
3. BRANCH_NAME
4. CI_COMMIT_REF_NAME
5. git rev-parse --abbrev-ref HEAD
6. "local"
"""
import os
import re
import subprocess
from typing import Callable, Iterable, List, NamedTuple, Optional, Tuple

from aws_lambda_powertools import Logger

from .environment import APPLICATION_NAME, BRANCH_ENV_VARS, GIT_QUERY_TIMEOUT, STACK_PREFIX

logger = Logger(service='stage-resolver')

DEFAULT_STAGE = 'local'
MAX_STAGE_LENGTH = 20

GIT_BRANCH_COMMAND = ['git', 'rev-parse', '--abbrev-ref', 'HEAD']

INVALID_STAGE_CHARS = re.compile(r'[^a-z0-9-]')
REPEATED_HYPHENS = re.compile(r'-+')


class DeploymentContext(NamedTuple):
    branch: str
    stage: str

    @property
    def stack_id(self) -> str:
        return f'{STACK_PREFIX}-{self.stage}'

    @property
    def tags(self) -> dict:
        return {
            'stage': self.stage,
            'branch': self.branch,
            'application': APPLICATION_NAME,
        }


def _exact(*names):
    return lambda branch: branch in names


def _prefix(*prefixes):
    return lambda branch: branch.startswith(prefixes)


# Evaluated in order, first match wins
STAGE_RULES: List[Tuple[Callable[[str], bool], str]] = [
    (_exact('main', 'master', 'prod', 'production'), 'prod'),
    (_exact('develop', 'development', 'dev'), 'dev'),
    (_prefix('hotfix/'), 'prod'),
    (_prefix('feature/', 'feat/', 'fix/', 'chore/'), 'dev'),
]


def branch_signals(environ=None) -> List[Tuple[str, Optional[str]]]:
    environ = os.environ if environ is None else environ
    return [(name, environ.get(name)) for name in BRANCH_ENV_VARS]


def query_git_branch(timeout: float = GIT_QUERY_TIMEOUT) -> str:
    """Name of the checked out branch. Raises on any git failure."""
    result = subprocess.run(
        GIT_BRANCH_COMMAND,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.DEVNULL,
        timeout=timeout,
        check=True,
    )
    return result.stdout.decode('utf-8', errors='replace')


def resolve_branch(
    signals: Iterable[Tuple[str, Optional[str]]],
    git_query: Callable[[], str] = query_git_branch,
) -> str:
    for name, value in signals:
        if value and value.strip():
            logger.debug({'message': 'Branch taken from environment', 'source': name})
            return value.strip()

    try:
        branch = git_query().strip()
    except Exception as ex:
        logger.debug({'message': 'Git branch query failed', 'error': str(ex)})
        return DEFAULT_STAGE

    return branch or DEFAULT_STAGE


def derive_stage(branch: str) -> str:
    lowered = branch.lower()
    for matches, stage in STAGE_RULES:
        if matches(lowered):
            return stage
    return sanitize_stage(lowered)


def sanitize_stage(raw: str) -> str:
    sanitized = INVALID_STAGE_CHARS.sub('-', raw)
    sanitized = REPEATED_HYPHENS.sub('-', sanitized).strip('-')
    # a cut can land right after a hyphen
    sanitized = sanitized[:MAX_STAGE_LENGTH].rstrip('-')
    return sanitized or DEFAULT_STAGE


def resolve_deployment(environ=None, git_query: Callable[[], str] = query_git_branch) -> DeploymentContext:
    branch = resolve_branch(branch_signals(environ), git_query)
    stage = derive_stage(branch)
    logger.info({'message': 'Resolved deployment stage', 'branch': branch, 'stage': stage})
    return DeploymentContext(branch=branch, stage=stage)
