import os

import aws_cdk as cdk

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))

PROJECT_NAME = os.environ.get('PROJECT_NAME', 'TEMPLATE_APP')
APPLICATION_NAME = 'Template_App'

STACK_PREFIX = 'InfraStack'

# CI branch signals, highest priority first
BRANCH_ENV_VARS = [
    'GITHUB_HEAD_REF',
    'GITHUB_REF_NAME',
    'BRANCH_NAME',
    'CI_COMMIT_REF_NAME',
]

GIT_QUERY_TIMEOUT = float(os.environ.get('GIT_QUERY_TIMEOUT', '5'))


def _from_root(path):
    if os.path.isabs(path):
        return path
    return os.path.join(ROOT_DIR, path)


FRONTEND_ASSET_DIR = _from_root(os.environ.get('FRONTEND_ASSET_DIR', 'frontend/dist'))
BACKEND_ASSET_DIR = _from_root(os.environ.get('BACKEND_ASSET_DIR', 'lambda/Functions/InfraBackend'))
GENERIC_LAYER_DIR = _from_root(os.environ.get('GENERIC_LAYER_DIR', 'lambda/Layers/Generic'))

BackendFunctionMap = {
    'handler': 'lambda_function.lambda_handler',
    'timeout_seconds': 30,
    'memory_size': 256,
}

CorsAllowHeaders = ['Content-Type', 'Authorization', 'X-Requested-With']


def resolve_target_env(environ=None) -> cdk.Environment:
    """Account and region for the stack. Explicit AWS_* values win over the CDK CLI defaults."""
    environ = os.environ if environ is None else environ
    return cdk.Environment(
        account=environ.get('AWS_ACCOUNT_ID') or environ.get('CDK_DEFAULT_ACCOUNT'),
        region=environ.get('AWS_REGION') or environ.get('CDK_DEFAULT_REGION'),
    )
