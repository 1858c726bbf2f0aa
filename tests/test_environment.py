import os

from infra_cdk import environment
from infra_cdk.environment import resolve_target_env


def test_explicit_account_and_region_win():
    env = resolve_target_env({
        'AWS_ACCOUNT_ID': '111111111111',
        'CDK_DEFAULT_ACCOUNT': '222222222222',
        'AWS_REGION': 'eu-west-1',
        'CDK_DEFAULT_REGION': 'us-east-1',
    })
    assert env.account == '111111111111'
    assert env.region == 'eu-west-1'


def test_cdk_defaults_used_as_fallback():
    env = resolve_target_env({
        'CDK_DEFAULT_ACCOUNT': '222222222222',
        'CDK_DEFAULT_REGION': 'ap-southeast-1',
    })
    assert env.account == '222222222222'
    assert env.region == 'ap-southeast-1'


def test_unset_target_is_environment_agnostic():
    env = resolve_target_env({})
    assert env.account is None
    assert env.region is None


def test_branch_signal_priority():
    assert environment.BRANCH_ENV_VARS == [
        'GITHUB_HEAD_REF',
        'GITHUB_REF_NAME',
        'BRANCH_NAME',
        'CI_COMMIT_REF_NAME',
    ]


def test_asset_directories_resolve_from_repository_root():
    assert os.path.isdir(environment.BACKEND_ASSET_DIR)
    assert os.path.isfile(os.path.join(environment.BACKEND_ASSET_DIR, 'lambda_function.py'))
    assert os.path.isdir(os.path.join(environment.GENERIC_LAYER_DIR, 'python', 'custom_exceptions'))
