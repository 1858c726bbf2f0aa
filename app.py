#!/usr/bin/env python3
import aws_cdk as cdk

from infra_cdk.infra_stack import InfraStack
from infra_cdk.stage_resolver import resolve_deployment
from infra_cdk.environment import resolve_target_env

app = cdk.App()

deployment = resolve_deployment()

InfraStack(
    app,
    deployment.stack_id,
    stack_name=deployment.stack_id,
    deployment=deployment,
    env=resolve_target_env()
)

app.synth()
