import os
from constructs import Construct
from .environment import *
from .stage_resolver import DeploymentContext

from aws_cdk import (
    Stack,
    aws_s3 as s3,
    aws_iam as iam,
    aws_cloudfront as cloudfront,
    aws_cloudfront_origins as origins,
    aws_s3_deployment as s3deploy,
    aws_dynamodb as dynamodb,
    aws_lambda as lambda_,
    aws_apigateway as apigateway,
    CfnOutput,
    Duration,
    Tags
)

"""
Infra Stack
Single stack per stage, named InfraStack-<stage>.

Resources:
1. Frontend S3 Bucket served through CloudFront with Origin Access Control
   - SPA routing: 403/404 answered with /index.html
   - Frontend build deployed when the build directory exists
2. DynamoDB Table keyed on code
3. Backend Lambda Function (STAGE, BRANCH and TABLE in its environment)
4. API Gateway proxying every route to the backend function
"""

class InfraStack(Stack):

    def __init__(self, scope: Construct, construct_id: str, deployment: DeploymentContext,
                 frontend_asset_dir=FRONTEND_ASSET_DIR, backend_asset_dir=BACKEND_ASSET_DIR, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        stage = deployment.stage
        branch = deployment.branch
        self.deployment = deployment

        # ===== Frontend (S3 + CloudFront with OAC) =====
        website_bucket = s3.Bucket(
            self,
            'FrontendBucket',
            block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
            enforce_ssl=True
        )

        origin_access_control = cloudfront.CfnOriginAccessControl(
            self,
            'OriginAccessControl',
            origin_access_control_config=cloudfront.CfnOriginAccessControl.OriginAccessControlConfigProperty(
                name=f'S3OriginAccessControl-{stage}',
                origin_access_control_origin_type='s3',
                signing_behavior='always',
                signing_protocol='sigv4'
            )
        )

        distribution = cloudfront.Distribution(
            self,
            'CFDistribution',
            default_behavior=cloudfront.BehaviorOptions(
                origin=origins.S3BucketOrigin.with_bucket_defaults(website_bucket),
                viewer_protocol_policy=cloudfront.ViewerProtocolPolicy.REDIRECT_TO_HTTPS
            ),
            default_root_object='index.html',
            error_responses=[
                cloudfront.ErrorResponse(
                    http_status=404,
                    response_http_status=200,
                    response_page_path='/index.html'
                ),
                cloudfront.ErrorResponse(
                    http_status=403,
                    response_http_status=200,
                    response_page_path='/index.html'
                )
            ]
        )

        cfn_distribution = distribution.node.default_child
        cfn_distribution.add_property_override(
            'DistributionConfig.Origins.0.OriginAccessControlId',
            origin_access_control.attr_id
        )

        website_bucket.add_to_resource_policy(
            iam.PolicyStatement(
                actions=['s3:GetObject'],
                resources=[website_bucket.arn_for_objects('*')],
                principals=[iam.ServicePrincipal('cloudfront.amazonaws.com')],
                conditions={
                    'StringEquals': {
                        'AWS:SourceArn': f'arn:aws:cloudfront::{self.account}:distribution/{distribution.distribution_id}'
                    }
                }
            )
        )

        # ===== DynamoDB Table =====
        table = dynamodb.Table(
            self,
            'Table',
            partition_key=dynamodb.Attribute(
                name='code',
                type=dynamodb.AttributeType.STRING
            ),
            billing_mode=dynamodb.BillingMode.PAY_PER_REQUEST
        )

        # ===== Lambda Function (Backend) =====
        generic_layer = lambda_.LayerVersion(
            self,
            'GenericLayer',
            code=lambda_.Code.from_asset(GENERIC_LAYER_DIR),
            compatible_runtimes=[lambda_.Runtime.PYTHON_3_12],
            description='Shared exception types for the backend function'
        )

        backend_lambda = lambda_.Function(
            self,
            'BackendLambda',
            runtime=lambda_.Runtime.PYTHON_3_12,
            handler=BackendFunctionMap['handler'],
            code=lambda_.Code.from_asset(backend_asset_dir),
            layers=[generic_layer],
            timeout=Duration.seconds(BackendFunctionMap['timeout_seconds']),
            memory_size=BackendFunctionMap['memory_size'],
            tracing=lambda_.Tracing.ACTIVE,
            environment={
                'TABLE': table.table_name,
                'STAGE': stage,
                'BRANCH': branch,
                'POWERTOOLS_SERVICE_NAME': f'{PROJECT_NAME}-Backend',
                'LOG_LEVEL': 'INFO'
            }
        )

        table.grant_read_write_data(backend_lambda)

        # ===== API Gateway (expose Lambda as REST API) =====
        api = apigateway.LambdaRestApi(
            self,
            'Api',
            handler=backend_lambda,
            proxy=True,
            default_cors_preflight_options=apigateway.CorsOptions(
                allow_origins=apigateway.Cors.ALL_ORIGINS,
                allow_methods=apigateway.Cors.ALL_METHODS,
                allow_headers=CorsAllowHeaders
            )
        )

        CfnOutput(
            self,
            'ApiUrl',
            value=api.url,
            description='Backend API Gateway URL'
        )

        # ===== Deploy frontend build to S3 =====
        if os.path.isdir(frontend_asset_dir):
            s3deploy.BucketDeployment(
                self,
                'DeployWebsite',
                sources=[s3deploy.Source.asset(frontend_asset_dir)],
                destination_bucket=website_bucket,
                distribution=distribution,
                distribution_paths=['/*']
            )

        CfnOutput(
            self,
            'CloudFrontURL',
            value=f'https://{distribution.distribution_domain_name}',
            description='Frontend CloudFront URL'
        )

        for key, value in deployment.tags.items():
            Tags.of(self).add(key, value)

        # Store references
        self.bucket = website_bucket
        self.distribution = distribution
        self.table = table
        self.backend_lambda = backend_lambda
        self.api = api
