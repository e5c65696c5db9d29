"""
CDK stack for the serverless image recognition application.

Resource groups:
- Object storage: image bucket, resized bucket, IP-restricted website bucket
- Label store: DynamoDB table keyed by image identifier
- Detection worker: Lambda fed by ImageQueue, with ImageDLQueue behind it
- Front-end API: API Gateway GET/DELETE /images on a non-proxy Lambda integration
- Identity layer: Cognito user pool, app client, identity pool and the
  authenticated role scoped to private/${cognito-identity.amazonaws.com:sub}/
"""
import json
from pathlib import Path
from typing import Dict, List, Optional

from aws_cdk import (
    BundlingOptions,
    CfnOutput,
    Duration,
    RemovalPolicy,
    Stack,
    aws_apigateway as apigw,
    aws_cognito as cognito,
    aws_dynamodb as dynamodb,
    aws_iam as iam,
    aws_lambda as _lambda,
    aws_lambda_event_sources as event_sources,
    aws_s3 as s3,
    aws_s3_deployment as s3deploy,
    aws_s3_notifications as s3n,
    aws_sqs as sqs,
)
from constructs import Construct

from image_rekognition.config.stack_settings import StackSettings, stack_settings

PROJECT_ROOT = Path(__file__).resolve().parents[3]

HANDLER_MODULE = "image_rekognition.infrastructure.handlers"
WORKER_HANDLER = f"{HANDLER_MODULE}.detection_worker.lambda_handler"
SERVICE_HANDLER = f"{HANDLER_MODULE}.image_service.lambda_handler"

# Only the runtime package is shipped in the function asset
FUNCTION_ASSET_EXCLUDES = [
    "*",
    "!image_rekognition",
    "!image_rekognition/**",
    "image_rekognition/infrastructure/cdk",
    "image_rekognition/infrastructure/cdk/**",
    "image_rekognition/api",
    "image_rekognition/api/**",
    "**/__pycache__",
]

IDENTITY_SUB = "${cognito-identity.amazonaws.com:sub}"
CORS_ORIGIN_HEADER = "method.response.header.Access-Control-Allow-Origin"


class ImageRekognitionStack(Stack):
    """
    Composes the five resource groups by reference.

    Args:
        settings: Topology settings; defaults to the STACK_ environment
    """

    def __init__(self, scope: Construct, construct_id: str,
                 settings: Optional[StackSettings] = None, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)
        self.settings = settings or stack_settings
        self.settings.validate_website_access()

        self.runtime = _lambda.Runtime(self.settings.python_runtime, _lambda.RuntimeFamily.PYTHON)

        self._create_storage_resources()
        self._create_website()
        self._create_label_table()
        self._create_queues()
        self._create_identity_resources()
        self._create_compute_resources()
        self._create_api()
        self._setup_event_processing()
        self._create_outputs()

    def _create_storage_resources(self) -> None:
        self.image_bucket = s3.Bucket(
            self, self.settings.image_bucket_id,
            removal_policy=RemovalPolicy.DESTROY,
            cors=[s3.CorsRule(
                allowed_methods=[s3.HttpMethods.GET, s3.HttpMethods.PUT,
                                 s3.HttpMethods.POST, s3.HttpMethods.DELETE],
                allowed_origins=["*"],
                allowed_headers=["*"]
            )]
        )
        self.resized_bucket = s3.Bucket(
            self, self.settings.resized_bucket_id,
            removal_policy=RemovalPolicy.DESTROY
        )

    def _create_website(self) -> None:
        """Website bucket readable only from the configured IP ranges."""
        self.website_bucket = s3.Bucket(
            self, self.settings.website_bucket_id,
            website_index_document="index.html",
            website_error_document="index.html",
            removal_policy=RemovalPolicy.DESTROY,
            block_public_access=s3.BlockPublicAccess(
                block_public_acls=True,
                ignore_public_acls=True,
                block_public_policy=False,
                restrict_public_buckets=False
            )
        )
        self.website_bucket.add_to_resource_policy(iam.PolicyStatement(
            actions=["s3:GetObject"],
            resources=[self.website_bucket.arn_for_objects("*")],
            principals=[iam.AnyPrincipal()],
            conditions={
                "IpAddress": {"aws:SourceIp": list(self.settings.allowed_ip_ranges)}
            }
        ))

        s3deploy.BucketDeployment(
            self, "DeployWebsite",
            sources=[s3deploy.Source.asset(str(PROJECT_ROOT / self.settings.website_asset_path))],
            destination_bucket=self.website_bucket
        )

    def _create_label_table(self) -> None:
        self.table = dynamodb.Table(
            self, self.settings.table_id,
            partition_key=dynamodb.Attribute(
                name=self.settings.table_partition_key,
                type=dynamodb.AttributeType.STRING
            ),
            billing_mode=dynamodb.BillingMode.PAY_PER_REQUEST,
            removal_policy=RemovalPolicy.DESTROY
        )

    def _create_queues(self) -> None:
        self.dead_letter_queue = sqs.Queue(
            self, self.settings.dead_letter_queue_name,
            queue_name=self.settings.dead_letter_queue_name
        )
        self.queue = sqs.Queue(
            self, self.settings.queue_name,
            queue_name=self.settings.queue_name,
            visibility_timeout=Duration.seconds(self.settings.visibility_timeout_seconds),
            receive_message_wait_time=Duration.seconds(self.settings.receive_wait_seconds),
            dead_letter_queue=sqs.DeadLetterQueue(
                max_receive_count=self.settings.max_receive_count,
                queue=self.dead_letter_queue
            )
        )

    def _create_identity_resources(self) -> None:
        self.user_pool = cognito.UserPool(
            self, "UserPool",
            self_sign_up_enabled=True,
            auto_verify=cognito.AutoVerifiedAttrs(email=True),
            sign_in_aliases=cognito.SignInAliases(email=True, username=True),
            removal_policy=RemovalPolicy.DESTROY
        )
        # Browser clients cannot keep a secret
        self.user_pool_client = cognito.UserPoolClient(
            self, "UserPoolClient",
            user_pool=self.user_pool,
            generate_secret=False,
            auth_flows=cognito.AuthFlow(user_password=True, user_srp=True)
        )
        self.identity_pool = cognito.CfnIdentityPool(
            self, "ImageRekognitionIdentityPool",
            allow_unauthenticated_identities=False,
            cognito_identity_providers=[
                cognito.CfnIdentityPool.CognitoIdentityProviderProperty(
                    client_id=self.user_pool_client.user_pool_client_id,
                    provider_name=self.user_pool.user_pool_provider_name
                )
            ]
        )

        self.authenticated_role = iam.Role(
            self, "ImageRekognitionAuthenticatedRole",
            assumed_by=iam.FederatedPrincipal(
                "cognito-identity.amazonaws.com",
                conditions={
                    "StringEquals": {
                        "cognito-identity.amazonaws.com:aud": self.identity_pool.ref
                    },
                    "ForAnyValue:StringLike": {
                        "cognito-identity.amazonaws.com:amr": "authenticated"
                    }
                },
                assume_role_action="sts:AssumeRoleWithWebIdentity"
            )
        )
        self.authenticated_role.add_to_policy(iam.PolicyStatement(
            actions=["s3:GetObject", "s3:PutObject"],
            resources=self._private_object_arns()
        ))
        self.authenticated_role.add_to_policy(iam.PolicyStatement(
            actions=["s3:ListBucket"],
            resources=[self.image_bucket.bucket_arn, self.resized_bucket.bucket_arn],
            conditions={
                "StringLike": {
                    "s3:prefix": [f"{self.settings.notification_prefix}{IDENTITY_SUB}/*"]
                }
            }
        ))
        self.authenticated_role.add_to_policy(iam.PolicyStatement(
            actions=["mobileanalytics:PutEvents", "cognito-sync:*", "cognito-identity:*"],
            resources=["*"]
        ))

        cognito.CfnIdentityPoolRoleAttachment(
            self, "IdentityPoolRoleAttachment",
            identity_pool_id=self.identity_pool.ref,
            roles={"authenticated": self.authenticated_role.role_arn}
        )

    def _private_object_arns(self) -> List[str]:
        prefix = f"{self.settings.notification_prefix}{IDENTITY_SUB}"
        arns = []
        for bucket in (self.image_bucket, self.resized_bucket):
            arns.append(f"{bucket.bucket_arn}/{prefix}/*")
            arns.append(f"{bucket.bucket_arn}/{prefix}")
        return arns

    def _create_compute_resources(self) -> None:
        self.runtime_layer = _lambda.LayerVersion(
            self, "RuntimeLayer",
            code=_lambda.Code.from_asset(
                str(PROJECT_ROOT / self.settings.layer_asset_path),
                bundling=BundlingOptions(
                    image=self.runtime.bundling_image,
                    command=[
                        "bash", "-c",
                        "pip install -r requirements.txt -t /asset-output/python"
                    ]
                )
            ),
            compatible_runtimes=[self.runtime],
            license="Apache-2.0",
            description="Pillow and pydantic for the image recognition functions"
        )
        function_code = _lambda.Code.from_asset(str(PROJECT_ROOT), exclude=FUNCTION_ASSET_EXCLUDES)

        self.worker_function = _lambda.Function(
            self, "rekognitionFunction",
            runtime=self.runtime,
            handler=WORKER_HANDLER,
            code=function_code,
            layers=[self.runtime_layer],
            timeout=Duration.seconds(self.settings.worker_timeout_seconds),
            memory_size=self.settings.worker_memory_mb,
            environment=self._environment_contract()
        )
        self.image_bucket.grant_read(self.worker_function)
        self.resized_bucket.grant_put(self.worker_function)
        self.table.grant_write_data(self.worker_function)
        self.worker_function.add_to_role_policy(iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=["rekognition:DetectLabels"],
            resources=["*"]
        ))

        self.service_function = _lambda.Function(
            self, "serviceFunction",
            runtime=self.runtime,
            handler=SERVICE_HANDLER,
            code=function_code,
            layers=[self.runtime_layer],
            timeout=Duration.seconds(self.settings.service_timeout_seconds),
            environment={
                **self._environment_contract(),
                "IDENTITY_POOL_ID": self.identity_pool.ref,
                "USER_POOL_PROVIDER": self.user_pool.user_pool_provider_name,
            }
        )
        # list needs s3:ListBucket, which grant_write does not include
        self.image_bucket.grant_read_write(self.service_function)
        self.resized_bucket.grant_write(self.service_function)
        self.table.grant_read_write_data(self.service_function)

    def _environment_contract(self) -> Dict[str, str]:
        return {
            "TABLE": self.table.table_name,
            "BUCKET": self.image_bucket.bucket_name,
            "RESIZEDBUCKET": self.resized_bucket.bucket_name,
            "UPLOAD_PREFIX": self.settings.notification_prefix,
            "ENVIRONMENT": "production",
        }

    def _create_api(self) -> None:
        self.api = apigw.LambdaRestApi(
            self, "imageAPi",
            handler=self.service_function,
            proxy=False,
            default_cors_preflight_options=apigw.CorsOptions(
                allow_origins=apigw.Cors.ALL_ORIGINS,
                allow_methods=apigw.Cors.ALL_METHODS
            )
        )
        # Authorizer rejections never reach the integration responses
        for response_id, response_type in (("Default4xx", apigw.ResponseType.DEFAULT_4_XX),
                                           ("Default5xx", apigw.ResponseType.DEFAULT_5_XX)):
            self.api.add_gateway_response(
                response_id,
                type=response_type,
                response_headers={"Access-Control-Allow-Origin": "'*'"}
            )

        self.authorizer = apigw.CognitoUserPoolsAuthorizer(
            self, "APIGatewayAuthorizer",
            authorizer_name="customer-authorizer",
            cognito_user_pools=[self.user_pool],
            identity_source="method.request.header.Authorization"
        )

        integration = apigw.LambdaIntegration(
            self.service_function,
            proxy=False,
            request_parameters={
                "integration.request.querystring.action": "method.request.querystring.action",
                "integration.request.querystring.key": "method.request.querystring.key",
            },
            request_templates={"application/json": request_template()},
            passthrough_behavior=apigw.PassthroughBehavior.WHEN_NO_TEMPLATES,
            integration_responses=[
                apigw.IntegrationResponse(
                    status_code="200",
                    response_parameters={CORS_ORIGIN_HEADER: "'*'"}
                ),
                apigw.IntegrationResponse(
                    # Any non-empty Lambda error message
                    selection_pattern="(\n|.)+",
                    status_code="500",
                    response_parameters={CORS_ORIGIN_HEADER: "'*'"}
                ),
            ]
        )

        images = self.api.root.add_resource("images")
        for method in ("GET", "DELETE"):
            images.add_method(
                method,
                integration,
                authorization_type=apigw.AuthorizationType.COGNITO,
                authorizer=self.authorizer,
                request_parameters={
                    "method.request.querystring.action": True,
                    "method.request.querystring.key": True,
                },
                method_responses=[
                    apigw.MethodResponse(status_code=status, response_parameters={CORS_ORIGIN_HEADER: True})
                    for status in ("200", "500")
                ]
            )

    def _setup_event_processing(self) -> None:
        key_filter = s3.NotificationKeyFilter(prefix=self.settings.notification_prefix)
        if self.settings.direct_trigger:
            # Deprecated: no retry, no dead-letter queue
            self.image_bucket.add_event_notification(
                s3.EventType.OBJECT_CREATED,
                s3n.LambdaDestination(self.worker_function),
                key_filter
            )
            return

        self.image_bucket.add_event_notification(
            s3.EventType.OBJECT_CREATED,
            s3n.SqsDestination(self.queue),
            key_filter
        )
        self.worker_function.add_event_source(event_sources.SqsEventSource(
            self.queue,
            report_batch_item_failures=True
        ))

    def _create_outputs(self) -> None:
        outputs = {
            "imageBucket": self.image_bucket.bucket_name,
            "resizedBucket": self.resized_bucket.bucket_name,
            "bucketURL": self.website_bucket.bucket_website_domain_name,
            "ddbTable": self.table.table_name,
            "UserPoolId": self.user_pool.user_pool_id,
            "AppClientId": self.user_pool_client.user_pool_client_id,
            "IdentityPoolId": self.identity_pool.ref,
            "ImageQueueUrl": self.queue.queue_url,
            "ImageDLQueueUrl": self.dead_letter_queue.queue_url,
        }
        for output_id, value in outputs.items():
            CfnOutput(self, output_id, value=value)


def request_template() -> str:
    """Maps the non-proxy request into the Front-End API event."""
    return json.dumps({
        "action": "$util.escapeJavaScript($input.params('action'))",
        "key": "$util.escapeJavaScript($input.params('key'))",
        "method": "$context.httpMethod",
        "token": "$util.escapeJavaScript($input.params('Authorization'))",
    })
