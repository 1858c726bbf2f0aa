import os
import json
import boto3
from decimal import Decimal
from aws_lambda_powertools import Logger, Tracer
from custom_exceptions import ApiException, BadRequestException, MethodNotAllowedException, ResourceNotFoundException

TABLE = os.environ.get('TABLE')
STAGE = os.environ.get('STAGE', 'local')
BRANCH = os.environ.get('BRANCH', 'local')

DDB_RESOURCE = boto3.resource('dynamodb')

ITEM_DDB_TABLE = DDB_RESOURCE.Table(TABLE)

logger = Logger()
tracer = Tracer()

"""
Routes (API Gateway proxy integration):
GET    /  or  /health
GET    /items/{code}
PUT    /items/{code}
DELETE /items/{code}
"""

class DecimalEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, Decimal):
            return int(obj) if obj == obj.to_integral_value() else float(obj)
        return super(DecimalEncoder, self).default(obj)

@tracer.capture_lambda_handler
def lambda_handler(event, context):
    try:
        logger.info(event)
        method = (event.get('httpMethod') or 'GET').upper()
        path = event.get('path') or '/'
        segments = [segment for segment in path.split('/') if segment]

        if not segments or segments == ['health']:
            if method != 'GET':
                raise MethodNotAllowedException(method, path)
            return create_response(200, "Success", {
                'status': 'ok',
                'stage': STAGE,
                'branch': BRANCH
            })

        if len(segments) == 2 and segments[0] == 'items':
            code = segments[1]
            if method == 'GET':
                return create_response(200, "Success", {'item': get_item(code)})
            if method == 'PUT':
                item = parse_item(code, event.get('body'))
                save_item(item)
                return create_response(200, "Item saved", {'item': item})
            if method == 'DELETE':
                delete_item(code)
                return create_response(200, "Item deleted", {'code': code})
            raise MethodNotAllowedException(method, path)

        raise ResourceNotFoundException('Route', path)

    except ApiException as e:
        logger.warning(f"Request rejected: {e.message}")
        return create_response(e.status_code, e.message)

    except Exception as ex:
        tracer.put_annotation("lambda_error", "true")
        tracer.put_annotation("lambda_name", context.function_name)
        tracer.put_metadata("event", event)
        tracer.put_metadata("message", str(ex))
        logger.exception({"message": str(ex)})
        return create_response(
            500,
            "The server encountered an unexpected condition that prevented it from fulfilling your request."
        )


def reject_constant(name):
    # NaN and Infinity cannot be stored in DynamoDB
    raise BadRequestException(f"Unsupported number {name} in request body")


def parse_item(code, body):
    if not body:
        raise BadRequestException("Request body is required")
    try:
        item = json.loads(body, parse_float=Decimal, parse_constant=reject_constant)
    except json.JSONDecodeError:
        raise BadRequestException("Request body must be valid JSON")
    if not isinstance(item, dict):
        raise BadRequestException("Request body must be a JSON object")

    # path wins over any code in the body
    item['code'] = code
    return item


@tracer.capture_method
def get_item(code):
    item = ITEM_DDB_TABLE.get_item(Key={'code': code}).get('Item')
    if item is None:
        raise ResourceNotFoundException('Item', code)
    return item


@tracer.capture_method
def save_item(item):
    ITEM_DDB_TABLE.put_item(Item=item)


@tracer.capture_method
def delete_item(code):
    response = ITEM_DDB_TABLE.delete_item(
        Key={'code': code},
        ReturnValues='ALL_OLD'
    )
    if not response.get('Attributes'):
        raise ResourceNotFoundException('Item', code)


def create_response(status_code, message, payload=None):
    if not payload:
        payload = {}
    return {
        'statusCode': status_code,
        'headers': {
            'Content-Type': 'application/json',
            'Access-Control-Allow-Origin': '*',
            'X-Content-Type-Options': 'nosniff',
            'Strict-Transport-Security': 'max-age=31536000; includeSubDomains; preload',
            'Cache-control': 'no-store',
            'Pragma': 'no-cache',
            'X-Frame-Options': 'SAMEORIGIN'
        },
        'body': json.dumps({"statusCode": status_code, "message": message, **payload}, cls=DecimalEncoder)
    }
