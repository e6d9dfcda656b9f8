# -*- coding: utf-8 -*-

"""
s3lite.exceptions
~~~~~~~~~~~~~~~~~

异常类。
"""

from .headers import AMZ_REQUEST_ID
from .xml_utils import xml_to_tree


_S3_ERROR_TO_EXCEPTION = {} # populated at end of module


S3_CLIENT_ERROR_STATUS = -1
S3_REQUEST_ERROR_STATUS = -2


class S3Error(Exception):
    def __init__(self, status, headers, body, details):
        #: HTTP 状态码
        self.status = status

        #: 请求ID，用于跟踪一个S3请求
        self.request_id = headers.get(AMZ_REQUEST_ID, '')

        #: HTTP响应体（部分）
        self.body = body

        #: 详细错误信息，是一个string到string的dict
        self.details = details

        #: S3错误码
        self.code = self.details.get('Code', '')

        #: S3错误信息
        self.message = self.details.get('Message', '')

    def __str__(self):
        return str(self.details)


class ClientError(S3Error):
    def __init__(self, message):
        S3Error.__init__(self, S3_CLIENT_ERROR_STATUS, {}, 'ClientError: ' + message, {})

    def __str__(self):
        return self.body


class RequestError(S3Error):
    def __init__(self, e):
        S3Error.__init__(self, S3_REQUEST_ERROR_STATUS, {}, 'RequestError: ' + str(e), {})
        self.exception = e

    def __str__(self):
        return self.body


class ServerError(S3Error):
    pass


class NotFound(ServerError):
    status = 404
    code = ''


class NoSuchBucket(NotFound):
    status = 404
    code = 'NoSuchBucket'


class NoSuchKey(NotFound):
    status = 404
    code = 'NoSuchKey'


class NotModified(ServerError):
    status = 304
    code = ''


class AccessDenied(ServerError):
    status = 403
    code = 'AccessDenied'


class SignatureDoesNotMatch(ServerError):
    status = 403
    code = 'SignatureDoesNotMatch'


class InvalidAccessKeyId(ServerError):
    status = 403
    code = 'InvalidAccessKeyId'


class RequestTimeTooSkewed(ServerError):
    status = 403
    code = 'RequestTimeTooSkewed'


def make_exception(resp):
    status = resp.status
    headers = resp.headers
    body = resp.read(4096)
    details = _parse_error_body(body)
    code = details.get('Code', '')

    try:
        klass = _S3_ERROR_TO_EXCEPTION[(status, code)]
        return klass(status, headers, body, details)
    except KeyError:
        return ServerError(status, headers, body, details)


def _walk_subclasses(klass):
    for sub in klass.__subclasses__():
        yield sub
        for subsub in _walk_subclasses(sub):
            yield subsub


for klass in _walk_subclasses(ServerError):
    status = getattr(klass, 'status', None)
    code = getattr(klass, 'code', None)

    if status is not None and code is not None:
        _S3_ERROR_TO_EXCEPTION[(status, code)] = klass


def _parse_error_body(body):
    if not body:
        return {}

    details = xml_to_tree(body).get('Error')
    if not isinstance(details, dict):
        return {}

    return dict((k, v) for k, v in details.items() if isinstance(v, str))
