# -*- coding: utf-8 -*-

"""
s3lite.auth
~~~~~~~~~~~

AWS Signature Version 4 签名。

签名分为三步，每一步都是纯函数，可以单独使用：
    1. :func:`construct_canonical_request` / :func:`make_canonical_request` ：构造规范请求（canonical request）
    2. :func:`make_string_to_sign` ：构造待签名串
    3. :func:`make_authorization` ：派生签名密钥，计算签名，生成 `Authorization` 头部的值

输入无法解析时，这些函数返回空串而不是抛出异常，由调用者决定如何处理。
:class:`ProviderAuth` 把上述步骤串起来，对 :class:`s3lite.http.Request` 签名。
"""

import hmac
import hashlib
import logging
import re
from urllib.parse import unquote_to_bytes

from . import utils
from .exceptions import ClientError
from .headers import *
from .http import RequestView, parse_request
from .credentials import StaticCredentialsProvider

HASH_ALGORITHM = 'AWS4-HMAC-SHA256'
TERMINATOR = 'aws4_request'
SECRET_KEY_PREFIX = 'AWS4'
DEFAULT_SIGNED_HEADERS = ['content-type', 'content-md5']

logger = logging.getLogger(__name__)

_SPACES_RE = re.compile(' {2,}')


def construct_canonical_request(raw_request):
    """根据原始的HTTP/1.1请求报文构造规范请求。

    :param raw_request: 请求报文，str或bytes
    :return: 规范请求；请求行无法解析时返回空串。
    """
    view = parse_request(raw_request)
    if view is None:
        logger.debug('Construct canonical request: malformed request')
        return ''

    return make_canonical_request(view)


def make_canonical_request(view, normalize_path=True, payload_hash=None):
    """根据 :class:`RequestView <s3lite.http.RequestView>` 构造规范请求。

    :param view: 请求的各个部分
    :param bool normalize_path: 是否规范化路径（去掉 `.` 、 `..` 以及重复的 `/` ）。S3不做路径规范化。
    :param str payload_hash: 作为最后一行的请求体摘要，如 `UNSIGNED-PAYLOAD` ；None表示计算请求体的SHA-256。
    """
    headers = _canonical_headers(view.headers)

    if payload_hash is None:
        payload_hash = utils.sha256_hex(view.body)

    return '\n'.join([view.method,
                      _canonical_uri(view.path, normalize_path),
                      _canonical_query(view.query),
                      ''.join(name + ':' + ','.join(values) + '\n' for name, values in headers),
                      ';'.join(name for name, values in headers),
                      payload_hash])


def _canonical_uri(path, normalize_path):
    if path.startswith('/'):
        path = path[1:]

    segments = [unquote_to_bytes(s) for s in path.split('/')]

    if not normalize_path:
        return '/' + '/'.join(utils.uri_encode(s) for s in segments)

    stack = []
    for segment in segments:
        if segment in (b'', b'.'):
            continue
        if segment == b'..':
            if stack:
                stack.pop()
            continue
        stack.append(segment)

    uri = '/' + '/'.join(utils.uri_encode(s) for s in stack)
    if stack and segments[-1] in (b'', b'.', b'..'):
        uri += '/'
    return uri


def _canonical_query(query):
    params = []
    for param in query.split('&'):
        if not param:
            continue
        name, _, value = param.partition('=')
        params.append((utils.uri_encode(unquote_to_bytes(name)), utils.uri_encode(unquote_to_bytes(value))))

    params.sort()
    return '&'.join(name + '=' + value for name, value in params)


def _canonical_headers(header_pairs):
    headers_by_name = {}
    for name, value in header_pairs:
        if value is None:
            continue
        headers_by_name.setdefault(name.lower(), []).append(_canonicalize_spaces(str(value)))

    return sorted(headers_by_name.items())


def _canonicalize_spaces(value):
    return _SPACES_RE.sub(' ', value).strip()


def make_string_to_sign(region, service, canonical_request):
    """构造待签名串。请求时间取自规范请求中第一个 `x-amz-date` 头部。

    :return: 待签名串；规范请求中没有 `x-amz-date` 时返回空串。
    """
    date_time = ''
    for line in canonical_request.split('\n'):
        if line.startswith(AMZ_DATE + ':'):
            date_time = line[len(AMZ_DATE) + 1:]
            break

    if not date_time:
        logger.debug('Make string to sign: no {0} header in canonical request'.format(AMZ_DATE))
        return ''

    scope = CredentialScope(date_time[:8], region, service)
    return '\n'.join([HASH_ALGORITHM,
                      date_time,
                      str(scope),
                      utils.sha256_hex(canonical_request)])


class CredentialScope(object):
    """签名的作用范围 `date/region/service/terminator` 。"""
    def __init__(self, date, region, service, terminator=TERMINATOR):
        self.date = date
        self.region = region
        self.service = service
        self.terminator = terminator

    def __str__(self):
        return '/'.join([self.date, self.region, self.service, self.terminator])

    @classmethod
    def from_string_to_sign(cls, string_to_sign):
        """从待签名串的第三行解析。格式不对时返回None。"""
        lines = string_to_sign.split('\n')
        if len(lines) < 3:
            return None

        parts = lines[2].split('/')
        if len(parts) != 4:
            return None

        return cls(*parts)


def make_signing_key(access_key_secret, scope):
    """依次以date、region、service、terminator做HMAC-SHA256，派生签名密钥。

    签名密钥只在一次签名计算中使用，不要记录或保存。
    """
    signing_date = hmac.new(utils.to_bytes(SECRET_KEY_PREFIX + access_key_secret), utils.to_bytes(scope.date),
                            hashlib.sha256)
    signing_region = hmac.new(signing_date.digest(), utils.to_bytes(scope.region), hashlib.sha256)
    signing_service = hmac.new(signing_region.digest(), utils.to_bytes(scope.service), hashlib.sha256)
    signing_key = hmac.new(signing_service.digest(), utils.to_bytes(scope.terminator), hashlib.sha256)
    return signing_key.digest()


def make_signature(string_to_sign, access_key_secret):
    """计算签名，即以签名密钥对待签名串做HMAC-SHA256的小写十六进制结果。

    :return: 签名；待签名串中没有合法的scope时返回空串。
    """
    scope = CredentialScope.from_string_to_sign(string_to_sign)
    if scope is None:
        return ''

    signing_key = make_signing_key(access_key_secret, scope)
    return hmac.new(signing_key, utils.to_bytes(string_to_sign), hashlib.sha256).hexdigest()


def make_authorization(string_to_sign, canonical_request, access_key_id, access_key_secret):
    """生成 `Authorization` 头部的值。

    :return: 形如 `AWS4-HMAC-SHA256 Credential=.../scope, SignedHeaders=..., Signature=...` 的字符串；
        待签名串或规范请求格式不对时返回空串。
    """
    scope = CredentialScope.from_string_to_sign(string_to_sign)
    canonical_request_lines = canonical_request.split('\n')
    if scope is None or len(canonical_request_lines) < 2:
        return ''

    signature = make_signature(string_to_sign, access_key_secret)
    signed_headers = canonical_request_lines[-2]

    return '{0} Credential={1}/{2}, SignedHeaders={3}, Signature={4}'.format(
        HASH_ALGORITHM, access_key_id, scope, signed_headers, signature)


def make_auth(access_key_id, access_key_secret):
    logger.debug("Init Auth: access_key_id: {0}, access_key_secret: ******".format(access_key_id))
    return Auth(access_key_id.strip(), access_key_secret.strip())


class AuthBase(object):
    """用于保存用户AccessKeyId、AccessKeySecret，以及计算签名的对象。"""
    def __init__(self, credentials_provider):
        self.credentials_provider = credentials_provider


class ProviderAuth(AuthBase):
    """AWS Signature Version 4，默认构造函数同父类AuthBase，需要传递credentials_provider。

    签名所用的region和service取自请求（ `req.region` 、 `req.service` ），由 :class:`Service <s3lite.Service>`
    和 :class:`Bucket <s3lite.Bucket>` 设置。
    """
    def _sign_request(self, req, bucket_name, key, in_additional_headers=None):
        """把authorization放入req的header里面

        :param req: authorization信息将会加入到这个请求的header里面
        :type req: s3lite.http.Request

        :param bucket_name: bucket名称
        :param key: 文件名
        :param in_additional_headers: 加入签名计算的额外header列表
        """
        if not req.region:
            raise ClientError('The region should not be None in signature version 4.')

        credentials = self.credentials_provider.get_credentials()
        if credentials.get_security_token():
            req.headers[AMZ_SECURITY_TOKEN] = credentials.get_security_token()

        req.headers[HOST] = req.netloc
        req.headers[AMZ_DATE] = utils.amz_date()

        if utils.is_sized_body(req.data):
            payload_hash = utils.sha256_hex(req.data)
        else:
            payload_hash = UNSIGNED_PAYLOAD
        req.headers[AMZ_CONTENT_SHA256] = payload_hash

        canonical_request = make_canonical_request(
            RequestView(req.method, req.path, req.query_string, self.__get_signed_headers(req, in_additional_headers)),
            normalize_path=(req.service != 's3'),
            payload_hash=payload_hash)
        string_to_sign = make_string_to_sign(req.region, req.service, canonical_request)

        logger.debug('Make signature: canonical_request = {0}'.format(canonical_request))
        logger.debug('Make signature: string to be signed = {0}'.format(string_to_sign))

        authorization = make_authorization(string_to_sign, canonical_request,
                                           credentials.get_access_key_id(), credentials.get_access_key_secret())
        if not authorization:
            raise ClientError('Failed to sign request: bucket: {0}, key: {1}'.format(bucket_name, key))

        req.headers[AUTHORIZATION] = authorization

    def __get_signed_headers(self, req, in_additional_headers):
        additional_headers = set(h.lower() for h in (in_additional_headers or []))

        signed_headers = []
        for k, v in req.headers.items():
            lower_key = k.lower()
            if v is None:
                continue
            if lower_key == 'host' or lower_key.startswith('x-amz-') or lower_key in DEFAULT_SIGNED_HEADERS \
                    or lower_key in additional_headers:
                signed_headers.append((lower_key, v))

        return signed_headers


class Auth(ProviderAuth):
    """AWS Signature Version 4，使用固定的AccessKeyId和AccessKeySecret。"""
    def __init__(self, access_key_id, access_key_secret):
        credentials_provider = StaticCredentialsProvider(access_key_id.strip(), access_key_secret.strip())
        super(Auth, self).__init__(credentials_provider)


class StsAuth(ProviderAuth):
    """用于STS临时凭证访问。临时凭证过期前，需要重新获取并替换 `Bucket` 的 `auth` 成员。

    :param str access_key_id: 临时AccessKeyId
    :param str access_key_secret: 临时AccessKeySecret
    :param str security_token: 临时安全令牌(SessionToken)，作为 `x-amz-security-token` 头部发送并参与签名
    """
    def __init__(self, access_key_id, access_key_secret, security_token):
        logger.debug("Init StsAuth: access_key_id: {0}, access_key_secret: ******, security_token: ******".format(
            access_key_id))
        credentials_provider = StaticCredentialsProvider(access_key_id, access_key_secret, security_token)
        super(StsAuth, self).__init__(credentials_provider)


class AnonymousAuth(object):
    """用于匿名访问。

    .. note::
        匿名用户只能读取公共读的Bucket，不能罗列Bucket。
    """
    def _sign_request(self, req, bucket_name, key, in_additional_headers=None):
        pass
