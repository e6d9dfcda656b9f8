# -*- coding: utf-8 -*-

"""
文件上传方法中的data参数
------------------------
诸如 :func:`put_object <Bucket.put_object>` 这样的上传接口都会有 `data` 参数用于接收用户数据。`data` 可以是下述类型
    - str类型：内部会自动转换为UTF-8的bytes
    - bytes类型：不做任何转换
    - file-like object或可迭代类型：签名时无法计算摘要， `x-amz-content-sha256` 为 `UNSIGNED-PAYLOAD`

返回值
------
:class:`Service` 和 :class:`Bucket` 类的方法都是返回 :class:`RequestResult <s3lite.models.RequestResult>`
及其子类。`RequestResult` 包含了HTTP响应的状态码、头部以及S3 Request ID，而它的子类则包含用户真正想要的结果。例如，
`ListBucketsResult.buckets` 就是返回的Bucket信息列表；`GetObjectResult` 则是一个file-like object，可以调用 `read()` 来获取响应的
HTTP包体。

区域
----
签名需要区域。 `region` 参数为None时使用 :data:`s3lite.defaults.default_region` ；endpoint为None时根据区域生成，
即 `https://s3.{region}.amazonaws.com` 。访问Bucket总是使用path-style的URL，即 `{endpoint}/{bucket}/{key}` 。
"""
import logging

from . import xml_utils
from . import http
from . import utils
from . import exceptions
from . import defaults
from . import models

from .models import *
from .utils import to_string

from urllib.parse import urlparse

logger = logging.getLogger(__name__)


class _Base(object):
    def __init__(self, auth, endpoint, region, session, connect_timeout,
                 app_name=''):
        self.auth = auth
        self.region = defaults.get(region, defaults.default_region)
        self.service = defaults.default_service
        self.endpoint = _normalize_endpoint(defaults.get(endpoint, _default_endpoint(self.region)).strip())
        self.session = session or http.Session()
        self.timeout = defaults.get(connect_timeout, defaults.connect_timeout)
        self.app_name = app_name

        self._make_url = _UrlMaker(self.endpoint)

    def _do(self, method, bucket_name, key, **kwargs):
        key = to_string(key)
        req = http.Request(method, self._make_url(bucket_name, key),
                           app_name=self.app_name,
                           region=self.region,
                           service=self.service,
                           **kwargs)
        self.auth._sign_request(req, bucket_name, key)

        resp = self.session.do_request(req, timeout=self.timeout)
        if resp.status // 100 != 2:
            e = exceptions.make_exception(resp)
            logger.error("Exception: {0}".format(e))
            raise e

        # connections return to the pool only after the body has been consumed
        content_length = models._hget(resp.headers, 'content-length', int)
        if content_length is not None and content_length == 0:
            resp.read()

        return resp

    def _parse_result(self, resp, parse_func, klass):
        result = klass(resp)
        parse_func(result, resp.read())
        return result


class Service(_Base):
    """用于Service操作的类，如罗列用户所有的Bucket。

    用法 ::

        >>> import s3lite
        >>> auth = s3lite.Auth('your-access-key-id', 'your-secret-access-key')
        >>> service = s3lite.Service(auth, region='us-west-1')
        >>> service.list_buckets()
        <s3lite.models.ListBucketsResult object at 0x0299FAB0>

    :param auth: 包含了用户认证信息的Auth对象
    :type auth: s3lite.Auth

    :param str endpoint: 访问域名，如 `https://s3.us-west-1.amazonaws.com` ；None表示根据区域生成

    :param str region: 区域，参与签名

    :param session: 会话。如果是None表示新开会话，非None则复用传入的会话
    :type session: s3lite.Session

    :param float connect_timeout: 连接超时时间，以秒为单位。
    :param str app_name: 应用名。该参数不为空，则在User Agent中加入其值。
        注意到，最终这个字符串是要作为HTTP Header的值传输的，所以必须要遵循HTTP标准。
    """

    def __init__(self, auth, endpoint=None,
                 region=None,
                 session=None,
                 connect_timeout=None,
                 app_name=''):
        logger.debug("Init s3 service, endpoint: {0}, region: {1}, connect_timeout: {2}, app_name: {3}".format(
            endpoint, region, connect_timeout, app_name))
        super(Service, self).__init__(auth, endpoint, region, session, connect_timeout,
                                      app_name=app_name)

    def list_buckets(self):
        """罗列用户所有的Bucket。

        :return: 罗列的结果
        :rtype: s3lite.models.ListBucketsResult
        """
        logger.debug("Start to list buckets, endpoint: {0}".format(self.endpoint))
        resp = self._do('GET', '', '')
        logger.debug("List buckets done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))
        return self._parse_result(resp, xml_utils.parse_list_buckets, ListBucketsResult)


class Bucket(_Base):
    """用于Object操作的类，诸如上传、下载、罗列Object等。

    用法（假设Bucket属于us-west-1区域） ::

        >>> import s3lite
        >>> auth = s3lite.Auth('your-access-key-id', 'your-secret-access-key')
        >>> bucket = s3lite.Bucket(auth, None, 'your-bucket', region='us-west-1')
        >>> bucket.put_object('readme.txt', 'content of the object')
        <s3lite.models.PutObjectResult object at 0x029B9930>

    :param auth: 包含了用户认证信息的Auth对象
    :type auth: s3lite.Auth

    :param str endpoint: 访问域名；None表示根据区域生成
    :param str bucket_name: Bucket名
    :param str region: Bucket所在的区域，参与签名

    :param session: 会话。如果是None表示新开会话，非None则复用传入的会话
    :type session: s3lite.Session

    :param float connect_timeout: 连接超时时间，以秒为单位。

    :param str app_name: 应用名。该参数不为空，则在User Agent中加入其值。
    """

    def __init__(self, auth, endpoint, bucket_name,
                 region=None,
                 session=None,
                 connect_timeout=None,
                 app_name=''):
        logger.debug("Init s3 bucket, endpoint: {0}, bucket: {1}, region: {2}, connect_timeout: {3}, "
                     "app_name: {4}".format(endpoint, bucket_name, region, connect_timeout, app_name))
        super(Bucket, self).__init__(auth, endpoint, region, session, connect_timeout,
                                     app_name=app_name)

        self.bucket_name = bucket_name.strip()

    def list_objects(self, prefix='', delimiter='', marker='', max_keys=1000):
        """根据前缀罗列Bucket里的文件。

        :param str prefix: 只罗列文件名为该前缀的文件
        :param str delimiter: 分隔符。可以用来模拟目录
        :param str marker: 分页标志。首次调用传空串，后续使用返回值的next_marker
        :param int max_keys: 最多返回文件的个数，文件和目录的和不能超过该值

        :return: :class:`ListObjectsResult <s3lite.models.ListObjectsResult>`
        """
        logger.debug(
            "Start to List objects, bucket: {0}, prefix: {1}, delimiter: {2}, marker: {3}, max-keys: {4}".format(
                self.bucket_name, to_string(prefix), delimiter, to_string(marker), max_keys))

        params = {'max-keys': str(max_keys)}
        if prefix:
            params['prefix'] = prefix
        if delimiter:
            params['delimiter'] = delimiter
        if marker:
            params['marker'] = marker

        resp = self.__do_bucket('GET', params=params)
        logger.debug("List objects done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))
        return self._parse_result(resp, xml_utils.parse_list_objects, ListObjectsResult)

    def put_object(self, key, data, headers=None):
        """上传一个普通文件。

        用法 ::
            >>> bucket.put_object('readme.txt', 'content of readme.txt')
            >>> with open(u'local_file.txt', 'rb') as f:
            >>>     bucket.put_object('remote_file.txt', f)

        :param key: 上传到S3的文件名

        :param data: 待上传的内容。
        :type data: bytes，str或file-like object

        :param headers: 用户指定的HTTP头部。可以指定Content-Type、Content-MD5、x-amz-meta-开头的头部等
        :type headers: 可以是dict，建议是s3lite.CaseInsensitiveDict

        :return: :class:`PutObjectResult <s3lite.models.PutObjectResult>`
        """
        headers = utils.set_content_type(http.CaseInsensitiveDict(headers), key)

        logger.debug("Start to put object, bucket: {0}, key: {1}, headers: {2}".format(self.bucket_name, to_string(key),
                                                                                       headers))
        resp = self.__do_object('PUT', key, data=data, headers=headers)
        logger.debug("Put object done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))
        return PutObjectResult(resp)

    def get_object(self, key, headers=None):
        """下载一个文件。

        用法 ::

            >>> result = bucket.get_object('readme.txt')
            >>> print(result.read())
            'hello world'

        :param key: 文件名

        :param headers: HTTP头部，如 `Range` 、 `If-Modified-Since`
        :type headers: 可以是dict，建议是s3lite.CaseInsensitiveDict

        :return: file-like object

        :raises: 如果文件不存在，则抛出 :class:`NoSuchKey <s3lite.exceptions.NoSuchKey>` ；还可能抛出其他异常
        """
        headers = http.CaseInsensitiveDict(headers)

        logger.debug("Start to get object, bucket: {0}, key: {1}, headers: {2}".format(
            self.bucket_name, to_string(key), headers))
        resp = self.__do_object('GET', key, headers=headers)
        logger.debug("Get object done, req_id: {0}, status_code: {1}".format(resp.request_id, resp.status))

        return GetObjectResult(resp)

    def __do_object(self, method, key, **kwargs):
        return self._do(method, self.bucket_name, key, **kwargs)

    def __do_bucket(self, method, **kwargs):
        return self._do(method, self.bucket_name, '', **kwargs)


def _default_endpoint(region):
    return 'https://s3.{0}.amazonaws.com'.format(region)


def _normalize_endpoint(endpoint):
    if not endpoint.startswith('http://') and not endpoint.startswith('https://'):
        endpoint = 'https://' + endpoint
    return endpoint.rstrip('/')


class _UrlMaker(object):
    """生成path-style的URL。Bucket名和文件名按RFC 3986编码，文件名中的 `/` 保持不变。"""
    def __init__(self, endpoint):
        p = urlparse(endpoint)

        self.scheme = p.scheme
        self.netloc = p.netloc

    def __call__(self, bucket_name, key):
        if not bucket_name:
            return '{0}://{1}/'.format(self.scheme, self.netloc)

        if not key:
            return '{0}://{1}/{2}'.format(self.scheme, self.netloc, utils.uri_encode(bucket_name))

        return '{0}://{1}/{2}/{3}'.format(self.scheme, self.netloc, utils.uri_encode(bucket_name),
                                          utils.uri_encode(key, ignore_slashes=True))
