# -*- coding: utf-8 -*-

"""
s3lite.models
~~~~~~~~~~~~~

该模块包含Python SDK API接口所需要的输入参数以及返回值类型。
"""
from .utils import http_to_unixtime
import logging

logger = logging.getLogger(__name__)


def _hget(headers, key, converter=lambda x: x):
    if key in headers:
        return converter(headers[key])
    else:
        return None


def _get_etag(headers):
    return _hget(headers, 'etag', lambda x: x.strip('"'))


class RequestResult(object):
    def __init__(self, resp):
        #: HTTP响应
        self.resp = resp

        #: HTTP状态码
        self.status = resp.status

        #: HTTP头
        self.headers = resp.headers

        #: 请求ID，用于跟踪一个S3请求
        self.request_id = resp.request_id


class GetObjectResult(RequestResult):
    def __init__(self, resp):
        super(GetObjectResult, self).__init__(resp)

        #: 文件最后修改时间，类型为int。参考 :func:`http_to_unixtime <s3lite.utils.http_to_unixtime>` 。
        self.last_modified = _hget(self.headers, 'last-modified', http_to_unixtime)

        #: 文件的MIME类型
        self.content_type = _hget(self.headers, 'content-type')

        #: Content-Length，可能是None。
        self.content_length = _hget(self.headers, 'content-length', int)

        #: HTTP ETag
        self.etag = _get_etag(self.headers)

    def read(self, amt=None):
        return self.resp.read(amt)

    def __iter__(self):
        return iter(self.resp)


class PutObjectResult(RequestResult):
    def __init__(self, resp):
        super(PutObjectResult, self).__init__(resp)

        #: HTTP ETag
        self.etag = _get_etag(self.headers)


class Owner(object):
    def __init__(self, display_name, owner_id):
        self.display_name = display_name
        self.id = owner_id


class SimplifiedBucketInfo(object):
    """:func:`list_buckets <s3lite.Service.list_buckets>` 结果中的单个元素类型。"""
    def __init__(self, name, creation_date):
        #: Bucket名
        self.name = name

        #: Bucket的创建时间，类型为float，精确到毫秒。
        self.creation_date = creation_date


class ListBucketsResult(RequestResult):
    def __init__(self, resp):
        super(ListBucketsResult, self).__init__(resp)

        #: Bucket的所有者，类型为 :class:`Owner` ，响应中没有时为None。
        self.owner = None

        #: 得到的Bucket列表，类型为 :class:`SimplifiedBucketInfo` 。
        self.buckets = []


class SimplifiedObjectInfo(object):
    def __init__(self, key, last_modified, etag, size, storage_class, owner=None):
        #: 文件名
        self.key = key

        #: 文件的最后修改时间，类型为float，精确到毫秒。
        self.last_modified = last_modified

        #: HTTP ETag
        self.etag = etag

        #: 文件大小
        self.size = size

        #: 文件的存储类别，是一个字符串。
        self.storage_class = storage_class

        #: owner信息, 类型为: class:`Owner <s3lite.models.Owner>`
        self.owner = owner


class ListObjectsResult(RequestResult):
    def __init__(self, resp):
        super(ListObjectsResult, self).__init__(resp)

        #: Bucket名
        self.name = ''

        #: 本次罗列使用的前缀
        self.prefix = ''

        #: 本次罗列使用的分页标记符
        self.marker = ''

        #: True表示还有更多的文件可以罗列；False表示已经列举完毕。
        self.is_truncated = False

        #: 下一次罗列的分页标记符，即，可以作为 :func:`list_objects <s3lite.Bucket.list_objects>` 的 `marker` 参数。
        self.next_marker = ''

        #: 本次罗列得到的文件列表。其中元素的类型为 :class:`SimplifiedObjectInfo` 。
        self.object_list = []

        #: 本次罗列得到的公共前缀列表，类型为str列表。
        self.prefix_list = []
