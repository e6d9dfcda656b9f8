# -*- coding: utf-8 -*-

"""
s3lite.http
~~~~~~~~~~~

这个模块包含HTTP Adapters。尽管SDK内部使用requests库进行HTTP通信，但是对使用者是透明的。
该模块中的 `Session` 、 `Request` 、`Response` 对requests的对应的类做了简单的封装。

`Transaction` 表示一个在后台线程中执行的请求，`RequestView` 和 `parse_request` 则用于
把原始的HTTP/1.1请求报文拆分成签名所需的各个部分。
"""

import logging
import platform
import re
import threading
from urllib.parse import urlparse

import requests
from requests.structures import CaseInsensitiveDict

from . import __version__
from .exceptions import RequestError
from .headers import AMZ_REQUEST_ID
from .utils import to_bytes, uri_encode


logger = logging.getLogger(__name__)

_USER_AGENT = 's3lite-python/{0}({1}/{2}/{3};{4})'.format(
    __version__, platform.system(), platform.release(), platform.machine(), platform.python_version())


class Session(object):
    """属于同一个Session的请求共享一组连接池，如有可能也会重用HTTP连接。"""
    def __init__(self):
        self.session = requests.Session()

    def do_request(self, req, timeout):
        try:
            return Response(self.session.request(req.method, req.full_url,
                                                 data=req.data,
                                                 headers=req.headers,
                                                 stream=True,
                                                 timeout=timeout))
        except requests.RequestException as e:
            raise RequestError(e)

    def begin_request(self, req, timeout):
        """在后台线程中发送请求，立即返回 :class:`Transaction` 。

        :param req: 已经签过名的请求
        :type req: s3lite.http.Request

        :param float timeout: 连接超时时间，以秒为单位。
        """
        transaction = Transaction()

        def run():
            try:
                resp = self.do_request(req, timeout)
            except RequestError as e:
                logger.error("Transaction failed: {0}".format(e))
                transaction._complete(_transaction_state_of(e.exception), error=e)
            except Exception as e:
                logger.error("Transaction broken: {0}".format(e))
                transaction._complete(Transaction.BROKEN, error=e)
            else:
                transaction._complete(Transaction.COMPLETED, response=resp)

        worker = threading.Thread(target=run)
        worker.daemon = True
        worker.start()

        return transaction


class Transaction(object):
    """一个正在进行或已经结束的HTTP请求。

    `state` 为 `IN_PROGRESS` 时请求还在进行；请求结束后， `state` 变为其余状态之一，
    成功时 `response` 是 :class:`Response` ，失败时 `error` 是引发失败的异常。
    """
    IN_PROGRESS = 'InProgress'
    COMPLETED = 'Completed'
    UNABLE_TO_CONNECT = 'UnableToConnect'
    BROKEN = 'Broken'
    TIMEOUT = 'Timeout'

    def __init__(self):
        self.state = Transaction.IN_PROGRESS
        self.response = None
        self.error = None

        self.__completed = threading.Event()
        self.__lock = threading.Lock()
        self.__completion_delegate = None

    def await_completion(self, timeout=None):
        """等待请求结束。

        :param float timeout: 最长等待时间，以秒为单位；None表示一直等待。
        :return: 请求已经结束返回True，超时返回False。
        """
        return self.__completed.wait(timeout)

    def set_completion_delegate(self, delegate):
        """设置请求结束时的回调，回调只会被调用一次。

        请求结束时回调在工作线程中被调用；如果设置时请求已经结束，回调在当前线程中被立即调用。
        """
        with self.__lock:
            if not self.__completed.is_set():
                self.__completion_delegate = delegate
                return

        delegate()

    def _complete(self, state, response=None, error=None):
        with self.__lock:
            self.state = state
            self.response = response
            self.error = error
            self.__completed.set()
            delegate = self.__completion_delegate
            self.__completion_delegate = None

        if delegate is not None:
            delegate()


def _transaction_state_of(e):
    if isinstance(e, requests.Timeout):
        return Transaction.TIMEOUT
    if isinstance(e, requests.ConnectionError):
        return Transaction.UNABLE_TO_CONNECT
    return Transaction.BROKEN


class Request(object):
    def __init__(self, method, url,
                 data=None,
                 params=None,
                 headers=None,
                 app_name='',
                 region=None,
                 service=None):
        self.method = method
        self.url = url
        self.region = region
        self.service = service
        self.data = to_bytes(data)
        self.params = params or {}

        if not isinstance(headers, CaseInsensitiveDict):
            self.headers = CaseInsensitiveDict(headers)
        else:
            self.headers = headers

        # tell requests not to add 'Accept-Encoding: gzip, deflate' by default
        if 'Accept-Encoding' not in self.headers:
            self.headers['Accept-Encoding'] = None

        if 'User-Agent' not in self.headers:
            if app_name:
                self.headers['User-Agent'] = _USER_AGENT + '/' + app_name
            else:
                self.headers['User-Agent'] = _USER_AGENT

    @property
    def host(self):
        return urlparse(self.url).hostname

    @property
    def port(self):
        p = urlparse(self.url)
        if p.port is not None:
            return p.port
        return 443 if p.scheme == 'https' else 80

    @property
    def netloc(self):
        return urlparse(self.url).netloc

    @property
    def path(self):
        return urlparse(self.url).path or '/'

    @property
    def query_string(self):
        """查询参数经过严格的RFC 3986编码后的字符串，签名和发送使用同一个字符串。"""
        return '&'.join(_param_to_quoted_query(k, v) for k, v in self.params.items())

    @property
    def full_url(self):
        query = self.query_string
        if query:
            return self.url + '?' + query
        return self.url


def _param_to_quoted_query(k, v):
    if v:
        return uri_encode(k) + '=' + uri_encode(v)
    else:
        return uri_encode(k)


_CHUNK_SIZE = 8 * 1024


class Response(object):
    def __init__(self, response):
        self.response = response
        self.status = response.status_code
        self.headers = response.headers
        self.request_id = response.headers.get(AMZ_REQUEST_ID, '')

    def read(self, amt=None):
        if amt is None:
            content = b''
            for chunk in self.response.iter_content(_CHUNK_SIZE):
                content += chunk
            return content
        else:
            try:
                return next(self.response.iter_content(amt))
            except StopIteration:
                return b''

    def __iter__(self):
        return self.response.iter_content(_CHUNK_SIZE)


class RequestView(object):
    """签名所需的请求各部分。

    :param str method: HTTP方法
    :param str path: 请求路径，可以包含百分号编码
    :param str query: 查询字符串，不含 `?`
    :param headers: 有序的 (name, value) 列表；也可以是dict，此时value可以是str或str的列表
    :param bytes body: 请求体
    """
    def __init__(self, method, path, query='', headers=None, body=b''):
        self.method = method
        self.path = path
        self.query = query or ''
        self.headers = _header_pairs(headers)
        self.body = to_bytes(body) or b''


def _header_pairs(headers):
    if not headers:
        return []

    if not hasattr(headers, 'items'):
        return list(headers)

    pairs = []
    for name, value in headers.items():
        if isinstance(value, (list, tuple)):
            pairs.extend((name, v) for v in value)
        else:
            pairs.append((name, value))
    return pairs


_TOKEN_RE = re.compile(r"^[!#$%&'*+.^_`|~0-9A-Za-z-]+$")
_VERSION_RE = re.compile(r'^HTTP/\d\.\d$')
_LINE_RE = re.compile(r'\r?\n')


def parse_request(raw_request):
    """把原始的HTTP/1.1请求报文解析为 :class:`RequestView` 。

    请求行中的路径可以包含空格（取第一个和最后一个空格之间的部分）；以 `//` 开头的路径仍然是路径，不会被当作authority。
    以空白开头的行是上一个header的续行，作为同名header的又一个值。

    :return: 无法解析时返回None。
    """
    raw_request = to_bytes(raw_request)

    head, body = _split_head_and_body(raw_request)
    try:
        head = head.decode('utf-8')
    except UnicodeDecodeError:
        return None

    lines = _LINE_RE.split(head)

    request_line = lines[0]
    first_space = request_line.find(' ')
    last_space = request_line.rfind(' ')
    if first_space <= 0 or last_space <= first_space + 1:
        return None

    method = request_line[:first_space]
    target = request_line[first_space + 1:last_space]
    version = request_line[last_space + 1:]
    if not _TOKEN_RE.match(method) or not _VERSION_RE.match(version):
        return None

    if target.startswith('http://') or target.startswith('https://'):
        p = urlparse(target)
        path, query = p.path or '/', p.query
    elif target.startswith('/'):
        path, _, query = target.partition('?')
    else:
        return None

    headers = []
    for line in lines[1:]:
        if not line:
            break

        if line[0] in ' \t':
            if not headers:
                return None
            headers.append((headers[-1][0], line.strip()))
            continue

        name, sep, value = line.partition(':')
        if not sep or not _TOKEN_RE.match(name):
            return None
        headers.append((name, value.strip()))

    content_length = [v for k, v in headers if k.lower() == 'content-length']
    if content_length and content_length[0].isdigit():
        body = body[:int(content_length[0])]

    return RequestView(method, path, query, headers, body)


def _split_head_and_body(raw_request):
    candidates = [(raw_request.find(d), d) for d in (b'\r\n\r\n', b'\n\n')]
    candidates = [(i, d) for i, d in candidates if i >= 0]
    if not candidates:
        return raw_request, b''

    index, delimiter = min(candidates)
    return raw_request[:index], raw_request[index + len(delimiter):]
