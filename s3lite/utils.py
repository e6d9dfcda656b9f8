# -*- coding: utf-8 -*-

"""
s3lite.utils
------------

工具函数模块。
"""


import logging
import mimetypes
import os
import hashlib
import calendar
import datetime
import re

logger = logging.getLogger(__name__)


def to_bytes(data):
    """Convert to UTF-8 encoding if the input is unicode; otherwise return the original data."""
    if isinstance(data, str):
        return data.encode(encoding='utf-8')
    else:
        return data


def to_string(data):
    """Convert the input to unicode if it's utf-8 bytes."""
    if isinstance(data, bytes):
        return data.decode('utf-8')
    else:
        return data


_UNRESERVED = frozenset(b'ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_.~')


def uri_encode(raw_text, ignore_slashes=False):
    """按RFC 3986编码：字母、数字以及 `-._~` 保持不变，其余字节编码为大写的 `%XX` 。

    :param raw_text: str或bytes，str先转换为UTF-8
    :param bool ignore_slashes: 为True时 `/` 保持不变
    """
    res = []
    for b in bytearray(to_bytes(raw_text)):
        if b in _UNRESERVED or (ignore_slashes and b == 0x2F):
            res.append(chr(b))
        else:
            res.append("%{0:02X}".format(b))

    return ''.join(res)


def sha256_hex(data):
    """返回data的SHA-256摘要的小写十六进制表示。None当作空内容处理。"""
    if data is None:
        data = b''
    return hashlib.sha256(to_bytes(data)).hexdigest()


def is_sized_body(data):
    """判断请求体是否可以在签名时直接计算摘要（即None、str或bytes）。"""
    return data is None or isinstance(data, (str, bytes, bytearray))


_EXTRA_TYPES_MAP = {
    ".js": "application/javascript",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".apk": "application/vnd.android.package-archive"
}


def content_type_by_name(name):
    """根据文件名，返回Content-Type。"""
    ext = os.path.splitext(name)[1].lower()
    if ext in _EXTRA_TYPES_MAP:
        return _EXTRA_TYPES_MAP[ext]

    return mimetypes.guess_type(name)[0]


def set_content_type(headers, name):
    """根据文件名在headers里设置Content-Type。如果headers中已经存在Content-Type，则直接返回。"""
    headers = headers or {}

    if 'Content-Type' in headers:
        return headers

    content_type = content_type_by_name(name)
    if content_type:
        headers['Content-Type'] = content_type

    return headers


_AMZ_DATE_FORMAT = "%Y%m%dT%H%M%SZ"

# A regex to match HTTP Last-Modified header, whose format is 'Sat, 05 Dec 2015 11:10:29 GMT'.
# Its strftime/strptime format is '%a, %d %b %Y %H:%M:%S GMT'

_HTTP_GMT_RE = re.compile(
    r'(?:Mon|Tue|Wed|Thu|Fri|Sat|Sun), (?P<day>0[1-9]|([1-2]\d)|(3[0-1])) (?P<month>Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec) (?P<year>\d+) (?P<hour>([0-1]\d)|(2[0-3])):(?P<minute>[0-5]\d):(?P<second>[0-5]\d) GMT$'
)

# S3 returns milliseconds, e.g. 2018-02-01T08:30:12.123Z; the fraction is optional.
_ISO8601_RE = re.compile(
    r'(?P<year>\d+)-(?P<month>01|02|03|04|05|06|07|08|09|10|11|12)-(?P<day>0[1-9]|([1-2]\d)|(3[0-1]))T(?P<hour>([0-1]\d)|(2[0-3])):(?P<minute>[0-5]\d):(?P<second>[0-5]\d)(\.(?P<millis>\d{1,3}))?Z$'
)

_MONTH_MAPPING = {
    'Jan': 1,
    'Feb': 2,
    'Mar': 3,
    'Apr': 4,
    'May': 5,
    'Jun': 6,
    'Jul': 7,
    'Aug': 8,
    'Sep': 9,
    'Oct': 10,
    'Nov': 11,
    'Dec': 12
}


def amz_date(now=None):
    """返回签名所用的请求时间，形如 `20150830T123600Z` 。

    :param now: 一个带时区的datetime；为None时取当前UTC时间。
    """
    if now is None:
        now = datetime.datetime.now(datetime.timezone.utc)
    return now.strftime(_AMZ_DATE_FORMAT)


def http_to_unixtime(time_string):
    """把HTTP Date格式的字符串转换为UNIX时间（自1970年1月1日UTC零点的秒数）。

    HTTP Date形如 `Sat, 05 Dec 2015 11:10:29 GMT` 。
    """
    m = _HTTP_GMT_RE.match(time_string)

    if not m:
        raise ValueError(time_string + " is not in valid HTTP date format")

    day = int(m.group('day'))
    month = _MONTH_MAPPING[m.group('month')]
    year = int(m.group('year'))
    hour = int(m.group('hour'))
    minute = int(m.group('minute'))
    second = int(m.group('second'))

    tm = datetime.datetime(year, month, day, hour, minute, second).timetuple()

    return calendar.timegm(tm)


def iso8601_to_unixtime(time_string):
    """把ISO8601时间字符串（形如，2018-02-01T08:30:12.123Z）转换为UNIX时间，保留毫秒，类型为float。"""

    m = _ISO8601_RE.match(time_string)

    if not m:
        raise ValueError(time_string + " is not in valid ISO8601 format")

    day = int(m.group('day'))
    month = int(m.group('month'))
    year = int(m.group('year'))
    hour = int(m.group('hour'))
    minute = int(m.group('minute'))
    second = int(m.group('second'))
    millis = int((m.group('millis') or '0').ljust(3, '0'))

    tm = datetime.datetime(year, month, day, hour, minute, second).timetuple()

    return (calendar.timegm(tm) * 1000 + millis) / 1000.0
