# -*- coding: utf-8 -*-

import io
import re
import functools

import s3lite

REGION = 'us-west-1'
BUCKET_NAME = 'ming-s3-share'

ACCESS_KEY_ID = 'fake-access-key-id'
SECRET_ACCESS_KEY = 'fake-secret-access-key'

AMZ_DATE = '20180208T101520Z'

MTIME_STRING = 'Fri, 11 Dec 2015 13:01:41 GMT'
MTIME = 1449838901
REQUEST_ID = '566AB62EB06147681C283D73'
ETAG = '7AE1A589ED6B161CAD94ACDB98206DA6'

RAW_ETAG = '"' + ETAG + '"'

EMPTY_SHA256 = 'e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855'


def bucket():
    return s3lite.Bucket(s3lite.Auth(ACCESS_KEY_ID, SECRET_ACCESS_KEY), None, BUCKET_NAME, region=REGION)


def service():
    return s3lite.Service(s3lite.Auth(ACCESS_KEY_ID, SECRET_ACCESS_KEY), region=REGION)


class RequestInfo(object):
    def __init__(self):
        self.req = None
        self.resp = None


def head_fields_to_headers(head_fields):
    headers = s3lite.CaseInsensitiveDict()
    for header_kv in head_fields:
        kv = header_kv.split(':', 1)
        if len(kv) == 2:
            headers[kv[0].strip()] = kv[1].strip()
        else:
            headers[kv[0].strip()] = ''

    return headers


class MockResponse2(object):
    def __init__(self, response_text):
        if isinstance(response_text, bytes):
            fields = re.split(b'\n\n', response_text, 1)
        else:
            fields = re.split('\n\n', response_text, 1)
        head_fields = re.split('\n', s3lite.to_string(fields[0]))
        response_line_fields = head_fields[0].split(' ', 2)

        self.status = int(response_line_fields[1])
        self.headers = head_fields_to_headers(head_fields[1:])
        self.request_id = self.headers.get('x-amz-request-id', '')

        if len(fields) == 2:
            self.body = s3lite.to_bytes(fields[1])
        else:
            self.body = b''

        self.__io = io.BytesIO(self.body)

    def read(self, amt=None):
        return self.__io.read(amt)

    def __iter__(self):
        return self

    def __next__(self):
        content = self.read(8192)
        if not content:
            raise StopIteration
        return content


def do4response(req, timeout, req_info=None, payload=None):
    resp = MockResponse2(payload)

    if req_info:
        req_info.req = req
        req_info.resp = resp

    return resp


def mock_response(do_request, response_text):
    req_info = RequestInfo()

    do_request.auto_spec = True
    do_request.side_effect = functools.partial(do4response, req_info=req_info, payload=response_text)

    return req_info


def signed_headers_of(authorization):
    m = re.search(r'SignedHeaders=([^,]*),', authorization)
    return m.group(1).split(';')
