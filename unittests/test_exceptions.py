# -*- coding: utf-8 -*-

import unittest

import requests

import s3lite
from s3lite.exceptions import *

from unittests.common import *


def make_error_response(status, code, message='error message'):
    return MockResponse2('''HTTP/1.1 {0} Error
Content-Type: application/xml
x-amz-request-id: {1}

<?xml version="1.0" encoding="UTF-8"?>
<Error>
  <Code>{2}</Code>
  <Message>{3}</Message>
  <Resource>/ming-s3-share/sjbhlsgsbecvlpbf</Resource>
  <RequestId>{1}</RequestId>
</Error>'''.format(status, REQUEST_ID, code, message))


class TestExceptions(unittest.TestCase):
    def test_make_exception(self):
        cases = [
            (404, 'NoSuchKey', NoSuchKey),
            (404, 'NoSuchBucket', NoSuchBucket),
            (403, 'AccessDenied', AccessDenied),
            (403, 'SignatureDoesNotMatch', SignatureDoesNotMatch),
            (403, 'InvalidAccessKeyId', InvalidAccessKeyId),
            (403, 'RequestTimeTooSkewed', RequestTimeTooSkewed),
            (500, 'InternalError', ServerError),
        ]

        for status, code, klass in cases:
            e = make_exception(make_error_response(status, code))
            self.assertEqual(klass, type(e))
            self.assertEqual(status, e.status)
            self.assertEqual(code, e.code)
            self.assertEqual('error message', e.message)
            self.assertEqual(REQUEST_ID, e.request_id)
            self.assertEqual(REQUEST_ID, e.details['RequestId'])

    def test_empty_body(self):
        e = make_exception(MockResponse2('HTTP/1.1 404 Not Found\nx-amz-request-id: {0}\n\n'.format(REQUEST_ID)))
        self.assertTrue(isinstance(e, NotFound))
        self.assertEqual('', e.code)
        self.assertEqual(REQUEST_ID, e.request_id)

        e = make_exception(MockResponse2('HTTP/1.1 304 Not Modified\n\n'))
        self.assertTrue(isinstance(e, NotModified))

    def test_non_xml_body(self):
        e = make_exception(MockResponse2('HTTP/1.1 502 Bad Gateway\n\n<html>bad gateway</html>'))
        self.assertEqual(ServerError, type(e))
        self.assertEqual({}, e.details)

    def test_bad_character_reference_in_body(self):
        e = make_exception(make_error_response(500, 'InternalError', 'bad &#x110000; reference'))
        self.assertEqual(ServerError, type(e))
        self.assertEqual('InternalError', e.code)
        self.assertEqual('bad &#x110000; reference', e.message)

    def test_client_error(self):
        e = ClientError('bad input')
        self.assertEqual(-1, e.status)
        self.assertEqual('ClientError: bad input', str(e))
        self.assertTrue(isinstance(e, S3Error))

    def test_request_error(self):
        cause = requests.ConnectionError('refused')
        e = RequestError(cause)
        self.assertEqual(-2, e.status)
        self.assertTrue(e.exception is cause)
        self.assertTrue(str(e).startswith('RequestError: '))


if __name__ == '__main__':
    unittest.main()
