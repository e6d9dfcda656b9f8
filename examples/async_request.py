# -*- coding: utf-8 -*-

import os
import threading

import s3lite


# 以下代码展示了如何在后台线程中发送一个签过名的请求，并通过Transaction等待结果。

access_key_id = os.getenv('S3_TEST_ACCESS_KEY_ID', '<yourAccessKeyId>')
secret_access_key = os.getenv('S3_TEST_SECRET_ACCESS_KEY', '<yourSecretAccessKey>')
region = os.getenv('S3_TEST_REGION', '<yourRegion>')


for param in (access_key_id, secret_access_key, region):
    assert '<' not in param, 'Please set parameters: ' + param


req = s3lite.Request('GET', 'https://s3.{0}.amazonaws.com/'.format(region), region=region, service='s3')
s3lite.Auth(access_key_id, secret_access_key)._sign_request(req, '', '')

done = threading.Event()

transaction = s3lite.Session().begin_request(req, 60)
transaction.set_completion_delegate(done.set)

# 可以在这里做别的事情
done.wait(60)

if transaction.state == s3lite.Transaction.COMPLETED:
    print(transaction.response.status)
    print(s3lite.xml_to_tree(transaction.response.read(), ['Bucket']))
else:
    print('request failed: {0}, {1}'.format(transaction.state, transaction.error))
