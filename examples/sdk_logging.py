# -*- coding: utf-8 -*-

import os
import logging

import s3lite


# 打开DEBUG级别的日志后，可以看到每个请求的规范请求（canonical request）和待签名串，便于排查签名错误。
# 日志中不会出现SecretAccessKey。

access_key_id = os.getenv('S3_TEST_ACCESS_KEY_ID', '<yourAccessKeyId>')
secret_access_key = os.getenv('S3_TEST_SECRET_ACCESS_KEY', '<yourSecretAccessKey>')
bucket_name = os.getenv('S3_TEST_BUCKET', '<yourBucketName>')
region = os.getenv('S3_TEST_REGION', '<yourRegion>')


for param in (access_key_id, secret_access_key, bucket_name, region):
    assert '<' not in param, 'Please set parameters: ' + param


# 输出到标准错误
s3lite.set_stream_logger('s3lite', logging.DEBUG)

# 也可以同时输出到文件
s3lite.set_file_logger('s3lite.log', 's3lite', logging.INFO)

bucket = s3lite.Bucket(s3lite.Auth(access_key_id, secret_access_key), None, bucket_name, region=region)

for obj in bucket.list_objects(max_keys=10).object_list:
    print(obj.key)
