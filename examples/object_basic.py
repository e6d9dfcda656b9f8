# -*- coding: utf-8 -*-

import os
import shutil

import s3lite


# 以下代码展示了基本的文件上传、下载、罗列用法。


# 首先初始化AccessKeyId、SecretAccessKey、Bucket和区域等信息。
# 通过环境变量获取，或者把诸如“<你的AccessKeyId>”替换成真实的AccessKeyId等。
#
# Endpoint可以不填，此时根据区域生成，如us-west-1区域对应
#   https://s3.us-west-1.amazonaws.com
access_key_id = os.getenv('S3_TEST_ACCESS_KEY_ID', '<你的AccessKeyId>')
secret_access_key = os.getenv('S3_TEST_SECRET_ACCESS_KEY', '<你的SecretAccessKey>')
bucket_name = os.getenv('S3_TEST_BUCKET', '<你的Bucket>')
region = os.getenv('S3_TEST_REGION', '<你的区域>')
endpoint = os.getenv('S3_TEST_ENDPOINT')


# 确认上面的参数都填写正确了
for param in (access_key_id, secret_access_key, bucket_name, region):
    assert '<' not in param, '请设置参数：' + param


auth = s3lite.Auth(access_key_id, secret_access_key)

# 罗列所有的Bucket
for b in s3lite.Service(auth, endpoint, region=region).list_buckets().buckets:
    print('bucket: ' + b.name)

# 创建Bucket对象，所有Object相关的接口都可以通过Bucket对象来进行
bucket = s3lite.Bucket(auth, endpoint, bucket_name, region=region)


# 上传一段字符串。Object名是motto.txt，内容是一段名言。
result = bucket.put_object('motto.txt', 'Never give up.')
print('etag: ' + result.etag)


# 把刚刚上传的Object下载到本地文件 “座右铭.txt” 中
# 因为get_object()方法返回的是一个file-like object，所以我们可以直接用shutil.copyfileobj()做拷贝
with open('本地座右铭.txt', 'wb') as f:
    shutil.copyfileobj(bucket.get_object('motto.txt'), f)


# 罗列Bucket里以motto开头的文件，每次最多返回10个
marker = ''
while True:
    result = bucket.list_objects(prefix='motto', marker=marker, max_keys=10)
    for obj in result.object_list:
        print(obj.key + ' ' + str(obj.size))

    if not result.is_truncated:
        break
    marker = result.next_marker


# 下载一个不存在的文件会抛出NoSuchKey异常
try:
    bucket.get_object('no-such-key')
except s3lite.exceptions.NoSuchKey as e:
    print('status={0}, request_id={1}'.format(e.status, e.request_id))


os.remove('本地座右铭.txt')
