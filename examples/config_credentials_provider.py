# -*- coding: utf-8 -*-

import s3lite


# 和AWS CLI一样，依次从环境变量（AWS_ACCESS_KEY_ID、AWS_SECRET_ACCESS_KEY、AWS_SESSION_TOKEN、AWS_DEFAULT_REGION）、
# 共享凭证文件（~/.aws/credentials）以及配置文件（~/.aws/config）中读取凭证和区域。
# 使用AWS_PROFILE环境变量或者options中的profile选择配置名。

defaults = s3lite.get_defaults({'profile': 'default'})

auth = s3lite.ProviderAuth(s3lite.ConfigCredentialsProvider({'profile': 'default'}))
service = s3lite.Service(auth, region=defaults.region or None)

for b in service.list_buckets().buckets:
    print(b.name)


# 也可以只从环境变量读取凭证
auth = s3lite.ProviderAuth(s3lite.EnvironmentVariableCredentialsProvider())
bucket = s3lite.Bucket(auth, None, '<yourBucketName>', region=defaults.region or None)

result = bucket.put_object("sample.txt", "hello world")

print("Returns status code: ", result.status)
