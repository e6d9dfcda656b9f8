# -*- coding: utf-8 -*-

import s3lite


# 下面的代码展示了如何单独使用V4签名的各个步骤，对一个原始的HTTP请求签名。
# 以AWS公开的示例凭证和IAM ListUsers请求为例，不需要访问网络。

access_key_id = 'AKIDEXAMPLE'
secret_access_key = 'wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY'

raw_request = ('GET https://iam.amazonaws.com/?Action=ListUsers&Version=2010-05-08 HTTP/1.1\r\n'
               'Host: iam.amazonaws.com\r\n'
               'Content-Type: application/x-www-form-urlencoded; charset=utf-8\r\n'
               'X-Amz-Date: 20150830T123600Z\r\n'
               '\r\n')

# 第一步：构造规范请求。请求无法解析时返回空串
canonical_request = s3lite.construct_canonical_request(raw_request)
assert canonical_request, 'malformed request'
print(canonical_request)

# 第二步：构造待签名串，请求时间取自X-Amz-Date头部
string_to_sign = s3lite.make_string_to_sign('us-east-1', 'iam', canonical_request)
print(string_to_sign)

# 第三步：计算签名，生成Authorization头部的值
print(s3lite.make_signature(string_to_sign, secret_access_key))
print(s3lite.make_authorization(string_to_sign, canonical_request, access_key_id, secret_access_key))
