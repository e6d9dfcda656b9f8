# -*- coding: utf-8 -*-
"""
s3lite.headers
~~~~~~~~~~~~~~
这个模块包含http请求里header的key定义
"""
AMZ_DATE = "x-amz-date"
AMZ_CONTENT_SHA256 = "x-amz-content-sha256"
AMZ_SECURITY_TOKEN = "x-amz-security-token"
AMZ_REQUEST_ID = "x-amz-request-id"

HOST = "Host"
AUTHORIZATION = "Authorization"

UNSIGNED_PAYLOAD = "UNSIGNED-PAYLOAD"
