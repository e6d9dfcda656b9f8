# -*- coding: utf-8 -*-

import os
import logging
from .exceptions import ClientError
from .config import get_defaults

logger = logging.getLogger(__name__)


class Credentials(object):
    def __init__(self, access_key_id="", access_key_secret="", security_token=""):
        self.access_key_id = access_key_id
        self.access_key_secret = access_key_secret
        self.security_token = security_token

    def get_access_key_id(self):
        return self.access_key_id

    def get_access_key_secret(self):
        return self.access_key_secret

    def get_security_token(self):
        return self.security_token


class CredentialsProvider(object):
    def get_credentials(self):
        return


class StaticCredentialsProvider(CredentialsProvider):
    def __init__(self, access_key_id="", access_key_secret="", security_token=""):
        self.credentials = Credentials(access_key_id, access_key_secret, security_token)

    def get_credentials(self):
        return self.credentials


class EnvironmentVariableCredentialsProvider(CredentialsProvider):
    """从环境变量 `AWS_ACCESS_KEY_ID` 、 `AWS_SECRET_ACCESS_KEY` 、 `AWS_SESSION_TOKEN` 读取凭证。"""
    def __init__(self):
        self.access_key_id = os.getenv('AWS_ACCESS_KEY_ID', '').strip()
        self.access_key_secret = os.getenv('AWS_SECRET_ACCESS_KEY', '').strip()
        self.security_token = os.getenv('AWS_SESSION_TOKEN', '').strip()

        if not self.access_key_id:
            raise ClientError("Access key id should not be null or empty.")
        if not self.access_key_secret:
            raise ClientError("Secret access key should not be null or empty.")

        self.credentials = Credentials(self.access_key_id, self.access_key_secret, self.security_token)

    def get_credentials(self):
        return self.credentials


class ConfigCredentialsProvider(CredentialsProvider):
    """按照环境变量、共享凭证文件（~/.aws/credentials）、配置文件（~/.aws/config）的顺序读取凭证。

    :param dict options: 可以包含 `home` （用户主目录）和 `profile` （配置名）
    :param environ: 读取环境变量的函数，参数为变量名，变量不存在时返回空串；None表示读取进程的环境变量
    """
    def __init__(self, options=None, environ=None):
        config = get_defaults(options, environ)
        logger.debug("Init ConfigCredentialsProvider: access_key_id: {0}, secret_access_key: ******".format(
            config.access_key_id))

        if not config.access_key_id:
            raise ClientError("Access key id should not be null or empty.")
        if not config.secret_access_key:
            raise ClientError("Secret access key should not be null or empty.")

        self.credentials = Credentials(config.access_key_id, config.secret_access_key, config.session_token)

    def get_credentials(self):
        return self.credentials
