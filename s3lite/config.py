# -*- coding: utf-8 -*-

"""
s3lite.config
~~~~~~~~~~~~~

读取AWS共享凭证文件（~/.aws/credentials）和配置文件（~/.aws/config）。

文件格式类似INI：
    - `[name]` 开始一个新的section；
    - `key = value` 设置一个值，key和value两边的空白被去掉；
    - value为空时，后面缩进更深的行是它的子项，结果是一个嵌套的dict；
    - 行分隔符可以是CR、LF的任意组合，空行被忽略。
"""

import os
import re
import logging

from . import defaults

logger = logging.getLogger(__name__)

_LINE_SEPARATOR_RE = re.compile(r'[\r\n]+')


class Config(object):
    """访问AWS所需的默认配置。

    :param str access_key_id: AccessKeyId
    :param str secret_access_key: SecretAccessKey
    :param str session_token: 临时凭证的SessionToken，可以为空
    :param str region: 区域，如 `us-west-1` ，可以为空
    """
    def __init__(self, access_key_id='', secret_access_key='', session_token='', region=''):
        self.access_key_id = access_key_id
        self.secret_access_key = secret_access_key
        self.session_token = session_token
        self.region = region

    def __repr__(self):
        return "Config(access_key_id={0!r}, secret_access_key='******', session_token={1}, region={2!r})".format(
            self.access_key_id, "'******'" if self.session_token else "''", self.region)


def config_from_string(config_string):
    """把配置文件的内容解析为dict，每个section对应一个dict。

    不在任何section中的行，以及没有 `=` 的行被忽略。
    """
    config = {}
    stack = []
    last_value = None

    for line in _LINE_SEPARATOR_RE.split(config_string):
        if not line:
            continue

        if line.startswith('['):
            if line.endswith(']'):
                section = {}
                config[line[1:-1].strip()] = section
                stack = [(0, section)]
                last_value = None
            continue

        stripped = line.lstrip(' ')
        if not stripped:
            continue
        indentation = len(line) - len(stripped)

        while stack and indentation < stack[-1][0]:
            stack.pop()
        if not stack:
            continue

        if indentation > stack[-1][0]:
            if not isinstance(last_value, dict):
                continue
            stack.append((indentation, last_value))
            last_value = None

        key, sep, value = line.partition('=')
        if not sep:
            continue

        key, value = key.strip(), value.strip()
        if value:
            last_value = value
        else:
            last_value = {}
        stack[-1][1][key] = last_value

    return config


def config_from_file(config_file_path):
    """读取并解析配置文件。文件不存在或无法读取时返回None。"""
    try:
        with open(config_file_path, 'rb') as f:
            content = f.read()
    except (IOError, OSError) as e:
        logger.debug("Read config file failed: path: {0}, error: {1}".format(config_file_path, e))
        return None

    return config_from_string(content.decode('utf-8', 'replace'))


def _getenv(name):
    return os.environ.get(name, '')


def _section_get(section, key):
    value = section.get(key, '')
    if isinstance(value, str):
        return value
    return ''


def get_defaults(options=None, environ=None):
    """依次从环境变量、共享凭证文件、配置文件中获取默认配置；前面的来源优先。

    用到的环境变量： `AWS_ACCESS_KEY_ID` 、 `AWS_SECRET_ACCESS_KEY` 、 `AWS_SESSION_TOKEN` 、
    `AWS_DEFAULT_REGION` 、 `AWS_PROFILE` 、 `AWS_SHARED_CREDENTIALS_FILE` 、 `AWS_CONFIG_FILE` 。

    :param dict options: 可以包含 `home` （用户主目录，缺省为当前用户的主目录）和 `profile` （配置名，缺省为 `default` ）
    :param environ: 读取环境变量的函数，参数为变量名，变量不存在时返回空串；None表示读取进程的环境变量

    :return: :class:`Config`
    """
    options = options or {}
    environ = defaults.get(environ, _getenv)

    home = options.get('home') or os.path.expanduser('~')
    profile = options.get('profile') or environ('AWS_PROFILE')

    if profile:
        config_section = 'profile ' + profile
    else:
        profile = 'default'
        config_section = 'default'

    result = Config(access_key_id=environ('AWS_ACCESS_KEY_ID'),
                    secret_access_key=environ('AWS_SECRET_ACCESS_KEY'),
                    session_token=environ('AWS_SESSION_TOKEN'),
                    region=environ('AWS_DEFAULT_REGION'))

    credentials_file = environ('AWS_SHARED_CREDENTIALS_FILE') or os.path.join(home, '.aws', 'credentials')
    credentials = (config_from_file(credentials_file) or {}).get(profile, {})
    _fill(result, credentials, include_region=False)

    config_file = environ('AWS_CONFIG_FILE') or os.path.join(home, '.aws', 'config')
    config = (config_from_file(config_file) or {}).get(config_section, {})
    _fill(result, config, include_region=True)

    logger.debug("Get defaults: profile: {0}, access_key_id: {1}, region: {2}".format(
        profile, result.access_key_id, result.region))
    return result


def _fill(result, section, include_region):
    if not result.access_key_id:
        result.access_key_id = _section_get(section, 'aws_access_key_id')
    if not result.secret_access_key:
        result.secret_access_key = _section_get(section, 'aws_secret_access_key')
    if not result.session_token:
        result.session_token = _section_get(section, 'aws_session_token')
    if include_region and not result.region:
        result.region = _section_get(section, 'region')
