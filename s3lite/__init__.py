__version__ = '1.0.0'

from . import models, exceptions, defaults

from .api import Service, Bucket
from .auth import (Auth, AnonymousAuth, StsAuth, ProviderAuth, make_auth,
                   construct_canonical_request, make_canonical_request,
                   make_string_to_sign, make_signing_key, make_signature, make_authorization)
from .http import Session, Request, Response, Transaction, RequestView, parse_request, CaseInsensitiveDict
from .credentials import (Credentials, CredentialsProvider, StaticCredentialsProvider,
                          EnvironmentVariableCredentialsProvider, ConfigCredentialsProvider)
from .config import Config, config_from_string, config_from_file, get_defaults

from .xml_utils import xml_to_tree

from .utils import to_bytes, to_string, amz_date, iso8601_to_unixtime, http_to_unixtime

import logging

logger = logging.getLogger('s3lite')


def set_file_logger(file_path, name="s3lite", level=logging.INFO, format_string=None):
    global logger
    if not format_string:
        format_string = "%(asctime)s %(name)s [%(levelname)s] %(thread)d : %(message)s"
    logger = logging.getLogger(name)
    logger.setLevel(level)
    fh = logging.FileHandler(file_path)
    fh.setLevel(level)
    formatter = logging.Formatter(format_string)
    fh.setFormatter(formatter)
    logger.addHandler(fh)


def set_stream_logger(name='s3lite', level=logging.DEBUG, format_string=None):
    global logger
    if not format_string:
        format_string = "%(asctime)s %(name)s [%(levelname)s] %(thread)d : %(message)s"
    logger = logging.getLogger(name)
    logger.setLevel(level)
    fh = logging.StreamHandler()
    fh.setLevel(level)
    formatter = logging.Formatter(format_string)
    fh.setFormatter(formatter)
    logger.addHandler(fh)
