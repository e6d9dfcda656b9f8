# -*- coding: utf-8 -*-

"""
s3lite.defaults
~~~~~~~~~~~~~~~

Global Default variables.

"""


def get(value, default_value):
    if value is None:
        return default_value
    else:
        return value


#: connection timeout
connect_timeout = 60

#: service name used in the credential scope
default_service = 's3'

#: region used when neither the caller nor the configuration supplies one
default_region = 'us-east-1'
