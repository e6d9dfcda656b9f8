# -*- coding: utf-8 -*-

import os
import shutil
import tempfile
import unittest

from mock import patch

import s3lite
from s3lite.credentials import *
from s3lite.exceptions import ClientError


class TestCredentialsProvider(unittest.TestCase):
    def test_static_credentials_provider(self):
        provider = StaticCredentialsProvider('ak', 'sk', 'token')
        credentials = provider.get_credentials()
        self.assertEqual('ak', credentials.get_access_key_id())
        self.assertEqual('sk', credentials.get_access_key_secret())
        self.assertEqual('token', credentials.get_security_token())

    def test_environment_variable_credentials_provider(self):
        with patch.dict(os.environ, {'AWS_ACCESS_KEY_ID': ' env-id ',
                                     'AWS_SECRET_ACCESS_KEY': 'env-secret',
                                     'AWS_SESSION_TOKEN': 'env-token'}):
            credentials = EnvironmentVariableCredentialsProvider().get_credentials()

        self.assertEqual('env-id', credentials.get_access_key_id())
        self.assertEqual('env-secret', credentials.get_access_key_secret())
        self.assertEqual('env-token', credentials.get_security_token())

    def test_environment_variables_are_independent(self):
        with patch.dict(os.environ, {'AWS_ACCESS_KEY_ID': 'env-id',
                                     'AWS_SECRET_ACCESS_KEY': 'env-secret'}):
            os.environ.pop('AWS_SESSION_TOKEN', None)
            credentials = EnvironmentVariableCredentialsProvider().get_credentials()

        self.assertNotEqual(credentials.get_access_key_id(), credentials.get_access_key_secret())
        self.assertEqual('', credentials.get_security_token())

    def test_environment_variable_missing(self):
        with patch.dict(os.environ, {'AWS_ACCESS_KEY_ID': 'env-id'}):
            os.environ.pop('AWS_SECRET_ACCESS_KEY', None)
            self.assertRaises(ClientError, EnvironmentVariableCredentialsProvider)

        with patch.dict(os.environ, {'AWS_SECRET_ACCESS_KEY': 'env-secret'}):
            os.environ.pop('AWS_ACCESS_KEY_ID', None)
            self.assertRaises(ClientError, EnvironmentVariableCredentialsProvider)


class TestConfigCredentialsProvider(unittest.TestCase):
    def setUp(self):
        self.home = tempfile.mkdtemp()
        os.mkdir(os.path.join(self.home, '.aws'))
        with open(os.path.join(self.home, '.aws', 'credentials'), 'w') as f:
            f.write('[default]\n'
                    'aws_access_key_id = file-id\n'
                    'aws_secret_access_key = file-secret\n')

    def tearDown(self):
        shutil.rmtree(self.home)

    def test_from_file(self):
        provider = ConfigCredentialsProvider({'home': self.home}, lambda name: '')
        credentials = provider.get_credentials()
        self.assertEqual('file-id', credentials.get_access_key_id())
        self.assertEqual('file-secret', credentials.get_access_key_secret())
        self.assertEqual('', credentials.get_security_token())

    def test_environment_first(self):
        environ = {'AWS_ACCESS_KEY_ID': 'env-id', 'AWS_SECRET_ACCESS_KEY': 'env-secret'}
        provider = ConfigCredentialsProvider({'home': self.home}, lambda name: environ.get(name, ''))
        self.assertEqual('env-id', provider.get_credentials().get_access_key_id())

    def test_missing_credentials(self):
        self.assertRaises(ClientError, ConfigCredentialsProvider, {'home': self.home, 'profile': 'nobody'},
                          lambda name: '')

    def test_provider_auth(self):
        auth = s3lite.ProviderAuth(ConfigCredentialsProvider({'home': self.home}, lambda name: ''))
        req = s3lite.Request('GET', 'https://s3.us-west-1.amazonaws.com/', region='us-west-1', service='s3')
        auth._sign_request(req, '', '')

        self.assertTrue(req.headers['Authorization'].startswith('AWS4-HMAC-SHA256 Credential=file-id/'))


if __name__ == '__main__':
    unittest.main()
