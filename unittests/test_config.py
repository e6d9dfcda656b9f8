# -*- coding: utf-8 -*-

import os
import shutil
import tempfile
import unittest

from s3lite.config import *


CREDENTIALS_FILE = '''[default]
aws_access_key_id = credentials-default-id
aws_secret_access_key = credentials-default-secret

[dev]
aws_access_key_id = credentials-dev-id
aws_secret_access_key = credentials-dev-secret
aws_session_token = credentials-dev-token
'''

CONFIG_FILE = '''[default]
region = us-west-1
output = json

[profile dev]
region = eu-central-1
aws_session_token = config-dev-token

[profile config-only]
aws_access_key_id = config-only-id
aws_secret_access_key = config-only-secret
region = ap-east-1
s3 =
  max_concurrent_requests = 20
'''


def make_environ(variables):
    return lambda name: variables.get(name, '')


class TestConfigFromString(unittest.TestCase):
    def test_sections_and_nested_values(self):
        config = config_from_string('[default]\r\n'
                                    'region = us-west-1\r\n'
                                    'output = json\r\n'
                                    '\r\n'
                                    '[another section]\r\n'
                                    'foo =\r\n'
                                    '  x =42\r\n'
                                    '  y= 18 \r\n')
        self.assertEqual({
            'default': {'region': 'us-west-1', 'output': 'json'},
            'another section': {'foo': {'x': '42', 'y': '18'}}
        }, config)

    def test_line_separators(self):
        expected = {'a': {'k1': 'v1', 'k2': 'v2'}}
        self.assertEqual(expected, config_from_string('[a]\nk1=v1\nk2=v2'))
        self.assertEqual(expected, config_from_string('[a]\rk1=v1\rk2=v2\r'))
        self.assertEqual(expected, config_from_string('[a]\n\r\n\rk1=v1\r\r\nk2=v2'))

    def test_nesting_returns_to_outer_level(self):
        config = config_from_string('[s]\n'
                                    'outer =\n'
                                    '    inner =\n'
                                    '        deep = 1\n'
                                    '    sibling = 2\n'
                                    'after = 3\n')
        self.assertEqual({'s': {'outer': {'inner': {'deep': '1'}, 'sibling': '2'}, 'after': '3'}}, config)

    def test_ignored_lines(self):
        config = config_from_string('orphan = 1\n'
                                    '[s]\n'
                                    'no equals sign\n'
                                    'k = v\n'
                                    '  indented = under a plain value\n'
                                    '   \n'
                                    '[broken section\n'
                                    'k2 = v2\n')
        self.assertEqual({'s': {'k': 'v', 'k2': 'v2'}}, config)

    def test_section_name_trimmed(self):
        self.assertEqual({'profile dev': {'k': 'v'}}, config_from_string('[ profile dev ]\nk = v'))

    def test_empty(self):
        self.assertEqual({}, config_from_string(''))


class TestConfigFromFile(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def test_from_file(self):
        path = os.path.join(self.tmpdir, 'config')
        with open(path, 'w') as f:
            f.write(CONFIG_FILE)

        config = config_from_file(path)
        self.assertEqual('us-west-1', config['default']['region'])
        self.assertEqual({'max_concurrent_requests': '20'}, config['profile config-only']['s3'])

    def test_missing_file(self):
        self.assertTrue(config_from_file(os.path.join(self.tmpdir, 'no-such-file')) is None)


class TestGetDefaults(unittest.TestCase):
    def setUp(self):
        self.home = tempfile.mkdtemp()
        os.mkdir(os.path.join(self.home, '.aws'))

        with open(os.path.join(self.home, '.aws', 'credentials'), 'w') as f:
            f.write(CREDENTIALS_FILE)
        with open(os.path.join(self.home, '.aws', 'config'), 'w') as f:
            f.write(CONFIG_FILE)

    def tearDown(self):
        shutil.rmtree(self.home)

    def test_default_profile(self):
        config = get_defaults({'home': self.home}, make_environ({}))
        self.assertEqual('credentials-default-id', config.access_key_id)
        self.assertEqual('credentials-default-secret', config.secret_access_key)
        self.assertEqual('', config.session_token)
        self.assertEqual('us-west-1', config.region)

    def test_named_profile(self):
        config = get_defaults({'home': self.home, 'profile': 'dev'}, make_environ({}))
        self.assertEqual('credentials-dev-id', config.access_key_id)
        self.assertEqual('credentials-dev-secret', config.secret_access_key)
        self.assertEqual('credentials-dev-token', config.session_token)
        self.assertEqual('eu-central-1', config.region)

    def test_profile_from_environment(self):
        config = get_defaults({'home': self.home}, make_environ({'AWS_PROFILE': 'config-only'}))
        self.assertEqual('config-only-id', config.access_key_id)
        self.assertEqual('config-only-secret', config.secret_access_key)
        self.assertEqual('ap-east-1', config.region)

    def test_environment_wins(self):
        environ = make_environ({
            'AWS_ACCESS_KEY_ID': 'env-id',
            'AWS_SECRET_ACCESS_KEY': 'env-secret',
            'AWS_SESSION_TOKEN': 'env-token',
            'AWS_DEFAULT_REGION': 'sa-east-1'
        })
        config = get_defaults({'home': self.home, 'profile': 'dev'}, environ)
        self.assertEqual('env-id', config.access_key_id)
        self.assertEqual('env-secret', config.secret_access_key)
        self.assertEqual('env-token', config.session_token)
        self.assertEqual('sa-east-1', config.region)

    def test_partial_environment(self):
        config = get_defaults({'home': self.home}, make_environ({'AWS_SECRET_ACCESS_KEY': 'env-secret'}))
        self.assertEqual('credentials-default-id', config.access_key_id)
        self.assertEqual('env-secret', config.secret_access_key)

    def test_file_locations_from_environment(self):
        other = os.path.join(self.home, 'other-credentials')
        with open(other, 'w') as f:
            f.write('[default]\naws_access_key_id = other-id\naws_secret_access_key = other-secret\n')

        environ = make_environ({'AWS_SHARED_CREDENTIALS_FILE': other,
                                'AWS_CONFIG_FILE': os.path.join(self.home, 'no-such-config')})
        config = get_defaults({'home': self.home}, environ)
        self.assertEqual('other-id', config.access_key_id)
        self.assertEqual('other-secret', config.secret_access_key)
        self.assertEqual('', config.region)

    def test_no_files(self):
        empty_home = tempfile.mkdtemp()
        try:
            config = get_defaults({'home': empty_home}, make_environ({}))
        finally:
            shutil.rmtree(empty_home)

        self.assertEqual('', config.access_key_id)
        self.assertEqual('', config.secret_access_key)
        self.assertEqual('', config.session_token)
        self.assertEqual('', config.region)

    def test_repr_masks_secrets(self):
        config = Config('id', 'secret', 'token', 'us-west-1')
        self.assertFalse('secret' in repr(config).replace('secret_access_key', ''))
        self.assertFalse('token' in repr(config).replace('session_token', ''))


if __name__ == '__main__':
    unittest.main()
