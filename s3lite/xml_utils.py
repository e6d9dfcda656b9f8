# -*- coding: utf-8 -*-

"""
s3lite.xml_utils
~~~~~~~~~~~~~~~~

XML处理相关。

    - xml_to_tree：把服务器端返回的XML转换为由dict、list、str组成的树
    - parse_开头的函数：在上述树的基础上解析服务器端返回的结果

xml_to_tree只处理S3实际返回的XML子集：没有命名空间、CDATA，属性会被忽略，
实体只支持 `&lt;` 、 `&gt;` 、 `&amp;` 、 `&quot;` 、 `&apos;` 以及数字字符引用。
"""
import logging
import re

from .models import Owner, SimplifiedBucketInfo, SimplifiedObjectInfo
from .utils import iso8601_to_unixtime

logger = logging.getLogger(__name__)


_STATE_HEADER = 0
_STATE_DOCUMENT = 1
_STATE_TAG_BEGIN = 2
_STATE_TAG = 3
_STATE_TAG_BEGIN_OR_CONTENT = 4
_STATE_CONTENT = 5
_STATE_TAG_END = 6
_STATE_END = 7

_ENTITY_RE = re.compile(r'&(#[0-9]+|#x[0-9a-fA-F]+|lt|gt|amp|quot|apos);')

_NAMED_ENTITIES = {
    'lt': '<',
    'gt': '>',
    'amp': '&',
    'quot': '"',
    'apos': "'"
}


def _replace_entity(m):
    name = m.group(1)
    try:
        if name.startswith('#x'):
            return chr(int(name[2:], 16))
        elif name.startswith('#'):
            return chr(int(name[1:]))
    except (ValueError, OverflowError):
        # 超出Unicode范围的字符引用原样保留
        return m.group(0)

    return _NAMED_ENTITIES[name]


def _decode_entities(text):
    if '&' not in text:
        return text
    return _ENTITY_RE.sub(_replace_entity, text)


class _TreeBuilder(object):
    """保存当前元素的栈。栈中每一项是 (container, key)，即元素的值在其父容器中的位置。"""
    def __init__(self, array_tags):
        self.array_tags = array_tags
        self.document = [None]
        self.stack = [(self.document, 0)]

    @property
    def depth(self):
        return len(self.stack) - 1

    def __ensure_object(self):
        container, key = self.stack[-1]
        value = container[key]
        if not isinstance(value, dict):
            value = {}
            container[key] = value
        return value

    def __ensure_array(self):
        container, key = self.stack[-1]
        value = container[key]
        if not isinstance(value, list):
            value = []
            container[key] = value
        return value

    def open(self, name):
        # 根元素总是以名字为key
        if name in self.array_tags and self.depth > 0:
            items = self.__ensure_array()
            items.append(None)
            self.stack.append((items, len(items) - 1))
        else:
            parent = self.__ensure_object()
            parent[name] = None
            self.stack.append((parent, name))

    def text(self, text):
        if self.depth == 0:
            return

        container, key = self.stack[-1]
        if isinstance(container[key], (dict, list)) and not text.strip():
            return

        container[key] = _decode_entities(text)

    def close(self):
        if self.depth == 0:
            return

        container, key = self.stack.pop()
        if container[key] is None:
            container[key] = ''

    def result(self):
        if isinstance(self.document[0], dict):
            return self.document[0]
        return {}


def xml_to_tree(text, array_tags=()):
    """把XML文本转换为树。

    对XML做一次从前往后的扫描，不回溯，也不做合法性校验：标签不匹配时得到的树会比预期浅。

    :param text: XML文本，str或UTF-8编码的bytes
    :param array_tags: 可重复出现的元素名集合。遇到这些元素时，父元素本身变为list，元素按文档顺序追加到其中；
        其余元素在父节点中对应唯一的值，后出现的覆盖先出现的。

    :return: 以根元素名为唯一key的dict；元素的值是str（文本）、dict（子元素）或list（数组元素）。

    用法 ::

        >>> xml_to_tree('<R><Items><Item>a</Item><Item>b</Item></Items></R>', ['Item'])
        {'R': {'Items': ['a', 'b']}}
    """
    if isinstance(text, (bytes, bytearray)):
        text = bytes(text).decode('utf-8', 'replace')

    builder = _TreeBuilder(frozenset(array_tags))
    state = _STATE_DOCUMENT
    resume_state = _STATE_DOCUMENT
    name = []
    content = []
    in_name = True
    quote = None
    self_closing = False

    for c in text:
        if state == _STATE_END:
            break

        if state == _STATE_DOCUMENT:
            if c == '<':
                state = _STATE_TAG_BEGIN

        elif state == _STATE_HEADER:
            if c == '>':
                state = resume_state

        elif state == _STATE_TAG_BEGIN:
            if c == '/':
                name = []
                state = _STATE_TAG_END
            elif c in '?!':
                resume_state = _STATE_DOCUMENT if builder.depth == 0 else _STATE_TAG_BEGIN_OR_CONTENT
                state = _STATE_HEADER
            else:
                name = [c]
                in_name = True
                quote = None
                self_closing = False
                state = _STATE_TAG

        elif state == _STATE_TAG:
            if quote is not None:
                if c == quote:
                    quote = None
            elif c == '>':
                builder.open(''.join(name))
                if self_closing:
                    builder.close()
                state = _STATE_TAG_BEGIN_OR_CONTENT
                if builder.depth == 0:
                    state = _STATE_END
            elif c == '/':
                self_closing = True
                in_name = False
            elif c in '"\'' and not in_name:
                quote = c
                self_closing = False
            elif c.isspace():
                in_name = False
            else:
                self_closing = False
                if in_name:
                    name.append(c)

        elif state == _STATE_TAG_BEGIN_OR_CONTENT:
            if c == '<':
                state = _STATE_TAG_BEGIN
            else:
                content = [c]
                state = _STATE_CONTENT

        elif state == _STATE_CONTENT:
            if c == '<':
                builder.text(''.join(content))
                content = []
                state = _STATE_TAG_BEGIN
            else:
                content.append(c)

        elif state == _STATE_TAG_END:
            if c == '>':
                if builder.depth == 0:
                    # close tag before the root element
                    state = _STATE_DOCUMENT
                    continue

                builder.close()
                if builder.depth == 0:
                    state = _STATE_END
                else:
                    state = _STATE_TAG_BEGIN_OR_CONTENT
            else:
                name.append(c)

    return builder.result()


def _find_tag(parent, path):
    node = _find_node(parent, path)
    if node is None:
        raise RuntimeError("parse xml: " + path + " could not be found")

    if not isinstance(node, str):
        raise RuntimeError("parse xml: " + path + " is not a text node")

    return node


def _find_tag_with_default(parent, path, default_value):
    node = _find_node(parent, path)
    if node is None:
        return default_value

    if not isinstance(node, str):
        return default_value

    return node


def _find_node(parent, path):
    node = parent
    for name in path.split('/'):
        if not isinstance(node, dict):
            return None
        node = node.get(name)
    return node


def _find_all(parent, path):
    node = _find_node(parent, path)
    if node is None or node == '':
        return []
    if isinstance(node, list):
        return node
    return [node]


def _find_bool(parent, path):
    text = _find_tag(parent, path)
    if text == 'true':
        return True
    elif text == 'false':
        return False
    else:
        raise RuntimeError("parse xml: value of " + path + " is not a boolean")


def _find_owner(parent):
    node = _find_node(parent, 'Owner')
    if not isinstance(node, dict):
        return None
    return Owner(_find_tag_with_default(node, 'DisplayName', ''), _find_tag_with_default(node, 'ID', ''))


def parse_list_buckets(result, body):
    tree = xml_to_tree(body, ['Bucket'])
    root = tree.get('ListAllMyBucketsResult', {})

    result.owner = _find_owner(root)

    for bucket_node in _find_all(root, 'Buckets'):
        result.buckets.append(SimplifiedBucketInfo(
            _find_tag(bucket_node, 'Name'),
            iso8601_to_unixtime(_find_tag(bucket_node, 'CreationDate'))
        ))

    return result


def parse_list_objects(result, body):
    root = xml_to_tree(body).get('ListBucketResult', {})

    result.name = _find_tag_with_default(root, 'Name', '')
    result.prefix = _find_tag_with_default(root, 'Prefix', '')
    result.marker = _find_tag_with_default(root, 'Marker', '')
    if _find_node(root, 'IsTruncated') is not None:
        result.is_truncated = _find_bool(root, 'IsTruncated')
    if result.is_truncated:
        result.next_marker = _find_tag_with_default(root, 'NextMarker', '')

    # Contents和CommonPrefixes直接位于ListBucketResult下，作为数组元素解析时ListBucketResult本身就是数组
    items = xml_to_tree(body, ['Contents', 'CommonPrefixes']).get('ListBucketResult')
    if not isinstance(items, list):
        items = []

    for node in items:
        if not isinstance(node, dict):
            continue

        if 'Key' in node:
            result.object_list.append(SimplifiedObjectInfo(
                _find_tag(node, 'Key'),
                iso8601_to_unixtime(_find_tag(node, 'LastModified')),
                _find_tag(node, 'ETag').strip('"'),
                int(_find_tag(node, 'Size')),
                _find_tag_with_default(node, 'StorageClass', ''),
                _find_owner(node)
            ))
        else:
            result.prefix_list.append(_find_tag(node, 'Prefix'))

    # S3 omits NextMarker unless a delimiter was given; the last key continues the listing
    if result.is_truncated and not result.next_marker:
        if result.object_list:
            result.next_marker = result.object_list[-1].key
        elif result.prefix_list:
            result.next_marker = result.prefix_list[-1]

    logger.debug("List objects parsed, name: {0}, objects: {1}, prefixes: {2}, is_truncated: {3}".format(
        result.name, len(result.object_list), len(result.prefix_list), result.is_truncated))

    return result
