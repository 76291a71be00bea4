import string
import unittest

from awssign import uri_encode


class TestUriEncode(unittest.TestCase):

    def test_slash(self) -> None:
        self.assertEqual(uri_encode('/', encode_slash=True), '%2F')
        self.assertEqual(uri_encode('/', encode_slash=False), '/')

    def test_unreserved_pass_through(self) -> None:
        self.assertEqual(uri_encode('A_1-~.', False), 'A_1-~.')
        unreserved = string.ascii_letters + string.digits + '-_.~'
        self.assertEqual(uri_encode(unreserved), unreserved)

    def test_reserved_characters_are_uppercase_hex(self) -> None:
        self.assertEqual(uri_encode('a b'), 'a%20b')
        self.assertEqual(uri_encode('a+b=c&d'), 'a%2Bb%3Dc%26d')
        self.assertEqual(uri_encode('*'), '%2A')
        self.assertEqual(uri_encode('?#[]'), '%3F%23%5B%5D')

    def test_one_triplet_per_utf8_byte(self) -> None:
        self.assertEqual(uri_encode('é'), '%C3%A9')
        self.assertEqual(uri_encode('€'), '%E2%82%AC')
        self.assertEqual(uri_encode('😀'), '%F0%9F%98%80')

    def test_path_segments(self) -> None:
        self.assertEqual(uri_encode('/photos/my cat.jpg', encode_slash=False), '/photos/my%20cat.jpg')
        self.assertEqual(uri_encode('/photos/my cat.jpg'), '%2Fphotos%2Fmy%20cat.jpg')

    def test_percent_is_encoded(self) -> None:
        self.assertEqual(uri_encode('%20'), '%2520')

    def test_empty(self) -> None:
        self.assertEqual(uri_encode(''), '')


if __name__ == '__main__':
    unittest.main(verbosity=2)
