from urllib.parse import quote


def uri_encode(text: str, encode_slash: bool = True) -> str:
    """
    Percent-encode ``text`` the way SigV4 expects.

    ``A-Z a-z 0-9 - _ . ~`` are left alone, everything else becomes one
    uppercase ``%XX`` triplet per UTF-8 byte. ``/`` is kept unless
    ``encode_slash`` is set.
    """
    # quote() never escapes the unreserved set, so only '/' needs deciding.
    return quote(text, safe='' if encode_slash else '/', errors='surrogatepass')
