"""Identifier-aware tokenization for ranked class search.

Type and member names in a dump are mostly PascalCase (``PlayerController``),
Unity-style prefixed (``m_MaxHealth``) or compiler generated
(``<Start>d__12``). This module turns them into lowercase words so that a
query such as "max health" can match them.
"""

import re


def _split_camel_case(text: str) -> list[str]:
    """Split camelCase and PascalCase text into separate words.

    Examples:
        >>> _split_camel_case("PlayerHealthController")
        ['Player', 'Health', 'Controller']
        >>> _split_camel_case("HTTPClient")
        ['HTTP', 'Client']
    """
    result = re.sub(r'([a-z0-9])([A-Z])', r'\1 \2', text)
    # Acronym followed by a capitalized word: HTTPClient -> HTTP Client
    result = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1 \2', result)
    return result.split()


def tokenize(text: str) -> list[str]:
    """Tokenize identifiers and free text into lowercase words.

    Splits on anything that is not a letter or digit (underscores, dots,
    generic brackets, whitespace), then on camelCase boundaries.

    Args:
        text: Query, identifier or space-separated list of identifiers.

    Returns:
        List of lowercase tokens, empty strings removed.

    Examples:
        >>> tokenize("m_MaxHealth")
        ['m', 'max', 'health']
        >>> tokenize("UnityEngine.MonoBehaviour")
        ['unity', 'engine', 'mono', 'behaviour']
        >>> tokenize("")
        []
    """
    if not text:
        return []

    result = []
    for token in re.findall(r'[A-Za-z0-9]+', text):
        if re.search(r'[a-z0-9][A-Z]|[A-Z]{2}[a-z]', token):
            result.extend(_split_camel_case(token))
        else:
            result.append(token)

    return [t.lower() for t in result if t]
