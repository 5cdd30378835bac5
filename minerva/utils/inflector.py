"""
Inflector

Word-form helpers used to turn a controller name ("blocks", "BlogPosts")
into the resource type of the model it manages ("Block", "BlogPost").
"""

import re

_UNINFLECTED = frozenset({"data", "equipment", "information", "media", "news", "series", "species"})

_IRREGULAR = {
    "children": "child",
    "men": "man",
    "people": "person",
    "women": "woman",
}

# Ordered: the first matching pattern wins
_SINGULAR_RULES: list[tuple[re.Pattern, str]] = [
    (re.compile(r"(quiz)zes$"), r"\1"),
    (re.compile(r"(matr|vert|ind)ices$"), r"\1ix"),
    (re.compile(r"(alias|status|bus|campus)es$"), r"\1"),
    (re.compile(r"(x|ch|ss|sh)es$"), r"\1"),
    (re.compile(r"(m)ovies$"), r"\1ovie"),
    (re.compile(r"([^aeiouy])ies$"), r"\1y"),
    (re.compile(r"(hive|tive)s$"), r"\1"),
    (re.compile(r"([lr])ves$"), r"\1f"),
    (re.compile(r"(ss)$"), r"\1"),
    (re.compile(r"(us)$"), r"\1"),
    (re.compile(r"s$"), ""),
]


def underscore(word: str) -> str:
    """CamelCase or dashed words to lower_snake_case."""
    word = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", word)
    word = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", word)
    return word.replace("-", "_").lower()


def _singularize_word(word: str) -> str:
    if word in _UNINFLECTED:
        return word
    if word in _IRREGULAR:
        return _IRREGULAR[word]
    for pattern, replacement in _SINGULAR_RULES:
        if pattern.search(word):
            return pattern.sub(replacement, word)
    return word


def singularize(word: str) -> str:
    """Singular form of a (snake_case) word; only the last segment inflects."""
    head, _, last = underscore(word).rpartition("_")
    singular = _singularize_word(last)
    return f"{head}_{singular}" if head else singular


def classify(word: str) -> str:
    """blog_post -> BlogPost"""
    return "".join(part.capitalize() for part in underscore(word).split("_") if part)


def resource_type_for(controller: str) -> str:
    """Resource type managed by a controller: classify(singularize(name))."""
    return classify(singularize(controller))
