from functools import lru_cache
from lxml.cssselect import CSSSelector


@lru_cache(maxsize=512)
def compile_selector(selector: str) -> CSSSelector:
    """Compile a CSS selector against HTML rules.

    Raises cssselect.SelectorError for malformed or unsupported selectors.
    """
    return CSSSelector(selector, translator='html')
