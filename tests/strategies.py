"""Shared hypothesis strategies for casedown property-based testing.

Provides reusable strategies at two levels:

- **Values**: matchees drawn from the shapes patterns can inspect
  (integers, strings, lists, string-keyed dicts)
- **Patterns**: flat element patterns that are always valid at an array
  element or hash value position

These are building blocks -- individual test modules compose them into
property-specific strategies.
"""

from __future__ import annotations

import keyword

from hypothesis import strategies as st

from .builders import literal, var

# ---------------------------------------------------------------------------
# Value strategies
# ---------------------------------------------------------------------------

# Small ints keep shrinking readable
safe_integer = st.integers(min_value=-1000, max_value=1000)

short_text = st.text(alphabet="abcdefghij", min_size=0, max_size=8)

scalar = st.one_of(safe_integer, short_text, st.none(), st.booleans())

int_list = st.lists(safe_integer, min_size=0, max_size=8)

# Keys double as local variable names in shorthand patterns (`in {key:}`)
hash_key = st.from_regex(r"[a-z][a-z0-9_]{0,6}", fullmatch=True).filter(
    lambda key: not keyword.iskeyword(key) and key not in {"value", "others"}
)

string_keyed_dict = st.dictionaries(hash_key, safe_integer, min_size=0, max_size=6)

matchee = st.one_of(scalar, int_list, string_keyed_dict)

# ---------------------------------------------------------------------------
# Pattern strategies
# ---------------------------------------------------------------------------

# Local names that never collide with synthetic variables or helpers
variable_name = st.from_regex(r"v_[a-z]{1,6}", fullmatch=True)

binding_pattern = variable_name.map(var)

literal_pattern = safe_integer.map(literal)

element_pattern = st.one_of(binding_pattern, literal_pattern)
