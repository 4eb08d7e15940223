"""Shared hypothesis strategies for pyoshka property-based testing.

- **Text**: arbitrary content, content rich in HTML metacharacters
- **Names**: tag names that dispatch as plain elements
- **Attributes**: attribute values for the raw-interpolation path
"""

from __future__ import annotations

from hypothesis import strategies as st

# ---------------------------------------------------------------------------
# Text strategies
# ---------------------------------------------------------------------------

# Arbitrary text without surrogates
plain_text = st.text(
    alphabet=st.characters(blacklist_categories=("Cs",)),
    min_size=0,
    max_size=200,
)

# Text biased towards the characters html_escape must rewrite
html_special_text = st.lists(
    st.one_of(
        st.sampled_from(["<", ">", "&", '"', "'", "&amp;", "&lt;", "<script>"]),
        st.text(alphabet="abc xyz", min_size=1, max_size=5),
    ),
    min_size=1,
    max_size=20,
).map("".join)

# ---------------------------------------------------------------------------
# Name strategies
# ---------------------------------------------------------------------------

# Lowercase element names (no trailing underscore, so name == element)
tag_names = st.from_regex(r"[a-z][a-z0-9]{0,10}", fullmatch=True)

# ---------------------------------------------------------------------------
# Attribute strategies
# ---------------------------------------------------------------------------

# Generic attribute names that are neither reserved nor URI attributes
plain_attribute_names = st.from_regex(r"[a-z][a-z0-9]{0,8}", fullmatch=True).filter(
    lambda name: name not in {"text", "src", "href"}
)

attribute_values = st.text(
    alphabet=st.characters(blacklist_categories=("Cs",)),
    min_size=0,
    max_size=50,
)
