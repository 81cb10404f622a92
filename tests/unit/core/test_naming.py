"""
Tests for output file naming and the imports option.
"""

import hashlib

import pytest

from css_split.core.base import NamingContext, OptionsError
from css_split.core.naming import (
    DEFAULT_FILENAME,
    file_parts,
    interpolate,
    normalize_imports,
)


def ctx(file="styles.css", index=0, content=""):
    return NamingContext(file=file, index=index, content=content)


class TestFileParts:

    def test_plain(self):
        """Test splitting a plain file name."""
        assert file_parts("styles.css") == {"name": "styles", "ext": "css", "suffix": ""}

    def test_directory_and_secondary_suffix(self):
        """Test names with a directory and a secondary suffix."""
        assert file_parts("css/app.css.gz") == {"name": "css/app", "ext": "css", "suffix": ".gz"}

    def test_hash_between_name_and_extension(self):
        """Test names with a hash before the extension."""
        assert file_parts("app.3fa2b1.css")["name"] == "app.3fa2b1"

    def test_not_css(self):
        """Test names that do not end in .css."""
        assert file_parts("bundle.js")["name"] == "bundle.js"


class TestInterpolate:

    def test_default_template(self):
        """Test the default chunk name template."""
        assert interpolate(DEFAULT_FILENAME, ctx()) == "styles-1.css"
        assert interpolate(DEFAULT_FILENAME, ctx(index=2)) == "styles-3.css"

    def test_secondary_suffix_is_preserved(self):
        """Test that a suffix after .css is kept."""
        assert interpolate(DEFAULT_FILENAME, ctx("css/app.css.gz", 1)) == "css/app-2.css.gz"

    def test_hash_segment_in_name_is_preserved(self):
        """Test that a hash segment stays part of the name."""
        assert interpolate(DEFAULT_FILENAME, ctx("app.3fa2b1.css")) == "app.3fa2b1-1.css"

    def test_all_occurrences(self):
        """Test that every occurrence of a placeholder is replaced."""
        assert interpolate("[name]/[name]-[part]-[part].[ext]", ctx(index=1)) == "styles/styles-2-2.css"

    def test_file_placeholder(self):
        """Test the file placeholder."""
        assert interpolate("split/[file]", ctx()) == "split/styles.css"

    def test_hash(self):
        """Test full and truncated content hashes."""
        digest = hashlib.md5(b"a {}").hexdigest()
        assert interpolate("[hash].[ext]", ctx(content="a {}")) == f"{digest}.css"
        assert interpolate("[name].[hash:8].[ext]", ctx(content="a {}")) == f"styles.{digest[:8]}.css"

    def test_hash_depends_on_content(self):
        """Test that the hash changes with the content."""
        assert interpolate("[hash]", ctx(content="a {}")) != interpolate("[hash]", ctx(content="b {}"))

    def test_unknown_placeholders_are_kept(self):
        """Test that unknown placeholders are left as they are."""
        assert interpolate("[name]-[chunkhash].[ext]", ctx()) == "styles-[chunkhash].css"

    def test_deterministic(self):
        """Test that interpolation is deterministic."""
        context = ctx(index=4, content="x {}")
        assert interpolate("[name]-[part]-[hash:4]", context) == interpolate("[name]-[part]-[hash:4]", context)


class TestNormalizeImports:

    def test_disabled(self):
        """Test that a false imports option writes no manifest."""
        assert normalize_imports(False)(ctx()) is False
        assert normalize_imports(None)(ctx()) is False

    def test_true_reuses_original_name(self):
        """Test that imports=True reuses the original name."""
        assert normalize_imports(True)(ctx()) == "styles.css"

    def test_true_with_preserve_renames(self):
        """Test that imports=True with preserve uses the split name."""
        assert normalize_imports(True, preserve=True)(ctx()) == "styles-split.css"

    def test_fixed_name(self):
        """Test a fixed manifest name."""
        assert normalize_imports("potato.css")(ctx()) == "potato.css"

    def test_template(self):
        """Test a templated manifest name."""
        assert normalize_imports("[name]-imports.[ext]")(ctx("app.css")) == "app-imports.css"

    def test_empty_string_disables(self):
        """Test that an empty imports string writes no manifest."""
        assert normalize_imports("")(ctx()) is False

    @pytest.mark.parametrize("value", [lambda: None, 1, 0, ["a.css"], {"name": "a.css"}])
    def test_rejects_other_types(self, value):
        """Test that other imports types are rejected."""
        with pytest.raises(OptionsError):
            normalize_imports(value)

    def test_error_is_a_type_error(self):
        """Test that the imports error is also a TypeError."""
        with pytest.raises(TypeError):
            normalize_imports(lambda context: "x.css")
