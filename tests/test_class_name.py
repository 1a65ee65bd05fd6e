import pytest

from manifest_index import class_name


class TestClassName:
    def test_fully_qualified_name_is_kept(self):
        assert class_name("com.app", "com.app.Main") == "com.app.Main"

    def test_leading_dot_is_appended_to_package(self):
        assert class_name("com.app", ".Main") == "com.app.Main"

    def test_bare_name_gets_separator(self):
        assert class_name("com.app", "Login") == "com.app.Login"

    def test_name_from_other_package_is_kept(self):
        assert class_name("com.app", "org.lib.Receiver") == "org.lib.Receiver"

    def test_two_segment_name_counts_as_qualified(self):
        assert class_name("com.app", "a.b") == "a.b"

    def test_trailing_dot_is_not_a_second_segment(self):
        assert class_name("com.app", "Main.") == "com.appMain."

    @pytest.mark.parametrize("raw", ["com.app.Main", ".Main", "Login", "a.b", ".ui.Home"])
    def test_resolution_is_idempotent(self, raw):
        once = class_name("com.app", raw)
        assert class_name("com.app", once) == once
